"""Tests for classification/scanner.py - counting lines of one file diff."""

import pytest

from varchange.classification import ArtifactCategory, FileDiffResult, scan
from varchange.classification.analyzer import analyze_artifact
from varchange.classification.scanner import is_file_header
from varchange.commits import ChangedArtifact


def make_diff(path, added=(), deleted=(), context=()):
    """Unified diff lines for one file."""
    lines = [
        f"diff --git a/{path} b/{path}",
        "index 1111111..2222222 100644",
        f"--- a/{path}",
        f"+++ b/{path}",
        "@@ -10,6 +10,8 @@ static int foo(void)",
    ]
    lines.extend(f" {line}" for line in context)
    lines.extend(f"-{line}" for line in deleted)
    lines.extend(f"+{line}" for line in added)
    return lines


class TestFileHeader:
    @pytest.mark.parametrize("line", ["+++ b/foo.c", "--- a/foo.c", "--- /dev/null", "+++"])
    def test_headers(self, line):
        assert is_file_header(line)

    @pytest.mark.parametrize("line", ["+++i;", "---x;", "+ ++i;", "-- comment"])
    def test_changed_lines(self, line):
        assert not is_file_header(line)


class TestScanSource:
    """Counting source file diffs."""

    def test_added_and_deleted_lines(self):
        """Three added lines, one of them a conditional on a config symbol."""
        diff = make_diff(
            "drivers/net/foo.c",
            added=["#ifdef CONFIG_FOO", "foo_init();", "bar();"],
            deleted=["old();"],
            context=["int x;"],
        )
        result = scan(diff, ArtifactCategory.SOURCE)
        assert result == FileDiffResult(
            category=ArtifactCategory.SOURCE,
            added_lines=3,
            deleted_lines=1,
            added_variability_lines=1,
            deleted_variability_lines=0,
        )

    def test_deleted_variability_line(self):
        diff = make_diff("kernel/fork.c", deleted=["if (IS_ENABLED(CONFIG_BAR))"])
        result = scan(diff, ArtifactCategory.SOURCE)
        assert result.deleted_lines == 1
        assert result.deleted_variability_lines == 1
        assert result.added_lines == 0

    def test_comments_and_blank_lines_not_counted(self):
        diff = make_diff("kernel/fork.c", added=["/* note */", "", "   ", "// more", "x++;"])
        result = scan(diff, ArtifactCategory.SOURCE)
        assert result.added_lines == 1

    def test_increment_line_counted(self):
        """An added "++i;" shows up as "+++i;" and is not a file header."""
        diff = make_diff("kernel/fork.c", added=["++i;"], deleted=["--i;"])
        result = scan(diff, ArtifactCategory.SOURCE)
        assert result.added_lines == 1
        assert result.deleted_lines == 1

    def test_header_like_lines_inside_hunk_counted(self):
        """Deleted "-- x" and added "++ y" lines look like headers but are content."""
        diff = make_diff("drivers/net/foo.c", deleted=["-- x;", "-- "], added=["++ y;"])
        result = scan(diff, ArtifactCategory.SOURCE)
        assert result.deleted_lines == 2
        assert result.added_lines == 1

    def test_headers_and_context_not_counted(self):
        diff = make_diff("kernel/fork.c", context=["a();", "b();"])
        assert scan(diff, ArtifactCategory.SOURCE).changed_lines == 0


class TestScanOtherCategories:
    def test_build_file(self):
        diff = make_diff(
            "drivers/net/Makefile",
            added=["obj-$(CONFIG_FOO) += foo.o", "# comment", "EXTRA_CFLAGS += -O2"],
        )
        result = scan(diff, ArtifactCategory.BUILD)
        assert result.added_lines == 2
        assert result.added_variability_lines == 1

    def test_model_file(self):
        diff = make_diff(
            "drivers/net/Kconfig",
            added=["config FOO", '\tbool "Foo support"', "\thelp", "\t  Say Y here."],
        )
        result = scan(diff, ArtifactCategory.MODEL)
        assert result.added_lines == 4
        assert result.added_variability_lines == 2

    def test_model_help_text_not_variability(self):
        """Help text starting with a Kconfig keyword is plain text."""
        lines = [
            "+config FOO",
            '+\tbool "Foo support"',
            "+\thelp",
            "+\t  Say Y here to enable foo;",
            "+\t  if you are unsure, say N.",
            "+\t  select this option to enable the foo driver.",
        ]
        result = scan(lines, ArtifactCategory.MODEL)
        assert result.added_lines == 6
        assert result.added_variability_lines == 2

    def test_other_counts_nothing(self):
        diff = make_diff("README", added=["#ifdef CONFIG_FOO", "text"], deleted=["x"])
        result = scan(diff, ArtifactCategory.OTHER)
        assert result == FileDiffResult(category=ArtifactCategory.OTHER)


class TestScanProperties:
    def test_empty_diff(self):
        result = scan([], ArtifactCategory.SOURCE)
        assert result.changed_lines == 0
        assert result.changed_variability_lines == 0

    def test_scan_is_idempotent(self):
        diff = make_diff("kernel/fork.c", added=["#if defined(CONFIG_X)", "y();"], deleted=["z();"])
        assert scan(diff, ArtifactCategory.SOURCE) == scan(diff, ArtifactCategory.SOURCE)

    def test_variability_never_exceeds_totals(self):
        diff = make_diff(
            "drivers/net/Makefile",
            added=["ifdef CONFIG_A", "obj-$(CONFIG_B) += b.o"],
            deleted=["ifeq ($(CONFIG_C),y)"],
        )
        result = scan(diff, ArtifactCategory.BUILD)
        assert result.added_variability_lines <= result.added_lines
        assert result.deleted_variability_lines <= result.deleted_lines

    def test_result_rejects_inconsistent_counts(self):
        with pytest.raises(ValueError):
            FileDiffResult(ArtifactCategory.SOURCE, added_lines=1, added_variability_lines=2)


class TestAnalyzeArtifact:
    """Classification followed by scanning."""

    def test_excluded_file_counts_nothing(self, linux_rules):
        """A changed docs/readme.txt counts no line regardless of content."""
        artifact = ChangedArtifact(
            "docs/readme.txt",
            tuple(make_diff("docs/readme.txt", added=["a", "b", "#ifdef CONFIG_X", "d", "e"])),
        )
        result = analyze_artifact(artifact, linux_rules)
        assert result == FileDiffResult(category=ArtifactCategory.OTHER)

    def test_source_file(self, linux_rules):
        artifact = ChangedArtifact(
            "drivers/net/foo.c", tuple(make_diff("drivers/net/foo.c", added=["x();"]))
        )
        result = analyze_artifact(artifact, linux_rules)
        assert result.category is ArtifactCategory.SOURCE
        assert result.added_lines == 1
