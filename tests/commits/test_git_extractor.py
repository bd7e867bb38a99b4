"""Tests for commits/git_extractor.py - parsing and streaming git log."""

import io
import logging
import os
import shutil
import subprocess

import pytest

from varchange.commits import GitExtractor
from varchange.exceptions import ExtractionError, InvalidPathError

MARKER = GitExtractor.COMMIT_MARKER

SAMPLE_LOG = f"""\
{MARKER}1111111111111111111111111111111111111111|2011-06-10 06:01:30 +0200

diff --git a/drivers/net/Kconfig b/drivers/net/Kconfig
index 1111111..2222222 100644
--- a/drivers/net/Kconfig
+++ b/drivers/net/Kconfig
@@ -1,2 +1,3 @@
 menu "Network"
+config FOO
+\tbool "Foo"
diff --git a/drivers/net/foo.c b/drivers/net/foo.c
new file mode 100644
--- /dev/null
+++ b/drivers/net/foo.c
@@ -0,0 +1 @@
+int foo;
{MARKER}2222222222222222222222222222222222222222|2011-06-11 07:00:00 +0000
{MARKER}3333333333333333333333333333333333333333|2011-06-12 08:00:00 +0000

diff --git a/old name.c b/new name.c
--- a/old name.c
+++ b/new name.c
@@ -1 +1 @@
-a;
+b;
""".splitlines()


class TestParseLog:
    def test_commits(self):
        commits = list(GitExtractor.parse_log(SAMPLE_LOG))
        assert [c.id for c in commits] == ["1" * 40, "2" * 40, "3" * 40]
        assert commits[0].date == "2011-06-10 06:01:30 +0200"

    def test_artifacts(self):
        first = next(iter(GitExtractor.parse_log(SAMPLE_LOG)))
        assert [a.path for a in first.artifacts] == ["drivers/net/Kconfig", "drivers/net/foo.c"]

        kconfig = first.artifacts[0]
        assert kconfig.diff_lines[0].startswith("diff --git")
        assert "+config FOO" in kconfig.diff_lines
        assert "+int foo;" not in kconfig.diff_lines
        assert first.artifacts[1].diff_lines[-1] == "+int foo;"

    def test_commit_without_diff(self):
        commits = list(GitExtractor.parse_log(SAMPLE_LOG))
        assert commits[1].artifacts == ()

    def test_new_path_used(self):
        last = list(GitExtractor.parse_log(SAMPLE_LOG))[-1]
        assert [a.path for a in last.artifacts] == ["new name.c"]

    def test_lines_before_first_commit_ignored(self):
        commits = list(GitExtractor.parse_log(["garbage", "+x"] + SAMPLE_LOG[:1]))
        assert len(commits) == 1
        assert commits[0].artifacts == ()

    def test_empty_log(self):
        assert list(GitExtractor.parse_log([])) == []


class TestLogCommand:
    def test_oldest_first(self, tmp_path):
        command = GitExtractor(str(tmp_path))._log_command()
        assert "--reverse" in command
        assert not any(arg.startswith("-n") for arg in command)

    def test_max_commits(self, tmp_path):
        command = GitExtractor(str(tmp_path), max_commits=5)._log_command()
        assert "-n5" in command


class TestRepositoryCheck:
    def test_not_a_repository(self, tmp_path):
        with pytest.raises(ExtractionError):
            GitExtractor(str(tmp_path)).ensure_repository()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(InvalidPathError):
            GitExtractor(str(tmp_path / "missing")).ensure_repository()

    def test_iter_commits_raises_for_non_repository(self, tmp_path):
        with pytest.raises(ExtractionError):
            list(GitExtractor(str(tmp_path)).iter_commits())


class FakeGitProcess:
    """Popen stand-in whose git never exits after printing its output."""

    instances = []

    def __init__(self, args, stdout=None, stderr=None, **kwargs):
        self.stdout = io.StringIO("line one\nline two\n")
        self.stderr = None
        self.returncode = None
        self.killed = False
        FakeGitProcess.instances.append(self)

    def wait(self, timeout=None):
        if timeout is not None and not self.killed:
            raise subprocess.TimeoutExpired("git", timeout)
        self.returncode = -9
        return self.returncode

    def poll(self):
        return self.returncode

    def kill(self):
        self.killed = True


class TestStreamLog:
    """Reading git output and reporting git failures."""

    def test_hanging_git_killed(self, tmp_path, monkeypatch, caplog):
        """Lines are kept and git is killed when it does not exit in time."""
        FakeGitProcess.instances.clear()
        monkeypatch.setattr(subprocess, "Popen", FakeGitProcess)
        with caplog.at_level(logging.WARNING, logger="varchange"):
            lines = list(GitExtractor(str(tmp_path))._stream_log())
        assert lines == ["line one", "line two"]
        assert FakeGitProcess.instances[0].killed
        assert "did not exit" in caplog.text

    def test_missing_git(self, tmp_path, monkeypatch):
        def no_git(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "Popen", no_git)
        with pytest.raises(ExtractionError):
            list(GitExtractor(str(tmp_path))._stream_log())

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_git_failure_logged(self, tmp_path, monkeypatch, caplog):
        """git's error output ends up in the warning instead of an exception."""
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
        with caplog.at_level(logging.WARNING, logger="varchange"):
            lines = list(GitExtractor(str(tmp_path))._stream_log())
        assert lines == []
        assert "git log failed" in caplog.text
        assert "not a git repository" in caplog.text


def git(repo, *args, date="2011-06-10T06:01:30+02:00"):
    env = dict(os.environ)
    env.update(
        GIT_AUTHOR_NAME="Test",
        GIT_AUTHOR_EMAIL="test@example.com",
        GIT_COMMITTER_NAME="Test",
        GIT_COMMITTER_EMAIL="test@example.com",
        GIT_AUTHOR_DATE=date,
        GIT_COMMITTER_DATE=date,
    )
    subprocess.run(["git", "-C", str(repo), *args], check=True, capture_output=True, env=env)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestGitRepository:
    """Extraction from a real repository."""

    @pytest.fixture
    def repo(self, tmp_path):
        repo = tmp_path / "repo"
        repo.mkdir()
        git(repo, "init", "-q")
        (repo / "drivers").mkdir()
        (repo / "drivers" / "Kconfig").write_text("config FOO\n\tbool\n")
        git(repo, "add", ".")
        git(repo, "commit", "-q", "-m", "first")

        (repo / "drivers" / "foo.c").write_text("#ifdef CONFIG_FOO\nint foo;\n#endif\n")
        git(repo, "add", ".")
        git(repo, "commit", "-q", "-m", "second", date="2011-06-11T06:01:30+02:00")
        return repo

    def test_commits_oldest_first(self, repo):
        commits = list(GitExtractor(str(repo)).iter_commits())
        assert len(commits) == 2
        assert [a.path for a in commits[0].artifacts] == ["drivers/Kconfig"]
        assert [a.path for a in commits[1].artifacts] == ["drivers/foo.c"]
        assert commits[0].date.startswith("2011-06-10")
        assert len(commits[0].id) == 40

    def test_diff_lines(self, repo):
        commits = list(GitExtractor(str(repo)).iter_commits())
        assert "+#ifdef CONFIG_FOO" in commits[1].artifacts[0].diff_lines

    def test_ensure_repository(self, repo):
        GitExtractor(str(repo)).ensure_repository()
