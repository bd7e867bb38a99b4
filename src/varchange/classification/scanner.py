"""Single-pass counting of added, deleted and variability lines in a diff."""

from __future__ import annotations

import re
from typing import Sequence

from .models import ArtifactCategory, FileDiffResult
from .normalizers import get_line_rules

# "+++ b/path" / "--- a/path" file headers; "+++i;" is an added "++i;"
_FILE_HEADER = re.compile(r"^(\+\+\+|---)(\s|$)")


def is_file_header(line: str) -> bool:
    return _FILE_HEADER.match(line) is not None


def scan(diff_lines: Sequence[str], category: ArtifactCategory) -> FileDiffResult:
    """Count the changed lines of one file's diff.

    Lines starting with ``+`` are added and lines starting with ``-`` are
    deleted; everything else (context, hunk headers, git metadata) is
    skipped. ``+++``/``---`` file headers only occur before the first
    ``@@`` hunk header; inside hunks such lines are changed content.

    A changed line is counted only when it normalizes to non-empty text,
    and counted as variability line when the category's detector accepts
    the normalized text.
    """
    rules = get_line_rules(category)
    added = deleted = added_var = deleted_var = 0

    in_hunk = False
    for position, line in enumerate(diff_lines):
        if line.startswith("@@"):
            in_hunk = True
            continue
        marker = line[:1]
        if marker not in ("+", "-"):
            continue
        if not in_hunk and is_file_header(line):
            continue

        clean = rules.normalize(line, position)
        if not clean:
            continue
        is_variability = rules.is_variability_change(clean, position)

        if marker == "+":
            added += 1
            if is_variability:
                added_var += 1
        else:
            deleted += 1
            if is_variability:
                deleted_var += 1

    return FileDiffResult(
        category=category,
        added_lines=added,
        deleted_lines=deleted,
        added_variability_lines=added_var,
        deleted_variability_lines=deleted_var,
    )
