"""Data models for commits handed to the analysis."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ChangedArtifact:
    """One file's diff content within a single commit."""

    path: str  # repository-relative path of the changed file
    diff_lines: tuple[str, ...] = ()  # raw unified-diff lines, headers included


@dataclass(frozen=True)
class Commit:
    id: str  # empty id marks a malformed commit
    date: str  # e.g. "2011-06-10 06:01:30 +0200"
    artifacts: tuple[ChangedArtifact, ...] = field(default_factory=tuple)
