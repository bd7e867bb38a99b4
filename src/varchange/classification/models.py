"""Data models for diff classification and per-commit metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ArtifactCategory(str, Enum):
    """Kind of artifact a changed file belongs to."""

    MODEL = "model"  # variability model definitions (Kconfig)
    SOURCE = "source"  # compiled code
    BUILD = "build"  # build-system definitions (Makefile, Kbuild)
    OTHER = "other"  # everything else; never counted


# Categories that contribute to metrics, in result-file column order
COUNTED_CATEGORIES = (ArtifactCategory.SOURCE, ArtifactCategory.BUILD, ArtifactCategory.MODEL)


@dataclass(frozen=True)
class FileDiffResult:
    """Line counts for one changed file.

    Variability counts never exceed the respective totals. OTHER files
    always have all-zero counts.
    """

    category: ArtifactCategory
    added_lines: int = 0
    deleted_lines: int = 0
    added_variability_lines: int = 0
    deleted_variability_lines: int = 0

    def __post_init__(self) -> None:
        if self.added_variability_lines > self.added_lines:
            raise ValueError("added_variability_lines exceeds added_lines")
        if self.deleted_variability_lines > self.deleted_lines:
            raise ValueError("deleted_variability_lines exceeds deleted_lines")

    @property
    def changed_lines(self) -> int:
        return self.added_lines + self.deleted_lines

    @property
    def changed_variability_lines(self) -> int:
        return self.added_variability_lines + self.deleted_variability_lines


@dataclass(frozen=True)
class CategoryCounts:
    """Counters of one artifact category within one commit."""

    files: int = 0
    lines: int = 0  # all changed lines, variability lines included
    variability_lines: int = 0

    @property
    def artifact_lines(self) -> int:
        """Changed lines carrying no variability information."""
        return self.lines - self.variability_lines

    def add(self, result: FileDiffResult) -> CategoryCounts:
        return CategoryCounts(
            files=self.files + 1,
            lines=self.lines + result.changed_lines,
            variability_lines=self.variability_lines + result.changed_variability_lines,
        )


@dataclass(frozen=True)
class CommitMetrics:
    """Per-commit rollup over all changed MODEL, SOURCE and BUILD files."""

    commit_id: str
    date: str
    model: CategoryCounts = field(default_factory=CategoryCounts)
    source: CategoryCounts = field(default_factory=CategoryCounts)
    build: CategoryCounts = field(default_factory=CategoryCounts)

    def counts(self, category: ArtifactCategory) -> CategoryCounts:
        if category is ArtifactCategory.MODEL:
            return self.model
        if category is ArtifactCategory.SOURCE:
            return self.source
        if category is ArtifactCategory.BUILD:
            return self.build
        raise KeyError(f"no counters for {category.name}")

    @property
    def artifact_lines(self) -> int:
        return sum(self.counts(c).artifact_lines for c in COUNTED_CATEGORIES)

    @property
    def variability_lines(self) -> int:
        return sum(self.counts(c).variability_lines for c in COUNTED_CATEGORIES)
