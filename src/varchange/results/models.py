"""Run-wide summary and commit bucketing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..classification.models import ArtifactCategory, CommitMetrics


class CommitBucket(str, Enum):
    """Mutually exclusive kinds of commits by the lines they change."""

    ARTIFACT_ONLY = "CCAI"
    VARIABILITY_ONLY = "CCVI"
    BOTH = "CCAVI"


def bucket_of(metrics: CommitMetrics) -> Optional[CommitBucket]:
    """Bucket of an analyzed commit, or None when it changed no counted line.

    Artifact lines are the changed lines without variability information,
    summed over model, source and build files.
    """
    artifact_lines = metrics.artifact_lines
    variability_lines = metrics.variability_lines
    if artifact_lines == 0 and variability_lines > 0:
        return CommitBucket.VARIABILITY_ONLY
    if artifact_lines > 0 and variability_lines == 0:
        return CommitBucket.ARTIFACT_ONLY
    if artifact_lines > 0 and variability_lines > 0:
        return CommitBucket.BOTH
    # Analyzable commit whose changes were all inert (comments, blank lines)
    return None


@dataclass
class LineTotals:
    lines: int = 0
    variability_lines: int = 0


@dataclass
class RunSummary:
    """Counters accumulated over one run.

    ``commits_available`` counts every commit taken from the queue,
    ``commits_analyzed`` only those absorbed into the metrics.
    """

    commits_available: int = 0
    commits_analyzed: int = 0

    artifact_only_commits: int = 0
    artifact_only_lines: int = 0

    variability_only_commits: int = 0
    variability_only_lines: int = 0

    both_commits: int = 0
    both_artifact_lines: int = 0
    both_variability_lines: int = 0

    # Commits analyzed but belonging to no bucket
    unbucketed_commits: int = 0

    totals: dict[ArtifactCategory, LineTotals] = field(
        default_factory=lambda: {
            ArtifactCategory.MODEL: LineTotals(),
            ArtifactCategory.SOURCE: LineTotals(),
            ArtifactCategory.BUILD: LineTotals(),
        }
    )

    @property
    def commits_unanalyzed(self) -> int:
        return self.commits_available - self.commits_analyzed

    def bucket_count(self, bucket: CommitBucket) -> int:
        if bucket is CommitBucket.ARTIFACT_ONLY:
            return self.artifact_only_commits
        if bucket is CommitBucket.VARIABILITY_ONLY:
            return self.variability_only_commits
        return self.both_commits
