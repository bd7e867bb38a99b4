"""Per-commit rollup of file diff results into commit metrics."""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Optional

from ..commits.models import ChangedArtifact, Commit
from ..logging_config import get_logger
from .models import ArtifactCategory, CategoryCounts, CommitMetrics, FileDiffResult
from .rules import ClassificationRules
from .scanner import scan

logger = get_logger(__name__)


def analyze_artifact(artifact: ChangedArtifact, rules: ClassificationRules) -> FileDiffResult:
    """Classify one changed file and count its diff lines."""
    category = rules.classify(artifact.path)
    return scan(artifact.diff_lines, category)


def analyze_commit(
    commit: Commit,
    rules: ClassificationRules,
    executor: Optional[Executor] = None,
) -> tuple[CommitMetrics, bool]:
    """Fold all changed files of a commit into :class:`CommitMetrics`.

    Returns the metrics and whether the commit was analyzable: its id is
    non-empty and at least one changed file is a MODEL, SOURCE or BUILD
    file. A commit touching only excluded, blacklisted or unmatched files is
    unanalyzable although nothing went wrong.

    With an ``executor`` the files are scanned concurrently; results are
    folded in artifact order either way.
    """
    empty = CommitMetrics(commit_id=commit.id, date=commit.date)
    if not commit.id:
        logger.debug("Rejecting commit without id")
        return empty, False

    if executor is not None and len(commit.artifacts) > 1:
        results = list(
            executor.map(lambda artifact: analyze_artifact(artifact, rules), commit.artifacts)
        )
    else:
        results = [analyze_artifact(artifact, rules) for artifact in commit.artifacts]

    counts = {
        ArtifactCategory.MODEL: CategoryCounts(),
        ArtifactCategory.SOURCE: CategoryCounts(),
        ArtifactCategory.BUILD: CategoryCounts(),
    }
    for result in results:
        if result.category is ArtifactCategory.OTHER:
            continue
        counts[result.category] = counts[result.category].add(result)

    analyzed = any(c.files for c in counts.values())
    metrics = CommitMetrics(
        commit_id=commit.id,
        date=commit.date,
        model=counts[ArtifactCategory.MODEL],
        source=counts[ArtifactCategory.SOURCE],
        build=counts[ArtifactCategory.BUILD],
    )
    return metrics, analyzed
