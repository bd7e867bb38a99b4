"""Run-wide aggregation of commit metrics."""

from __future__ import annotations

import copy
import threading
from typing import Optional

from ..classification.models import COUNTED_CATEGORIES, CommitMetrics
from ..logging_config import get_logger
from .formats import serialize_summary
from .models import CommitBucket, RunSummary, bucket_of
from .writer import ResultWriter

logger = get_logger(__name__)


class RunAggregator:
    """Accumulates commit metrics into a :class:`RunSummary`.

    Created once per run and passed to whoever consumes commits. Every
    mutation and its output write happen under one lock, so concurrent
    callers never interleave their increments or rows. :meth:`finalize`
    writes the summary and leaves the aggregator ready for a new run.
    """

    def __init__(self, writer: Optional[ResultWriter] = None) -> None:
        self._writer = writer
        self._lock = threading.Lock()
        self._summary = RunSummary()

    def absorb(self, metrics: CommitMetrics) -> Optional[CommitBucket]:
        """Count an analyzed commit and append its result row.

        Returns the commit's bucket, None if it falls into none.
        """
        with self._lock:
            summary = self._summary
            summary.commits_available += 1
            summary.commits_analyzed += 1

            for category in COUNTED_CATEGORIES:
                counts = metrics.counts(category)
                totals = summary.totals[category]
                totals.lines += counts.lines
                totals.variability_lines += counts.variability_lines

            bucket = bucket_of(metrics)
            if bucket is CommitBucket.VARIABILITY_ONLY:
                summary.variability_only_commits += 1
                summary.variability_only_lines += metrics.variability_lines
            elif bucket is CommitBucket.ARTIFACT_ONLY:
                summary.artifact_only_commits += 1
                summary.artifact_only_lines += metrics.artifact_lines
            elif bucket is CommitBucket.BOTH:
                summary.both_commits += 1
                summary.both_artifact_lines += metrics.artifact_lines
                summary.both_variability_lines += metrics.variability_lines
            else:
                summary.unbucketed_commits += 1
                logger.debug("Commit %s changed no counted line", metrics.commit_id)

            if self._writer is not None:
                self._writer.append_result(metrics)
            return bucket

    def record_unanalyzed(self, commit_id: str) -> None:
        """Count a commit that could not be analyzed and list its id."""
        with self._lock:
            self._summary.commits_available += 1
            if self._writer is not None:
                self._writer.append_unanalyzed(commit_id)

    def snapshot(self) -> RunSummary:
        """Copy of the current counters."""
        with self._lock:
            return copy.deepcopy(self._summary)

    def finalize(self) -> str:
        """Write and return the serialized summary, then reset for a new run."""
        with self._lock:
            text = serialize_summary(self._summary)
            if self._writer is not None:
                self._writer.write_summary(text)
                self._writer.reset()
            self._summary = RunSummary()
            return text
