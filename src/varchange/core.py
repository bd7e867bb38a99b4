"""Run orchestrator: consumes commits, writes results, triggers visualization.

Setup problems (missing or broken patterns, unsupported target SPL, an
output directory that cannot be reset, a missing R environment) raise from
the constructor, before any commit is read. Once running, a commit that
cannot be analyzed is listed as unanalyzed and the run goes on.
"""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .classification import ClassificationRules, analyze_commit
from .commits import Commit, CommitQueue
from .config import AnalysisConfig
from .exceptions import AnalysisSetupError
from .logging_config import get_logger
from .results import (
    ResultWriter,
    RScriptVisualizer,
    RunAggregator,
    RunSummary,
    Visualizer,
    prepare_output_directory,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunOutcome:
    """What a finished run produced."""

    summary: RunSummary
    summary_text: str
    result_file: Path
    summary_file: Path
    unanalyzed_file: Path
    visualized: Optional[bool] = None  # None when visualization is disabled

    @property
    def succeeded(self) -> bool:
        return self.visualized is not False


class VariabilityChangeAnalyzer:
    """Analyzes every commit of a :class:`CommitQueue` until it is closed."""

    def __init__(
        self,
        config: AnalysisConfig,
        commit_queue: CommitQueue,
        visualizer: Optional[Visualizer] = None,
    ) -> None:
        self.config = config
        self.commit_queue = commit_queue
        self.rules = ClassificationRules.from_config(config)
        self.target_spl = config.normalized_target_spl

        self.visualizer = visualizer
        if self.target_spl is None:
            logger.info("Visualization of analysis results disabled")
        elif self.visualizer is None:
            self.visualizer = self._create_visualizer(config)

        self.output_dir = Path(config.output_dir)
        prepare_output_directory(self.output_dir)
        self.writer = ResultWriter(self.output_dir)
        self.aggregator = RunAggregator(self.writer)
        logger.debug("%s created", type(self).__name__)

    @staticmethod
    def _create_visualizer(config: AnalysisConfig) -> RScriptVisualizer:
        if not config.visualization_script:
            raise AnalysisSetupError(
                f"target SPL '{config.target_spl}' requires a visualization script"
            )
        visualizer = RScriptVisualizer(Path(config.visualization_script))
        visualizer.check_environment()
        return visualizer

    def analyze(self) -> RunOutcome:
        """Consume the queue, finalize the summary and visualize if enabled."""
        logger.info("Starting analysis")
        summary, summary_text = self._analyze_commits()

        visualized: Optional[bool] = None
        if self.target_spl is not None and self.visualizer is not None:
            visualized = self.visualizer.visualize(
                self.writer.result_file, self.output_dir, self.target_spl
            )

        return RunOutcome(
            summary=summary,
            summary_text=summary_text,
            result_file=self.writer.result_file,
            summary_file=self.writer.summary_file,
            unanalyzed_file=self.writer.unanalyzed_file,
            visualized=visualized,
        )

    def _analyze_commits(self) -> tuple[RunSummary, str]:
        if self.config.workers:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                self._consume(executor)
        else:
            self._consume(None)

        summary = self.aggregator.snapshot()
        summary_text = self.aggregator.finalize()
        logger.info(
            "Analyzed %d of %d commits", summary.commits_analyzed, summary.commits_available
        )
        return summary, summary_text

    def _consume(self, executor: Optional[Executor]) -> None:
        for commit in self.commit_queue:
            self.process_commit(commit, executor)

    def process_commit(self, commit: Commit, executor: Optional[Executor] = None) -> bool:
        """Analyze one commit and record it; True if it entered the metrics."""
        logger.debug("Analyzing commit %s", commit.id)
        try:
            metrics, analyzed = analyze_commit(commit, self.rules, executor)
        except Exception:
            logger.exception("Analyzing commit %s failed", commit.id)
            analyzed = False

        if analyzed:
            logger.debug("Writing analysis results for commit %s", commit.id)
            self.aggregator.absorb(metrics)
        else:
            logger.debug("Commit %s not analyzed", commit.id)
            self.aggregator.record_unanalyzed(commit.id)
        return analyzed
