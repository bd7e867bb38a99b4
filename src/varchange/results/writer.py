"""Append-only writers for result, summary and unanalyzed files.

Write failures are logged and swallowed: a run always completes, at the
price of possibly incomplete output files.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from ..classification.models import CommitMetrics
from ..exceptions import AnalysisSetupError
from ..logging_config import get_logger
from .formats import RESULT_HEADER, format_result_row

logger = get_logger(__name__)

FILE_PREFIX = "VariabilityChangeAnalyzer"
RESULT_FILE_NAME = f"{FILE_PREFIX}_Results.tsv"
SUMMARY_FILE_NAME = f"{FILE_PREFIX}_Summary.tsv"
UNANALYZED_FILE_NAME = f"{FILE_PREFIX}_Unanalyzed.txt"


def prepare_output_directory(output_dir: Path) -> None:
    """Replace ``output_dir`` by an empty directory holding empty result and
    summary files. The unanalyzed file is created on first use only.

    Raises:
        AnalysisSetupError: If the directory cannot be reset or the files
            cannot be created
    """
    if output_dir.exists() and not output_dir.is_dir():
        raise AnalysisSetupError(f'"{output_dir}" exists and is not a directory')
    try:
        if output_dir.exists():
            logger.debug('Deleting directory "%s"', output_dir)
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)
        (output_dir / RESULT_FILE_NAME).touch()
        (output_dir / SUMMARY_FILE_NAME).touch()
    except OSError as e:
        raise AnalysisSetupError(f'Creating result directory "{output_dir}" failed: {e}')


class ResultWriter:
    """Writes the three output files of a run inside one directory."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.result_file = self.output_dir / RESULT_FILE_NAME
        self.summary_file = self.output_dir / SUMMARY_FILE_NAME
        self.unanalyzed_file = self.output_dir / UNANALYZED_FILE_NAME
        self._header_written = False

    @property
    def header_written(self) -> bool:
        return self._header_written

    def append_result(self, metrics: CommitMetrics) -> bool:
        """Append one result row, preceded by the header on first use."""
        text = ""
        if not self._header_written:
            text += RESULT_HEADER + "\n"
        text += format_result_row(metrics) + "\n"
        if not self._append(self.result_file, text, "results"):
            return False
        self._header_written = True
        return True

    def append_unanalyzed(self, commit_id: str) -> bool:
        return self._append(self.unanalyzed_file, commit_id + "\n", "unanalyzed commit")

    def write_summary(self, summary_text: str) -> bool:
        return self._append(self.summary_file, summary_text, "summary")

    def reset(self) -> None:
        """Start a new run: the next result row is preceded by a header."""
        self._header_written = False

    def _append(self, path: Path, text: str, what: str) -> bool:
        try:
            with open(path, "a", encoding="utf-8", newline="\n") as f:
                f.write(text)
            return True
        except OSError as e:
            logger.error('Saving %s to "%s" failed: %s', what, path.resolve(), e)
            return False
