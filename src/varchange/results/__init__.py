"""Results: run aggregation, tab-separated output and visualization."""

from .collector import RunAggregator
from .formats import (
    RESULT_HEADER,
    format_commit_date,
    format_result_row,
    serialize_summary,
)
from .models import CommitBucket, RunSummary, bucket_of
from .visualizer import RScriptVisualizer, Visualizer
from .writer import (
    RESULT_FILE_NAME,
    SUMMARY_FILE_NAME,
    UNANALYZED_FILE_NAME,
    ResultWriter,
    prepare_output_directory,
)

__all__ = [
    "CommitBucket",
    "RESULT_FILE_NAME",
    "RESULT_HEADER",
    "RScriptVisualizer",
    "ResultWriter",
    "RunAggregator",
    "RunSummary",
    "SUMMARY_FILE_NAME",
    "UNANALYZED_FILE_NAME",
    "Visualizer",
    "bucket_of",
    "format_commit_date",
    "format_result_row",
    "prepare_output_directory",
    "serialize_summary",
]
