"""Tab-separated renderings of commit metrics and run summaries."""

from __future__ import annotations

from typing import Optional

from ..classification.models import COUNTED_CATEGORIES, ArtifactCategory, CommitMetrics
from .models import RunSummary

RESULT_COLUMNS = (
    "Date",
    "Commit",
    "CCF",
    "CCLAI",
    "CCLVI",
    "CBF",
    "CBLAI",
    "CBLVI",
    "CMF",
    "CMLAI",
    "CMLVI",
)
RESULT_HEADER = "\t".join(RESULT_COLUMNS)

SUMMARY_TITLE = (
    "Counted Element\tNumber of Commits\t"
    "Number of Changed Lines (artifact-specific)\t"
    "Number of Changed Lines (variability)"
)

SUMMARY_GLOSSARY = (
    "Description:",
    "CAv\t[C]ommits [Av]ailable: number of all commits input to this analysis",
    "CAn\t[C]ommits [An]alyzed: number of commits actually analyzed",
    "\t    Some commits may not be analyzed due to no file changes",
    "CCAI\t[C]ommits [C]hanging [A]rtifact-specific [I]nformation: number of commits that "
    "exclusively change at least one line of",
    "\t    a) help text in a variability model file (no variability information)",
    "\t    b) general source code in a source code file (no variability information)",
    "\t    c) the general build process definition in a build file (no variability information)",
    "CCVI\t[C]ommits [C]hanging [V]ariability [I]nformation: number of commits that "
    "exclusively change at least one line defining",
    "\t    a) configuration options, etc. in a variability model file (variability information)",
    "\t    b) references to configuration options in a source code file (variability information)",
    "\t    c) references to configuration options in a build file (variability information)",
    "CCAVI\t[C]ommits [C]hanging [A]rtifact-specific and [V]ariability [I]nformation: number of "
    "commits that change both types of information (see CCAI and CCVI)",
    "CML\t[C]hanged [M]odel [L]ines: number of changed model lines over all analyzed commits",
    "CCL\t[C]hanged source [C]ode [L]ines: number of changed source code lines over all "
    "analyzed commits",
    "CBL\t[C]hanged [B]uild process [L]ines: number of changed build process lines over all "
    "analyzed commits",
)

_TOTALS_KEYS = (
    ("CML", ArtifactCategory.MODEL),
    ("CCL", ArtifactCategory.SOURCE),
    ("CBL", ArtifactCategory.BUILD),
)


def format_commit_date(timestamp: str) -> Optional[str]:
    """Reduce "2011-06-10 06:01:30 +0200" to "2011/06/10".

    Returns None when the timestamp does not start with a
    year-month-day date.
    """
    if not timestamp or not timestamp.strip():
        return None
    date_part = timestamp.split()[0]
    parts = date_part.split("-")
    if len(parts) != 3:
        return None
    return "/".join(parts)


def format_result_row(metrics: CommitMetrics) -> str:
    """One result line: date, commit, then files/lines/variability lines
    for source, build and model files."""
    fields = [format_commit_date(metrics.date) or "", metrics.commit_id]
    for category in COUNTED_CATEGORIES:
        counts = metrics.counts(category)
        fields.extend(str(n) for n in (counts.files, counts.lines, counts.variability_lines))
    return "\t".join(fields)


def serialize_summary(summary: RunSummary) -> str:
    lines = [
        SUMMARY_TITLE,
        f"CAv\t{summary.commits_available}",
        f"CAn\t{summary.commits_analyzed}",
        f"CCAI\t{summary.artifact_only_commits}\t{summary.artifact_only_lines}",
        f"CCVI\t{summary.variability_only_commits}\t\t{summary.variability_only_lines}",
        f"CCAVI\t{summary.both_commits}\t{summary.both_artifact_lines}"
        f"\t{summary.both_variability_lines}",
    ]
    for key, category in _TOTALS_KEYS:
        totals = summary.totals[category]
        lines.append(f"{key}\t\t{totals.lines}\t{totals.variability_lines}")
    lines.extend(["", ""])
    lines.extend(SUMMARY_GLOSSARY)
    return "\n".join(lines) + "\n"
