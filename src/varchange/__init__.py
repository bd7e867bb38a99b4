"""
varchange - Variability change analysis for KBuild-style product lines

Measures, per commit, how many changed lines of variability model, source
and build files touch configuration symbols and conditional logic, and how
many only touch plain artifact content.
"""

__version__ = "0.1.0"

from .classification import (
    ArtifactCategory,
    ClassificationRules,
    CommitMetrics,
    FileDiffResult,
    analyze_commit,
    scan,
)
from .commits import ChangedArtifact, Commit, CommitQueue
from .core import RunOutcome, VariabilityChangeAnalyzer
from .results import RunAggregator, RunSummary

__all__ = [
    "ArtifactCategory",
    "ChangedArtifact",
    "ClassificationRules",
    "Commit",
    "CommitMetrics",
    "CommitQueue",
    "FileDiffResult",
    "RunAggregator",
    "RunOutcome",
    "RunSummary",
    "VariabilityChangeAnalyzer",
    "analyze_commit",
    "scan",
]
