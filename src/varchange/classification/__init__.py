"""Diff classification: path routing, line classification and per-commit counting."""

from .analyzer import analyze_artifact, analyze_commit
from .models import (
    COUNTED_CATEGORIES,
    ArtifactCategory,
    CategoryCounts,
    CommitMetrics,
    FileDiffResult,
)
from .normalizers import LINE_RULES, LineRules, get_line_rules
from .rules import ClassificationRules
from .scanner import scan

__all__ = [
    "ArtifactCategory",
    "COUNTED_CATEGORIES",
    "CategoryCounts",
    "ClassificationRules",
    "CommitMetrics",
    "FileDiffResult",
    "LINE_RULES",
    "LineRules",
    "analyze_artifact",
    "analyze_commit",
    "get_line_rules",
    "scan",
]
