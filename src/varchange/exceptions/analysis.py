"""Analysis-related exceptions: setup of a run, commit extraction."""

from pathlib import Path

from .base import VarChangeError


class AnalysisError(VarChangeError):
    """Base class for analysis-related errors."""
    pass


class AnalysisSetupError(AnalysisError):
    """Raised when a run cannot be prepared (output location, R environment)."""

    def __init__(self, reason: str):
        super().__init__(f"Analysis setup failed: {reason}", details={"reason": reason})
        self.reason = reason


class ExtractionError(AnalysisError):
    """Raised when commits cannot be extracted from a repository."""

    def __init__(self, repo_path: Path, reason: str):
        super().__init__(
            f"Cannot extract commits from {repo_path}",
            details={"repo": str(repo_path), "reason": reason},
        )
        self.repo_path = repo_path
        self.reason = reason
