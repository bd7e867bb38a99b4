"""Exception hierarchy for varchange."""

from .analysis import (
    AnalysisError,
    AnalysisSetupError,
    ExtractionError,
)
from .base import VarChangeError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    UnsupportedTargetError,
)

__all__ = [
    "VarChangeError",
    "AnalysisError",
    "AnalysisSetupError",
    "ExtractionError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
    "UnsupportedTargetError",
]
