"""Configuration exceptions: artifact patterns, paths, target product lines."""

from pathlib import Path
from typing import Any, Iterable

from .base import VarChangeError


class ConfigurationError(VarChangeError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a path given on the command line or in a config file is unusable."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path {path}: {reason}", details={"path": path})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value, typically an artifact pattern, is unusable.

    A missing value is reported without a ``value`` detail.
    """

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid {key}: {reason}",
            details={"key": key, "value": value, "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class UnsupportedTargetError(ConfigurationError):
    """Raised when the target product line for visualization is not supported."""

    def __init__(self, target: str, supported: Iterable[str]):
        self.supported = sorted(supported)
        super().__init__(
            f"Unsupported target SPL: {target}",
            details={"target": target, "supported": ", ".join(self.supported)},
        )
        self.target = target
