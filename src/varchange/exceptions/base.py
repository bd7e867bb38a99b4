"""Base exception for varchange."""

from typing import Any, Dict, Optional


class VarChangeError(Exception):
    """Base exception for all varchange errors.

    ``details`` values are stored as strings so that paths, counts and
    patterns can be passed as they are.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = {
            key: str(value) for key, value in (details or {}).items() if value is not None
        }

    def __str__(self) -> str:
        if not self.details:
            return self.message
        details_str = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({details_str})"
