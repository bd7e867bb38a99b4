"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

console = Console()


def resolve_config(config: Optional[Path] = None, **options) -> AnalysisConfig:
    """Build the configuration from CLI options; unset options don't override."""
    overrides = {key: value for key, value in options.items() if value is not None}
    return load_config(config_file=config, **overrides)
