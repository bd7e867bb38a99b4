"""Configuration loading and management for varchange.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Project config (./varchange.toml)
    3. Explicit config file (--config)
    4. Environment variables (VARCHANGE_* prefix)
    5. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(source_files_regex=r".*\\.[hc]", verbose=True)
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, UnsupportedTargetError

Verbosity = Literal["quiet", "normal", "verbose"]

# Product lines the visualization scripts know how to label
SUPPORTED_TARGET_SPLS = frozenset({"linux", "coreboot"})

PROJECT_CONFIG_NAME = "varchange.toml"


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    The three file patterns are mandatory for analysis; they are validated
    and compiled when the classification rules are built, so a config can
    be loaded (e.g. to inspect it) before they are supplied.

    Attributes:
        Artifact patterns (full-match regular expressions over file paths):
            model_files_regex: Variability model files, e.g. Kconfig
            source_files_regex: Code files, e.g. *.c, *.h, *.S
            build_files_regex: Build files, e.g. Makefile, Kbuild

        Classification:
            blacklist: File extensions (without ".") never analyzed

        Output:
            output_dir: Directory receiving the result, summary and
                unanalyzed files. Deleted and re-created on every run.

        Visualization:
            target_spl: Product line label ("linux" or "coreboot");
                visualization is skipped when unset
            visualization_script: Main R script receiving
                (result file, output dir, target spl)

        Extraction and scheduling:
            git_max_commits: Maximum commits to extract (0 = unlimited)
            queue_size: Capacity of the commit queue between extractor
                and analyzer
            workers: Threads scanning the files of one commit
                (None = scan sequentially)

        Output control:
            verbosity: Logging verbosity level
    """

    model_files_regex: Optional[str] = None
    source_files_regex: Optional[str] = None
    build_files_regex: Optional[str] = None

    blacklist: list[str] = field(default_factory=lambda: ["lb"])

    output_dir: str = "varchange-results"

    target_spl: Optional[str] = None
    visualization_script: Optional[str] = None

    git_max_commits: int = 0
    queue_size: int = 100
    workers: Optional[int] = None

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.git_max_commits < 0:
            raise ValueError("git_max_commits must be non-negative")
        if self.queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")

        for extension in self.blacklist:
            if not extension or extension.startswith("."):
                raise ValueError(
                    f"blacklist entries are extensions without '.', got '{extension}'"
                )

        if self.target_spl is not None:
            if self.target_spl.lower() not in SUPPORTED_TARGET_SPLS:
                raise UnsupportedTargetError(self.target_spl, SUPPORTED_TARGET_SPLS)

    @property
    def normalized_target_spl(self) -> Optional[str]:
        """Target SPL in lower case, or None when visualization is disabled."""
        if self.target_spl is None:
            return None
        return self.target_spl.lower()


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing, or a
            value fails validation
    """
    merged: dict = {}

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    if isinstance(merged.get("blacklist"), tuple):
        merged["blacklist"] = list(merged["blacklist"])

    try:
        return AnalysisConfig(**merged)
    except ConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from VARCHANGE_* environment variables.

    Supported environment variables:
        VARCHANGE_MODEL_FILES_REGEX: str
        VARCHANGE_SOURCE_FILES_REGEX: str
        VARCHANGE_BUILD_FILES_REGEX: str
        VARCHANGE_OUTPUT_DIR: str
        VARCHANGE_TARGET_SPL: str
        VARCHANGE_VISUALIZATION_SCRIPT: str
        VARCHANGE_GIT_MAX_COMMITS: int
        VARCHANGE_QUEUE_SIZE: int
        VARCHANGE_WORKERS: int
        VARCHANGE_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any VARCHANGE_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"VARCHANGE_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that cannot be expressed in one variable
    (lists such as the blacklist).

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If neither tomllib nor tomli is available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
