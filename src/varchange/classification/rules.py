"""Path routing: which artifact category a changed file belongs to."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..config import AnalysisConfig
from ..exceptions import InvalidConfigError
from .models import ArtifactCategory

# Directories holding documentation or scripts are never analyzed, at any depth
_DOC_DIR_PATTERN = r"[dD]ocumentation(s)?"
_SCRIPT_DIR_PATTERN = r"[sS]cript(s)?"

EXCLUDE_PATTERN = re.compile(
    rf"((.*/)?(({_DOC_DIR_PATTERN})|({_SCRIPT_DIR_PATTERN}))/.*)|(.*\.txt)"
)

# Names that look like model files but are not, e.g. coreboot's "Config.lb"
DEFAULT_BLACKLIST = ("lb",)


def compile_pattern(key: str, pattern: Optional[str]) -> re.Pattern:
    """Compile a mandatory artifact pattern.

    Raises:
        InvalidConfigError: If the pattern is missing or not a valid regex
    """
    if pattern is None or not pattern.strip():
        raise InvalidConfigError(key, pattern, "pattern is required")
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidConfigError(key, pattern, f"invalid regular expression: {e}")


@dataclass(frozen=True)
class ClassificationRules:
    """Precompiled path predicates deciding the category of a changed file.

    Precedence, first hit wins:
        1. exclusion pattern (documentation/script directories, *.txt)
        2. blacklisted extension
        3. source, build, model pattern (full match)
        4. OTHER
    """

    model_pattern: re.Pattern
    source_pattern: re.Pattern
    build_pattern: re.Pattern
    blacklist: tuple[str, ...] = DEFAULT_BLACKLIST
    exclude_pattern: re.Pattern = field(default=EXCLUDE_PATTERN)

    @classmethod
    def from_patterns(
        cls,
        model: Optional[str],
        source: Optional[str],
        build: Optional[str],
        blacklist: Sequence[str] = DEFAULT_BLACKLIST,
    ) -> ClassificationRules:
        return cls(
            model_pattern=compile_pattern("model_files_regex", model),
            source_pattern=compile_pattern("source_files_regex", source),
            build_pattern=compile_pattern("build_files_regex", build),
            blacklist=tuple(blacklist),
        )

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> ClassificationRules:
        return cls.from_patterns(
            config.model_files_regex,
            config.source_files_regex,
            config.build_files_regex,
            config.blacklist,
        )

    def is_excluded(self, path: str) -> bool:
        return self.exclude_pattern.fullmatch(path) is not None

    def is_blacklisted(self, path: str) -> bool:
        stripped = path.strip()
        return any(stripped.endswith(f".{extension}") for extension in self.blacklist)

    def classify(self, path: str) -> ArtifactCategory:
        if not path or self.is_excluded(path) or self.is_blacklisted(path):
            return ArtifactCategory.OTHER
        if self.source_pattern.fullmatch(path):
            return ArtifactCategory.SOURCE
        if self.build_pattern.fullmatch(path):
            return ArtifactCategory.BUILD
        if self.model_pattern.fullmatch(path):
            return ArtifactCategory.MODEL
        return ArtifactCategory.OTHER
