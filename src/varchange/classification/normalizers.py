"""Per-category line normalization and variability detection.

Every artifact category owns one :class:`LineRules` pair:

``normalize(raw_line, position) -> str``
    Strips the diff marker, surrounding whitespace and inert content
    (comments, blank lines). Inert lines normalize to ``""`` and are not
    counted at all.

``is_variability_change(clean_line, position) -> bool``
    Whether the cleaned line refers to a configuration construct.

The pairs live in the :data:`LINE_RULES` dispatch table keyed by
:class:`ArtifactCategory`; the table must cover every category.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .models import ArtifactCategory

# Configuration symbol as referenced from code and build files
CONFIG_SYMBOL = re.compile(r"\bCONFIG_[A-Za-z0-9_]+\b")

DIFF_MARKERS = ("+", "-")


def strip_marker(raw_line: str) -> str:
    """Remove the leading ``+``/``-`` of a diff line and trim it."""
    if raw_line[:1] in DIFF_MARKERS:
        raw_line = raw_line[1:]
    return raw_line.strip()


def _strip_hash_comment(line: str, honor_quotes: bool) -> str:
    """Cut a ``#`` comment, ignoring escaped ``\\#`` and (optionally) quoted ones."""
    quote = ""
    escaped = False
    for index, char in enumerate(line):
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
        elif honor_quotes and char in "\"'":
            if not quote:
                quote = char
            elif quote == char:
                quote = ""
        elif char == "#" and not quote:
            return line[:index].rstrip()
    return line


# ── SOURCE: C, headers, assembler ──────────────────────────────────

_C_BLOCK_COMMENT = re.compile(r"/\*.*?\*/")
_C_LINE_COMMENT = re.compile(r"//.*$")
# Comment-only lines; "*ptr = x;" is code, "* text" continues a block comment
_C_COMMENT_ONLY = re.compile(r"^(/\*|//|\*/|\*(\s|$))")

_PREPROCESSOR_CONDITIONAL = re.compile(r"^#\s*(if|ifdef|ifndef|elif|elifdef|elifndef)\b")
_SYMBOL_REFERENCE = re.compile(
    r"\b(IS_ENABLED|IS_BUILTIN|IS_MODULE|IS_REACHABLE|defined)\s*\(\s*CONFIG_[A-Za-z0-9_]+"
)


def normalize_source_line(raw_line: str, position: int) -> str:
    line = strip_marker(raw_line)
    if not line or _C_COMMENT_ONLY.match(line):
        return ""
    line = _C_BLOCK_COMMENT.sub(" ", line)
    line = _C_LINE_COMMENT.sub("", line)
    # An unterminated "/*" opens a comment running past this line
    opening = line.find("/*")
    if opening >= 0:
        line = line[:opening]
    return line.strip()


def is_source_variability_change(clean_line: str, position: int) -> bool:
    if not CONFIG_SYMBOL.search(clean_line):
        return False
    if _PREPROCESSOR_CONDITIONAL.match(clean_line):
        return True
    return _SYMBOL_REFERENCE.search(clean_line) is not None


# ── BUILD: Makefile, Kbuild ────────────────────────────────────────

_BUILD_CONDITIONAL = re.compile(r"^(ifdef|ifndef|ifeq|ifneq)\b")
_VARIABLE_EXPANSION = re.compile(r"\$[({]\s*CONFIG_[A-Za-z0-9_]+")


def normalize_build_line(raw_line: str, position: int) -> str:
    line = strip_marker(raw_line)
    if not line or line.startswith("#"):
        return ""
    return _strip_hash_comment(line, honor_quotes=False)


def is_build_variability_change(clean_line: str, position: int) -> bool:
    if not CONFIG_SYMBOL.search(clean_line):
        return False
    if _BUILD_CONDITIONAL.match(clean_line):
        return True
    return _VARIABLE_EXPANSION.search(clean_line) is not None


# ── MODEL: Kconfig ─────────────────────────────────────────────────

# Building blocks of Kconfig expressions. Symbols are upper case, so prose
# such as "if you are unsure" never forms an expression.
_SYMBOL = r"[A-Z0-9_]+"
_STRING = r'"(?:[^"\\]|\\.)*"' + r"|'[^']*'"
_VALUE = rf"(?:{_SYMBOL}|[ymn]|0[xX][0-9a-fA-F]+|-?\d+|{_STRING}|\$\(.*\))"
_TERM = rf"(?:[!(]\s*)*{_VALUE}(?:\s*\))*"
_OPERATOR = r"(?:&&|\|\||!=|<=|>=|=|<|>)"
_EXPR = rf"{_TERM}(?:\s*{_OPERATOR}\s*{_TERM})*"
_CONDITION = rf"(?:\s+if\s+{_EXPR})?"

# Kconfig directives that declare symbols or their properties. Help text,
# menus and comments only describe and are therefore not listed.
_MODEL_DIRECTIVES = [
    r"(menu)?config\s+\w+",
    r"choice(\s+\w+)?",
    r"endchoice",
    rf"if\s+{_EXPR}",
    r"endif",
    rf"(o|r|or)?source\s+(?:{_STRING})",
    rf"depends\s+on\s+{_EXPR}",
    rf"(select|imply)\s+{_SYMBOL}{_CONDITION}",
    rf"(default|def_bool|def_tristate)\s+{_EXPR}{_CONDITION}",
    rf"(bool|boolean|tristate|string|hex|int)(\s+(?:{_STRING}))?{_CONDITION}",
    rf"range\s+{_TERM}\s+{_TERM}{_CONDITION}",
    rf"prompt\s+(?:{_STRING}){_CONDITION}",
    rf"visible\s+if\s+{_EXPR}",
    rf"option\s+\w+(=(?:{_STRING}))?",
    r"optional",
    r"modules",
]
_MODEL_DIRECTIVE = re.compile("|".join(f"(?:{d})" for d in _MODEL_DIRECTIVES))


def normalize_model_line(raw_line: str, position: int) -> str:
    line = strip_marker(raw_line)
    if not line or line.startswith("#"):
        return ""
    return _strip_hash_comment(line, honor_quotes=True)


def is_model_variability_change(clean_line: str, position: int) -> bool:
    return _MODEL_DIRECTIVE.fullmatch(clean_line) is not None


# ── OTHER ──────────────────────────────────────────────────────────


def normalize_other_line(raw_line: str, position: int) -> str:
    return ""


def is_other_variability_change(clean_line: str, position: int) -> bool:
    return False


@dataclass(frozen=True)
class LineRules:
    """The normalize/detect pair of one artifact category."""

    category: ArtifactCategory
    normalize: Callable[[str, int], str]
    is_variability_change: Callable[[str, int], bool]


LINE_RULES: dict[ArtifactCategory, LineRules] = {
    ArtifactCategory.SOURCE: LineRules(
        ArtifactCategory.SOURCE, normalize_source_line, is_source_variability_change
    ),
    ArtifactCategory.BUILD: LineRules(
        ArtifactCategory.BUILD, normalize_build_line, is_build_variability_change
    ),
    ArtifactCategory.MODEL: LineRules(
        ArtifactCategory.MODEL, normalize_model_line, is_model_variability_change
    ),
    ArtifactCategory.OTHER: LineRules(
        ArtifactCategory.OTHER, normalize_other_line, is_other_variability_change
    ),
}

_missing = set(ArtifactCategory) - set(LINE_RULES)
if _missing:
    raise RuntimeError(f"LINE_RULES lacks categories: {sorted(c.name for c in _missing)}")


def get_line_rules(category: ArtifactCategory) -> LineRules:
    return LINE_RULES[category]
