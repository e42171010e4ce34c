"""Constants and enums for fpguard configuration."""
from __future__ import annotations

from enum import Enum
from typing import Final

__version__: Final[str] = "0.1.0"


class Severity(Enum):
    """Rule severity levels."""

    ERROR = "error"
    WARNING = "warning"
    OFF = "off"


class OutputFormat(Enum):
    """Output format options."""

    HUMAN = "human"
    MACHINE = "machine"


MUTABLE_BINDING: Final[str] = "MutableBinding"
NATIVE_LOOP: Final[str] = "NativeLoop"
SWITCH_STATEMENT: Final[str] = "SwitchStatement"
TRY_CATCH: Final[str] = "TryCatch"
CLASS_DECLARATION: Final[str] = "ClassDeclaration"
TOP_LEVEL_SIDE_EFFECT: Final[str] = "TopLevelSideEffect"

RULE_IDS: Final[tuple[str, ...]] = (
    MUTABLE_BINDING,
    NATIVE_LOOP,
    SWITCH_STATEMENT,
    TRY_CATCH,
    CLASS_DECLARATION,
    TOP_LEVEL_SIDE_EFFECT,
)

DEFAULT_SEVERITIES: Final[dict[str, Severity]] = {
    MUTABLE_BINDING: Severity.WARNING,
    NATIVE_LOOP: Severity.ERROR,
    SWITCH_STATEMENT: Severity.ERROR,
    TRY_CATCH: Severity.ERROR,
    CLASS_DECLARATION: Severity.ERROR,
    TOP_LEVEL_SIDE_EFFECT: Severity.WARNING,
}

IGNORE_WITHOUT_REASON: Final[str] = "IgnoreWithoutReason"
IGNORE_DISALLOWED: Final[str] = "IgnoreDisallowed"
TOO_MANY_IGNORES: Final[str] = "TooManyIgnores"

EXIT_CLEAN: Final[int] = 0
EXIT_FINDINGS: Final[int] = 1
EXIT_PARSE_FAILURE: Final[int] = 2
EXIT_USAGE_ERROR: Final[int] = 3

CONFIG_FILENAME: Final[str] = "fpguard.toml"

DEFAULT_INCLUDE: Final[tuple[str, ...]] = (
    "**/*.js",
    "**/*.mjs",
    "**/*.cjs",
    "**/*.jsx",
)

JS_SUFFIXES: Final[frozenset[str]] = frozenset({".js", ".mjs", ".cjs", ".jsx"})

DEFAULT_EXCLUDES: Final[tuple[str, ...]] = (
    "**/node_modules/**",
    "**/.*",
    "**/.git/**",
    "**/bower_components/**",
    "**/coverage/**",
    "build/**",
    "dist/**",
    "**/*.min.js",
)

_RULE_IDS_BY_LOWER: Final[dict[str, str]] = {
    rule_id.lower(): rule_id for rule_id in RULE_IDS
}


def canonical_rule_id(raw: str) -> str | None:
    """Return the registered spelling of a rule id, matching case-insensitively."""
    return _RULE_IDS_BY_LOWER.get(raw.strip().lower())
