"""Common types and dataclasses for fpguard."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from fpguard.constants import (
    DEFAULT_EXCLUDES,
    DEFAULT_INCLUDE,
    DEFAULT_SEVERITIES,
    OutputFormat,
    Severity,
)


@dataclass(frozen=True, slots=True)
class IgnoreGovernance:
    """Configuration for ignore pragma governance."""

    require_reason: bool = True
    disallow: frozenset[str] = field(default_factory=lambda: frozenset())
    max_per_file: int | None = None


@dataclass(frozen=True, slots=True)
class RuleConfig:
    """Severity configuration for all rules."""

    severities: MappingProxyType[str, Severity] = field(
        default_factory=lambda: MappingProxyType(DEFAULT_SEVERITIES)
    )


@dataclass(frozen=True, slots=True)
class FpGuardConfig:
    """Complete fpguard configuration."""

    config_path: Path | None = None
    include: tuple[str, ...] = DEFAULT_INCLUDE
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES
    output_format: OutputFormat = OutputFormat.HUMAN
    show_source: bool = True
    jobs: int = 1
    rules: RuleConfig = field(default_factory=RuleConfig)
    ignores: IgnoreGovernance = field(default_factory=IgnoreGovernance)
    selected_rules: frozenset[str] | None = None

    def get_severity(self, rule_code: str) -> Severity:
        """Get the severity for a rule code.

        A rule named explicitly in ``selected_rules`` never resolves to OFF;
        it falls back to its default severity instead.
        """
        severity: Severity = self.rules.severities.get(rule_code, Severity.OFF)
        if (
            severity == Severity.OFF
            and self.selected_rules is not None
            and rule_code in self.selected_rules
        ):
            return DEFAULT_SEVERITIES.get(rule_code, Severity.WARNING)
        return severity

    def is_rule_enabled(self, rule_code: str) -> bool:
        """Check if a rule is active for this run."""
        if self.selected_rules is not None and rule_code not in self.selected_rules:
            return False
        return self.get_severity(rule_code) != Severity.OFF


class ConfigError(Exception):
    """Error during configuration loading or validation."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path: Path | None = path
        super().__init__(message)


class UnknownRuleError(Exception):
    """A requested rule id is not registered."""

    def __init__(self, rule_ids: list[str]) -> None:
        self.rule_ids: list[str] = rule_ids
        quoted: str = ", ".join(f"'{r}'" for r in rule_ids)
        super().__init__(f"Unknown rule id{'s' if len(rule_ids) != 1 else ''}: {quoted}")


class ParseFailure(Exception):
    """A file could not be turned into a syntax tree. Line/column are 1-based."""

    def __init__(
        self,
        message: str,
        *,
        file: Path,
        line: int = 1,
        column: int = 1,
        source_line: str | None = None,
    ) -> None:
        self.message: str = message
        self.file: Path = file
        self.line: int = line
        self.column: int = column
        self.source_line: str | None = source_line
        super().__init__(f"{file}:{line}:{column}: {message}")
