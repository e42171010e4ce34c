"""Finding and report data model for fpguard."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from fpguard.constants import Severity


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source code location. All values are 1-based, columns count characters."""

    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


@dataclass(frozen=True, slots=True)
class Finding:
    """A single rule violation found in code."""

    file: Path
    location: SourceLocation
    rule_id: str
    message: str
    severity: Severity
    source_line: str | None = None


def _sort_key(finding: Finding) -> tuple[str, int, int, str]:
    return (
        str(finding.file),
        finding.location.line,
        finding.location.column,
        finding.rule_id,
    )


@dataclass(frozen=True, slots=True)
class DiagnosticReport:
    """Immutable collection of findings, sorted by file, line, column, rule id."""

    findings: tuple[Finding, ...] = ()

    @classmethod
    def build(cls, findings: Iterable[Finding]) -> DiagnosticReport:
        """Build a report from findings in any order."""
        return cls(findings=tuple(sorted(findings, key=_sort_key)))

    def merge(self, other: DiagnosticReport) -> DiagnosticReport:
        """Return a new report holding the findings of both."""
        return DiagnosticReport.build((*self.findings, *other.findings))

    def for_rule(self, rule_id: str) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.rule_id == rule_id)

    @property
    def files(self) -> tuple[Path, ...]:
        """Files with at least one finding, in report order."""
        return tuple(dict.fromkeys(f.file for f in self.findings))

    @property
    def has_errors(self) -> bool:
        """Return True if any finding has ERROR severity."""
        return any(f.severity == Severity.ERROR for f in self.findings)

    @property
    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.WARNING)

    def __len__(self) -> int:
        return len(self.findings)

    def __iter__(self) -> Iterator[Finding]:
        return iter(self.findings)
