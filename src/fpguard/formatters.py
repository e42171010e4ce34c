"""Output formatters for fpguard reports."""
from __future__ import annotations

import json
from itertools import groupby
from operator import attrgetter
from typing import Final, Protocol

from fpguard.constants import OutputFormat
from fpguard.diagnostics import DiagnosticReport, Finding
from fpguard.types import FpGuardConfig, ParseFailure

NO_FINDINGS: Final[str] = "No findings."


class Formatter(Protocol):
    def format(
        self,
        *,
        report: DiagnosticReport,
        failures: tuple[ParseFailure, ...],
        config: FpGuardConfig,
    ) -> str: ...


class HumanFormatter:
    """Readable listing, grouped under one header line per file."""

    def format(
        self,
        *,
        report: DiagnosticReport,
        failures: tuple[ParseFailure, ...],
        config: FpGuardConfig,
    ) -> str:
        lines: list[str] = []

        for file, file_findings in groupby(report, key=attrgetter("file")):
            lines.append(str(file))
            for finding in file_findings:
                lines.extend(_human_finding(finding=finding, config=config))
            lines.append("")

        for failure in failures:
            lines.append(
                f"{failure.file}:{failure.line}:{failure.column}: "
                f"PARSE FAILURE {failure.message}"
            )
            if config.show_source and failure.source_line is not None:
                lines.extend(_caret(failure.source_line, failure.column))
        if failures:
            lines.append("")

        return "\n".join(lines).rstrip("\n")


def _human_finding(*, finding: Finding, config: FpGuardConfig) -> list[str]:
    lines: list[str] = [
        f"  {finding.location.line}:{finding.location.column}  "
        f"{finding.severity.value}  {finding.rule_id}  {finding.message}"
    ]
    if config.show_source and finding.source_line is not None:
        lines.extend(_caret(finding.source_line, finding.location.column))
    return lines


def _caret(source_line: str, column: int) -> list[str]:
    caret_pos: int = max(0, column - 1)
    return [f"    {source_line}", f"    {' ' * caret_pos}^"]


class MachineFormatter:
    """JSON Lines: one record per finding or parse failure."""

    def format(
        self,
        *,
        report: DiagnosticReport,
        failures: tuple[ParseFailure, ...],
        config: FpGuardConfig,
    ) -> str:
        records: list[dict[str, object]] = []

        for finding in report:
            record: dict[str, object] = {
                "type": "finding",
                "file": str(finding.file),
                "line": finding.location.line,
                "column": finding.location.column,
                "end_line": finding.location.end_line,
                "end_column": finding.location.end_column,
                "rule_id": finding.rule_id,
                "severity": finding.severity.value,
                "message": finding.message,
            }
            if config.show_source:
                record["source_line"] = finding.source_line
            records.append(record)

        for failure in failures:
            records.append({
                "type": "parse_failure",
                "file": str(failure.file),
                "line": failure.line,
                "column": failure.column,
                "message": failure.message,
            })

        if not report and not failures:
            records.append({"type": "no_findings"})

        return "\n".join(json.dumps(r, sort_keys=True) for r in records)


def get_formatter(*, output_format: OutputFormat) -> Formatter:
    if output_format == OutputFormat.MACHINE:
        return MachineFormatter()
    return HumanFormatter()


def format_summary(*, report: DiagnosticReport) -> str:
    error_count: int = report.error_count
    warning_count: int = report.warning_count

    parts: list[str] = []
    if error_count > 0:
        parts.append(f"{error_count} error{'s' if error_count != 1 else ''}")
    if warning_count > 0:
        parts.append(f"{warning_count} warning{'s' if warning_count != 1 else ''}")

    if not parts:
        return NO_FINDINGS

    return f"Found {', '.join(parts)}."
