"""Lint orchestrator for fpguard."""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from fpguard.constants import (
    EXIT_CLEAN,
    EXIT_FINDINGS,
    EXIT_PARSE_FAILURE,
    OutputFormat,
)
from fpguard.diagnostics import DiagnosticReport, Finding
from fpguard.engine import run
from fpguard.formatters import Formatter, format_summary, get_formatter
from fpguard.ignores import apply_ignores
from fpguard.parser import ParseResult, parse_file
from fpguard.rules.base import Rule
from fpguard.rules.registry import get_enabled_rules
from fpguard.scanner import scan_files
from fpguard.types import FpGuardConfig, ParseFailure

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileOutcome:
    file: Path
    findings: tuple[Finding, ...] = ()
    failure: ParseFailure | None = None


@dataclass(frozen=True, slots=True)
class LintResult:
    report: DiagnosticReport
    failures: tuple[ParseFailure, ...]
    files_checked: int
    exit_code: int


def lint_file(*, file: Path, rules: list[Rule], config: FpGuardConfig) -> FileOutcome:
    """Parse and check one file. A parse failure affects this file only."""
    logger.debug("Checking %s", file)
    result: ParseResult = parse_file(file=file)
    try:
        report: DiagnosticReport = run(parse_result=result, rules=rules, config=config)
    except ParseFailure as e:
        logger.debug("Parse failure in %s: %s", file, e.message)
        return FileOutcome(file=file, failure=e)

    kept: list[Finding] = apply_ignores(
        findings=list(report),
        parse_result=result,
        governance=config.ignores,
    )
    logger.debug("%s: %d diagnostics", file, len(kept))
    return FileOutcome(file=file, findings=tuple(kept))


def exit_code_for(
    *,
    report: DiagnosticReport,
    failures: tuple[ParseFailure, ...],
) -> int:
    if failures:
        return EXIT_PARSE_FAILURE
    if report.has_errors:
        return EXIT_FINDINGS
    return EXIT_CLEAN


def lint_paths(*, paths: tuple[Path, ...], config: FpGuardConfig) -> LintResult:
    started: float = time.perf_counter()
    files: list[Path] = scan_files(paths=paths, config=config)
    rules: list[Rule] = get_enabled_rules(config=config)
    logger.info("Found %d files, %d rules enabled", len(files), len(rules))

    outcomes: list[FileOutcome]
    if config.jobs > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=config.jobs) as pool:
            outcomes = list(pool.map(
                lambda f: lint_file(file=f, rules=rules, config=config), files,
            ))
    else:
        outcomes = [lint_file(file=f, rules=rules, config=config) for f in files]

    report: DiagnosticReport = DiagnosticReport.build(
        finding for outcome in outcomes for finding in outcome.findings
    )
    failures: tuple[ParseFailure, ...] = tuple(
        outcome.failure for outcome in outcomes if outcome.failure is not None
    )

    logger.info("Completed in %.3fs", time.perf_counter() - started)
    return LintResult(
        report=report,
        failures=failures,
        files_checked=len(files),
        exit_code=exit_code_for(report=report, failures=failures),
    )


def render_results(*, result: LintResult, config: FpGuardConfig) -> str:
    """Render a lint result as text. Never empty."""
    formatter: Formatter = get_formatter(output_format=config.output_format)
    output: str = formatter.format(
        report=result.report, failures=result.failures, config=config,
    )
    if config.output_format == OutputFormat.MACHINE:
        return output

    summary: str = format_summary(report=result.report)
    suffix: str = "s" if result.files_checked != 1 else ""
    file_count: str = f"Checked {result.files_checked} file{suffix}."
    failure_count: int = len(result.failures)

    parts: list[str] = []
    if output:
        parts.append(output)
    parts.append(summary)
    if failure_count:
        parts.append(
            f"{failure_count} file{'s' if failure_count != 1 else ''} "
            "could not be parsed."
        )
    parts.append(file_count)

    return "\n".join(parts)
