"""Ignore pragma parsing and finding filtering for fpguard."""
from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from tree_sitter import Node, Tree

from fpguard.constants import (
    IGNORE_DISALLOWED,
    IGNORE_WITHOUT_REASON,
    TOO_MANY_IGNORES,
    Severity,
    canonical_rule_id,
)
from fpguard.diagnostics import Finding, SourceLocation
from fpguard.parser import ParseResult, char_column
from fpguard.types import IgnoreGovernance

_IGNORE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"//\s*fpguard:\s*ignore\[([^\]]+)\](?:\s+because:\s*(.+))?\s*$"
)
_IGNORE_FILE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"//\s*fpguard:\s*ignore-file\[([^\]]+)\](?:\s+because:\s*(.+))?\s*$"
)


@dataclass(frozen=True, slots=True)
class IgnoreDirective:
    line: int
    codes: frozenset[str]
    reason: str | None
    is_file_level: bool
    is_inline: bool


def parse_ignore_directives(*, parse_result: ParseResult) -> list[IgnoreDirective]:
    """Collect ignore pragmas from the ``//`` comments of a parsed file.

    Pragma-like text inside string or template literals is not a comment
    and is never collected.
    """
    if parse_result.tree is None:
        return []

    directives: list[IgnoreDirective] = []
    for comment in _iter_comments(parse_result.tree):
        text: str = (comment.text or b"").decode("utf-8", errors="replace")
        row, byte_col = comment.start_point

        file_match: re.Match[str] | None = _IGNORE_FILE_PATTERN.match(text)
        if file_match is not None:
            directives.append(IgnoreDirective(
                line=row + 1,
                codes=_parse_codes(file_match.group(1)),
                reason=_clean_reason(file_match.group(2)),
                is_file_level=True,
                is_inline=False,
            ))
            continue

        match: re.Match[str] | None = _IGNORE_PATTERN.match(text)
        if match is not None:
            directives.append(IgnoreDirective(
                line=row + 1,
                codes=_parse_codes(match.group(1)),
                reason=_clean_reason(match.group(2)),
                is_file_level=False,
                is_inline=_has_code_before(
                    source_lines=parse_result.source_lines,
                    row=row,
                    byte_column=byte_col,
                ),
            ))

    return directives


def _iter_comments(tree: Tree) -> Iterator[Node]:
    """Yield comment nodes in document order."""
    stack: list[Node] = [tree.root_node]
    while stack:
        node: Node = stack.pop()
        if node.type == "comment":
            yield node
            continue
        stack.extend(reversed(node.children))


def _has_code_before(
    *,
    source_lines: tuple[str, ...],
    row: int,
    byte_column: int,
) -> bool:
    if not 0 <= row < len(source_lines):
        return False
    column: int = char_column(
        source_lines=source_lines, row=row, byte_column=byte_column,
    )
    return bool(source_lines[row][:column - 1].strip())


def apply_ignores(
    *,
    findings: list[Finding],
    parse_result: ParseResult,
    governance: IgnoreGovernance,
) -> list[Finding]:
    """Drop suppressed findings.

    The returned list may include governance findings for misused pragmas.
    """
    directives: list[IgnoreDirective] = parse_ignore_directives(parse_result=parse_result)
    if not directives:
        return findings

    governance_violations: list[Finding] = _check_governance(
        directives=directives,
        governance=governance,
        file=parse_result.file,
        source_lines=parse_result.source_lines,
    )

    file_codes: frozenset[str] = frozenset().union(
        *(d.codes for d in directives if d.is_file_level)
    )

    line_ignores: dict[int, frozenset[str]] = {}
    for d in directives:
        if not d.is_file_level and d.is_inline:
            line_ignores[d.line] = line_ignores.get(d.line, frozenset()) | d.codes

    block_ranges: list[tuple[int, int, frozenset[str]]] = _resolve_block_ranges(
        directives=directives,
        tree=parse_result.tree,
    )

    kept: list[Finding] = []
    for finding in findings:
        if finding.rule_id in governance.disallow:
            kept.append(finding)
            continue

        if finding.rule_id in file_codes:
            continue

        line_codes: frozenset[str] | None = line_ignores.get(finding.location.line)
        if line_codes is not None and finding.rule_id in line_codes:
            continue

        if any(
            start <= finding.location.line <= end and finding.rule_id in codes
            for start, end, codes in block_ranges
        ):
            continue

        kept.append(finding)

    return governance_violations + kept


def _parse_codes(raw: str) -> frozenset[str]:
    return frozenset(
        canonical_rule_id(c) or c.strip() for c in raw.split(",") if c.strip()
    )


def _clean_reason(raw: str | None) -> str | None:
    if raw is None:
        return None
    stripped: str = raw.strip()
    return stripped if stripped else None


def _is_statement(node: Node) -> bool:
    return node.type.endswith(("_statement", "_declaration"))


def _collect_statement_ranges(*, tree: Tree) -> dict[int, int]:
    """Map start line -> end line for every statement in the tree (1-based)."""
    ranges: dict[int, int] = {}
    stack: list[Node] = [tree.root_node]
    while stack:
        node: Node = stack.pop()
        if node.is_named and _is_statement(node):
            start: int = node.start_point[0] + 1
            ranges[start] = max(ranges.get(start, start), node.end_point[0] + 1)
        stack.extend(node.children)
    return ranges


def _resolve_block_ranges(
    *,
    directives: list[IgnoreDirective],
    tree: Tree | None,
) -> list[tuple[int, int, frozenset[str]]]:
    block_directives: list[IgnoreDirective] = [
        d for d in directives if not d.is_file_level and not d.is_inline
    ]
    if not block_directives or tree is None:
        return []

    stmt_ranges: dict[int, int] = _collect_statement_ranges(tree=tree)
    result: list[tuple[int, int, frozenset[str]]] = []
    for directive in block_directives:
        next_line: int = directive.line + 1
        end_line: int | None = stmt_ranges.get(next_line)
        if end_line is not None:
            result.append((next_line, end_line, directive.codes))

    return result


def _check_governance(
    *,
    directives: list[IgnoreDirective],
    governance: IgnoreGovernance,
    file: Path,
    source_lines: tuple[str, ...],
) -> list[Finding]:
    violations: list[Finding] = []

    if governance.require_reason:
        for d in directives:
            if d.reason is None:
                violations.append(Finding(
                    file=file,
                    location=SourceLocation(line=d.line, column=1),
                    rule_id=IGNORE_WITHOUT_REASON,
                    message="Ignore pragma requires a reason (use 'because: ...')",
                    severity=Severity.ERROR,
                    source_line=_get_source_line(d.line, source_lines),
                ))

    for d in directives:
        for code in sorted(d.codes):
            if code in governance.disallow:
                violations.append(Finding(
                    file=file,
                    location=SourceLocation(line=d.line, column=1),
                    rule_id=IGNORE_DISALLOWED,
                    message=f"Rule '{code}' cannot be ignored "
                    f"(disallowed by configuration)",
                    severity=Severity.ERROR,
                    source_line=_get_source_line(d.line, source_lines),
                ))

    if (
        governance.max_per_file is not None
        and len(directives) > governance.max_per_file
    ):
        violations.append(Finding(
            file=file,
            location=SourceLocation(line=1, column=1),
            rule_id=TOO_MANY_IGNORES,
            message=f"File has {len(directives)} ignore directives, "
            f"maximum allowed is {governance.max_per_file}",
            severity=Severity.ERROR,
            source_line=_get_source_line(1, source_lines),
        ))

    return violations


def _get_source_line(line: int, source_lines: tuple[str, ...]) -> str | None:
    if 1 <= line <= len(source_lines):
        return source_lines[line - 1]
    return None
