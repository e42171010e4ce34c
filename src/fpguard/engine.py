"""Rule engine: applies rules to one file's syntax tree."""
from __future__ import annotations

from typing import Final

from tree_sitter import Node

from fpguard.diagnostics import DiagnosticReport
from fpguard.parser import ParseResult, SyntaxErrorInfo, syntax_error_info
from fpguard.rules.base import InspectContext, Rule
from fpguard.types import FpGuardConfig, ParseFailure

_SKIPPED_TOP_LEVEL: Final[frozenset[str]] = frozenset({"comment", "hash_bang_line"})


def top_level_nodes(root: Node) -> list[Node]:
    """Top-level statements and declarations of a program."""
    return [n for n in root.named_children if n.type not in _SKIPPED_TOP_LEVEL]


def run(
    *,
    parse_result: ParseResult,
    rules: list[Rule],
    config: FpGuardConfig,
) -> DiagnosticReport:
    """Run every rule against every top-level node of a parsed file.

    Raises:
        ParseFailure: If the parse result has no usable tree.
    """
    root: Node = _checked_root(parse_result)
    contexts: dict[str, InspectContext] = {
        rule.code: InspectContext(
            file=parse_result.file,
            source_lines=parse_result.source_lines,
            severity=config.get_severity(rule.code),
        )
        for rule in rules
    }
    return DiagnosticReport.build(
        finding
        for node in top_level_nodes(root)
        for rule in rules
        for finding in rule.check(node, context=contexts[rule.code])
    )


def _checked_root(parse_result: ParseResult) -> Node:
    error: SyntaxErrorInfo | None = parse_result.syntax_error
    if error is None and parse_result.tree is not None:
        # trees built outside parse_source have not been checked yet
        error = syntax_error_info(
            tree=parse_result.tree, source_lines=parse_result.source_lines,
        )
        if error is None:
            return parse_result.tree.root_node

    if error is None:
        error = SyntaxErrorInfo(
            line=1, column=1, message="No syntax tree", source_line=None,
        )
    raise ParseFailure(
        error.message,
        file=parse_result.file,
        line=error.line,
        column=error.column,
        source_line=error.source_line,
    )
