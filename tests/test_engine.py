"""Tests for the rule engine."""
from __future__ import annotations

from pathlib import Path

import pytest
from tree_sitter import Node

from fpguard.constants import (
    CLASS_DECLARATION,
    MUTABLE_BINDING,
    NATIVE_LOOP,
    SWITCH_STATEMENT,
    TOP_LEVEL_SIDE_EFFECT,
    Severity,
)
from fpguard.diagnostics import DiagnosticReport, Finding
from fpguard.engine import run, top_level_nodes
from fpguard.parser import ParseResult, SyntaxErrorInfo, parse_source
from fpguard.rules.base import InspectContext, Rule
from fpguard.rules.registry import RULES, get_enabled_rules
from fpguard.types import FpGuardConfig, ParseFailure

_FILE: Path = Path("app.js")

_MIXED_SOURCE: str = """\
let count = 0;
class Counter {}
for (const x of xs) { switch (x) { default: break; } }
var name = "n";
"""


def _run(code: str, *, config: FpGuardConfig | None = None) -> DiagnosticReport:
    cfg: FpGuardConfig = config or FpGuardConfig()
    return run(
        parse_result=parse_source(source=code, file=_FILE),
        rules=get_enabled_rules(config=cfg),
        config=cfg,
    )


class TestRunExamples:
    def test_single_let_gives_one_warning(self) -> None:
        report: DiagnosticReport = _run("let x = 1;")
        assert len(report) == 1
        finding: Finding = report.findings[0]
        assert finding.rule_id == MUTABLE_BINDING
        assert finding.location.line == 1
        assert finding.location.column == 1
        assert finding.severity == Severity.WARNING

    def test_const_arrow_is_clean(self) -> None:
        assert len(_run("const f = () => 1;")) == 0

    def test_three_case_switch_gives_one_finding(self) -> None:
        code: str = (
            "switch (kind) {\n"
            "  case 1: break;\n"
            "  case 2: break;\n"
            "  case 3: break;\n"
            "}\n"
        )
        report: DiagnosticReport = _run(code)
        assert len(report.for_rule(SWITCH_STATEMENT)) == 1
        assert len(report) == 1

    def test_clean_functional_module(self) -> None:
        code: str = (
            'import * as R from "ramda";\n'
            "\n"
            "const double = (x) => x * 2;\n"
            "const total = (xs) => R.sum(R.map(double, xs));\n"
            "export const describe = (xs) => `total: ${total(xs)}`;\n"
        )
        assert len(_run(code)) == 0

    def test_empty_source(self) -> None:
        assert len(_run("")) == 0

    def test_every_rule_reports_without_short_circuit(self) -> None:
        report: DiagnosticReport = _run(_MIXED_SOURCE)
        rule_ids: set[str] = {f.rule_id for f in report}
        assert rule_ids == {
            MUTABLE_BINDING,
            CLASS_DECLARATION,
            NATIVE_LOOP,
            SWITCH_STATEMENT,
        }
        assert len(report.for_rule(MUTABLE_BINDING)) == 2


class TestRunOrdering:
    def test_sorted_by_line_column_rule(self) -> None:
        report: DiagnosticReport = _run(_MIXED_SOURCE)
        keys: list[tuple[int, int, str]] = [
            (f.location.line, f.location.column, f.rule_id) for f in report
        ]
        assert keys == sorted(keys)
        assert len(keys) >= 2

    def test_same_line_sorted_by_column(self) -> None:
        report: DiagnosticReport = _run("for (let i = 0; i < 3; i++) {}\n")
        assert [f.rule_id for f in report] == [
            NATIVE_LOOP,
            MUTABLE_BINDING,
            TOP_LEVEL_SIDE_EFFECT,
        ]

    def test_deterministic(self) -> None:
        first: DiagnosticReport = _run(_MIXED_SOURCE)
        second: DiagnosticReport = _run(_MIXED_SOURCE)
        assert first == second

    def test_rule_order_does_not_change_report(self) -> None:
        config: FpGuardConfig = FpGuardConfig()
        parse_result: ParseResult = parse_source(source=_MIXED_SOURCE, file=_FILE)
        rules: list[Rule] = list(RULES.values())
        forward: DiagnosticReport = run(
            parse_result=parse_result, rules=rules, config=config,
        )
        backward: DiagnosticReport = run(
            parse_result=parse_result, rules=rules[::-1], config=config,
        )
        assert forward == backward


class TestRuleIndependence:
    def test_disabling_rule_keeps_other_findings(self) -> None:
        everything: DiagnosticReport = _run(_MIXED_SOURCE)
        only_loops: DiagnosticReport = _run(
            _MIXED_SOURCE,
            config=FpGuardConfig(selected_rules=frozenset({NATIVE_LOOP})),
        )
        assert only_loops.findings == everything.for_rule(NATIVE_LOOP)

    def test_no_rules_gives_empty_report(self) -> None:
        report: DiagnosticReport = run(
            parse_result=parse_source(source=_MIXED_SOURCE, file=_FILE),
            rules=[],
            config=FpGuardConfig(),
        )
        assert len(report) == 0

    def test_rules_see_each_top_level_node(self) -> None:
        seen: list[str] = []

        def recording(node: Node, *, context: InspectContext) -> list[Finding]:
            seen.append(node.type)
            return []

        run(
            parse_result=parse_source(
                source="// header\nconst a = 1;\nfunction f() {}\n", file=_FILE,
            ),
            rules=[Rule(code="Recording", inspect=recording)],
            config=FpGuardConfig(),
        )
        assert seen == ["lexical_declaration", "function_declaration"]


class TestRunParseFailure:
    def test_malformed_source_raises(self) -> None:
        with pytest.raises(ParseFailure) as exc_info:
            _run("const a = 1;\nconst b = ;\n")
        failure: ParseFailure = exc_info.value
        assert failure.file == _FILE
        assert failure.line == 2
        assert failure.column >= 1
        assert failure.message

    def test_missing_tree_raises(self) -> None:
        parse_result: ParseResult = ParseResult(
            file=_FILE,
            tree=None,
            source="",
            source_lines=(),
            syntax_error=SyntaxErrorInfo(
                line=1, column=1, message="Cannot read file: gone", source_line=None,
            ),
        )
        with pytest.raises(ParseFailure, match="Cannot read file"):
            run(parse_result=parse_result, rules=[], config=FpGuardConfig())


class TestTopLevelNodes:
    def test_skips_comments(self) -> None:
        result: ParseResult = parse_source(
            source="/* a */\nconst x = 1;\n// b\n", file=_FILE,
        )
        assert result.tree is not None
        nodes: list[Node] = top_level_nodes(result.tree.root_node)
        assert [n.type for n in nodes] == ["lexical_declaration"]
