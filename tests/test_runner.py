"""Tests for the fpguard lint runner."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from tree_sitter import Node

import fpguard.rules.registry as registry_mod
from fpguard.constants import (
    EXIT_CLEAN,
    EXIT_FINDINGS,
    EXIT_PARSE_FAILURE,
    MUTABLE_BINDING,
    NATIVE_LOOP,
    OutputFormat,
    Severity,
)
from fpguard.diagnostics import Finding
from fpguard.rules.base import InspectContext, Rule
from fpguard.runner import LintResult, lint_paths, render_results
from fpguard.types import FpGuardConfig


def _write_file(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


class TestLintPaths:
    def test_clean_file(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "good.js", "const f = () => 1;\n")
        result: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())
        assert result.files_checked == 1
        assert result.exit_code == EXIT_CLEAN
        assert len(result.report) == 0
        assert result.failures == ()

    def test_warning_only_exits_clean(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "let.js", "let x = 1;\n")
        result: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())
        assert len(result.report) == 1
        assert result.exit_code == EXIT_CLEAN

    def test_error_finding_exit_code(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "loop.js", "while (true) {}\n")
        result: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())
        assert result.report.has_errors
        assert result.exit_code == EXIT_FINDINGS

    def test_parse_failure_does_not_abort_batch(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "bad.js", "const x = ;\n")
        _write_file(tmp_path / "loop.js", "while (true) {}\n")
        result: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())
        assert result.files_checked == 2
        assert len(result.failures) == 1
        assert result.failures[0].file.name == "bad.js"
        assert len(result.report.for_rule(NATIVE_LOOP)) == 1
        assert result.exit_code == EXIT_PARSE_FAILURE

    def test_findings_carry_file_path(self, tmp_path: Path) -> None:
        target: Path = _write_file(tmp_path / "a.js", "let x = 1;\n")
        result: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())
        assert result.report.findings[0].file == target.resolve()

    def test_selected_rules_only(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "a.js", "let x = 1;\nwhile (x) {}\n")
        config: FpGuardConfig = FpGuardConfig(selected_rules=frozenset({MUTABLE_BINDING}))
        result: LintResult = lint_paths(paths=(tmp_path,), config=config)
        assert [f.rule_id for f in result.report] == [MUTABLE_BINDING]

    def test_ignore_pragmas_applied(self, tmp_path: Path) -> None:
        _write_file(
            tmp_path / "a.js",
            "let x = 1; // fpguard: ignore[MutableBinding] because: legacy\n",
        )
        result: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())
        assert len(result.report) == 0

    def test_pragma_text_in_string_literal_is_ignored(self, tmp_path: Path) -> None:
        _write_file(
            tmp_path / "a.js",
            'let x = "// fpguard: ignore[MutableBinding] because: s";\n',
        )
        result: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())
        assert [
            (f.rule_id, f.location.line, f.location.column, f.severity)
            for f in result.report
        ] == [(MUTABLE_BINDING, 1, 1, Severity.WARNING)]

    def test_parallel_matches_serial(self, tmp_path: Path) -> None:
        for idx in range(6):
            _write_file(
                tmp_path / f"f{idx}.js",
                f"let a{idx} = {idx};\nfor (;;) {{}}\nclass C{idx} {{}}\n",
            )
        serial: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())
        parallel: LintResult = lint_paths(
            paths=(tmp_path,), config=FpGuardConfig(jobs=4),
        )
        assert serial.report == parallel.report
        assert len(serial.report) == 18


class TestRunnerRuleIntegration:
    def test_registry_rules_used(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_file(tmp_path / "a.js", "const a = 1;\n")

        def flag_everything(node: Node, *, context: InspectContext) -> list[Finding]:
            return [context.finding(rule_id=MUTABLE_BINDING, node=node, message="fake")]

        monkeypatch.setattr(
            registry_mod,
            "_all_rules",
            lambda: [Rule(code=MUTABLE_BINDING, inspect=flag_everything)],
        )
        result: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())

        assert len(result.report) == 1
        assert result.report.findings[0].message == "fake"
        assert result.report.findings[0].severity == Severity.WARNING

    def test_rules_skipped_on_parse_failure(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_file(tmp_path / "bad.js", "function broken( {\n")
        calls: list[str] = []

        def counting(node: Node, *, context: InspectContext) -> list[Finding]:
            calls.append(node.type)
            return []

        monkeypatch.setattr(
            registry_mod,
            "_all_rules",
            lambda: [Rule(code=NATIVE_LOOP, inspect=counting)],
        )
        result: LintResult = lint_paths(paths=(tmp_path,), config=FpGuardConfig())

        assert calls == []
        assert result.exit_code == EXIT_PARSE_FAILURE


class TestRenderResults:
    def test_clean_human(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "good.js", "const f = () => 1;\n")
        config: FpGuardConfig = FpGuardConfig()
        result: LintResult = lint_paths(paths=(tmp_path,), config=config)
        output: str = render_results(result=result, config=config)
        assert output == "No findings.\nChecked 1 file."

    def test_human_with_findings(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "a.js", "let x = 1;\n")
        config: FpGuardConfig = FpGuardConfig()
        result: LintResult = lint_paths(paths=(tmp_path,), config=config)
        output: str = render_results(result=result, config=config)
        assert "1:1  warning  MutableBinding" in output
        assert "Found 1 warning." in output
        assert "Checked 1 file." in output

    def test_human_reports_parse_failures(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "bad.js", "const x = ;\n")
        config: FpGuardConfig = FpGuardConfig()
        result: LintResult = lint_paths(paths=(tmp_path,), config=config)
        output: str = render_results(result=result, config=config)
        assert "PARSE FAILURE" in output
        assert "1 file could not be parsed." in output

    def test_machine_has_no_summary(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "a.js", "let x = 1;\n")
        config: FpGuardConfig = FpGuardConfig(output_format=OutputFormat.MACHINE)
        result: LintResult = lint_paths(paths=(tmp_path,), config=config)
        output: str = render_results(result=result, config=config)
        records: list[dict[str, object]] = [
            json.loads(line) for line in output.splitlines()
        ]
        assert [r["type"] for r in records] == ["finding"]

    def test_machine_parse_failure_has_no_clean_marker(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "bad.js", "const x = ;\n")
        config: FpGuardConfig = FpGuardConfig(output_format=OutputFormat.MACHINE)
        result: LintResult = lint_paths(paths=(tmp_path,), config=config)
        output: str = render_results(result=result, config=config)
        records: list[dict[str, object]] = [
            json.loads(line) for line in output.splitlines()
        ]
        assert [r["type"] for r in records] == ["parse_failure"]

    def test_machine_empty_directory(self, tmp_path: Path) -> None:
        config: FpGuardConfig = FpGuardConfig(output_format=OutputFormat.MACHINE)
        result: LintResult = lint_paths(paths=(tmp_path,), config=config)
        output: str = render_results(result=result, config=config)
        assert json.loads(output) == {"type": "no_findings"}

    def test_render_is_deterministic(self, tmp_path: Path) -> None:
        _write_file(tmp_path / "a.js", "let x = 1;\nclass A {}\nswitch (x) {}\n")
        _write_file(tmp_path / "b.js", "var y;\ntry { f(); } catch (e) {}\n")
        config: FpGuardConfig = FpGuardConfig()
        first: str = render_results(
            result=lint_paths(paths=(tmp_path,), config=config), config=config,
        )
        second: str = render_results(
            result=lint_paths(paths=(tmp_path,), config=config), config=config,
        )
        assert first == second
