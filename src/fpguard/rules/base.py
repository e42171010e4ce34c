"""Rule record and inspection context for fpguard lint rules."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from tree_sitter import Node

from fpguard.constants import Severity
from fpguard.diagnostics import Finding, SourceLocation
from fpguard.parser import char_column


@dataclass(frozen=True, slots=True)
class InspectContext:
    """Read-only data a rule needs to turn nodes into findings."""

    file: Path
    source_lines: tuple[str, ...]
    severity: Severity

    def location_of(self, node: Node) -> SourceLocation:
        """1-based, character-counted location of a node."""
        start_row, start_col = node.start_point
        end_row, end_col = node.end_point
        return SourceLocation(
            line=start_row + 1,
            column=char_column(
                source_lines=self.source_lines, row=start_row, byte_column=start_col,
            ),
            end_line=end_row + 1,
            end_column=char_column(
                source_lines=self.source_lines, row=end_row, byte_column=end_col,
            ),
        )

    def source_line(self, line: int) -> str | None:
        if 1 <= line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def finding(self, *, rule_id: str, node: Node, message: str) -> Finding:
        location: SourceLocation = self.location_of(node)
        return Finding(
            file=self.file,
            location=location,
            rule_id=rule_id,
            message=message,
            severity=self.severity,
            source_line=self.source_line(location.line),
        )


Inspector = Callable[..., list[Finding]]


@dataclass(frozen=True, slots=True)
class Rule:
    """A stateless check for one prohibited construct.

    ``inspect`` is called once per top-level statement with the statement
    node and an ``InspectContext`` passed as ``context=``.
    """

    code: str
    inspect: Inspector

    def check(self, node: Node, *, context: InspectContext) -> list[Finding]:
        return self.inspect(node, context=context)
