"""NativeLoop: disallow for/while/do-while statements."""
from __future__ import annotations

from typing import Final

from tree_sitter import Node

from fpguard.constants import NATIVE_LOOP
from fpguard.diagnostics import Finding
from fpguard.rules._util import first_child_of_type, iter_subtree
from fpguard.rules.base import InspectContext

_LOOP_NAMES: Final[dict[str, str]] = {
    "for_statement": "for",
    "while_statement": "while",
    "do_statement": "do...while",
}


def inspect(node: Node, *, context: InspectContext) -> list[Finding]:
    """Flag loop statements by form, whatever their body does."""
    findings: list[Finding] = []
    for current in iter_subtree(node):
        name: str | None = _loop_name(current)
        if name is None:
            continue
        findings.append(context.finding(
            rule_id=NATIVE_LOOP,
            node=current,
            message=f"Native '{name}' loop; use map, filter, reduce or "
            "recursion over the collection instead",
        ))
    return findings


def _loop_name(node: Node) -> str | None:
    if node.type == "for_in_statement":
        operator: Node | None = node.child_by_field_name("operator")
        if operator is None:
            operator = first_child_of_type(node, "of") or first_child_of_type(node, "in")
        return f"for...{operator.type}" if operator is not None else "for...in"
    return _LOOP_NAMES.get(node.type)
