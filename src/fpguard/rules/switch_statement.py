"""SwitchStatement: disallow switch statements."""
from __future__ import annotations

from tree_sitter import Node

from fpguard.constants import SWITCH_STATEMENT
from fpguard.diagnostics import Finding
from fpguard.rules._util import iter_nodes_of_type
from fpguard.rules.base import InspectContext


def inspect(node: Node, *, context: InspectContext) -> list[Finding]:
    return [
        context.finding(
            rule_id=SWITCH_STATEMENT,
            node=switch,
            message="'switch' statement; use a lookup object or R.cond instead",
        )
        for switch in iter_nodes_of_type(node, frozenset({"switch_statement"}))
    ]
