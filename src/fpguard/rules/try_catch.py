"""TryCatch: disallow exception-catching control flow."""
from __future__ import annotations

from tree_sitter import Node

from fpguard.constants import TRY_CATCH
from fpguard.diagnostics import Finding
from fpguard.rules._util import first_child_of_type, iter_nodes_of_type
from fpguard.rules.base import InspectContext


def inspect(node: Node, *, context: InspectContext) -> list[Finding]:
    """Flag try statements with a catch clause, rethrowing or not.

    A bare try/finally catches nothing and is left alone.
    """
    return [
        context.finding(
            rule_id=TRY_CATCH,
            node=statement,
            message="'try/catch' used for control flow; return an Either or "
            "Result value and handle both branches explicitly",
        )
        for statement in iter_nodes_of_type(node, frozenset({"try_statement"}))
        if _catches(statement)
    ]


def _catches(statement: Node) -> bool:
    handler: Node | None = statement.child_by_field_name("handler")
    if handler is None:
        handler = first_child_of_type(statement, "catch_clause")
    return handler is not None
