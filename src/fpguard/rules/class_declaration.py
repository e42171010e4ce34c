"""ClassDeclaration: disallow class declarations and class expressions."""
from __future__ import annotations

from typing import Final

from tree_sitter import Node

from fpguard.constants import CLASS_DECLARATION
from fpguard.diagnostics import Finding
from fpguard.rules._util import iter_nodes_of_type
from fpguard.rules.base import InspectContext

# "class" is also the keyword token; iter_subtree only yields named nodes.
_CLASS_NODE_TYPES: Final[frozenset[str]] = frozenset({"class_declaration", "class"})


def inspect(node: Node, *, context: InspectContext) -> list[Finding]:
    return [
        context.finding(
            rule_id=CLASS_DECLARATION,
            node=cls,
            message=f"Class {_describe(cls)}; use plain functions over data "
            "and compose behaviour instead of inheriting it",
        )
        for cls in iter_nodes_of_type(node, _CLASS_NODE_TYPES)
    ]


def _describe(cls: Node) -> str:
    name: Node | None = cls.child_by_field_name("name")
    if name is None or name.text is None:
        return "expression"
    return f"'{name.text.decode('utf-8', errors='replace')}'"
