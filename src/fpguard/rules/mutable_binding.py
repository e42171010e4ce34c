"""MutableBinding: disallow reassignable variable declarations."""
from __future__ import annotations

from typing import Final

from tree_sitter import Node

from fpguard.constants import MUTABLE_BINDING
from fpguard.diagnostics import Finding
from fpguard.rules._util import iter_subtree
from fpguard.rules.base import InspectContext

_REASSIGNABLE_KINDS: Final[frozenset[str]] = frozenset({"let", "var"})


def inspect(node: Node, *, context: InspectContext) -> list[Finding]:
    """Flag every ``let``/``var`` declaration, including loop heads."""
    findings: list[Finding] = []
    for current in iter_subtree(node):
        keyword: Node | None = _declaration_keyword(current)
        if keyword is None or keyword.type not in _REASSIGNABLE_KINDS:
            continue
        findings.append(context.finding(
            rule_id=MUTABLE_BINDING,
            node=keyword,
            message=f"Reassignable '{keyword.type}' binding; declare it with "
            "'const' and derive new values instead of reassigning",
        ))
    return findings


def _declaration_keyword(node: Node) -> Node | None:
    """Return the let/var/const keyword token of a declaration, if any."""
    if node.type in ("lexical_declaration", "variable_declaration"):
        return node.children[0] if node.children else None
    if node.type == "for_in_statement":
        # for (let x of xs) keeps its keyword on the loop node itself
        return node.child_by_field_name("kind")
    return None
