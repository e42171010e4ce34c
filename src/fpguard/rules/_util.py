"""Shared syntax tree helpers for rules."""
from __future__ import annotations

from collections.abc import Iterator
from typing import Final

from tree_sitter import Node

FUNCTION_NODE_TYPES: Final[frozenset[str]] = frozenset({
    "function_declaration",
    "function_expression",
    "function",
    "generator_function_declaration",
    "generator_function",
    "arrow_function",
    "method_definition",
})


def is_function_node(node: Node) -> bool:
    return node.is_named and node.type in FUNCTION_NODE_TYPES


def iter_subtree(node: Node) -> Iterator[Node]:
    """Yield named nodes of a subtree in document order, using a work-list."""
    stack: list[Node] = [node]
    while stack:
        current: Node = stack.pop()
        if current.is_named:
            yield current
        stack.extend(reversed(current.children))


def iter_nodes_of_type(node: Node, types: frozenset[str]) -> Iterator[Node]:
    return (n for n in iter_subtree(node) if n.type in types)


def is_deferred_node(node: Node) -> bool:
    """True for nodes whose contents run later than the statement holding them.

    Function bodies run when called; instance field initializers run on
    construction. Static fields and static blocks run with the class.
    """
    if is_function_node(node):
        return True
    if node.type == "field_definition":
        return first_child_of_type(node, "static") is None
    return False


def iter_eager_nodes(node: Node) -> Iterator[Node]:
    """Like iter_subtree, but does not descend into deferred code."""
    stack: list[Node] = [node]
    while stack:
        current: Node = stack.pop()
        if is_deferred_node(current):
            continue
        if current.is_named:
            yield current
        stack.extend(reversed(current.children))


def first_child_of_type(node: Node, node_type: str) -> Node | None:
    return next((c for c in node.children if c.type == node_type), None)
