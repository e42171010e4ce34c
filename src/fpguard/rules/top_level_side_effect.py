"""TopLevelSideEffect: disallow calls and assignments evaluated at module scope."""
from __future__ import annotations

from typing import Final

from tree_sitter import Node

from fpguard.constants import TOP_LEVEL_SIDE_EFFECT
from fpguard.diagnostics import Finding
from fpguard.rules._util import iter_eager_nodes
from fpguard.rules.base import InspectContext

_EFFECT_KINDS: Final[dict[str, str]] = {
    "call_expression": "function call",
    "new_expression": "constructor call",
    "assignment_expression": "assignment",
    "augmented_assignment_expression": "assignment",
    "update_expression": "update",
}

_EXEMPT_STATEMENTS: Final[frozenset[str]] = frozenset({
    "import_statement",
    "comment",
    "hash_bang_line",
    "empty_statement",
})


def inspect(node: Node, *, context: InspectContext) -> list[Finding]:
    """Flag a module-level statement that calls or assigns outside a function body.

    Reports at most one finding per statement, at its first effect.
    """
    if not _is_module_level(node) or node.type in _EXEMPT_STATEMENTS:
        return []

    effect: Node | None = next(
        (n for n in iter_eager_nodes(node) if n.type in _EFFECT_KINDS),
        None,
    )
    if effect is None:
        return []

    return [context.finding(
        rule_id=TOP_LEVEL_SIDE_EFFECT,
        node=effect,
        message=f"Module-level {_EFFECT_KINDS[effect.type]} runs on import; "
        "move it into a function body",
    )]


def _is_module_level(node: Node) -> bool:
    parent: Node | None = node.parent
    return parent is not None and parent.type == "program"
