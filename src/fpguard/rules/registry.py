"""Rule registry for fpguard."""
from __future__ import annotations

from types import MappingProxyType
from typing import Final

from fpguard.constants import (
    CLASS_DECLARATION,
    MUTABLE_BINDING,
    NATIVE_LOOP,
    SWITCH_STATEMENT,
    TOP_LEVEL_SIDE_EFFECT,
    TRY_CATCH,
    canonical_rule_id,
)
from fpguard.rules import (
    class_declaration,
    mutable_binding,
    native_loop,
    switch_statement,
    top_level_side_effect,
    try_catch,
)
from fpguard.rules.base import Rule
from fpguard.types import FpGuardConfig, UnknownRuleError

RULES: Final[MappingProxyType[str, Rule]] = MappingProxyType({
    MUTABLE_BINDING: Rule(code=MUTABLE_BINDING, inspect=mutable_binding.inspect),
    NATIVE_LOOP: Rule(code=NATIVE_LOOP, inspect=native_loop.inspect),
    SWITCH_STATEMENT: Rule(code=SWITCH_STATEMENT, inspect=switch_statement.inspect),
    TRY_CATCH: Rule(code=TRY_CATCH, inspect=try_catch.inspect),
    CLASS_DECLARATION: Rule(code=CLASS_DECLARATION, inspect=class_declaration.inspect),
    TOP_LEVEL_SIDE_EFFECT: Rule(
        code=TOP_LEVEL_SIDE_EFFECT, inspect=top_level_side_effect.inspect,
    ),
})


def get_enabled_rules(*, config: FpGuardConfig) -> list[Rule]:
    """Return rules that are active for the given config."""
    return [rule for rule in _all_rules() if config.is_rule_enabled(rule.code)]


def resolve_rule_ids(*, rule_ids: tuple[str, ...]) -> frozenset[str]:
    """Map user-supplied rule ids to registered ones.

    Raises:
        UnknownRuleError: If any id is not registered.
    """
    resolved: dict[str, str | None] = {raw: canonical_rule_id(raw) for raw in rule_ids}
    unknown: list[str] = [
        raw for raw, code in resolved.items() if code is None or code not in RULES
    ]
    if unknown:
        raise UnknownRuleError(unknown)
    return frozenset(code for code in resolved.values() if code is not None)


def _all_rules() -> list[Rule]:
    """Return all registered rules."""
    return list(RULES.values())
