"""Rule documentation catalog for the fpguard explain command."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from fpguard.constants import (
    CLASS_DECLARATION,
    MUTABLE_BINDING,
    NATIVE_LOOP,
    SWITCH_STATEMENT,
    TOP_LEVEL_SIDE_EFFECT,
    TRY_CATCH,
)


@dataclass(frozen=True, slots=True)
class RuleInfo:
    code: str
    name: str
    category: str
    description: str
    bad_example: str
    good_example: str


RULE_CATALOG: Final[dict[str, RuleInfo]] = {
    MUTABLE_BINDING: RuleInfo(
        code=MUTABLE_BINDING,
        name="Reassignable Binding",
        category="immutability",
        description=(
            "Declare every binding with const. A let or var invites\n"
            "reassignment, which hides where a value really comes from.\n"
            "Destructuring and loop counters are flagged too."
        ),
        bad_example="let total = 0;",
        good_example="const total = R.sum(prices);",
    ),
    NATIVE_LOOP: RuleInfo(
        code=NATIVE_LOOP,
        name="Native Loop Statement",
        category="iteration",
        description=(
            "Replace for, for...in, for...of, while and do...while with\n"
            "map, filter, reduce or recursion. The rule looks at the form\n"
            "of the statement, so even a simple counted loop is flagged."
        ),
        bad_example="for (let i = 0; i < xs.length; i++) { out.push(f(xs[i])); }",
        good_example="const out = xs.map(f);",
    ),
    SWITCH_STATEMENT: RuleInfo(
        code=SWITCH_STATEMENT,
        name="Switch Statement",
        category="control-flow",
        description=(
            "Replace switch with a lookup object or R.cond. One finding is\n"
            "reported per switch, whatever the number of cases."
        ),
        bad_example="switch (kind) { case 'a': return 1; default: return 0; }",
        good_example="const scoreOf = R.propOr(0, R.__, { a: 1 });",
    ),
    TRY_CATCH: RuleInfo(
        code=TRY_CATCH,
        name="Exception-Based Control Flow",
        category="control-flow",
        description=(
            "Do not catch exceptions to steer control flow. Return an\n"
            "Either/Result value and handle both branches explicitly.\n"
            "A catch that only rethrows is still flagged."
        ),
        bad_example="try { parse(s); } catch (e) { fallback(); }",
        good_example="const result = tryParse(s); // Either<Error, Value>",
    ),
    CLASS_DECLARATION: RuleInfo(
        code=CLASS_DECLARATION,
        name="Class Declaration",
        category="data",
        description=(
            "Model data as plain objects and behaviour as functions.\n"
            "Class declarations and class expressions are both flagged;\n"
            "there are no exemptions."
        ),
        bad_example="class User { constructor(name) { this.name = name; } }",
        good_example="const makeUser = (name) => ({ name });",
    ),
    TOP_LEVEL_SIDE_EFFECT: RuleInfo(
        code=TOP_LEVEL_SIDE_EFFECT,
        name="Top-Level Side Effect",
        category="effects",
        description=(
            "Calls, constructor calls, assignments and updates that run at\n"
            "module scope execute on import. Keep module scope to pure\n"
            "declarations and move effects into functions."
        ),
        bad_example="const config = loadConfig();",
        good_example="const getConfig = () => loadConfig();",
    ),
}


def format_rule_detail(*, info: RuleInfo, default_severity: str) -> str:
    """Format a single rule's full documentation."""
    lines: list[str] = [
        f"{info.code}: {info.name}",
        f"Category: {info.category} | Default severity: {default_severity}",
        "",
    ]
    lines.extend(f"  {desc_line}" for desc_line in info.description.splitlines())
    lines.extend([
        "",
        f"  Bad:   {info.bad_example.splitlines()[0]}",
        f"  Good:  {info.good_example.splitlines()[0]}",
        "",
        f"  Suppress: // fpguard: ignore[{info.code}] because: <reason>",
    ])
    return "\n".join(lines)


def format_rule_table(*, catalog: dict[str, RuleInfo], severities: dict[str, str]) -> str:
    """Format all rules as a summary table."""
    lines: list[str] = [
        f"{'RULE':<20} {'SEVERITY':<10} {'NAME':<30}",
        "-" * 60,
    ]
    for code in sorted(catalog):
        info: RuleInfo = catalog[code]
        severity: str = severities.get(code, "off")
        lines.append(f"{code:<20} {severity:<10} {info.name:<30}")
    return "\n".join(lines)
