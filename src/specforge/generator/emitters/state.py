"""state.ts emitter."""

from ..naming import js_literal, pascal_case, type_name
from ..program import WidgetProgram
from ..versions import TEMPLATE_ENGINE_VERSION


def rule_checks(key: str, program: WidgetProgram) -> list[str]:
    """Conditions (all must hold) for one field's required/min/max rule."""
    rule = program.field_rules.get(key)
    if rule is None:
        return []
    ref = f"state[{js_literal(key)}]"
    absent = f"{ref} === undefined || {ref} === null"
    checks = []
    if rule.required:
        checks.append(f"!({absent})")
    if rule.min is not None:
        checks.append(f"({absent} || (typeof {ref} === \"number\" && {ref} >= {js_literal(rule.min)}))")
    if rule.max is not None:
        checks.append(f"({absent} || (typeof {ref} === \"number\" && {ref} <= {js_literal(rule.max)}))")
    return checks


def emit_state(program: WidgetProgram, include_comments: bool = True) -> str:
    state_type = f"{pascal_case(program.widget_id)}State"
    lines = []
    if include_comments:
        lines.extend([
            "/**",
            f" * State module for {program.widget_id}",
            f" * Generated by specforge {TEMPLATE_ENGINE_VERSION}",
            " */",
            "",
        ])

    lines.append(f"export interface {state_type} {{")
    lines.extend(f"  {js_literal(k)}: {type_name(t)};" for k, t in program.field_types.items())
    lines.extend(["}", ""])

    lines.append(f"export const initialState: {state_type} = {{")
    lines.extend(f"  {js_literal(k)}: {js_literal(v)}," for k, v in program.initial_state.items())
    lines.extend(["};", ""])

    lines.extend([
        f"export function createState(): {state_type} {{",
        "  return JSON.parse(JSON.stringify(initialState));",
        "}",
        "",
        f"export function validateState(state: Partial<{state_type}>): boolean {{",
    ])
    for key in program.field_types:
        checks = rule_checks(key, program)
        if checks:
            lines.append(f"  if (!({' && '.join(checks)})) return false;")
    lines.extend(["  return true;", "}"])
    return "\n".join(lines) + "\n"
