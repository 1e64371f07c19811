"""actions.ts emitter and the script body of every operation."""

from typing import assert_never

from ..naming import comment_text, js_literal, pascal_case
from ..program import (
    AdjustState,
    Animate,
    Broadcast,
    CompiledAction,
    Conditional,
    CustomHandler,
    EmitEvent,
    Intent,
    Parallel,
    ResetState,
    Sequence,
    SetState,
    ToggleState,
    WidgetProgram,
)
from ..versions import TEMPLATE_ENGINE_VERSION

# Guard and equality helpers; valid as both JavaScript and TypeScript
SCRIPT_HELPERS = [
    "function sameValue(a: any, b: any): boolean {",
    "  if (a === b) return true;",
    "  if (a === null || b === null || typeof a !== \"object\" || typeof b !== \"object\") return false;",
    "  if (Array.isArray(a) !== Array.isArray(b)) return false;",
    "  if (Array.isArray(a)) {",
    "    return a.length === b.length && a.every(function (item: any, i: number) { return sameValue(item, b[i]); });",
    "  }",
    "  const keys = Object.keys(a);",
    "  if (keys.length !== Object.keys(b).length) return false;",
    "  return keys.every(function (key) { return Object.prototype.hasOwnProperty.call(b, key) && sameValue(a[key], b[key]); });",
    "}",
    "",
    "function checkGuard(guard: { type: string; stateKey: string | null; value: unknown }, state: object): boolean {",
    "  const current = guard.stateKey === null ? undefined : (state as Record<string, unknown>)[guard.stateKey];",
    "  switch (guard.type) {",
    "    case \"equals\":",
    "      return sameValue(current === undefined ? null : current, guard.value);",
    "    case \"notEquals\":",
    "      return !sameValue(current === undefined ? null : current, guard.value);",
    "    case \"greaterThan\":",
    "      return typeof current === \"number\" && typeof guard.value === \"number\" && current > guard.value;",
    "    case \"lessThan\":",
    "      return typeof current === \"number\" && typeof guard.value === \"number\" && current < guard.value;",
    "    case \"contains\":",
    "      if (typeof current === \"string\" && typeof guard.value === \"string\") return current.indexOf(guard.value) >= 0;",
    "      if (Array.isArray(current)) return current.some(function (item) { return sameValue(item, guard.value); });",
    "      return false;",
    "    default:",
    "      return true;",
    "  }",
    "}",
]


def strip_types(lines: list[str]) -> list[str]:
    """Plain-script version of :data:`SCRIPT_HELPERS`."""
    replacements = (
        ("a: any, b: any): boolean", "a, b)"),
        ("item: any, i: number", "item, i"),
        ("guard: { type: string; stateKey: string | null; value: unknown }, state: object): boolean", "guard, state)"),
        ("(state as Record<string, unknown>)", "state"),
    )
    stripped = []
    for line in lines:
        for typed, plain in replacements:
            line = line.replace(typed, plain)
        stripped.append(line)
    return stripped


def action_body(action: CompiledAction, program: WidgetProgram) -> list[str]:
    """Statements run for one action against a ``ctx`` ActionContext."""
    lines = []
    if action.guard is not None:
        lines.append(f"if (!checkGuard({js_literal(action.guard.to_literal())}, ctx.getState())) return;")

    def call_members(members: tuple[str, ...]) -> list[str]:
        return [f"{program.actions[m].function_name}(ctx);" for m in members if m in program.actions]

    match action.op:
        case SetState(key=key, value=value):
            lines.append(f"ctx.setState({{ {js_literal(key)}: {js_literal(value)} }});")
        case ToggleState(key=key):
            k = js_literal(key)
            lines.append(f"ctx.setState({{ {k}: !ctx.getState()[{k}] }});")
        case AdjustState(key=key, delta=delta):
            k = js_literal(key)
            lines.append(f"const current = ctx.getState()[{k}];")
            lines.append(f"ctx.setState({{ {k}: (typeof current === \"number\" ? current : 0) + ({js_literal(delta)}) }});")
        case ResetState(values=values):
            lines.append(f"ctx.setState({js_literal(dict(values))});")
        case EmitEvent(event_type=event_type, payload=payload, to_output=to_output):
            lines.append(f"ctx.emit({js_literal(event_type)}, {js_literal(payload)});")
            if to_output:
                lines.append(f"ctx.emitOutput({js_literal(event_type)}, {js_literal(payload)});")
        case Broadcast(event=event, payload=payload):
            lines.append(f"ctx.broadcast({js_literal(event)}, {js_literal(payload)});")
        case Animate(duration=duration):
            lines.append(f"ctx.animate({js_literal(duration)});")
        case Intent() as intent:
            lines.append(f"ctx.emit({js_literal(intent.event_type)}, {js_literal(intent.payload)});")
        case CustomHandler(handler=handler):
            lines.append(f"/* unresolved custom handler: {comment_text(handler)} */")
        case Sequence(members=members) | Conditional(members=members):
            lines.extend(call_members(members))
        case Parallel(members=members):
            calls = ", ".join(c.rstrip(";") for c in call_members(members))
            lines.append(f"Promise.all([{calls}]);")
        case _:
            assert_never(action.op)

    return lines


def emit_actions(program: WidgetProgram, include_comments: bool = True) -> str:
    state_type = f"{pascal_case(program.widget_id)}State"
    lines = []
    if include_comments:
        lines.extend([
            "/**",
            f" * Actions module for {program.widget_id}",
            f" * Generated by specforge {TEMPLATE_ENGINE_VERSION}",
            " */",
            "",
        ])

    lines.extend([
        f"import type {{ {state_type} }} from './state';",
        "",
        "export type ActionContext = {",
        f"  getState: () => {state_type};",
        f"  setState: (patch: Partial<{state_type}>) => void;",
        "  emit: (event: string, payload?: unknown) => void;",
        "  broadcast: (event: string, payload?: unknown) => void;",
        "  emitOutput: (port: string, value: unknown) => void;",
        "  animate: (duration: number) => void;",
        "};",
        "",
    ])
    lines.extend(SCRIPT_HELPERS)

    for action in program.actions.values():
        lines.append("")
        if include_comments:
            lines.extend(["/**", f" * {comment_text(action.description or action.action_id)}", " */"])
        lines.append(f"export function {action.function_name}(ctx: ActionContext): void {{")
        lines.extend(f"  {line}" for line in action_body(action, program))
        lines.append("}")

    lines.append("")
    lines.append("export const actionMap: Record<string, (ctx: ActionContext) => void> = {")
    lines.extend(f"  {js_literal(a.action_id)}: {a.function_name}," for a in program.actions.values())
    lines.append("};")
    return "\n".join(lines) + "\n"
