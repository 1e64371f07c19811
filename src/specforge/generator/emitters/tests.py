"""<id>.test.ts emitter (vitest scaffold)."""

from ..naming import js_literal
from ..program import WidgetProgram
from ..versions import TEMPLATE_ENGINE_VERSION


def test_file_name(program: WidgetProgram) -> str:
    return f"{program.widget_id}.test.ts"


def validation_title(accepted: bool, what: str) -> str:
    return f"should {'accept' if accepted else 'reject'} {what}"


def emit_tests(program: WidgetProgram, include_comments: bool = True) -> str:
    lines = []
    if include_comments:
        lines.extend([
            "/**",
            f" * Test file for {program.widget_id}",
            f" * Generated by specforge {TEMPLATE_ENGINE_VERSION}",
            " */",
            "",
        ])

    lines.extend([
        "import { describe, it, expect } from 'vitest';",
        "import { createState, validateState, initialState } from './state';",
        "import { actionMap } from './actions';",
        "",
        f"describe({js_literal(program.display_name)}, () => {{",
        "  describe('State', () => {",
        "    it('should create initial state', () => {",
        "      expect(createState()).toEqual(initialState);",
        "    });",
    ])
    for key, value in program.initial_state.items():
        lines.extend([
            "",
            f"    it({js_literal(f'should have correct default for {key}')}, () => {{",
            f"      expect(createState()[{js_literal(key)}]).toEqual({js_literal(value)});",
            "    });",
        ])
    lines.extend(["  });", "", "  describe('Actions', () => {"])
    for action in program.actions.values():
        lines.extend([
            f"    it({js_literal(f'should define {action.action_id} action')}, () => {{",
            f"      expect(typeof actionMap[{js_literal(action.action_id)}]).toBe('function');",
            "    });",
        ])
    # Expectations follow the compiled rules, so a default that breaks its
    # own rule (or a required field) is asserted as rejected
    accepts_defaults = program.validate_state(program.initial_state)
    accepts_empty = program.validate_state({})
    lines.extend([
        "  });",
        "",
        "  describe('Validation', () => {",
        f"    it({js_literal(validation_title(accepts_defaults, 'default state'))}, () => {{",
        f"      expect(validateState(initialState)).toBe({js_literal(accepts_defaults)});",
        "    });",
        "",
        f"    it({js_literal(validation_title(accepts_empty, 'empty partial state'))}, () => {{",
        f"      expect(validateState({{}})).toBe({js_literal(accepts_empty)});",
        "    });",
        "  });",
        "});",
    ])
    return "\n".join(lines) + "\n"
