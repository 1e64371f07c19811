"""Tests for the compiled program, value semantics and naming."""

import pytest

from specforge.generator.engine import prepare
from specforge.generator.naming import (
    camel_case,
    comment_text,
    css_string,
    css_value,
    function_names,
    js_literal,
    minify_markup,
    pascal_case,
)
from specforge.generator.program import (
    AdjustState,
    Broadcast,
    EmitEvent,
    Guard,
    Intent,
    ResetState,
    Sequence,
    check_guard,
    compile_program,
    display_value,
    resolve_trigger,
    same_value,
    truthy,
)
from specforge.spec import ConditionType, VisualType, parse_spec


@pytest.mark.unit
class TestNaming:
    """Identifier and literal helpers."""

    @pytest.mark.parametrize(
        "text,expected",
        [("click-counter", "ClickCounter"), ("my_widget2", "MyWidget2"), ("fooBar", "FooBar")],
    )
    def test_pascal_case(self, text, expected):
        assert pascal_case(text) == expected

    def test_camel_case(self):
        assert camel_case("reset-all") == "resetAll"

    def test_function_names(self):
        names = function_names(["inc", "reset-all", "9lives", "reset_all"])
        assert names == {
            "inc": "incAction",
            "reset-all": "resetAllAction",
            "9lives": "a9livesAction",
            "reset_all": "resetAllAction2",
        }

    def test_js_literal_escapes(self):
        assert js_literal("</script>") == '"<\\/script>"'
        assert js_literal("a\u2028b") == '"a\\u2028b"'

    def test_css_value_escapes(self):
        assert css_value("#fff") == "#fff"
        assert css_value("red}</style>") == "red\\7d \\3c /style>"
        assert css_value("a;\nb") == "a\\3b  b"

    def test_css_string(self):
        assert css_string('a"b') == '"a\\"b"'

    def test_comment_text(self):
        assert comment_text("ends */ here\nnext") == "ends * / here next"

    def test_minify_markup(self):
        doc = "<div>\n  <!-- note -->\n  <span>x</span>\n</div>\n"
        assert minify_markup(doc) == "<div><span>x</span></div>"


@pytest.mark.unit
class TestValueSemantics:
    """Equality, truthiness and guards."""

    def test_same_value(self):
        assert same_value(1, 1.0)
        assert not same_value(True, 1)
        assert not same_value(0, False)
        assert same_value({"a": [1]}, {"a": [1]})
        assert not same_value(None, 0)
        assert not same_value({"a": True}, {"a": 1})
        assert same_value({"a": 1, "b": 2}, {"b": 2, "a": 1})
        assert not same_value([1, 2], [2, 1])

    @pytest.mark.parametrize("value", [None, False, 0, 0.0, ""])
    def test_falsy(self, value):
        assert not truthy(value)

    @pytest.mark.parametrize("value", [True, 1, -1, "0", [], {}])
    def test_truthy(self, value):
        assert truthy(value)

    def test_display_value(self):
        assert display_value("hi") == "hi"
        assert display_value(3.0) == "3"
        assert display_value(True) == "true"
        assert display_value([1, 2]) == "[1,2]"

    def test_guards(self):
        state = {"n": 5, "tags": ["a", "b"], "name": "widget"}

        assert check_guard(None, state)
        assert check_guard(Guard(ConditionType.EQUALS, "n", 5), state)
        assert check_guard(Guard(ConditionType.NOT_EQUALS, "n", "5"), state)
        assert check_guard(Guard(ConditionType.GREATER_THAN, "n", 4), state)
        assert not check_guard(Guard(ConditionType.LESS_THAN, "n", 5), state)
        assert not check_guard(Guard(ConditionType.GREATER_THAN, "name", 1), state)
        assert check_guard(Guard(ConditionType.CONTAINS, "tags", "b"), state)
        assert check_guard(Guard(ConditionType.CONTAINS, "name", "idg"), state)
        assert not check_guard(Guard(ConditionType.CONTAINS, "n", 5), state)
        assert check_guard(Guard(ConditionType.EQUALS, "missing", None), state)
        assert check_guard(Guard(ConditionType.CUSTOM, expression="anything"), state)

    def test_resolve_trigger(self):
        assert resolve_trigger("click") == "onClick"
        assert resolve_trigger("onDoubleClick") == "onDoubleClick"
        assert resolve_trigger("onTimeout") == "onTimeout"
        assert resolve_trigger("onMount") is None
        assert resolve_trigger("shake") is None


@pytest.mark.unit
class TestCompile:
    """Spec to program."""

    def test_counter_program(self, counter_spec):
        _, program = prepare(counter_spec)

        assert program.widget_id == "click-counter"
        assert program.initial_state == {"count": 0, "step": 1, "active": True}
        assert program.field_types == {"count": "number", "step": "number", "active": "boolean"}
        assert program.rendered_fields == ("count", "step", "active")
        assert program.trigger_actions("onClick") == ("inc",)
        assert program.subscriptions == (("counter:reset", "reset"),)
        assert program.input_ports == ("step",)
        assert program.output_ports == ("total",)
        assert program.exposed == ("reset",)
        assert program.dom_bindings() == [("root", "click", "onClick")]
        assert not program.has_interval

    def test_operations(self, counter_spec):
        _, program = prepare(counter_spec)

        assert program.actions["inc"].op == AdjustState("count", 1)
        assert program.actions["dec"].op == AdjustState("count", -1)
        assert program.actions["reset"].op == ResetState((("count", 0),))
        assert program.actions["announce"].op == Broadcast("counter:changed", {})
        assert program.actions["total"].op == EmitEvent("total", {"source": "counter"}, True)
        assert program.actions["inc"].function_name == "incAction"

    def test_explicit_zero_amount(self, minimal_spec):
        minimal_spec["state"] = {"n": {"type": "number", "default": 0}}
        minimal_spec["actions"] = {
            "noop": {"type": "incrementState", "description": "No-op", "params": {"stateKey": "n", "amount": 0}},
        }
        _, program = prepare(minimal_spec)
        assert program.actions["noop"].op == AdjustState("n", 0)

    def test_zero_values(self, minimal_spec):
        minimal_spec["state"] = {
            "s": {"type": "string"},
            "n": {"type": "number", "default": None},
            "b": {"type": "boolean"},
            "o": {"type": "object"},
            "a": {"type": "array"},
            "x": {"type": "any"},
        }
        program = compile_program(parse_spec(minimal_spec))
        assert program.initial_state == {"s": "", "n": 0, "b": False, "o": {}, "a": [], "x": None}

    def test_reset_all(self, minimal_spec):
        minimal_spec["state"] = {"a": {"type": "number", "default": 1}, "b": {"type": "string", "default": "x"}}
        minimal_spec["actions"] = {"reset": {"type": "resetState", "description": "Reset"}}
        _, program = prepare(minimal_spec)
        assert program.actions["reset"].op == ResetState((("a", 1), ("b", "x")))

    def test_intents_and_composites(self, minimal_spec):
        minimal_spec["actions"] = {
            "fetch": {"type": "fetch", "description": "Load", "params": {"endpoint": "/api/data"}},
            "go": {"type": "navigate", "description": "Go", "params": {"url": "https://example.com"}},
            "both": {"type": "sequence", "description": "Both", "params": {"actions": ["fetch", "go"]}},
        }
        _, program = prepare(minimal_spec)

        fetch = program.actions["fetch"].op
        assert isinstance(fetch, Intent)
        assert fetch.event_type == "intent:fetch"
        assert fetch.payload == {"endpoint": "/api/data", "method": "GET"}
        assert program.actions["both"].op == Sequence(("fetch", "go"))

    def test_non_html_renders_nothing(self, minimal_spec):
        minimal_spec["visual"] = {"type": "svg", "skins": []}
        minimal_spec["state"] = {"n": {"type": "number", "default": 0}}
        _, program = prepare(minimal_spec)
        assert program.visual_type == VisualType.SVG
        assert program.rendered_fields == ()

    def test_validate_state(self, counter_spec):
        _, program = prepare(counter_spec)

        assert program.validate_state({"step": 50})
        assert program.validate_state({})
        assert not program.validate_state({"step": 0})
        assert not program.validate_state({"step": 101})
        assert not program.validate_state({"step": "5"})
