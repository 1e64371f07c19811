"""Tests for spec loading and the spec model."""

import pytest
from pydantic import ValidationError as PydanticValidationError
from returns.result import Failure, Success

from specforge.core.validate import SpecLoadError
from specforge.core.json import safe_json_dumps
from specforge.spec import (
    ActionKind,
    Spec,
    StateValueType,
    load_spec,
    parse_spec,
    try_load_spec,
    try_parse_spec,
)


@pytest.mark.unit
class TestLoadSpec:
    """Test text to raw mapping."""

    def test_load_plain(self, counter_spec):
        assert load_spec(safe_json_dumps(counter_spec)) == counter_spec

    def test_load_fenced(self, counter_spec):
        text = f"```json\n{safe_json_dumps(counter_spec, indent=2)}\n```"
        assert load_spec(text)["id"] == "click-counter"

    def test_load_no_object(self):
        with pytest.raises(SpecLoadError):
            load_spec("nothing to see")

    def test_load_too_large(self, counter_spec):
        with pytest.raises(SpecLoadError, match="exceeds maximum"):
            load_spec(safe_json_dumps(counter_spec), max_size=100)

    def test_load_too_deep(self):
        text = '{"a": {"b": {"c": {"d": 1}}}}'
        with pytest.raises(SpecLoadError, match="depth"):
            load_spec(text, max_depth=2)

    def test_try_load(self):
        assert isinstance(try_load_spec('{"id": "x"}'), Success)
        assert isinstance(try_load_spec("garbage"), Failure)


@pytest.mark.unit
class TestParseSpec:
    """Test raw mapping to model."""

    def test_parse_counter(self, counter_spec):
        spec = parse_spec(counter_spec)

        assert spec.id == "click-counter"
        assert spec.display_name == "Click Counter"
        assert spec.state["count"].type == StateValueType.NUMBER
        assert spec.state["step"].rule.max == 100
        assert spec.actions["inc"].type == ActionKind.INCREMENT_STATE
        assert spec.actions["inc"].params.state_key == "count"
        assert spec.events.triggers == {"onClick": ["inc"]}

    def test_parse_model_passthrough(self, counter_spec):
        spec = parse_spec(counter_spec)
        assert parse_spec(spec) is spec

    def test_parse_invalid(self):
        with pytest.raises(PydanticValidationError):
            parse_spec({"id": "x"})
        assert isinstance(try_parse_spec({"id": "x"}), Failure)

    def test_null_reads_as_absent(self, minimal_spec):
        minimal_spec["state"] = {"label": {"type": "string", "default": None}}
        spec = parse_spec(minimal_spec)
        assert spec.state["label"].default is None

    def test_integers_stay_integers(self, counter_spec):
        spec = parse_spec(counter_spec)
        assert isinstance(spec.size.width, int)
        assert isinstance(spec.actions["inc"].params.amount, int)

    def test_to_json_dict_roundtrip(self, counter_spec):
        spec = parse_spec(counter_spec)
        again = Spec.model_validate(spec.to_json_dict())

        assert again == spec
        assert spec.to_json_dict()["displayName"] == "Click Counter"
        assert spec.to_json_dict()["state"]["step"]["validate"] == {"min": 1, "max": 100}
