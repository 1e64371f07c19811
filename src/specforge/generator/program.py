"""Compiled widget program.

A valid spec is compiled once into a :class:`WidgetProgram`: resolved
defaults, typed operations per action, guards and dispatch tables. The
JavaScript emitters render it and the runtime interprets it, so both sides
share one reading of every action kind.
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Union, assert_never

from ..core.json import safe_json_dumps
from ..spec.models import (
    ActionDefinition,
    ActionKind,
    ConditionType,
    EventTrigger,
    Spec,
    StateFieldSpec,
    StateValidation,
    VisualType,
)
from .naming import function_names, zero_value


INTERVAL_MS = 1000
ANIMATION_MS = 300
MAX_RENDERED_FIELDS = 3
DEFAULT_FETCH_METHOD = "GET"

# DOM event name -> (listener target, trigger)
DOM_EVENTS: dict[str, tuple[str, EventTrigger]] = {
    "click": ("root", EventTrigger.ON_CLICK),
    "dblclick": ("root", EventTrigger.ON_DOUBLE_CLICK),
    "mouseenter": ("root", EventTrigger.ON_HOVER),
    "mouseleave": ("root", EventTrigger.ON_HOVER_END),
    "focus": ("root", EventTrigger.ON_FOCUS),
    "blur": ("root", EventTrigger.ON_BLUR),
    "keydown": ("document", EventTrigger.ON_KEY_DOWN),
    "keyup": ("document", EventTrigger.ON_KEY_UP),
    "dragstart": ("root", EventTrigger.ON_DRAG_START),
    "drag": ("root", EventTrigger.ON_DRAG),
    "dragend": ("root", EventTrigger.ON_DRAG_END),
    "drop": ("root", EventTrigger.ON_DROP),
    "contextmenu": ("root", EventTrigger.ON_CONTEXT_MENU),
    "wheel": ("root", EventTrigger.ON_WHEEL),
    "touchstart": ("root", EventTrigger.ON_TOUCH_START),
    "touchmove": ("root", EventTrigger.ON_TOUCH_MOVE),
    "touchend": ("root", EventTrigger.ON_TOUCH_END),
    "animationend": ("root", EventTrigger.ON_ANIMATION_END),
    "transitionend": ("root", EventTrigger.ON_TRANSITION_END),
    "visibilitychange": ("document", EventTrigger.ON_VISIBILITY_CHANGE),
}
TRIGGER_EVENTS: dict[EventTrigger, str] = {trigger: name for name, (_, trigger) in DOM_EVENTS.items()}

# Fired from protocol messages, never from widget:event
LIFECYCLE_TRIGGERS = frozenset({
    EventTrigger.ON_MOUNT,
    EventTrigger.ON_UNMOUNT,
    EventTrigger.ON_RESIZE,
    EventTrigger.ON_STATE_CHANGE,
    EventTrigger.ON_INPUT,
    EventTrigger.ON_OUTPUT,
})

# Triggers a host may fire by name through widget:event
ROUTABLE_TRIGGERS = tuple(t.value for t in EventTrigger if t not in LIFECYCLE_TRIGGERS)


def resolve_trigger(event_type: str) -> str | None:
    """Map a widget:event type (DOM event or trigger name) to a trigger."""
    if event_type in DOM_EVENTS:
        return DOM_EVENTS[event_type][1].value
    if event_type in ROUTABLE_TRIGGERS:
        return event_type
    return None


# ============================================================================
# Value semantics (mirrored by the generated script helpers)
# ============================================================================


def json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    return "object"


def is_number(value: Any) -> bool:
    return json_type(value) == "number" and not (isinstance(value, float) and math.isnan(value))


def same_value(a: Any, b: Any) -> bool:
    """Structural equality that never equates booleans with numbers; key order is ignored."""
    kind = json_type(a)
    if kind != json_type(b):
        return False
    if kind == "array":
        return len(a) == len(b) and all(same_value(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(same_value(a[key], b[key]) for key in a)
    return bool(a == b)


def truthy(value: Any) -> bool:
    """Script truthiness: empty containers are truthy."""
    if value is None or value is False or value == "":
        return False
    if is_number(value):
        return value != 0
    if isinstance(value, float):
        return False
    return True


def display_value(value: Any) -> str:
    """Text a rendered state field shows: strings as-is, the rest as JSON."""
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return safe_json_dumps(value)


@dataclass(frozen=True)
class Guard:
    """Comparison against one state field, checked before an action runs."""

    kind: ConditionType
    state_key: str | None = None
    value: Any = None
    expression: str | None = None

    def to_literal(self) -> dict[str, Any]:
        """Shape embedded in generated scripts."""
        return {"type": self.kind.value, "stateKey": self.state_key, "value": self.value}


def check_guard(guard: Guard | None, state: Mapping[str, Any]) -> bool:
    """Evaluate a guard; custom expressions always pass."""
    if guard is None:
        return True

    current = state.get(guard.state_key) if guard.state_key is not None else None

    match guard.kind:
        case ConditionType.EQUALS:
            return same_value(current, guard.value)
        case ConditionType.NOT_EQUALS:
            return not same_value(current, guard.value)
        case ConditionType.GREATER_THAN:
            return is_number(current) and is_number(guard.value) and current > guard.value
        case ConditionType.LESS_THAN:
            return is_number(current) and is_number(guard.value) and current < guard.value
        case ConditionType.CONTAINS:
            if isinstance(current, str) and isinstance(guard.value, str):
                return guard.value in current
            if isinstance(current, list):
                return any(same_value(item, guard.value) for item in current)
            return False
        case ConditionType.CUSTOM:
            return True
        case _:
            assert_never(guard.kind)


# ============================================================================
# Operations
# ============================================================================


@dataclass(frozen=True)
class SetState:
    key: str
    value: Any


@dataclass(frozen=True)
class ToggleState:
    key: str


@dataclass(frozen=True)
class AdjustState:
    """Increment (positive delta) or decrement (negative delta)."""

    key: str
    delta: float


@dataclass(frozen=True)
class ResetState:
    values: tuple[tuple[str, Any], ...]


@dataclass(frozen=True)
class EmitEvent:
    event_type: str
    payload: Any
    to_output: bool = False


@dataclass(frozen=True)
class Broadcast:
    event: str
    payload: Any


@dataclass(frozen=True)
class Animate:
    duration: float


@dataclass(frozen=True)
class Intent:
    """Structured request the host carries out (sound, navigation, fetch)."""

    kind: ActionKind
    params: tuple[tuple[str, Any], ...]

    @property
    def event_type(self) -> str:
        return f"intent:{self.kind.value}"

    @property
    def payload(self) -> dict[str, Any]:
        return dict(self.params)


@dataclass(frozen=True)
class CustomHandler:
    handler: str


@dataclass(frozen=True)
class Sequence:
    members: tuple[str, ...]


@dataclass(frozen=True)
class Parallel:
    members: tuple[str, ...]


@dataclass(frozen=True)
class Conditional:
    members: tuple[str, ...]


Operation = Union[
    SetState, ToggleState, AdjustState, ResetState, EmitEvent, Broadcast,
    Animate, Intent, CustomHandler, Sequence, Parallel, Conditional,
]


@dataclass(frozen=True)
class CompiledAction:
    action_id: str
    function_name: str
    op: Operation
    guard: Guard | None = None
    description: str | None = None


# ============================================================================
# Program
# ============================================================================


@dataclass(frozen=True)
class WidgetProgram:
    """Everything the emitters and the runtime need, resolved once."""

    widget_id: str
    version: str
    display_name: str
    description: str
    visual_type: VisualType
    initial_state: dict[str, Any]
    field_types: dict[str, str]
    field_rules: dict[str, StateValidation]
    actions: dict[str, CompiledAction]
    triggers: dict[str, tuple[str, ...]]
    subscriptions: tuple[tuple[str, str], ...] = ()
    accepted: tuple[tuple[str, str], ...] = ()
    input_ports: tuple[str, ...] = ()
    output_ports: tuple[str, ...] = ()
    exposed: tuple[str, ...] = ()
    rendered_fields: tuple[str, ...] = ()

    def trigger_actions(self, trigger: EventTrigger | str) -> tuple[str, ...]:
        name = trigger.value if isinstance(trigger, EventTrigger) else trigger
        return self.triggers.get(name, ())

    def dom_bindings(self) -> list[tuple[str, str, str]]:
        """(target, DOM event, trigger) for each bound DOM-like trigger."""
        bindings = []
        for name, (target, trigger) in DOM_EVENTS.items():
            if self.triggers.get(trigger.value):
                bindings.append((target, name, trigger.value))
        return bindings

    @property
    def has_interval(self) -> bool:
        return bool(self.triggers.get(EventTrigger.ON_INTERVAL.value))

    def validate_state(self, partial: Mapping[str, Any]) -> bool:
        """Check required/min/max rules against a candidate partial state."""
        for key, rule in self.field_rules.items():
            value = partial.get(key)
            if rule.required and value is None:
                return False
            if value is None:
                continue
            if rule.min is not None and not (is_number(value) and value >= rule.min):
                return False
            if rule.max is not None and not (is_number(value) and value <= rule.max):
                return False
        return True


def initial_value(field_spec: StateFieldSpec) -> Any:
    if field_spec.default is not None:
        return field_spec.default
    return zero_value(field_spec.type)


def compile_action(
    action_id: str,
    definition: ActionDefinition,
    spec: Spec,
    names: Mapping[str, str],
) -> CompiledAction:
    params = definition.params
    members = tuple(params.actions or ())

    match definition.type:
        case ActionKind.SET_STATE:
            op: Operation = SetState(params.state_key or "", params.value)
        case ActionKind.TOGGLE_STATE:
            op = ToggleState(params.toggle_key or params.state_key or "")
        case ActionKind.INCREMENT_STATE:
            op = AdjustState(params.state_key or "", 1 if params.amount is None else params.amount)
        case ActionKind.DECREMENT_STATE:
            op = AdjustState(params.state_key or "", -(1 if params.amount is None else params.amount))
        case ActionKind.RESET_STATE:
            keys = [params.state_key] if params.state_key else list(spec.state)
            op = ResetState(tuple((k, initial_value(spec.state[k])) for k in keys if k in spec.state))
        case ActionKind.EMIT:
            event_type = params.event_type or ""
            outputs = {port.id for port in spec.api.outputs}
            payload = {} if params.event_payload is None else params.event_payload
            op = EmitEvent(event_type, payload, event_type in outputs)
        case ActionKind.BROADCAST:
            payload = {} if params.event_payload is None else params.event_payload
            op = Broadcast(params.broadcast_event or "", payload)
        case ActionKind.ANIMATE:
            op = Animate(ANIMATION_MS if params.duration is None else params.duration)
        case ActionKind.PLAY_SOUND:
            op = Intent(definition.type, (("sound", params.sound),))
        case ActionKind.NAVIGATE:
            op = Intent(definition.type, (("url", params.url),))
        case ActionKind.FETCH:
            op = Intent(
                definition.type,
                (("endpoint", params.endpoint), ("method", params.method or DEFAULT_FETCH_METHOD)),
            )
        case ActionKind.CUSTOM:
            op = CustomHandler(params.custom_handler or action_id)
        case ActionKind.SEQUENCE:
            op = Sequence(members)
        case ActionKind.PARALLEL:
            op = Parallel(members)
        case ActionKind.CONDITIONAL:
            op = Conditional(members)
        case _:
            assert_never(definition.type)

    guard = None
    if definition.condition is not None:
        condition = definition.condition
        guard = Guard(condition.type, condition.state_key, condition.value, condition.expression)

    return CompiledAction(action_id, names[action_id], op, guard, definition.description)


def compile_program(spec: Spec) -> WidgetProgram:
    """
    Compile a spec into a program.

    The spec must already have passed validation; references are assumed to
    resolve.
    """
    names = function_names(spec.actions)
    actions = {
        action_id: compile_action(action_id, definition, spec, names)
        for action_id, definition in spec.actions.items()
    }

    known = {t.value for t in EventTrigger}
    triggers = {
        trigger: tuple(action_list)
        for trigger, action_list in spec.events.triggers.items()
        if trigger in known
    }

    rendered: tuple[str, ...] = ()
    if spec.visual.type == VisualType.HTML:
        rendered = tuple(spec.state)[:MAX_RENDERED_FIELDS]

    return WidgetProgram(
        widget_id=spec.id,
        version=spec.version,
        display_name=spec.display_name,
        description=spec.description,
        visual_type=spec.visual.type,
        initial_state={key: initial_value(f) for key, f in spec.state.items()},
        field_types={key: f.type.value for key, f in spec.state.items()},
        field_rules={key: f.rule for key, f in spec.state.items() if f.rule is not None},
        actions=actions,
        triggers=triggers,
        subscriptions=tuple((s.event, s.handler) for s in spec.events.subscriptions),
        accepted=tuple((m.id, m.handler) for m in spec.api.accepts),
        input_ports=tuple(port.id for port in spec.api.inputs),
        output_ports=tuple(port.id for port in spec.api.outputs),
        exposed=tuple(method.id for method in spec.api.exposes),
        rendered_fields=rendered,
    )
