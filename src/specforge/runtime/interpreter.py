"""
Action interpreter.

Runs compiled operations against an action context with the same semantics
as the generated scripts: guards first, composites call members in order,
unknown members are skipped.
"""

import copy
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, assert_never

from ..core.logging_config import get_logger
from ..generator.program import (
    AdjustState,
    Animate,
    Broadcast,
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
    check_guard,
    is_number,
    truthy,
)

logger = get_logger(__name__)


class ActionContext(Protocol):
    """What an action may touch: its widget's state and outbound channel."""

    def get_state(self) -> dict[str, Any]:
        ...

    def set_state(self, patch: Mapping[str, Any]) -> None:
        ...

    def emit(self, event_type: str, payload: Any = None) -> None:
        ...

    def broadcast(self, event: str, payload: Any = None) -> None:
        ...

    def emit_output(self, port: str, value: Any) -> None:
        ...

    def animate(self, duration: float) -> None:
        ...

    def custom(self, handler: str) -> None:
        ...


@dataclass(frozen=True)
class Effect:
    """Side effect an action requested, in order of request."""

    kind: str  # emit | broadcast | output | animate | custom
    name: str
    payload: Any = None


class StateContext:
    """
    Standalone context over a plain state dict.

    Records effects instead of sending them; useful for checking action
    semantics without a channel.

    Examples:
        >>> ctx = StateContext({"count": 5})
        >>> run_action(program, "inc", ctx)
        True
        >>> ctx.state
        {'count': 7}
    """

    def __init__(self, state: Mapping[str, Any] | None = None):
        self.state: dict[str, Any] = copy.deepcopy(dict(state or {}))
        self.effects: list[Effect] = []

    def get_state(self) -> dict[str, Any]:
        return copy.deepcopy(self.state)

    def set_state(self, patch: Mapping[str, Any]) -> None:
        self.state.update(copy.deepcopy(dict(patch)))

    def emit(self, event_type: str, payload: Any = None) -> None:
        self.effects.append(Effect("emit", event_type, {} if payload is None else payload))

    def broadcast(self, event: str, payload: Any = None) -> None:
        self.effects.append(Effect("broadcast", event, {} if payload is None else payload))

    def emit_output(self, port: str, value: Any) -> None:
        self.effects.append(Effect("output", port, value))

    def animate(self, duration: float) -> None:
        self.effects.append(Effect("animate", "pulse", duration))

    def custom(self, handler: str) -> None:
        self.effects.append(Effect("custom", handler))


def run_action(program: WidgetProgram, action_id: str, ctx: ActionContext) -> bool:
    """
    Run one action by id.

    Returns:
        False if the action does not exist or its guard failed
    """
    action = program.actions.get(action_id)
    if action is None:
        logger.debug("action_not_found", action_id=action_id)
        return False

    if not check_guard(action.guard, ctx.get_state()):
        logger.debug("action_guard_failed", action_id=action_id)
        return False

    match action.op:
        case SetState(key=key, value=value):
            ctx.set_state({key: copy.deepcopy(value)})
        case ToggleState(key=key):
            ctx.set_state({key: not truthy(ctx.get_state().get(key))})
        case AdjustState(key=key, delta=delta):
            current = ctx.get_state().get(key)
            ctx.set_state({key: (current if is_number(current) else 0) + delta})
        case ResetState(values=values):
            ctx.set_state(copy.deepcopy(dict(values)))
        case EmitEvent(event_type=event_type, payload=payload, to_output=to_output):
            ctx.emit(event_type, copy.deepcopy(payload))
            if to_output:
                ctx.emit_output(event_type, copy.deepcopy(payload))
        case Broadcast(event=event, payload=payload):
            ctx.broadcast(event, copy.deepcopy(payload))
        case Animate(duration=duration):
            ctx.animate(duration)
        case Intent() as intent:
            ctx.emit(intent.event_type, intent.payload)
        case CustomHandler(handler=handler):
            ctx.custom(handler)
        case Sequence(members=members) | Parallel(members=members) | Conditional(members=members):
            # Parallel members still run one after another in a single context
            for member in members:
                if member in program.actions:
                    run_action(program, member, ctx)
        case _:
            assert_never(action.op)

    return True


def run_trigger(program: WidgetProgram, trigger: str, ctx: ActionContext) -> int:
    """Run every action bound to a trigger; returns how many ran."""
    return sum(run_action(program, action_id, ctx) for action_id in program.trigger_actions(trigger))
