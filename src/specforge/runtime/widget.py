"""
Reference widget runtime.

Executes a compiled program behind a channel exactly as the generated entry
document does: an explicit phase value, one STATE_PATCH per state change
and silent no-ops for anything the current phase does not accept.
"""

import copy
from enum import Enum
from typing import Any, Mapping

from ..core.logging_config import get_logger
from ..generator.engine import prepare
from ..generator.program import (
    DOM_EVENTS,
    INTERVAL_MS,
    WidgetProgram,
    compile_program,
    display_value,
    resolve_trigger,
    same_value,
)
from ..generator.versions import PROTOCOL_VERSION
from ..spec.models import EventTrigger, GeneratedPackage, Spec
from .channel import Channel
from .interpreter import Effect, run_action, run_trigger
from .protocol import Envelope, MessageType, envelope, parse_envelope, payload_dict

logger = get_logger(__name__)


class Phase(str, Enum):
    """Widget lifecycle phase."""
    LOADING = "Loading"
    AWAITING_INIT = "AwaitingInit"
    ACTIVE = "Active"
    DESTROYED = "Destroyed"


class WidgetRuntime:
    """
    One widget instance.

    Implements the action context, so compiled actions run directly against
    it. Outbound messages go to ``channel``; without a channel they are only
    recorded in ``effects``.

    Examples:
        >>> host_end, widget_end = channel_pair()
        >>> widget = WidgetRuntime.from_spec(example_counter_spec(), widget_end)
        >>> widget.boot()
        >>> widget.handle({"type": "INIT", "payload": {"state": {"count": 3}}})
        >>> widget.phase
        <Phase.ACTIVE: 'Active'>
    """

    def __init__(self, program: WidgetProgram, channel: Channel | None = None):
        self.program = program
        self.channel = channel
        self.phase = Phase.LOADING
        self.effects: list[Effect] = []
        self.rendered: dict[str, str] = {}
        self.initialized = False

        self._state: dict[str, Any] = copy.deepcopy(program.initial_state)
        self._pending_init: Envelope | None = None
        self._notifying = False
        self._timer_running = False
        self._elapsed_ms = 0

    @classmethod
    def from_spec(cls, spec: Spec | Mapping[str, Any], channel: Channel | None = None) -> "WidgetRuntime":
        """
        Raises:
            GenerationError: If the spec is invalid
        """
        _, program = prepare(spec)
        return cls(program, channel)

    @classmethod
    def from_package(cls, package: GeneratedPackage, channel: Channel | None = None) -> "WidgetRuntime":
        return cls(compile_program(package.spec), channel)

    @property
    def state(self) -> dict[str, Any]:
        return copy.deepcopy(self._state)

    @property
    def widget_id(self) -> str:
        return self.program.widget_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def boot(self) -> None:
        """Bind listeners, render defaults, announce READY."""
        if self.phase != Phase.LOADING:
            return
        self._timer_running = self.program.has_interval
        self._render()
        self.phase = Phase.AWAITING_INIT
        self._post(MessageType.READY, {
            "widgetId": self.program.widget_id,
            "version": self.program.version,
            "protocolVersion": PROTOCOL_VERSION,
        })
        if self._pending_init is not None:
            queued, self._pending_init = self._pending_init, None
            self._init(queued.payload)

    def handle(self, raw: Any) -> None:
        """Process one inbound wire value; never raises."""
        message = parse_envelope(raw)
        if message is None:
            logger.debug("message_ignored", widget_id=self.widget_id, reason="malformed")
            return
        try:
            self._dispatch(message)
        except Exception:
            # The sandbox boundary must survive a hostile or buggy peer
            logger.warning("message_dropped", widget_id=self.widget_id, type=message.type, exc_info=True)

    def pump(self, limit: int | None = None) -> int:
        """Handle queued inbound messages; returns how many were read."""
        if self.channel is None:
            return 0
        count = 0
        while limit is None or count < limit:
            raw = self.channel.receive()
            if raw is None:
                break
            self.handle(raw)
            count += 1
        return count

    def dom_event(self, name: str) -> bool:
        """
        Simulate a DOM event on the widget document.

        Only events the program binds a listener for have any effect.
        """
        binding = DOM_EVENTS.get(name)
        if binding is None or not self.program.trigger_actions(binding[1]):
            return False
        if self.phase != Phase.ACTIVE:
            return False
        self._run_trigger(binding[1].value)
        return True

    def advance(self, ms: int) -> int:
        """Advance the interval timer clock; returns ticks that elapsed."""
        if not self._timer_running:
            return 0
        self._elapsed_ms += ms
        ticks, self._elapsed_ms = divmod(self._elapsed_ms, INTERVAL_MS)
        for _ in range(ticks):
            if self.phase == Phase.ACTIVE:
                self._run_trigger(EventTrigger.ON_INTERVAL.value)
        return ticks

    def validate_state(self, partial: Mapping[str, Any]) -> bool:
        return self.program.validate_state(partial)

    # ------------------------------------------------------------------
    # Action context
    # ------------------------------------------------------------------

    def get_state(self) -> dict[str, Any]:
        return copy.deepcopy(self._state)

    def set_state(self, patch: Mapping[str, Any]) -> None:
        """Merge a patch; changed fields go out as one STATE_PATCH."""
        if not isinstance(patch, Mapping):
            return

        changed = {}
        for key, value in patch.items():
            if key not in self._state or not same_value(self._state[key], value):
                self._state[key] = copy.deepcopy(value)
                changed[key] = copy.deepcopy(value)
        if not changed:
            return

        self._post(MessageType.STATE_PATCH, changed)
        self._render()
        if self._notifying:
            return
        self._notifying = True
        try:
            self._run_trigger(EventTrigger.ON_STATE_CHANGE.value)
        finally:
            self._notifying = False

    def emit(self, event_type: str, payload: Any = None) -> None:
        payload = {} if payload is None else payload
        self.effects.append(Effect("emit", event_type, payload))
        self._post(MessageType.EMIT, {"type": event_type, "payload": payload})

    def broadcast(self, event: str, payload: Any = None) -> None:
        payload = {} if payload is None else payload
        self.effects.append(Effect("broadcast", event, payload))
        self._post(MessageType.BROADCAST, {"event": event, "payload": payload})

    def emit_output(self, port: str, value: Any) -> None:
        self.effects.append(Effect("output", port, value))
        self._post(MessageType.OUTPUT, {"portName": port, "value": value})

    def animate(self, duration: float) -> None:
        self.effects.append(Effect("animate", "pulse", duration))

    def custom(self, handler: str) -> None:
        logger.debug("custom_handler_unresolved", widget_id=self.widget_id, handler=handler)
        self.effects.append(Effect("custom", handler))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, message: Envelope) -> None:
        if self.phase == Phase.DESTROYED:
            logger.debug("message_ignored", widget_id=self.widget_id, type=message.type, phase=self.phase.value)
            return

        if self.phase == Phase.LOADING:
            if message.type == MessageType.INIT.value and self._pending_init is None:
                self._pending_init = message
            elif message.type == MessageType.DESTROY.value:
                self._destroy()
            return

        if message.type == MessageType.INIT.value:
            self._init(message.payload)
            return
        if message.type == MessageType.DESTROY.value:
            self._destroy()
            return
        if self.phase != Phase.ACTIVE:
            logger.debug("message_ignored", widget_id=self.widget_id, type=message.type, phase=self.phase.value)
            return

        payload = message.payload
        match message.type:
            case MessageType.WIDGET_EVENT.value:
                self._widget_event(payload)
            case MessageType.PIPELINE_INPUT.value:
                self._pipeline_input(payload)
            case MessageType.INVOKE.value:
                self._invoke(payload)
            case MessageType.STATE_UPDATE.value:
                self.set_state(payload)
            case MessageType.SETTINGS_UPDATE.value:
                pass
            case MessageType.RESIZE.value:
                self._run_trigger(EventTrigger.ON_RESIZE.value)
                self._render()
            case _:
                logger.debug("message_ignored", widget_id=self.widget_id, type=message.type)

    def _init(self, payload: Any) -> None:
        if self.initialized:
            return
        self.initialized = True
        overrides = (payload_dict(payload) or {}).get("state")
        if isinstance(overrides, dict):
            self._state.update(copy.deepcopy(overrides))
        self._run_trigger(EventTrigger.ON_MOUNT.value)
        self.phase = Phase.ACTIVE
        self._render()

    def _widget_event(self, payload: Any) -> None:
        event = payload_dict(payload)
        if event is None or not isinstance(event.get("type"), str):
            return
        event_type = event["type"]

        trigger = resolve_trigger(event_type)
        if trigger is not None:
            self._run_trigger(trigger)
        for name, handler in self.program.subscriptions:
            if name == event_type:
                run_action(self.program, handler, self)
        for method, handler in self.program.accepted:
            if method == event_type:
                run_action(self.program, handler, self)

    def _pipeline_input(self, payload: Any) -> None:
        data = payload_dict(payload)
        if data is None or not isinstance(data.get("portName"), str):
            return
        port = data["portName"]
        if port not in self.program.input_ports:
            logger.debug("input_port_unknown", widget_id=self.widget_id, port=port)
            return
        if port in self.program.field_types:
            self.set_state({port: data.get("value")})
        run_action(self.program, port, self)
        self._run_trigger(EventTrigger.ON_INPUT.value)

    def _invoke(self, payload: Any) -> None:
        data = payload_dict(payload)
        if data is None or not isinstance(data.get("method"), str):
            return
        if data["method"] not in self.program.exposed:
            logger.debug("method_not_exposed", widget_id=self.widget_id, method=data["method"])
            return
        run_action(self.program, data["method"], self)

    def _destroy(self) -> None:
        if self.phase == Phase.ACTIVE:
            self._run_trigger(EventTrigger.ON_UNMOUNT.value)
        self._timer_running = False
        self._elapsed_ms = 0
        self.phase = Phase.DESTROYED

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run_trigger(self, trigger: str) -> None:
        run_trigger(self.program, trigger, self)

    def _render(self) -> None:
        self.rendered = {
            key: display_value(self._state[key]) if key in self._state else ""
            for key in self.program.rendered_fields
        }

    def _post(self, message_type: MessageType, payload: Any = None) -> None:
        if self.channel is not None:
            self.channel.send(envelope(message_type, payload))
