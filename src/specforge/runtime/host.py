"""
Widget host.

Multiplexes any number of live widget instances, each behind its own
channel. The host keeps an eventually consistent mirror of every instance's
state, routes broadcasts to listening instances and carries port outputs
along connected pipelines.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from ..core.id import InstanceID, new_instance_id
from ..core.logging_config import get_logger
from ..core.validate import SpecforgeError
from ..generator.program import WidgetProgram, compile_program
from ..spec.models import GeneratedPackage
from .channel import Channel, channel_pair
from .protocol import MessageType, envelope, parse_envelope, payload_dict
from .widget import WidgetRuntime

logger = get_logger(__name__)


class SessionNotFoundError(SpecforgeError):
    """No live session with that instance id."""


@dataclass(frozen=True)
class Pipe:
    """Output port of one instance wired to an input port of another."""

    source: str
    source_port: str
    target: str
    target_port: str


@dataclass
class HostSession:
    """Host-side view of one widget instance."""

    instance_id: InstanceID
    channel: Channel
    widget_id: str | None = None
    initial_state: dict[str, Any] = field(default_factory=dict)
    listens: frozenset[str] = frozenset()
    state: dict[str, Any] = field(default_factory=dict)
    ready: bool = False
    init_sent: bool = False
    destroyed: bool = False
    ready_info: dict[str, Any] | None = None
    emits: list[dict[str, Any]] = field(default_factory=list)
    outputs: list[dict[str, Any]] = field(default_factory=list)
    broadcasts: list[dict[str, Any]] = field(default_factory=list)
    runtime: WidgetRuntime | None = None


def listened_events(program: WidgetProgram) -> frozenset[str]:
    """Event types a program reacts to when they arrive as widget:event."""
    return frozenset(name for name, _ in program.subscriptions) | frozenset(
        method for method, _ in program.accepted
    )


class WidgetHost:
    """
    Loads widgets and exchanges protocol messages with them.

    Examples:
        >>> host = WidgetHost()
        >>> session = host.launch(package)
        >>> host.settle()
        >>> host.send_event(session.instance_id, "click")
        >>> host.settle()
        >>> session.state
        {'count': 1, ...}
    """

    def __init__(self) -> None:
        self.sessions: dict[str, HostSession] = {}
        self.pipes: list[Pipe] = []

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def attach(
        self,
        channel: Channel,
        widget_id: str | None = None,
        initial_state: Mapping[str, Any] | None = None,
        listens: Iterable[str] = (),
        speculative_init: bool = False,
    ) -> HostSession:
        """
        Register a channel to a widget that is (or will be) loading.

        Args:
            channel: Host end of the widget's channel
            widget_id: Spec id, if known before READY
            initial_state: State override sent with INIT
            listens: Broadcast events to route to this instance
            speculative_init: Send INIT now instead of waiting for READY
        """
        session = HostSession(
            instance_id=new_instance_id(),
            channel=channel,
            widget_id=widget_id,
            initial_state=dict(initial_state or {}),
            listens=frozenset(listens),
        )
        self.sessions[session.instance_id] = session
        logger.info("session_attached", instance_id=session.instance_id, widget_id=widget_id)

        if speculative_init:
            self._send_init(session)
        return session

    def launch(
        self,
        package: GeneratedPackage | WidgetProgram,
        initial_state: Mapping[str, Any] | None = None,
        speculative_init: bool = False,
    ) -> HostSession:
        """Start an in-process instance of a package and boot it."""
        program = package if isinstance(package, WidgetProgram) else compile_program(package.spec)
        host_end, widget_end = channel_pair()
        session = self.attach(
            host_end,
            widget_id=program.widget_id,
            initial_state=initial_state,
            listens=listened_events(program),
            speculative_init=speculative_init,
        )
        session.state = {**copy.deepcopy(program.initial_state), **session.state}
        session.runtime = WidgetRuntime(program, widget_end)
        session.runtime.boot()
        return session

    def session(self, instance_id: str) -> HostSession:
        try:
            return self.sessions[instance_id]
        except KeyError:
            raise SessionNotFoundError(f"No widget session '{instance_id}'") from None

    def live_sessions(self) -> list[HostSession]:
        return [s for s in self.sessions.values() if not s.destroyed]

    def connect(self, source: str, source_port: str, target: str, target_port: str) -> Pipe:
        """Carry ``source``'s output port into ``target``'s input port."""
        self.session(source)
        self.session(target)
        pipe = Pipe(source, source_port, target, target_port)
        self.pipes.append(pipe)
        return pipe

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def pump(self, limit: int | None = None) -> int:
        """
        Handle messages waiting on every live session's channel.

        Args:
            limit: Max messages per session (use with blocking stream channels)

        Returns:
            Number of messages read
        """
        count = 0
        for session in list(self.sessions.values()):
            read = 0
            while not session.destroyed and (limit is None or read < limit):
                raw = session.channel.receive()
                if raw is None:
                    break
                self._handle(session, raw)
                read += 1
            count += read
        return count

    def settle(self, max_rounds: int = 1000) -> int:
        """Pump in-process widgets and the host until no messages remain."""
        total = 0
        for _ in range(max_rounds):
            moved = sum(s.runtime.pump() for s in self.live_sessions() if s.runtime is not None)
            moved += self.pump()
            if moved == 0:
                break
            total += moved
        else:
            logger.warning("host_settle_exhausted", rounds=max_rounds)
        return total

    def _handle(self, session: HostSession, raw: Any) -> None:
        message = parse_envelope(raw)
        if message is None:
            logger.debug("message_ignored", instance_id=session.instance_id, reason="malformed")
            return

        payload = message.payload
        match message.type:
            case MessageType.READY.value:
                session.ready = True
                session.ready_info = payload_dict(payload)
                if session.ready_info and isinstance(session.ready_info.get("widgetId"), str):
                    session.widget_id = session.ready_info["widgetId"]
                if not session.init_sent:
                    self._send_init(session)
            case MessageType.STATE_PATCH.value:
                patch = payload_dict(payload)
                if patch is not None:
                    session.state.update(patch)
            case MessageType.EMIT.value:
                if payload_dict(payload) is not None:
                    session.emits.append(payload)
            case MessageType.OUTPUT.value:
                if payload_dict(payload) is not None:
                    session.outputs.append(payload)
                    self._route_output(session, payload)
            case MessageType.BROADCAST.value:
                if payload_dict(payload) is not None:
                    session.broadcasts.append(payload)
                    self._route_broadcast(session, payload)
            case _:
                logger.debug("message_ignored", instance_id=session.instance_id, type=message.type)

    def _route_broadcast(self, sender: HostSession, payload: dict[str, Any]) -> None:
        event = payload.get("event")
        if not isinstance(event, str):
            return
        for session in self.live_sessions():
            if session is sender or event not in session.listens:
                continue
            session.channel.send(envelope(MessageType.WIDGET_EVENT, {"type": event, "payload": payload.get("payload")}))

    def _route_output(self, sender: HostSession, payload: dict[str, Any]) -> None:
        port = payload.get("portName")
        for pipe in self.pipes:
            if pipe.source != sender.instance_id or pipe.source_port != port:
                continue
            target = self.sessions.get(pipe.target)
            if target is None or target.destroyed:
                continue
            target.channel.send(
                envelope(MessageType.PIPELINE_INPUT, {"portName": pipe.target_port, "value": payload.get("value")})
            )

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def _send_init(self, session: HostSession) -> None:
        session.init_sent = True
        session.state.update(copy.deepcopy(session.initial_state))
        session.channel.send(envelope(MessageType.INIT, {"state": session.initial_state}))

    def _send(self, instance_id: str, message_type: MessageType, payload: Any = None) -> None:
        session = self.session(instance_id)
        if session.destroyed:
            logger.debug("send_dropped", instance_id=instance_id, type=message_type.value)
            return
        session.channel.send(envelope(message_type, payload))

    def send_event(self, instance_id: str, event_type: str, payload: Any = None) -> None:
        event: dict[str, Any] = {"type": event_type}
        if payload is not None:
            event["payload"] = payload
        self._send(instance_id, MessageType.WIDGET_EVENT, event)

    def send_input(self, instance_id: str, port: str, value: Any) -> None:
        self._send(instance_id, MessageType.PIPELINE_INPUT, {"portName": port, "value": value})

    def update_state(self, instance_id: str, patch: Mapping[str, Any]) -> None:
        self._send(instance_id, MessageType.STATE_UPDATE, dict(patch))

    def update_settings(self, instance_id: str, settings: Mapping[str, Any]) -> None:
        self._send(instance_id, MessageType.SETTINGS_UPDATE, dict(settings))

    def resize(self, instance_id: str, width: int, height: int) -> None:
        self._send(instance_id, MessageType.RESIZE, {"width": width, "height": height})

    def invoke(self, instance_id: str, method: str, args: Any = None) -> None:
        call: dict[str, Any] = {"method": method}
        if args is not None:
            call["args"] = args
        self._send(instance_id, MessageType.INVOKE, call)

    def destroy(self, instance_id: str) -> None:
        """Send DESTROY and sever the channel; late messages are dropped."""
        session = self.session(instance_id)
        if session.destroyed:
            return
        session.channel.send(envelope(MessageType.DESTROY))
        session.channel.close()
        session.destroyed = True
        self.pipes = [p for p in self.pipes if instance_id not in (p.source, p.target)]
        if session.runtime is not None:
            session.runtime.pump()
        logger.info("session_destroyed", instance_id=instance_id, widget_id=session.widget_id)
