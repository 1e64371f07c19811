"""Runtime protocol: envelopes, channels, the reference widget and a host."""

from .protocol import INBOUND, OUTBOUND, Envelope, MessageType, envelope, parse_envelope
from .channel import Channel, QueueChannel, StreamChannel, channel_pair
from .interpreter import ActionContext, Effect, StateContext, run_action, run_trigger
from .widget import Phase, WidgetRuntime
from .host import HostSession, Pipe, SessionNotFoundError, WidgetHost, listened_events

__all__ = [
    # Protocol
    "MessageType",
    "Envelope",
    "envelope",
    "parse_envelope",
    "INBOUND",
    "OUTBOUND",
    # Channels
    "Channel",
    "QueueChannel",
    "StreamChannel",
    "channel_pair",
    # Interpreter
    "ActionContext",
    "Effect",
    "StateContext",
    "run_action",
    "run_trigger",
    # Widget
    "Phase",
    "WidgetRuntime",
    # Host
    "WidgetHost",
    "HostSession",
    "Pipe",
    "SessionNotFoundError",
    "listened_events",
]
