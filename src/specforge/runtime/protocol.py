"""Runtime protocol: the two-field envelope and its message types."""

from enum import Enum
from typing import Any

import msgspec


class MessageType(str, Enum):
    """Every envelope type either party understands."""

    # Host -> widget
    INIT = "INIT"
    WIDGET_EVENT = "widget:event"
    PIPELINE_INPUT = "pipeline:input"
    STATE_UPDATE = "STATE_UPDATE"
    SETTINGS_UPDATE = "SETTINGS_UPDATE"
    RESIZE = "RESIZE"
    DESTROY = "DESTROY"
    INVOKE = "widget:invoke"

    # Widget -> host
    READY = "READY"
    STATE_PATCH = "STATE_PATCH"
    EMIT = "widget:emit"
    OUTPUT = "widget:output"
    BROADCAST = "widget:broadcast"


INBOUND = frozenset({
    MessageType.INIT,
    MessageType.WIDGET_EVENT,
    MessageType.PIPELINE_INPUT,
    MessageType.STATE_UPDATE,
    MessageType.SETTINGS_UPDATE,
    MessageType.RESIZE,
    MessageType.DESTROY,
    MessageType.INVOKE,
})

OUTBOUND = frozenset({
    MessageType.READY,
    MessageType.STATE_PATCH,
    MessageType.EMIT,
    MessageType.OUTPUT,
    MessageType.BROADCAST,
})


class Envelope(msgspec.Struct, frozen=True, omit_defaults=True):
    """``{type, payload?}``; a None payload is left off the wire."""

    type: str
    payload: Any = None

    def to_wire(self) -> dict[str, Any]:
        return msgspec.to_builtins(self)

    def encode(self) -> bytes:
        return msgspec.json.encode(self)


def envelope(message_type: MessageType, payload: Any = None) -> Envelope:
    return Envelope(type=message_type.value, payload=payload)


def parse_envelope(raw: Any) -> Envelope | None:
    """
    Read an envelope from a wire value (mapping, JSON text or bytes).

    Returns:
        The envelope, or None if the value is not a well-formed envelope
    """
    try:
        if isinstance(raw, (str, bytes, bytearray, memoryview)):
            return msgspec.json.decode(raw, type=Envelope)
        return msgspec.convert(raw, type=Envelope)
    except msgspec.DecodeError:
        # msgspec.ValidationError is a DecodeError
        return None


def payload_dict(payload: Any) -> dict[str, Any] | None:
    """The payload when it is a JSON object, else None."""
    return payload if isinstance(payload, dict) else None
