"""Message channels between a host and a widget instance.

A channel carries wire values (envelopes as mappings or JSON lines) in one
direction per end. Sends on a closed or unconnected channel are dropped;
delivery is at-most-once and ordered per sender.
"""

import copy
from collections import deque
from typing import Any, BinaryIO, Protocol

from ..core.json import safe_json_dumps
from ..core.logging_config import get_logger
from .protocol import Envelope

logger = get_logger(__name__)


class Channel(Protocol):
    """One end of a bidirectional message link."""

    @property
    def closed(self) -> bool:
        ...

    def send(self, envelope: Envelope) -> None:
        """Deliver an envelope to the other end."""
        ...

    def post(self, raw: Any) -> None:
        """Deliver a raw wire value, well-formed or not."""
        ...

    def receive(self) -> Any | None:
        """Next inbound wire value, or None when nothing is waiting."""
        ...

    def close(self) -> None:
        """Sever the link."""
        ...


class QueueChannel:
    """
    In-process channel end backed by a queue.

    Values are deep-copied on delivery so the two parties share no memory.
    Closing severs both directions: the closing end drops its pending inbox,
    the other end keeps what was already delivered but can no longer send.
    """

    def __init__(self) -> None:
        self._inbox: deque[Any] = deque()
        self._peer: "QueueChannel | None" = None
        self._closed = False

    def connect(self, peer: "QueueChannel") -> None:
        self._peer = peer
        peer._peer = self

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return len(self._inbox)

    def send(self, envelope: Envelope) -> None:
        self.post(envelope.to_wire())

    def post(self, raw: Any) -> None:
        if self._closed or self._peer is None:
            logger.debug("channel_send_dropped", closed=self._closed)
            return
        self._peer._inbox.append(copy.deepcopy(raw))

    def receive(self) -> Any | None:
        return self._inbox.popleft() if self._inbox else None

    def close(self) -> None:
        self._closed = True
        self._inbox.clear()
        if self._peer is not None:
            self._peer._closed = True


def channel_pair() -> tuple[QueueChannel, QueueChannel]:
    """Two connected ends: (host end, widget end)."""
    host_end, widget_end = QueueChannel(), QueueChannel()
    host_end.connect(widget_end)
    return host_end, widget_end


class StreamChannel:
    """
    Channel end over binary streams, one JSON document per line.

    Suitable for OS pipes, subprocess stdio and socket files. ``receive``
    blocks on the reader until a line or end-of-stream arrives.
    """

    def __init__(self, reader: BinaryIO, writer: BinaryIO) -> None:
        self.reader = reader
        self.writer = writer
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, envelope: Envelope) -> None:
        self._write(envelope.encode())

    def post(self, raw: Any) -> None:
        if isinstance(raw, (bytes, bytearray)):
            data = bytes(raw)
        elif isinstance(raw, str):
            data = raw.encode("utf-8")
        else:
            data = safe_json_dumps(raw).encode("utf-8")
        self._write(data.replace(b"\n", b" "))

    def _write(self, data: bytes) -> None:
        if self._closed:
            logger.debug("channel_send_dropped", closed=True)
            return
        try:
            self.writer.write(data + b"\n")
            self.writer.flush()
        except (BrokenPipeError, ValueError) as e:
            # Peer went away or stream already closed
            logger.debug("channel_write_failed", error=str(e))
            self._closed = True

    def receive(self) -> bytes | None:
        if self._closed:
            return None
        line = self.reader.readline()
        if not line:
            return None
        return line.rstrip(b"\r\n")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.writer.close()
