"""Tests for the protocol envelope and channels."""

import io

import pytest

from specforge.runtime import (
    INBOUND,
    OUTBOUND,
    MessageType,
    QueueChannel,
    StreamChannel,
    channel_pair,
    envelope,
    parse_envelope,
)


@pytest.mark.unit
class TestEnvelope:
    """Envelope construction and parsing."""

    def test_directions_disjoint(self):
        assert not INBOUND & OUTBOUND
        assert INBOUND | OUTBOUND == set(MessageType)

    def test_payload_omitted_when_none(self):
        assert envelope(MessageType.DESTROY).to_wire() == {"type": "DESTROY"}
        assert envelope(MessageType.DESTROY).encode() == b'{"type":"DESTROY"}'

    def test_to_wire(self):
        wire = envelope(MessageType.STATE_PATCH, {"count": 1}).to_wire()
        assert wire == {"type": "STATE_PATCH", "payload": {"count": 1}}

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "INIT", "payload": {"state": {}}},
            '{"type":"INIT","payload":{"state":{}}}',
            b'{"type":"INIT","payload":{"state":{}}}',
        ],
    )
    def test_parse(self, raw):
        message = parse_envelope(raw)
        assert message is not None
        assert message.type == "INIT"
        assert message.payload == {"state": {}}

    def test_parse_unknown_type(self):
        """Unknown types still parse; receivers decide to ignore them."""
        message = parse_envelope({"type": "totallyUnknown"})
        assert message is not None
        assert message.payload is None

    def test_parse_extra_keys(self):
        message = parse_envelope({"type": "READY", "payload": {}, "extra": 1})
        assert message is not None and message.type == "READY"

    @pytest.mark.parametrize(
        "raw",
        [None, 42, "not json", b"{", [], {"payload": {}}, {"type": 5}, '"INIT"'],
    )
    def test_parse_malformed(self, raw):
        assert parse_envelope(raw) is None


@pytest.mark.unit
class TestQueueChannel:
    """In-process channel pair."""

    def test_delivery_order(self):
        host_end, widget_end = channel_pair()
        host_end.send(envelope(MessageType.INIT, {"state": {}}))
        host_end.send(envelope(MessageType.DESTROY))

        assert widget_end.pending == 2
        assert widget_end.receive() == {"type": "INIT", "payload": {"state": {}}}
        assert widget_end.receive() == {"type": "DESTROY"}
        assert widget_end.receive() is None
        assert host_end.receive() is None

    def test_deep_copies(self):
        """Sender mutations after posting never reach the receiver."""
        host_end, widget_end = channel_pair()
        payload = {"items": [1]}
        host_end.post({"type": "STATE_UPDATE", "payload": payload})
        payload["items"].append(2)

        assert widget_end.receive()["payload"] == {"items": [1]}

    def test_unconnected_drops(self):
        lonely = QueueChannel()
        lonely.post({"type": "READY"})
        assert lonely.pending == 0

    def test_close_severs_both_ends(self):
        host_end, widget_end = channel_pair()
        widget_end.post({"type": "READY"})
        host_end.post({"type": "INIT"})
        host_end.close()

        assert host_end.closed and widget_end.closed
        assert host_end.receive() is None
        # already delivered messages stay readable on the other end
        assert widget_end.receive() == {"type": "INIT"}

        widget_end.post({"type": "STATE_PATCH", "payload": {}})
        host_end.post({"type": "INIT"})
        assert host_end.pending == 0
        assert widget_end.pending == 0


@pytest.mark.unit
class TestStreamChannel:
    """Newline-delimited JSON over byte streams."""

    def test_send(self):
        writer = io.BytesIO()
        channel = StreamChannel(io.BytesIO(), writer)
        channel.send(envelope(MessageType.READY, {"widgetId": "w"}))

        assert writer.getvalue() == b'{"type":"READY","payload":{"widgetId":"w"}}\n'

    def test_post_keeps_one_line(self):
        writer = io.BytesIO()
        channel = StreamChannel(io.BytesIO(), writer)
        channel.post("bad\nline")
        channel.post({"type": "RESIZE"})

        assert writer.getvalue().splitlines() == [b"bad line", b'{"type":"RESIZE"}']

    def test_receive(self):
        reader = io.BytesIO(b'{"type":"INIT"}\r\n{"type":"DESTROY"}\n')
        channel = StreamChannel(reader, io.BytesIO())

        assert parse_envelope(channel.receive()).type == "INIT"
        assert parse_envelope(channel.receive()).type == "DESTROY"
        assert channel.receive() is None

    def test_close(self):
        writer = io.BytesIO()
        channel = StreamChannel(io.BytesIO(b'{"type":"INIT"}\n'), writer)
        channel.close()

        assert channel.closed
        assert writer.closed
        assert channel.receive() is None
        channel.send(envelope(MessageType.READY))

    def test_write_to_closed_stream(self):
        """A stream closed underneath the channel closes the channel."""
        writer = io.BytesIO()
        channel = StreamChannel(io.BytesIO(), writer)
        writer.close()
        channel.send(envelope(MessageType.READY))

        assert channel.closed
