from __future__ import annotations

import pytest

from logtap.channel import DuplexChannel, decode_frame
from logtap.errors import ChannelError, DecodeError


def _channel(received: list) -> DuplexChannel:
    return DuplexChannel("ws://localhost:9222/devtools/page/X", on_message=received.append)


def test_decode_frame() -> None:
    assert decode_frame('{"id": 1, "result": {}}') == {"id": 1, "result": {}}
    assert decode_frame(b'{"method": "Log.entryAdded"}') == {"method": "Log.entryAdded"}
    with pytest.raises(DecodeError):
        decode_frame("{not json")


def test_malformed_frame_is_dropped() -> None:
    received: list = []
    channel = _channel(received)

    channel._on_message(None, "{broken")
    channel._on_message(None, '{"method": "Runtime.consoleAPICalled", "params": {}}')

    assert received == [{"method": "Runtime.consoleAPICalled", "params": {}}]


def test_handler_failure_does_not_escape() -> None:
    def explode(frame):
        raise KeyError("boom")

    channel = DuplexChannel("ws://x", on_message=explode)
    channel._on_message(None, "{}")


def test_error_before_open_rejects_open_future() -> None:
    errors: list[str] = []
    channel = DuplexChannel("ws://x", on_message=lambda frame: None, on_error=errors.append)

    channel._on_error(None, ConnectionRefusedError("refused"))

    with pytest.raises(ChannelError, match="refused"):
        channel._opened.result(timeout=0)
    assert errors == ["refused"]


def test_open_then_close() -> None:
    closed: list[bool] = []
    channel = DuplexChannel("ws://x", on_message=lambda frame: None, on_close=lambda: closed.append(True))

    channel._on_open(None)
    assert channel.is_open
    assert channel._opened.result(timeout=0) is True

    channel._on_close(None, 1000, "bye")
    assert not channel.is_open
    assert closed == [True]


def test_send_requires_open_channel() -> None:
    channel = DuplexChannel("ws://x", on_message=lambda frame: None)

    with pytest.raises(ChannelError, match="not open"):
        channel.send({"id": 1, "method": "Runtime.enable"})
