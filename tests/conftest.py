from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable

import httpx
import pytest

from logtap.config import LogtapConfig
from logtap.errors import ChannelError
from logtap.session import BrowserSession

CHROME_TABS = [
    {
        "id": "A1B2C3",
        "title": "Example",
        "url": "https://example.com/",
        "webSocketDebuggerUrl": "ws://localhost:9222/devtools/page/A1B2C3",
    },
    {
        "id": "D4E5F6",
        "title": "Docs",
        "url": "https://example.com/docs",
        "webSocketDebuggerUrl": "ws://localhost:9222/devtools/page/D4E5F6",
    },
]

FIREFOX_TABS = [
    {"actor": "/server1.conn0.tabDescriptor1", "title": "Mozilla", "url": "https://mozilla.org/"},
]


def ack_enables(payload: dict) -> dict | None:
    """Default responder: acknowledge domain enables, leave everything else pending."""
    if payload.get("method", "").endswith(".enable"):
        return {"result": {}}
    return None


class FakeChannel:
    """Stands in for DuplexChannel; replies are injected by the test."""

    def __init__(
        self,
        url: str,
        on_message: Callable[[Any], None],
        on_error: Callable[[str], None] | None = None,
        on_close: Callable[[], None] | None = None,
        *,
        responder: Callable[[dict], dict | None] | None = ack_enables,
        open_error: str | None = None,
    ) -> None:
        self.url = url
        self.on_message = on_message
        self.on_error = on_error
        self.on_close = on_close
        self.responder = responder
        self.open_error = open_error
        self.sent: list[dict] = []
        self.is_open = False
        self.closed = False

    def open(self) -> Future:
        future: Future = Future()
        if self.open_error:
            future.set_exception(ChannelError(self.open_error))
        else:
            self.is_open = True
            future.set_result(True)
        return future

    def send(self, payload: dict) -> None:
        self.sent.append(payload)
        if self.responder and "id" in payload:
            reply = self.responder(payload)
            if reply is not None:
                self.on_message({"id": payload["id"], **reply})

    def close(self) -> None:
        self.closed = True
        self.is_open = False

    def emit(self, frame: Any) -> None:
        self.on_message(frame)

    def reply(self, msg_id: int, result: Any = None, error: str | None = None) -> None:
        if error is not None:
            self.on_message({"id": msg_id, "error": {"code": -32000, "message": error}})
        else:
            self.on_message({"id": msg_id, "result": result if result is not None else {}})

    def commands(self) -> list[dict]:
        return [p for p in self.sent if "id" in p]


def make_http_client(tabs_by_path: dict[str, Any] | None = None, status: int = 200) -> httpx.Client:
    tabs_by_path = {"/json": CHROME_TABS, "/json/list": FIREFOX_TABS} if tabs_by_path is None else tabs_by_path

    def handler(request: httpx.Request) -> httpx.Response:
        if status != 200:
            return httpx.Response(status, text="nope")
        return httpx.Response(200, json=tabs_by_path.get(request.url.path, []))

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def channels() -> list[FakeChannel]:
    return []


@pytest.fixture
def make_session(channels: list[FakeChannel]):
    def factory(
        tabs_by_path: dict[str, Any] | None = None,
        config: LogtapConfig | None = None,
        status: int = 200,
        **channel_kwargs: Any,
    ) -> BrowserSession:
        def channel_factory(url: str, **callbacks: Any) -> FakeChannel:
            channel = FakeChannel(url, **callbacks, **channel_kwargs)
            channels.append(channel)
            return channel

        return BrowserSession(
            config or LogtapConfig(),
            channel_factory=channel_factory,
            http_client=make_http_client(tabs_by_path, status),
        )

    return factory


@pytest.fixture
def session(make_session) -> BrowserSession:
    return make_session()
