"""Duplex WebSocket channel to one debug target.

WebSocketApp handles the socket on a daemon thread; we decode frames and
hand them to the session callbacks.

PUBLIC API:
  - DuplexChannel: One JSON-per-message WebSocket connection
"""

import json
import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable

import websocket

from .errors import ChannelError, DecodeError

logger = logging.getLogger(__name__)


def decode_frame(message: str | bytes) -> Any:
    """Decode one inbound frame as a JSON document.

    Raises:
        DecodeError: If the frame is not valid JSON.
    """
    try:
        return json.loads(message)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Malformed frame: {e}") from e


class DuplexChannel:
    """Bidirectional message channel backed by websocket-client.

    Attributes:
        url: WebSocket address of the target.
    """

    def __init__(
        self,
        url: str,
        on_message: Callable[[Any], None],
        on_error: Callable[[str], None] | None = None,
        on_close: Callable[[], None] | None = None,
    ):
        """Initialize channel. Nothing is opened until open() is called.

        Args:
            url: WebSocket address.
            on_message: Called with each decoded frame on the reader thread.
            on_error: Called with the transport error message.
            on_close: Called once when the socket closes.
        """
        self.url = url
        self._on_message_cb = on_message
        self._on_error_cb = on_error
        self._on_close_cb = on_close

        self._ws_app: websocket.WebSocketApp | None = None
        self._ws_thread: threading.Thread | None = None
        self._opened: Future = Future()
        self._is_open = threading.Event()

    @property
    def is_open(self) -> bool:
        return self._is_open.is_set()

    def open(self) -> Future:
        """Start connecting.

        Returns:
            Future resolved once the socket is open, or failed with ChannelError
            if the transport errors first.
        """
        if self._ws_app:
            return self._opened

        self._ws_app = websocket.WebSocketApp(
            self.url,
            on_open=self._on_open,
            on_message=self._on_message,
            on_error=self._on_error,
            on_close=self._on_close,
        )

        self._ws_thread = threading.Thread(
            target=self._ws_app.run_forever,
            kwargs={
                "skip_utf8_validation": True,
                "suppress_origin": True,
            },
            name="logtap-channel",
        )
        self._ws_thread.daemon = True
        self._ws_thread.start()

        return self._opened

    def send(self, payload: dict) -> None:
        """Write one JSON document.

        Raises:
            ChannelError: If the channel is not open or the write fails.
        """
        ws_app = self._ws_app
        if not ws_app or not self.is_open:
            raise ChannelError("Channel is not open")

        try:
            ws_app.send(json.dumps(payload))
        except websocket.WebSocketException as e:
            raise ChannelError(f"Send failed: {e}") from e

    def close(self) -> None:
        """Close the socket and wait briefly for the reader thread."""
        ws_app = self._ws_app
        self._ws_app = None

        if ws_app:
            ws_app.close()

        if self._ws_thread and self._ws_thread.is_alive() and self._ws_thread is not threading.current_thread():
            self._ws_thread.join(timeout=2)
        self._ws_thread = None
        self._is_open.clear()

    def _on_open(self, ws):
        logger.info(f"WebSocket connected: {self.url}")
        self._is_open.set()
        if not self._opened.done():
            self._opened.set_result(True)

    def _on_message(self, ws, message):
        try:
            frame = decode_frame(message)
        except DecodeError as e:
            logger.warning(f"Discarding frame: {e}")
            return

        try:
            self._on_message_cb(frame)
        except Exception as e:
            logger.error(f"Error handling message: {e}")

    def _on_error(self, ws, error):
        logger.error(f"WebSocket error: {error}")
        if not self._opened.done():
            self._opened.set_exception(ChannelError(f"WebSocket connection error: {error}"))
        if self._on_error_cb:
            self._on_error_cb(str(error))

    def _on_close(self, ws, code, reason):
        logger.info(f"WebSocket closed: {code} {reason}")
        self._is_open.clear()
        if not self._opened.done():
            self._opened.set_exception(ChannelError(f"WebSocket closed before opening: {reason or code}"))
        if self._on_close_cb:
            self._on_close_cb()


__all__ = ["DuplexChannel", "decode_frame"]
