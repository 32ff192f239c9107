"""Browser debugging session: lifecycle, commands and telemetry.

One BrowserSession owns at most one DuplexChannel. Frames arrive on the
channel's reader thread; replies settle pending commands, everything else goes
through the EventDemultiplexer into the RecordStore.

PUBLIC API:
  - BrowserSession: Connect, send commands, query captured records
  - SessionState: Lifecycle state enum
"""

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, TimeoutError, wait
from enum import Enum
from typing import Any, Callable

import httpx

from .channel import DuplexChannel
from .config import LogtapConfig
from .correlator import Correlator
from .dialects import Dialect
from .errors import ChannelError, CommandError, CommandTimeout, NotConnected
from .events import EventDemultiplexer
from .records import ConsoleRecord, NetworkRecord, Severity
from .store import RecordStore
from .targets import Target, list_targets, select_target

logger = logging.getLogger(__name__)

_DEFAULT = object()


class SessionState(str, Enum):
    """Session lifecycle state."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class BrowserSession:
    """Single-target debugging session.

    Attributes:
        config: Connection and buffering settings.
        store: Captured console and network records.
        state: Current lifecycle state.
        dialect: Dialect of the live connection, None when disconnected.
        target: Connected tab, None when disconnected.
        channel: Live channel, None when disconnected.
        connected: True once the channel is open.
    """

    def __init__(
        self,
        config: LogtapConfig | None = None,
        channel_factory: Callable[..., DuplexChannel] = DuplexChannel,
        http_client: httpx.Client | None = None,
    ):
        """Initialize session.

        Args:
            config: Settings. Defaults to LogtapConfig().
            channel_factory: Builds the channel, called as
                factory(url, on_message=, on_error=, on_close=).
            http_client: Optional httpx client used for target discovery.
        """
        self.config = config or LogtapConfig()
        self.store = RecordStore(self.config.capacity)
        self.demux = EventDemultiplexer(self.store)

        self._channel_factory = channel_factory
        self._http_client = http_client
        self._correlator = Correlator()
        self._lock = threading.Lock()

        self.channel: DuplexChannel | None = None
        self.connected = False
        self.state = SessionState.DISCONNECTED
        self.dialect: Dialect | None = None
        self.target: Target | None = None

        # Bumped on every connect/disconnect so late callbacks from an old channel are ignored
        self._generation = 0
        self._handshake: Future | None = None

    @property
    def is_connected(self) -> bool:
        return self.state is SessionState.CONNECTED and self.channel is not None

    @property
    def pending_count(self) -> int:
        return len(self._correlator)

    def list_targets(self, dialect: Dialect | str, host: str | None = None, port: int | None = None) -> list[Target]:
        """List inspectable tabs.

        Raises:
            EndpointUnreachable: If the debug port does not answer.
        """
        dialect = Dialect.parse(dialect)
        return list_targets(
            dialect,
            host or self.config.host,
            port or self.config.port_for(dialect),
            timeout=self.config.discovery_timeout,
            client=self._http_client,
        )

    def connect(
        self,
        dialect: Dialect | str = Dialect.CHROME,
        host: str | None = None,
        port: int | None = None,
        target_index: int | None = None,
    ) -> str:
        """Connect to a tab and enable event delivery.

        Returns once the channel is open and the dialect's initialization
        commands are acknowledged (Chrome) or sent (Firefox).

        Args:
            dialect: "chrome" or "firefox".
            host: Debugging host. Defaults to config.host.
            port: Debugging port. Defaults to the dialect's configured port.
            target_index: Tab index from list_targets(). Defaults to 0.

        Returns:
            Status text.

        Raises:
            EndpointUnreachable, NoTargetsAvailable, TargetIndexOutOfRange,
            ChannelError, CommandError, CommandTimeout: Connection failed;
            the session is left disconnected.
        """
        dialect = Dialect.parse(dialect)
        host = host or self.config.host
        port = port or self.config.port_for(dialect)

        with self._lock:
            if self.state is SessionState.CONNECTED and self.channel:
                return f"Already connected to {self.dialect.value if self.dialect else dialect.value}"
            if self.state is SessionState.CONNECTING:
                return f"Connection to {dialect.value} already in progress"

            self.state = SessionState.CONNECTING
            self.dialect = dialect
            self._generation += 1
            generation = self._generation
            handshake: Future = Future()
            self._handshake = handshake

        channel = None
        try:
            target = select_target(self.list_targets(dialect, host, port), target_index)
            address = target.channel_address()
            with self._lock:
                self._ensure_current(generation)
                self.target = target

            channel = self._channel_factory(
                address,
                on_message=lambda frame: self._handle_frame(frame, generation),
                on_error=lambda message: self._handle_error(message, generation),
                on_close=lambda: self._handle_close(generation),
            )
            with self._lock:
                self._ensure_current(generation)
                self.channel = channel

            self._await(channel.open(), self.config.connect_timeout, "WebSocket open", handshake)
            with self._lock:
                self._ensure_current(generation)
                self.connected = True

            self._initialize(dialect, handshake)

            with self._lock:
                self._ensure_current(generation)
                self.state = SessionState.CONNECTED
                handshake.set_result(True)
        except Exception:
            self._rollback(generation, channel)
            raise

        logger.info(f"Connected to {dialect.value} tab {target.id}")
        return f"Connected to {dialect.value} ({target.title} - {target.url})"

    def _ensure_current(self, generation: int) -> None:
        """Fail a connect superseded by disconnect(). Caller holds the lock."""
        if self._generation != generation:
            raise ChannelError("Disconnected while connecting")

    def _initialize(self, dialect: Dialect, handshake: Future) -> None:
        if dialect.is_request_response:
            for method in dialect.init_commands:
                msg_id, future = self._send(method)
                try:
                    self._await(future, self.config.command_timeout, method, handshake)
                except TimeoutError:
                    self._correlator.discard(msg_id)
                    raise CommandTimeout(method, self.config.command_timeout or 0) from None
        else:
            for packet_type in dialect.init_commands:
                self.send_packet(packet_type, {})

    def _await(self, future: Future, timeout: float | None, what: str, handshake: Future) -> Any:
        """Wait for future, failing early if the handshake is aborted by a channel error or disconnect."""
        done, _ = wait([future, handshake], timeout=timeout, return_when=FIRST_COMPLETED)

        if future in done:
            return future.result()
        if handshake in done and handshake.exception():
            raise handshake.exception()
        if what == "WebSocket open":
            raise ChannelError(f"Timed out waiting for {what}")
        raise TimeoutError(what)

    def _rollback(self, generation: int, channel: DuplexChannel | None) -> None:
        """Undo a failed connect and close the channel it created."""
        with self._lock:
            if self._generation == generation:
                channel = channel or self.channel
                self._reset()
            elif channel is not None and self.channel is channel:
                self.channel = None
                self.connected = False

        if channel:
            channel.close()

    def _reset(self) -> None:
        """Clear connection state. Caller holds the lock."""
        self._generation += 1
        self.channel = None
        self.connected = False
        self.state = SessionState.DISCONNECTED
        self.dialect = None
        self.target = None
        if self._handshake and not self._handshake.done():
            self._handshake.set_exception(ChannelError("Disconnected while connecting"))
        self._handshake = None
        dropped = self._correlator.abandon()
        if dropped:
            logger.warning(f"Abandoned {dropped} pending command(s)")

    def disconnect(self) -> str:
        """Close the channel. Pending commands are left unresolved.

        Returns:
            Status text.
        """
        with self._lock:
            channel = self.channel
            was_live = self.state is not SessionState.DISCONNECTED
            self._reset()

        if channel:
            channel.close()

        return "Disconnected from browser" if was_live else "Not connected"

    def _send(self, method: str, params: dict | None = None) -> tuple[int, Future]:
        channel = self.channel
        if channel is None or not self.connected:
            raise NotConnected()
        if self.dialect and not self.dialect.is_request_response:
            raise CommandError(
                method, f"request/response commands are not supported by the {self.dialect.value} dialect"
            )

        # Register before writing so a fast reply cannot be missed
        msg_id, future = self._correlator.register(method)

        message: dict[str, Any] = {"id": msg_id, "method": method}
        if params:
            message["params"] = params

        try:
            channel.send(message)
        except ChannelError:
            self._correlator.discard(msg_id)
            raise

        return msg_id, future

    def send(self, method: str, params: dict | None = None) -> Future:
        """Send CDP command asynchronously.

        Returns:
            Future resolved with the reply's 'result', or failed with CommandError.

        Raises:
            NotConnected: If no channel is live. Nothing is sent.
        """
        return self._send(method, params)[1]

    def execute(self, method: str, params: dict | None = None, timeout: Any = _DEFAULT) -> Any:
        """Send CDP command synchronously.

        Args:
            method: CDP method (e.g. "Runtime.evaluate").
            params: Optional parameters.
            timeout: Seconds to wait; None waits forever. Defaults to config.command_timeout.

        Raises:
            NotConnected: If no channel is live.
            CommandError: If the browser returned an error.
            CommandTimeout: If no reply arrived in time.
        """
        if timeout is _DEFAULT:
            timeout = self.config.command_timeout

        msg_id, future = self._send(method, params)
        try:
            return future.result(timeout=timeout)
        except TimeoutError:
            self._correlator.discard(msg_id)
            raise CommandTimeout(method, timeout) from None

    def send_packet(self, packet_type: str, message: dict | None = None) -> None:
        """Send a fire-and-forget Firefox packet addressed to the tab actor.

        Raises:
            NotConnected: If no channel is live.
        """
        channel = self.channel
        if channel is None or not self.connected:
            raise NotConnected()

        channel.send({"to": self.target.id if self.target else None, "type": packet_type, "message": message or {}})

    def evaluate(self, code: str, context: str = "") -> dict:
        """Evaluate JavaScript in the page.

        Args:
            code: Expression to evaluate.
            context: "console" enables the DevTools command line API, otherwise
                the value is returned by value.

        Returns:
            Raw Runtime.evaluate result; a thrown error shows up as 'exceptionDetails'.
        """
        if context == "console":
            params = {"expression": code, "objectGroup": "console", "includeCommandLineAPI": True}
        else:
            params = {"expression": code, "returnByValue": True}
        return self.execute("Runtime.evaluate", params)

    def browser_info(self) -> dict:
        """User agent of the connected browser, as a raw Runtime.evaluate result."""
        return self.execute("Runtime.evaluate", {"expression": "navigator.userAgent", "returnByValue": True})

    def query_console(
        self, severity: Severity | str | None = None, limit: int | None = 50, clear: bool = False
    ) -> list[ConsoleRecord]:
        return self.store.query_console(severity, limit, clear)

    def query_network(
        self, method: str | None = None, limit: int | None = 50, clear: bool = False
    ) -> list[NetworkRecord]:
        return self.store.query_network(method, limit, clear)

    def clear_all(self) -> None:
        self.store.clear_all()

    def status(self) -> dict:
        """Snapshot of connection state and record counts."""
        with self._lock:
            target = self.target
            return {
                "state": self.state.value,
                "connected": self.state is SessionState.CONNECTED,
                "dialect": self.dialect.value if self.dialect else None,
                "title": target.title if target else None,
                "url": target.url if target else None,
                "pending": len(self._correlator),
                **self.store.counts,
            }

    def _handle_frame(self, frame: Any, generation: int) -> None:
        if generation != self._generation:
            return
        if isinstance(frame, dict) and "id" in frame:
            self._correlator.resolve(frame)
            return
        self.demux.handle_frame(frame, self.dialect)

    def _handle_error(self, message: str, generation: int) -> None:
        self._drop_channel(generation, ChannelError(f"WebSocket connection error: {message}"))

    def _handle_close(self, generation: int) -> None:
        self._drop_channel(generation, ChannelError("WebSocket closed while connecting"))

    def _drop_channel(self, generation: int, error: ChannelError) -> None:
        """Tear down after a channel error or close.

        A connect in progress is failed through the handshake and rolls itself
        back; a live session is reset and its channel released.
        """
        with self._lock:
            if generation != self._generation:
                return
            handshake = self._handshake
            connecting = self.state is SessionState.CONNECTING
            channel = None
            self.connected = False
            if not connecting:
                channel = self.channel
                self._reset()

        if connecting:
            if handshake and not handshake.done():
                handshake.set_exception(error)
            return

        logger.info("Browser connection closed")
        if channel:
            channel.close()


__all__ = ["BrowserSession", "SessionState"]
