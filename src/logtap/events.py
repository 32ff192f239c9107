"""Classification and dispatch of inbound protocol events.

Every decoded frame is classified into exactly one variant of the Event union.
Frames that are command replies, or that match no known shape, become
Unrecognized and are dropped by the demultiplexer.

PUBLIC API:
  - Event: Union of all event variants
  - classify: Turn a decoded frame into an Event
  - EventDemultiplexer: Build records from events into a RecordStore
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any

from .dialects import Dialect
from .records import ConsoleRecord, NetworkRecord, Severity, now_ms
from .store import RecordStore

logger = logging.getLogger(__name__)

UNCAUGHT_EXCEPTION_TEXT = "uncaught exception"


@dataclass(frozen=True)
class ConsoleApiCalled:
    """Runtime.consoleAPICalled"""

    level: str
    args: list[dict]


@dataclass(frozen=True)
class LogEntryAdded:
    """Log.entryAdded"""

    level: str
    text: str
    url: str | None = None
    line_number: int | None = None


@dataclass(frozen=True)
class ExceptionThrown:
    """Runtime.exceptionThrown"""

    description: str | None
    url: str | None = None
    line_number: int | None = None
    column_number: int | None = None
    stack_trace: str | None = None


@dataclass(frozen=True)
class RequestWillBeSent:
    """Network.requestWillBeSent"""

    request_id: str
    method: str
    url: str
    timestamp: float | None = None
    wall_time: float | None = None
    resource_type: str | None = None
    headers: dict[str, str] | None = None
    post_data: str | None = None


@dataclass(frozen=True)
class ResponseReceived:
    """Network.responseReceived"""

    request_id: str
    status: int | None
    mime_type: str | None
    headers: dict[str, str] | None
    timestamp: float | None


@dataclass(frozen=True)
class LoadingFailed:
    """Network.loadingFailed"""

    request_id: str
    error_text: str


@dataclass(frozen=True)
class FirefoxConsoleCall:
    """consoleAPICall packet"""

    level: str
    arguments: list[Any]


@dataclass(frozen=True)
class FirefoxPageError:
    """pageError packet"""

    message: str | None
    url: str | None = None
    line_number: int | None = None
    column_number: int | None = None


@dataclass(frozen=True)
class Unrecognized:
    """Anything else: command replies, events we do not record."""

    frame: Any


type Event = (
    ConsoleApiCalled
    | LogEntryAdded
    | ExceptionThrown
    | RequestWillBeSent
    | ResponseReceived
    | LoadingFailed
    | FirefoxConsoleCall
    | FirefoxPageError
    | Unrecognized
)


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _stack_text(stack: Any) -> str | None:
    """Render a CDP StackTrace (or a plain string) as text."""
    if stack is None or isinstance(stack, str):
        return stack
    frames = _dict(stack).get("callFrames") or []
    lines = [
        f"at {f.get('functionName') or '<anonymous>'} "
        f"({f.get('url', '')}:{f.get('lineNumber', 0)}:{f.get('columnNumber', 0)})"
        for f in frames
        if isinstance(f, dict)
    ]
    return "\n".join(lines) if lines else None


def _classify_chrome(method: str, params: dict) -> Event | None:
    if method == "Runtime.consoleAPICalled":
        args = params.get("args") or []
        return ConsoleApiCalled(level=params.get("type", "log"), args=[a for a in args if isinstance(a, dict)])

    if method == "Log.entryAdded":
        entry = _dict(params.get("entry"))
        return LogEntryAdded(
            level=entry.get("level", "log"),
            text=entry.get("text", ""),
            url=entry.get("url"),
            line_number=entry.get("lineNumber"),
        )

    if method == "Runtime.exceptionThrown":
        details = _dict(params.get("exceptionDetails"))
        exception = _dict(details.get("exception"))
        return ExceptionThrown(
            description=exception.get("description") or details.get("text"),
            url=details.get("url"),
            line_number=details.get("lineNumber"),
            column_number=details.get("columnNumber"),
            stack_trace=_stack_text(details.get("stackTrace")),
        )

    if method == "Network.requestWillBeSent":
        request = _dict(params.get("request"))
        if "requestId" not in params:
            return None
        return RequestWillBeSent(
            request_id=params["requestId"],
            method=request.get("method", "GET"),
            url=request.get("url", ""),
            timestamp=params.get("timestamp"),
            wall_time=params.get("wallTime"),
            resource_type=params.get("type"),
            headers=request.get("headers"),
            post_data=request.get("postData"),
        )

    if method == "Network.responseReceived":
        response = _dict(params.get("response"))
        if "requestId" not in params:
            return None
        return ResponseReceived(
            request_id=params["requestId"],
            status=response.get("status"),
            mime_type=response.get("mimeType"),
            headers=response.get("headers"),
            timestamp=params.get("timestamp"),
        )

    if method == "Network.loadingFailed":
        if "requestId" not in params:
            return None
        return LoadingFailed(request_id=params["requestId"], error_text=params.get("errorText", "failed"))

    return None


def _classify_firefox(packet_type: str, frame: dict) -> Event | None:
    if packet_type == "consoleAPICall":
        message = _dict(frame.get("message"))
        return FirefoxConsoleCall(level=message.get("level", "log"), arguments=list(message.get("arguments") or []))

    if packet_type == "pageError":
        error = _dict(frame.get("pageError"))
        return FirefoxPageError(
            message=error.get("errorMessage"),
            url=error.get("sourceName"),
            line_number=error.get("lineNumber"),
            column_number=error.get("columnNumber"),
        )

    return None


def classify(frame: Any, dialect: Dialect | None) -> Event:
    """Classify a decoded frame for the active dialect.

    Frames carrying a correlation id are replies, never events.
    """
    if not isinstance(frame, dict) or "id" in frame or dialect is None:
        return Unrecognized(frame)

    event = None
    if dialect is Dialect.CHROME and isinstance(frame.get("method"), str):
        event = _classify_chrome(frame["method"], _dict(frame.get("params")))
    elif dialect is Dialect.FIREFOX and isinstance(frame.get("type"), str):
        event = _classify_firefox(frame["type"], frame)

    return event if event is not None else Unrecognized(frame)


def render_arg(arg: Any, remote_object: bool = True) -> str:
    """Render one console argument as text.

    CDP RemoteObjects with a primitive value render as that value; anything
    else is rendered as JSON. Firefox arguments arrive as plain values.
    """
    if remote_object and isinstance(arg, dict):
        if arg.get("type") in ("string", "number", "boolean") and "value" in arg:
            arg = arg["value"]
        else:
            return json.dumps(arg, default=str)

    if isinstance(arg, str):
        return arg
    return json.dumps(arg, default=str)


class EventDemultiplexer:
    """Turns classified events into console and network records.

    Attributes:
        store: Record store receiving the records.
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self._last_timestamp = 0

    def _stamp(self) -> int:
        # Keep capture timestamps non-decreasing even if the wall clock steps back
        self._last_timestamp = max(self._last_timestamp, now_ms())
        return self._last_timestamp

    def handle_frame(self, frame: Any, dialect: Dialect | None) -> bool:
        """Classify and dispatch a frame. Returns True if it produced or updated a record."""
        return self.dispatch(classify(frame, dialect))

    def dispatch(self, event: Event) -> bool:
        if isinstance(event, ConsoleApiCalled):
            self.store.add_console(
                ConsoleRecord(
                    severity=Severity.normalize(event.level),
                    source="console-api",
                    text=" ".join(render_arg(a) for a in event.args),
                    timestamp=self._stamp(),
                    args=list(event.args),
                )
            )
        elif isinstance(event, LogEntryAdded):
            self.store.add_console(
                ConsoleRecord(
                    severity=Severity.normalize(event.level),
                    source="browser-log",
                    text=event.text,
                    timestamp=self._stamp(),
                    url=event.url,
                    line_number=event.line_number,
                )
            )
        elif isinstance(event, ExceptionThrown):
            self.store.add_console(
                ConsoleRecord(
                    severity=Severity.ERROR,
                    source="javascript-exception",
                    text=event.description or UNCAUGHT_EXCEPTION_TEXT,
                    timestamp=self._stamp(),
                    url=event.url,
                    line_number=event.line_number,
                    column_number=event.column_number,
                    stack_trace=event.stack_trace,
                )
            )
        elif isinstance(event, FirefoxConsoleCall):
            self.store.add_console(
                ConsoleRecord(
                    severity=Severity.normalize(event.level),
                    source="firefox-console",
                    text=" ".join(render_arg(a, remote_object=False) for a in event.arguments),
                    timestamp=self._stamp(),
                    args=list(event.arguments),
                )
            )
        elif isinstance(event, FirefoxPageError):
            self.store.add_console(
                ConsoleRecord(
                    severity=Severity.ERROR,
                    source="firefox-error",
                    text=event.message or UNCAUGHT_EXCEPTION_TEXT,
                    timestamp=self._stamp(),
                    url=event.url,
                    line_number=event.line_number,
                    column_number=event.column_number,
                )
            )
        elif isinstance(event, RequestWillBeSent):
            captured = time.time()
            self.store.add_network(
                NetworkRecord(
                    request_id=event.request_id,
                    method=event.method,
                    url=event.url,
                    timestamp=event.timestamp if event.timestamp is not None else captured,
                    wall_time=event.wall_time if event.wall_time is not None else captured,
                    resource_type=event.resource_type,
                    request_headers=event.headers,
                    post_data=event.post_data,
                )
            )
        elif isinstance(event, ResponseReceived):
            updated = self.store.update_request(
                event.request_id,
                lambda r: r.apply_response(event.status, event.mime_type, event.headers, event.timestamp),
            )
            if not updated:
                logger.debug(f"Response for unknown request {event.request_id}, dropped")
                return False
        elif isinstance(event, LoadingFailed):
            if not self.store.update_request(event.request_id, lambda r: setattr(r, "error_text", event.error_text)):
                return False
        else:
            return False

        return True


__all__ = [
    "Event",
    "ConsoleApiCalled",
    "LogEntryAdded",
    "ExceptionThrown",
    "RequestWillBeSent",
    "ResponseReceived",
    "LoadingFailed",
    "FirefoxConsoleCall",
    "FirefoxPageError",
    "Unrecognized",
    "classify",
    "render_arg",
    "EventDemultiplexer",
]
