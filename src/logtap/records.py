"""Telemetry records captured from the browser.

PUBLIC API:
  - Severity: Console severity enum
  - ConsoleRecord: One console, log or exception event
  - NetworkRecord: One HTTP exchange (request, then response)
  - NetworkTiming: Request/response timing pair
  - now_ms: Wall-clock capture timestamp in milliseconds
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Console message severity."""

    LOG = "log"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"

    @classmethod
    def normalize(cls, level: str | None) -> "Severity":
        """Map a protocol level onto the five known severities.

        Unknown levels (dir, table, trace, ...) are recorded as log.
        """
        level = (level or "").lower()
        try:
            return cls(level)
        except ValueError:
            return _LEVEL_ALIASES.get(level, cls.LOG)


_LEVEL_ALIASES = {
    "warn": Severity.WARNING,
    "verbose": Severity.DEBUG,
    "assert": Severity.ERROR,
    "exception": Severity.ERROR,
}


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ConsoleRecord:
    """One observed console message.

    Attributes:
        severity: Normalized severity.
        source: Origin tag of the protocol event (console-api, browser-log, ...).
        text: Rendered message text.
        timestamp: Capture time in milliseconds since the epoch.
        url: Source url, when known.
        line_number: Source line, when known.
        column_number: Source column, when known.
        stack_trace: Stack trace text, when known.
        args: Raw console arguments as sent by the browser.
    """

    severity: Severity
    source: str
    text: str
    timestamp: int = field(default_factory=now_ms)
    url: str | None = None
    line_number: int | None = None
    column_number: int | None = None
    stack_trace: str | None = None
    args: list[Any] | None = None


@dataclass(frozen=True)
class NetworkTiming:
    request_time: float
    response_time: float

    @property
    def duration(self) -> float:
        return self.response_time - self.request_time


@dataclass
class NetworkRecord:
    """One observed HTTP exchange.

    Created when the request is sent; the response fields stay None until a
    response with the same request_id arrives, and forever if none does.
    """

    request_id: str
    method: str
    url: str
    timestamp: float
    wall_time: float | None = None
    resource_type: str | None = None
    request_headers: dict[str, str] | None = None
    post_data: str | None = None
    status: int | None = None
    mime_type: str | None = None
    response_headers: dict[str, str] | None = None
    timing: NetworkTiming | None = None
    error_text: str | None = None

    def apply_response(
        self, status: int | None, mime_type: str | None, headers: dict[str, str] | None, timestamp: float | None
    ) -> None:
        """Fill in the response phase in place."""
        self.status = status
        self.mime_type = mime_type
        self.response_headers = headers
        response_time = timestamp if timestamp is not None else self.timestamp
        request_time = self.timing.request_time if self.timing else self.timestamp
        self.timing = NetworkTiming(request_time=request_time, response_time=response_time)


__all__ = ["Severity", "ConsoleRecord", "NetworkRecord", "NetworkTiming", "now_ms"]
