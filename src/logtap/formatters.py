"""Text rendering of captured records.

PUBLIC API:
  - format_time: Render a millisecond timestamp as HH:MM:SS
  - format_location: url:line:column of a console record
  - format_status: Status column of a network record
  - format_duration: Response time of a network record
  - format_console_record: One console record as text
  - format_network_record: One network record as a single line
"""

from datetime import datetime

from .records import ConsoleRecord, NetworkRecord


def format_time(timestamp_ms: float | None) -> str:
    if not timestamp_ms:
        return "--:--:--"
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return "--:--:--"


def format_location(record: ConsoleRecord) -> str | None:
    """url[:line[:column]], or None without a url."""
    if not record.url:
        return None
    location = record.url
    if record.line_number is not None:
        location += f":{record.line_number}"
        if record.column_number is not None:
            location += f":{record.column_number}"
    return location


def format_status(record: NetworkRecord) -> str:
    """HTTP status, PND while awaiting a response, ERR if loading failed."""
    if record.error_text:
        return "ERR"
    return str(record.status) if record.status is not None else "PND"


def format_duration(record: NetworkRecord) -> str | None:
    # Network timestamps are in seconds
    if not record.timing or not record.timing.duration:
        return None
    return f"{record.timing.duration * 1000:.0f}ms"


def network_time_ms(record: NetworkRecord) -> float | None:
    """Request wall-clock time in ms. The protocol timestamp is monotonic, so it is never shown."""
    if record.wall_time is None:
        return None
    return record.wall_time * 1000


def format_console_record(record: ConsoleRecord) -> str:
    """Render as `[time] [LEVEL] [source] text` plus location and stack lines."""
    level = record.severity.value.upper().ljust(5)
    source = record.source.ljust(20)
    text = f"[{format_time(record.timestamp)}] [{level}] [{source}] {record.text}"

    if location := format_location(record):
        text += f"\n    at: {location}"
    if record.stack_trace:
        text += f"\n    stack: {record.stack_trace}"

    return text


def format_network_record(record: NetworkRecord) -> str:
    """Render as `[time] [status] [METHOD] url (type) - Nms`."""
    time_text = format_time(network_time_ms(record))
    text = f"[{time_text}] [{format_status(record).ljust(3)}] [{record.method.ljust(6)}] {record.url}"

    if record.resource_type:
        text += f" ({record.resource_type})"
    if duration := format_duration(record):
        text += f" - {duration}"
    if record.error_text:
        text += f" !! {record.error_text}"

    return text


__all__ = [
    "format_time",
    "format_location",
    "format_status",
    "format_duration",
    "network_time_ms",
    "format_console_record",
    "format_network_record",
]
