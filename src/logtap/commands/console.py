"""Browser console message commands."""

from logtap.app import app
from logtap.commands._errors import error_response
from logtap.commands._utils import build_code_response, build_table_response, truncate_string
from logtap.formatters import format_console_record, format_location, format_time
from logtap.records import Severity

_LEVELS = {"all"} | {s.value for s in Severity}


@app.command(display="markdown", fastmcp={"type": "tool", "mime_type": "text/markdown"})
def console_logs(state, level: str = "all", limit: int = 50, clear: bool = False, full: bool = False) -> dict:
    """Show captured console messages, exceptions and browser log entries.

    Records are kept after disconnecting, up to the configured capacity.

    Args:
        level: log, error, warning, info, debug or all (default: all)
        limit: Max results, newest kept (default: 50)
        clear: Clear all console records after reading (default: False)
        full: Untruncated text with locations and stack traces (default: False)

    Examples:
        console_logs()                       # Last 50 messages
        console_logs("error", limit=10)      # Last 10 errors
        console_logs("error", full=True)     # Errors with stack traces
        console_logs(clear=True)             # Read and reset

    Returns:
        Console messages, oldest first
    """
    level = (level or "all").lower()
    if level not in _LEVELS:
        return error_response("custom", custom_message=f"Unknown level '{level}'", expected=", ".join(sorted(_LEVELS)))

    records = state.session.query_console(level, limit, clear)
    summary = f"{len(records)} message{'s' if len(records) != 1 else ''}" + (" (cleared)" if clear else "")

    if full:
        text = "\n\n".join(map(format_console_record, records))
        return build_code_response(f"Console Messages ({summary})", text, "text")

    rows = [
        {
            "Time": format_time(r.timestamp),
            "Level": r.severity.value,
            "Source": r.source,
            "Message": truncate_string(r.text, 300),
            "Location": format_location(r) or "-",
        }
        for r in records
    ]

    warnings = []
    if not state.session.is_connected:
        warnings.append("Not connected, showing previously captured messages")

    return build_table_response(
        title="Console Messages",
        headers=["Time", "Level", "Source", "Message", "Location"],
        rows=rows,
        summary=summary,
        warnings=warnings,
    )
