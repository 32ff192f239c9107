"""Network request monitoring commands."""

from logtap.app import app
from logtap.commands._utils import build_code_response, build_table_response, truncate_string
from logtap.formatters import format_duration, format_network_record, format_status, format_time, network_time_ms


@app.command(display="markdown", fastmcp={"type": "tool", "mime_type": "text/markdown"})
def network_requests(state, method: str = "", limit: int = 50, clear: bool = False, full: bool = False) -> dict:
    """Show captured network requests (Chrome only).

    Args:
        method: HTTP method filter, e.g. GET or POST (default: all)
        limit: Max results, newest kept (default: 50)
        clear: Clear all network records after reading (default: False)
        full: One untruncated line per request instead of a table (default: False)

    Examples:
        network_requests()                  # Last 50 requests
        network_requests("POST")            # POST requests only

    Returns:
        Requests, oldest first. Status PND means no response yet.
    """
    records = state.session.query_network(method or None, limit, clear)
    summary = f"{len(records)} request{'s' if len(records) != 1 else ''}" + (" (cleared)" if clear else "")

    if full:
        text = "\n".join(map(format_network_record, records))
        return build_code_response(f"Network Requests ({summary})", text, "text")

    rows = [
        {
            "Time": format_time(network_time_ms(r)),
            "Status": format_status(r),
            "Method": r.method,
            "Type": r.resource_type or "-",
            "URL": truncate_string(r.url, 100),
            "Duration": format_duration(r) or "-",
        }
        for r in records
    ]

    return build_table_response(
        title="Network Requests",
        headers=["Time", "Status", "Method", "Type", "URL", "Duration"],
        rows=rows,
        summary=summary,
    )
