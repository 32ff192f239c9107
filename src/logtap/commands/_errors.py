"""Unified error handling for logtap commands.

PUBLIC API:
  - check_connection: Validate session connection state
  - error_response: Build formatted error responses
"""

from typing import Optional

from replkit2.textkit import markdown

from logtap.errors import (
    EndpointUnreachable,
    LogtapError,
    NoTargetsAvailable,
    NotConnected,
    TargetIndexOutOfRange,
)

# Standard error message templates
_ERRORS = {
    "not_connected": {
        "message": "Browser not connected",
        "details": "Use `connect_browser()` to connect to a tab",
        "help": [
            "Run `browser_tabs()` to see available tabs",
            "Use `connect_browser()` to connect to the first Chrome tab",
            "Or `connect_browser('firefox', port=6000)` for Firefox",
        ],
    },
    "unreachable": {
        "message": "Cannot reach the browser debug port",
        "help": [
            "Chrome: start with --remote-debugging-port=9222",
            "Firefox: start with --start-debugger-server 6000",
        ],
    },
    "no_targets": {"message": "No open tabs", "details": "Open a tab in the browser and try again"},
    "bad_index": {"details": "Run `browser_tabs()` to see valid indexes"},
}


def _error_key(error: Exception) -> str:
    if isinstance(error, NotConnected):
        return "not_connected"
    if isinstance(error, EndpointUnreachable):
        return "unreachable"
    if isinstance(error, NoTargetsAvailable):
        return "no_targets"
    if isinstance(error, TargetIndexOutOfRange):
        return "bad_index"
    return "custom"


def check_connection(state) -> Optional[dict]:
    """Return an error response if the session is not connected, None otherwise."""
    if not state.session.is_connected:
        return error_response("not_connected")
    return None


def error_response(error_key: str | Exception, custom_message: str | None = None, **kwargs) -> dict:
    """Build consistent error response in markdown.

    Args:
        error_key: Key from error templates, or a LogtapError to describe.
        custom_message: Override default message. Defaults to None.
        **kwargs: Additional context to add to error response.

    Returns:
        Markdown dict with error formatting.
    """
    if isinstance(error_key, Exception):
        custom_message = custom_message or str(error_key)
        error_key = _error_key(error_key)

    error_info = _ERRORS.get(error_key, {})
    message = custom_message or error_info.get("message", "Error occurred")

    builder = markdown().element("alert", message=message, level="error")

    if details := error_info.get("details"):
        builder.text(details)

    if help_items := error_info.get("help"):
        builder.text("**How to fix:**")
        builder.list(help_items)

    for key, value in kwargs.items():
        if value:
            builder.text(f"_{key}: {value}_")

    return builder.build()


__all__ = ["check_connection", "error_response", "LogtapError"]
