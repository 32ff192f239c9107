"""Browser connection management commands.

PUBLIC API:
  - connect_browser: Connect to a Chrome or Firefox tab
  - browser_tabs: List available tabs
  - disconnect_browser: Close the browser connection
  - clear_logs: Clear captured console and network records
  - status: Get connection status
"""

from logtap.app import app
from logtap.commands._errors import LogtapError, error_response
from logtap.commands._utils import build_info_response, build_table_response, truncate_string
from logtap.dialects import Dialect


@app.command(display="markdown", fastmcp={"type": "tool", "mime_type": "text/markdown"})
def connect_browser(
    state,
    browser_type: str = "chrome",
    host: str = "",
    port: int = 0,
    tab_index: int = None,  # pyright: ignore[reportArgumentType]
) -> dict:
    """Connect to a browser tab over its remote debugging protocol.

    Chrome: launch with --remote-debugging-port=9222
    Firefox: launch with --start-debugger-server 6000

    Args:
        browser_type: "chrome" or "firefox" (default: chrome)
        host: Debugging host (default: from config, usually localhost)
        port: Debugging port (default: 9222 for Chrome, 6000 for Firefox)
        tab_index: Tab to connect to, see browser_tabs() (default: 0)

    Examples:
        connect_browser()                              # First Chrome tab
        connect_browser(tab_index=2)                   # Third Chrome tab
        connect_browser("firefox", port=6000)          # First Firefox tab

    Returns:
        Connection status in markdown
    """
    try:
        message = state.session.connect(browser_type, host or None, port or None, tab_index)
    except (LogtapError, ValueError) as e:
        return error_response(e)

    target = state.session.target
    return build_info_response(
        title="Browser Connection",
        fields={
            "Status": message,
            "Page": target.title if target else None,
            "URL": target.url if target else None,
        },
    )


@app.command(display="markdown", fastmcp={"type": "tool", "mime_type": "text/markdown"})
def browser_tabs(state, browser_type: str = "chrome", host: str = "", port: int = 0) -> dict:
    """List tabs available for connection.

    Args:
        browser_type: "chrome" or "firefox" (default: chrome)
        host: Debugging host (default: from config)
        port: Debugging port (default: per browser)

    Returns:
        Table of tabs in markdown
    """
    try:
        targets = state.session.list_targets(browser_type, host or None, port or None)
    except (LogtapError, ValueError) as e:
        return error_response(e)

    rows = [
        {
            "Index": str(i),
            "Title": truncate_string(t.title or "Untitled", 40),
            "URL": truncate_string(t.url, 60),
        }
        for i, t in enumerate(targets)
    ]

    return build_table_response(
        title=f"{Dialect.parse(browser_type).value.capitalize()} Tabs",
        headers=["Index", "Title", "URL"],
        rows=rows,
        summary=f"{len(targets)} tab{'s' if len(targets) != 1 else ''} available",
    )


@app.command(display="markdown", fastmcp={"type": "tool", "mime_type": "text/markdown"})
def disconnect_browser(state) -> dict:
    """Disconnect from the browser. Captured records are kept."""
    return build_info_response(title="Disconnect Status", fields={"Status": state.session.disconnect()})


@app.command(display="markdown", fastmcp={"type": "tool", "mime_type": "text/markdown"})
def clear_logs(state) -> dict:
    """Clear all captured console messages and network requests."""
    counts = state.session.store.counts
    state.session.clear_all()
    return build_info_response(
        title="Clear Status",
        fields={"Cleared": f"{counts['console']} console messages, {counts['network']} network requests"},
    )


@app.command(display="markdown", fastmcp={"type": "resource", "mime_type": "text/markdown"})
def status(state) -> dict:
    """Get connection status and record counts."""
    info = state.session.status()
    return build_info_response(
        title="Connection Status",
        fields={
            "State": info["state"],
            "Browser": info["dialect"],
            "Page": info["title"],
            "URL": info["url"],
            "Console": f"{info['console']} stored",
            "Network": f"{info['network']} stored",
            "Pending commands": info["pending"] or None,
        },
    )
