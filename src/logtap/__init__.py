"""logtap - browser console and network logger.

Connects to Chrome (CDP) or Firefox (remote debugging protocol), buffers
console messages, exceptions and network requests, and runs JavaScript in the
page. Usable as a REPL or as an MCP server.

PUBLIC API:
  - BrowserSession: Session manager (connect, commands, record queries)
  - LogtapConfig: Settings loaded from logtap.toml
  - Dialect: Supported protocol dialects
  - main: Entry point function for CLI
  - __version__: Package version string
"""

import atexit
import logging
import sys
from importlib.metadata import PackageNotFoundError, version

from logtap.config import LogtapConfig
from logtap.dialects import Dialect
from logtap.session import BrowserSession

try:
    __version__ = version("logtap")
except PackageNotFoundError:
    __version__ = "0.0.0"


def main():
    """Entry point for logtap.

    Modes:
    - `--mcp` flag, or stdin is not a TTY: Runs as MCP server
    - Otherwise: Runs as interactive REPL
    """
    from logtap.app import app

    # stderr only, stdout carries the MCP stream
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )
    atexit.register(lambda: app.state.cleanup() if hasattr(app, "state") and app.state else None)

    if "--mcp" in sys.argv or not sys.stdin.isatty():
        app.mcp.run()
    else:
        app.run(title="logtap - browser console and network logger")


__all__ = ["BrowserSession", "LogtapConfig", "Dialect", "main", "__version__"]
