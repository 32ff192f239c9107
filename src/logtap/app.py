"""Main application entry point for logtap.

Provides dual REPL/MCP access to a BrowserSession. Built on ReplKit2; every
command receives the LogtapState instance.
"""

from dataclasses import dataclass, field

from replkit2 import App

from logtap.config import LogtapConfig
from logtap.session import BrowserSession


def _default_session() -> BrowserSession:
    return BrowserSession(LogtapConfig.load())


@dataclass
class LogtapState:
    """Application state for logtap.

    Attributes:
        session: The browser debugging session shared by all commands.
    """

    session: BrowserSession = field(default_factory=_default_session)

    def cleanup(self) -> None:
        """Close the browser channel, if any."""
        self.session.disconnect()


# Must be created before command imports for decorator registration
app = App(
    "logtap",
    LogtapState,
    uri_scheme="logtap",
    fastmcp={
        "description": "Browser console and network logger over remote debugging protocols",
        "tags": {"browser", "debugging", "console", "network"},
    },
)


# Command imports trigger @app.command decorator registration
from logtap.commands import connection  # noqa: E402, F401
from logtap.commands import console  # noqa: E402, F401
from logtap.commands import network  # noqa: E402, F401
from logtap.commands import javascript  # noqa: E402, F401
