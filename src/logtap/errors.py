"""Exceptions raised by the logtap session manager.

PUBLIC API:
  - LogtapError: Base exception for all logtap operations
  - EndpointUnreachable: Discovery HTTP call failed
  - NoTargetsAvailable: Browser exposes no inspectable targets
  - TargetIndexOutOfRange: Requested target index does not exist
  - ChannelError: Transport-level WebSocket failure
  - NotConnected: Command attempted without a live session
  - CommandError: Browser reported an error for a command
  - CommandTimeout: Command response did not arrive in time
  - DecodeError: Inbound frame is not valid JSON
"""


class LogtapError(Exception):
    """Base exception for all logtap operations."""

    pass


class EndpointUnreachable(LogtapError):
    """Raised when the browser's introspection endpoint cannot be reached."""

    def __init__(self, port: int, reason: str = ""):
        self.port = port
        message = f"Cannot reach browser debug port {port}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NoTargetsAvailable(LogtapError):
    """Raised when the browser has no open tabs to inspect."""

    pass


class TargetIndexOutOfRange(LogtapError):
    """Raised when a target index is not within the discovered target list."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Tab index {index} out of range, {count} tab{'s' if count != 1 else ''} available")


class ChannelError(LogtapError):
    """Raised when the WebSocket channel fails at the transport level."""

    pass


class NotConnected(LogtapError):
    """Raised when a command is issued while no browser session is live."""

    def __init__(self, message: str = "Browser not connected"):
        super().__init__(message)


class CommandError(LogtapError):
    """Raised when the browser answers a command with an error."""

    def __init__(self, method: str, message: str):
        self.method = method
        super().__init__(f"{method} failed: {message}")


class CommandTimeout(LogtapError):
    """Raised when a command's response does not arrive within its timeout."""

    def __init__(self, method: str, timeout: float):
        self.method = method
        self.timeout = timeout
        super().__init__(f"Command {method} timed out after {timeout}s")


class DecodeError(LogtapError):
    """Raised when an inbound frame cannot be decoded. Never leaves the channel."""

    pass


__all__ = [
    "LogtapError",
    "EndpointUnreachable",
    "NoTargetsAvailable",
    "TargetIndexOutOfRange",
    "ChannelError",
    "NotConnected",
    "CommandError",
    "CommandTimeout",
    "DecodeError",
]
