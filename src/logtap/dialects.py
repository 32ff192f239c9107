"""Debug protocol dialects supported by logtap.

Chrome speaks CDP (request/response with correlation ids). Firefox speaks the
remote debugging protocol, addressed by actor and used here fire-and-forget.

PUBLIC API:
  - Dialect: Supported protocol dialect enum
"""

from enum import Enum


class Dialect(str, Enum):
    """Protocol dialect of the connected browser."""

    CHROME = "chrome"
    FIREFOX = "firefox"

    @property
    def discovery_path(self) -> str:
        """HTTP path of the target introspection document."""
        return "/json" if self is Dialect.CHROME else "/json/list"

    @property
    def default_port(self) -> int:
        return 9222 if self is Dialect.CHROME else 6000

    @property
    def is_request_response(self) -> bool:
        """Whether commands receive correlated replies."""
        return self is Dialect.CHROME

    @property
    def init_commands(self) -> tuple[str, ...]:
        """Commands issued once after the channel opens.

        Chrome domains must be enabled before they emit events. Firefox only
        needs subscription packets for the event types we record.
        """
        if self is Dialect.CHROME:
            return ("Runtime.enable", "Log.enable", "Network.enable", "Console.enable")
        return ("consoleAPICall", "pageError")

    @classmethod
    def parse(cls, value: "str | Dialect") -> "Dialect":
        """Parse dialect name, case-insensitive.

        Raises:
            ValueError: If the name is not a known dialect.
        """
        if isinstance(value, Dialect):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            known = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown browser type '{value}' (expected one of: {known})") from None


__all__ = ["Dialect"]
