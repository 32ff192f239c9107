"""Target discovery over the browser's HTTP introspection endpoint.

PUBLIC API:
  - Target: One inspectable browser tab
  - list_targets: Fetch targets for a dialect
  - select_target: Pick a target by index
"""

import logging
from dataclasses import dataclass

import httpx

from .dialects import Dialect
from .errors import ChannelError, EndpointUnreachable, NoTargetsAvailable, TargetIndexOutOfRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """Inspectable browser tab.

    Attributes:
        id: Chrome target id, or the Firefox actor.
        title: Tab title.
        url: Page url.
        ws_url: Resolved WebSocket address, None if the tab is not debuggable.
    """

    id: str
    title: str
    url: str
    ws_url: str | None

    @classmethod
    def from_json(cls, data: dict, dialect: Dialect, host: str, port: int) -> "Target":
        if dialect is Dialect.FIREFOX:
            actor = data.get("actor", "")
            return cls(
                id=actor,
                title=data.get("title", ""),
                url=data.get("url", ""),
                ws_url=f"ws://{host}:{port}{actor}" if actor else None,
            )

        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            url=data.get("url", ""),
            ws_url=data.get("webSocketDebuggerUrl"),
        )

    def channel_address(self) -> str:
        """WebSocket address to open.

        Raises:
            ChannelError: If the target exposes no debugger address.
        """
        if not self.ws_url:
            raise ChannelError(f"No WebSocket debugger URL for tab '{self.title or self.id}'")
        return self.ws_url


def list_targets(
    dialect: Dialect, host: str, port: int, timeout: float = 2.0, client: httpx.Client | None = None
) -> list[Target]:
    """Fetch the target list from the introspection endpoint.

    Args:
        dialect: Browser dialect, selects the endpoint path.
        host: Debugging host.
        port: Debugging port.
        timeout: HTTP timeout in seconds.
        client: Optional httpx client (tests pass one with a mock transport).

    Returns:
        Targets in the order the browser lists them. May be empty.

    Raises:
        EndpointUnreachable: On connection failure, non-2xx status or a body that is not a JSON list.
    """
    url = f"http://{host}:{port}{dialect.discovery_path}"
    try:
        if client is None:
            resp = httpx.get(url, timeout=timeout)
        else:
            resp = client.get(url, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except httpx.HTTPError as e:
        logger.error(f"Failed to list {dialect.value} tabs: {e}")
        raise EndpointUnreachable(port, str(e)) from e
    except ValueError as e:
        raise EndpointUnreachable(port, f"invalid JSON from {url}") from e

    if not isinstance(data, list):
        raise EndpointUnreachable(port, f"unexpected response from {url}")

    return [Target.from_json(item, dialect, host, port) for item in data if isinstance(item, dict)]


def select_target(targets: list[Target], index: int | None = None) -> Target:
    """Pick a target by index (first when None).

    Raises:
        NoTargetsAvailable: If targets is empty.
        TargetIndexOutOfRange: If index is not a valid position.
    """
    if not targets:
        raise NoTargetsAvailable("Browser has no open tabs")

    index = 0 if index is None else index
    if index < 0 or index >= len(targets):
        raise TargetIndexOutOfRange(index, len(targets))

    return targets[index]


__all__ = ["Target", "list_targets", "select_target"]
