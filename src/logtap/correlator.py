"""Correlation of CDP command replies to pending futures.

PUBLIC API:
  - Correlator: Maps correlation ids to pending Futures
"""

import itertools
import logging
import threading
from concurrent.futures import Future

from .errors import CommandError

logger = logging.getLogger(__name__)


class Correlator:
    """Pending-command table keyed by correlation id.

    Ids come from a counter that never resets, so a reply from a previous
    connection can never resolve a newer command.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self._pending: dict[int, tuple[str, Future]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def register(self, method: str) -> tuple[int, Future]:
        """Allocate the next id and a Future awaiting its reply."""
        future: Future = Future()
        with self._lock:
            msg_id = next(self._ids)
            self._pending[msg_id] = (method, future)
        return msg_id, future

    def resolve(self, frame: dict) -> bool:
        """Settle the Future whose id matches the reply frame.

        Returns:
            True if a pending command was settled, False for unknown ids.
        """
        with self._lock:
            entry = self._pending.pop(frame.get("id"), None)

        if entry is None:
            logger.debug(f"Reply for unknown command id {frame.get('id')}")
            return False

        method, future = entry
        if "error" in frame:
            error = frame["error"]
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            future.set_exception(CommandError(method, message))
        else:
            future.set_result(frame.get("result", {}))
        return True

    def discard(self, msg_id: int) -> None:
        """Forget a pending command without settling it."""
        with self._lock:
            self._pending.pop(msg_id, None)

    def abandon(self) -> int:
        """Drop every pending command; their Futures stay unresolved.

        Returns:
            Number of commands dropped.
        """
        with self._lock:
            count = len(self._pending)
            self._pending.clear()
        return count


__all__ = ["Correlator"]
