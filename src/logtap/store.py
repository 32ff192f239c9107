"""Bounded in-memory record stores.

PUBLIC API:
  - BoundedStore: Fixed-capacity FIFO sequence with snapshot queries
  - RecordStore: Console and network stores owned by one session
  - DEFAULT_CAPACITY: Records kept per store unless configured
"""

import copy
import threading
from collections import deque
from typing import Callable, Generic, Iterable, TypeVar

from .records import ConsoleRecord, NetworkRecord, Severity

T = TypeVar("T")

DEFAULT_CAPACITY = 1000


class BoundedStore(Generic[T]):
    """Append-only sequence that evicts from the head past capacity.

    All operations hold the store lock, so a query's snapshot-then-clear can
    never interleave with an append from the channel thread.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Store capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._items: deque[T] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def append(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def extend(self, items: Iterable[T]) -> None:
        """Append many items; only the last `capacity` survive."""
        with self._lock:
            self._items.extend(items)

    def query(
        self, predicate: Callable[[T], bool] | None = None, limit: int | None = None, clear: bool = False
    ) -> list[T]:
        """Return the last `limit` matching items in chronological order.

        Args:
            predicate: Filter applied to each item. None matches everything.
            limit: Max items returned, newest kept. None or <= 0 returns all matches.
            clear: Empty the whole store (not just the returned slice) after reading.

        Returns:
            Copies of the matching items, oldest first.
        """
        with self._lock:
            matches = [item for item in self._items if predicate is None or predicate(item)]
            if limit is not None and limit > 0:
                matches = matches[-limit:]
            snapshot = copy.deepcopy(matches)
            if clear:
                self._items.clear()

        return snapshot

    def find(self, predicate: Callable[[T], bool]) -> T | None:
        """Return a copy of the newest item matching predicate."""
        with self._lock:
            for item in reversed(self._items):
                if predicate(item):
                    return copy.deepcopy(item)
        return None

    def update(self, predicate: Callable[[T], bool], apply: Callable[[T], None]) -> bool:
        """Mutate the newest item matching predicate in place, under the store lock.

        Returns:
            False if nothing matched.
        """
        with self._lock:
            for item in reversed(self._items):
                if predicate(item):
                    apply(item)
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


class RecordStore:
    """Console and network telemetry for one session.

    Attributes:
        console: Console, log and exception records.
        network: Network exchange records.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self.console: BoundedStore[ConsoleRecord] = BoundedStore(capacity)
        self.network: BoundedStore[NetworkRecord] = BoundedStore(capacity)

    def add_console(self, record: ConsoleRecord) -> None:
        self.console.append(record)

    def add_network(self, record: NetworkRecord) -> None:
        self.network.append(record)

    def find_request(self, request_id: str) -> NetworkRecord | None:
        """Copy of the network record for a request id.

        Newest first, since Chrome reuses request ids across redirects.
        """
        return self.network.find(lambda r: r.request_id == request_id)

    def update_request(self, request_id: str, apply: Callable[[NetworkRecord], None]) -> bool:
        """Apply a change to the newest record for a request id. False if there is none."""
        return self.network.update(lambda r: r.request_id == request_id, apply)

    def query_console(
        self, severity: Severity | str | None = None, limit: int | None = 50, clear: bool = False
    ) -> list[ConsoleRecord]:
        """Console records, optionally filtered by severity ("all" or None for every level)."""
        if severity is None or severity == "all":
            return self.console.query(None, limit, clear)

        wanted = Severity(severity.lower()) if isinstance(severity, str) else severity
        return self.console.query(lambda r: r.severity is wanted, limit, clear)

    def query_network(
        self, method: str | None = None, limit: int | None = 50, clear: bool = False
    ) -> list[NetworkRecord]:
        """Network records, optionally filtered by HTTP method (case-insensitive)."""
        if not method:
            return self.network.query(None, limit, clear)

        wanted = method.upper()
        return self.network.query(lambda r: r.method.upper() == wanted, limit, clear)

    def clear_all(self) -> None:
        self.console.clear()
        self.network.clear()

    @property
    def counts(self) -> dict[str, int]:
        return {"console": len(self.console), "network": len(self.network)}


__all__ = ["BoundedStore", "RecordStore", "DEFAULT_CAPACITY"]
