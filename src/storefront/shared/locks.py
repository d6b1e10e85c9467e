"""Per-product critical sections for stock mutation.

Placement checks stock and then decrements it; both steps, and the commit
that follows, must happen while no other request touches the same products.
"""

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager


class StockLocks:
    """Registry of one lock per product identifier."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, product_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(product_id, threading.Lock())

    @contextmanager
    def holding(self, product_ids: Iterable) -> Iterator[None]:
        """Hold the locks of all given products, acquired in sorted order."""
        keys = sorted({str(product_id) for product_id in product_ids})
        locks = [self._lock_for(key) for key in keys]

        acquired = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


stock_locks = StockLocks()
