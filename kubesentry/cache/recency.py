"""Fixed-capacity least-recently-used recency cache.

Used by enrichers to recognise a condition they have already reported
during this process's lifetime.  Entries are only ever removed by eviction.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Hashable

DEFAULT_CAPACITY = 500


class RecencyCache:
    """Thread-safe LRU set exposed through a single ``seen`` operation."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"RecencyCache capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._entries: OrderedDict[Hashable, None] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def seen(self, key: Hashable) -> bool:
        """Return whether *key* was already recorded, then mark it most recent.

        Inserting a new key while full evicts the least recently used key.
        """
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                return True
            if len(self._entries) >= self._capacity:
                self._entries.popitem(last=False)
            self._entries[key] = None
            return False

    def __contains__(self, key: object) -> bool:
        # Inspection only: does not refresh recency.
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
