"""
In-process replay store.

Records are lost on restart, so this is only suitable for a single process and
for tests.
"""

import threading
from typing import Set


class MemoryReplayStore:
    """Replay store backed by a set guarded by a lock."""

    def __init__(self) -> None:
        self._used: Set[str] = set()
        self._lock = threading.Lock()

    def was_used(self, key: str) -> bool:
        with self._lock:
            return key in self._used

    def mark_used(self, key: str) -> None:
        with self._lock:
            self._used.add(key)

    def try_claim(self, key: str) -> bool:
        with self._lock:
            if key in self._used:
                return True
            self._used.add(key)
            return False

    def close(self) -> None:
        pass

    def __len__(self) -> int:
        with self._lock:
            return len(self._used)
