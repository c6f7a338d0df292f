from __future__ import annotations
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class KeyedLocks:
    """One re-entrant lock per key (book id, member id).

    An entry lives only while some caller holds or waits on it, so the
    registry stays as small as the set of keys currently in use.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # key -> [lock, number of callers holding or waiting]
        self._locks: Dict[str, List] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.RLock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]
