from __future__ import annotations

import math
import threading
import time
from typing import Callable, Optional, Tuple

from cachetools import TLRUCache

from ...domain.ports import ExpiringCache

_Entry = Tuple[str, Optional[int]]


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    ttl = entry[1]
    if ttl is None:
        return math.inf
    return now + ttl


class InMemoryExpiringCache(ExpiringCache):
    """
    Process-local ExpiringCache backed by `cachetools.TLRUCache`.

    Each entry carries its own ttl. Only suitable for a single process:
    consumption marks are not shared between workers.

    The cache is bounded: once `maxsize` live entries are held, inserting
    another evicts an existing one, and an evicted consumption mark lets
    that token be redeemed again. Size `maxsize` above the number of
    consumed-but-unexpired tokens you expect, or use the redis backend.
    """

    def __init__(
        self,
        maxsize: int = 100_000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._cache.get(key)
        return entry[0] if entry is not None else None

    def put(self, key: str, value: str, ttl_seconds: Optional[int]) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            return

        with self._lock:
            self._cache[key] = (value, ttl_seconds)

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)
