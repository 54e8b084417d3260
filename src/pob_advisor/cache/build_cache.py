"""In-process cache of parsed builds, keyed by build code.

Keys are the SHA-256 of the raw build code string exactly as received
(no stripping), so two codes that decode to the same XML but differ in
whitespace are separate entries. Entries are evicted least-recently-used
beyond ``max_size`` and expire ``ttl_seconds`` after their last access;
``lookup`` and ``contains`` both count as access.

Hit rate is not tracked; ``stats()`` reports it as 0.0.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from pob_advisor.models.build import ParsedBuild, content_hash


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CacheStats:
    size: int
    max_size: int
    hit_rate: float = 0.0

    def to_dict(self) -> dict:
        return {"size": self.size, "maxSize": self.max_size, "hitRate": self.hit_rate}


class BuildCache:
    """LRU + TTL map from build code to ParsedBuild, safe across threads."""

    def __init__(
        self,
        max_size: int = 100,
        ttl_seconds: float = 3600.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[ParsedBuild, float]] = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def key_for(code: str) -> str:
        return content_hash(code)

    def _touch(self, key: str) -> ParsedBuild | None:
        # Caller holds the lock.
        entry = self._entries.get(key)
        if entry is None:
            return None
        build, stamp = entry
        now = self._clock()
        if now - stamp >= self.ttl_seconds:
            del self._entries[key]
            return None
        self._entries[key] = (build, now)
        self._entries.move_to_end(key)
        return build

    def lookup(self, code: str) -> ParsedBuild | None:
        with self._lock:
            return self._touch(self.key_for(code))

    def contains(self, code: str) -> bool:
        with self._lock:
            return self._touch(self.key_for(code)) is not None

    def store(self, code: str, build: ParsedBuild) -> None:
        key = self.key_for(code)
        with self._lock:
            self._entries[key] = (build, self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cached build %s", evicted[:12])

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(size=len(self._entries), max_size=self.max_size)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
