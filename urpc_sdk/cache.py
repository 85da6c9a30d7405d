"""
Response cache for read-only calls.

Results are memoized for the lifetime of the cache object, with no TTL and no
invalidation: a cached call is assumed to return the same value for as long as
the owning client lives. Concurrent async lookups of the same key share one
in-flight fetch.
"""
import asyncio
import logging
import threading
from typing import Awaitable, Callable, Dict, Optional, Sequence, Tuple

from cachetools import LRUCache

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, str, str]

DEFAULT_MAXSIZE = 10_000


def cache_key(call_type: str, target: str, method_signature: str, args: Sequence[str]) -> CacheKey:
    """Canonical key for a call: (call type, target, signature, joined args)."""
    return (call_type, target, method_signature, ",".join(args))


class ResponseCache:
    """
    Thread-safe memo of completed call results.

    Only successful results are stored; a failing fetch leaves no entry.
    """

    def __init__(self, maxsize: int = DEFAULT_MAXSIZE):
        self._values = LRUCache(maxsize=maxsize)
        self._lock = threading.RLock()
        self._in_flight: Dict[CacheKey, "asyncio.Task[str]"] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> Optional[str]:
        with self._lock:
            value = self._values.get(key)
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
            return value

    def set(self, key: CacheKey, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self.hits = 0
            self.misses = 0

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def get_or_call(self, key: CacheKey, fetch: Callable[[], str]) -> str:
        """
        Return the cached value for key, calling fetch on a miss.

        Two threads missing on the same key will both call fetch.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached
        value = fetch()
        self.set(key, value)
        return value

    async def get_or_fetch(self, key: CacheKey, fetch: Callable[[], Awaitable[str]]) -> str:
        """
        Async variant of get_or_call that coalesces concurrent misses.

        The first caller to miss starts the fetch; callers arriving while it is
        in flight await the same task and see the same result or exception.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(key, fetch))
            self._in_flight[key] = task
        else:
            logger.debug(f"Joining in-flight request for {key}")
        return await task

    async def _fetch_and_store(self, key: CacheKey, fetch: Callable[[], Awaitable[str]]) -> str:
        try:
            value = await fetch()
            self.set(key, value)
            return value
        finally:
            # gone before the task completes, so late callers start afresh
            self._in_flight.pop(key, None)

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)
