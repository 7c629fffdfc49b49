"""Result caching and cooperative scheduling for re-analysis.

Everything here runs on a single asyncio event loop. The cache, the
debounce timers and the memory tracker are only touched from that loop,
so no locking is needed.
"""

from __future__ import annotations

import asyncio
import hashlib
import inspect
import logging
import math
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .config import Config
from .errors import AnalysisTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Share of entries dropped when the cache overflows
EVICTION_FRACTION = 0.25

_MISSING = object()


def fingerprint(kind: str, identity: str, text: str) -> str:
    """Cache key for one source unit: kind, identity and a content hash."""
    digest = hashlib.sha256(text.encode("utf-8", errors="surrogatepass")).hexdigest()
    return f"{kind}:{identity}:{digest}"


@dataclass
class CacheEntry(Generic[T]):
    value: T
    created_at: float
    last_access: float
    access_count: int = 1
    seq: int = 0


@dataclass
class CacheStats:
    size: int
    max_entries: int
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class ResultCache:
    """Bounded in-memory cache with batched eviction.

    When an insert would exceed ``max_entries`` the cache first drops expired
    entries, then the least-accessed quarter (oldest access breaks ties).
    """

    def __init__(
        self,
        max_entries: int = 10_000,
        max_age_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._max_age = max_age_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[Any]] = {}
        self._seq = 0
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            logger.debug("Cache miss: %s", key)
            return default
        entry.access_count += 1
        entry.last_access = self._clock()
        self._hits += 1
        logger.debug("Cache hit: %s", key)
        return entry.value

    def put(self, key: str, value: Any) -> None:
        now = self._clock()
        existing = self._entries.get(key)
        if existing is not None:
            existing.value = value
            existing.last_access = now
            return

        if len(self._entries) >= self._max_entries:
            self._evict()

        self._seq += 1
        self._entries[key] = CacheEntry(value=value, created_at=now, last_access=now, seq=self._seq)

    def clear(self, pattern: Optional[str] = None) -> int:
        """Remove all entries, or only those whose key matches ``pattern`` (regex)."""
        if pattern is None:
            removed = len(self._entries)
            self._entries.clear()
            return removed

        regex = re.compile(pattern)
        doomed = [key for key in self._entries if regex.search(key)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def cleanup_expired(self, max_age_seconds: Optional[float] = None) -> int:
        """Drop entries not accessed within ``max_age_seconds``."""
        max_age = max_age_seconds if max_age_seconds is not None else self._max_age
        if max_age is None:
            return 0
        cutoff = self._clock() - max_age
        expired = [key for key, entry in self._entries.items() if entry.last_access < cutoff]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Removed %d expired cache entries", len(expired))
        return len(expired)

    @property
    def stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            max_entries=self._max_entries,
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _evict(self) -> None:
        expired = self.cleanup_expired() if self._max_age is not None else 0
        if len(self._entries) < self._max_entries:
            self._evictions += expired
            return

        count = max(1, math.ceil(len(self._entries) * EVICTION_FRACTION))
        ranked = sorted(
            self._entries.items(),
            key=lambda item: (item[1].access_count, item[1].last_access, item[1].seq),
        )
        for key, _ in ranked[:count]:
            del self._entries[key]
        self._evictions += expired + count
        logger.debug("Cache full, evicted %d entries", count)


class Scheduler:
    """Decides whether and when analysis runs, and caches what it produces."""

    def __init__(self, config: Config | None = None, cache: ResultCache | None = None) -> None:
        self.config = config if config is not None else Config()
        self.cache = cache if cache is not None else ResultCache(
            max_entries=self.config.max_cache_entries,
            max_age_seconds=self.config.cache_max_age_seconds,
        )
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._tasks: set[asyncio.Task] = set()
        self._memory: dict[str, int] = {}
        self._memory_total = 0

    # -- memoization --------------------------------------------------------

    def memoize(self, fn: Callable[..., T], key_fn: Callable[..., str]) -> Callable[..., T]:
        """Wrap ``fn`` so equal keys reuse the cached value."""

        def wrapper(*args: Any, **kwargs: Any) -> T:
            key = key_fn(*args, **kwargs)
            cached = self.cache.get(key, _MISSING)
            if cached is not _MISSING:
                return cached
            value = fn(*args, **kwargs)
            self.cache.put(key, value)
            return value

        return wrapper

    def clear_cache(self, pattern: Optional[str] = None) -> int:
        return self.cache.clear(pattern)

    # -- debouncing ---------------------------------------------------------

    def debounce(self, key: str, fn: Callable[..., Any], *args: Any, delay_ms: Optional[float] = None) -> None:
        """Run ``fn(*args)`` once ``delay_ms`` passes without another call for ``key``.

        Must be called from a running event loop. A newer call replaces the
        pending one, so only the latest arguments are used.
        """
        loop = asyncio.get_running_loop()
        self.cancel_debounce(key)
        delay = (delay_ms if delay_ms is not None else self.config.debounce_delay_ms) / 1000
        self._timers[key] = loop.call_later(delay, self._fire, key, fn, args)

    def cancel_debounce(self, key: str) -> bool:
        handle = self._timers.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    @property
    def pending_debounces(self) -> int:
        return len(self._timers)

    def _fire(self, key: str, fn: Callable[..., Any], args: tuple) -> None:
        self._timers.pop(key, None)
        try:
            result = fn(*args)
        except Exception:
            logger.exception("Debounced call for %s failed", key)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Debounced task failed: %s", exc, exc_info=exc)

    # -- size gates ---------------------------------------------------------

    def should_process(self, size_bytes: int) -> bool:
        """False when the input exceeds the hard size ceiling."""
        if size_bytes > self.config.max_file_size:
            logger.warning(
                "Skipping analysis: %d bytes exceeds limit of %d", size_bytes, self.config.max_file_size
            )
            return False
        return True

    def is_large(self, size_bytes: int) -> bool:
        return size_bytes > self.config.large_file_threshold

    async def run_cooperatively(self, fn: Callable[..., T], *args: Any) -> T:
        """Run synchronous ``fn`` with a yield to the event loop before and after."""
        await asyncio.sleep(0)
        result = fn(*args)
        await asyncio.sleep(0)
        return result

    # -- timeouts -----------------------------------------------------------

    async def with_timeout(self, fn: Callable[..., Any], *args: Any, timeout_ms: Optional[float] = None) -> Any:
        """Race ``fn(*args)`` against a timer.

        Coroutines are cancelled at the deadline. Synchronous work cannot be
        interrupted; its result is discarded if it ran past the deadline.
        """
        timeout_ms = timeout_ms if timeout_ms is not None else self.config.parse_timeout_ms
        started = time.monotonic()
        result = fn(*args)
        if inspect.isawaitable(result):
            remaining = timeout_ms / 1000 - (time.monotonic() - started)
            try:
                return await asyncio.wait_for(result, timeout=max(remaining, 0))
            except asyncio.TimeoutError as e:
                raise AnalysisTimeoutError(timeout_ms) from e

        if (time.monotonic() - started) * 1000 > timeout_ms:
            raise AnalysisTimeoutError(timeout_ms)
        return result

    # -- memory tracking ----------------------------------------------------

    def track_memory_usage(self, key: str, size_bytes: int) -> None:
        """Record an estimate for ``key``; warns past the soft threshold, never blocks."""
        self._memory_total += size_bytes - self._memory.get(key, 0)
        self._memory[key] = size_bytes
        if self._memory_total > self.config.memory_warning_threshold:
            logger.warning(
                "High memory usage: %.1fMB tracked across %d sources",
                self._memory_total / (1024 * 1024),
                len(self._memory),
            )

    def release_memory_tracking(self, key: str) -> None:
        self._memory_total -= self._memory.pop(key, 0)

    @property
    def memory_usage(self) -> int:
        return self._memory_total

    # -- lifecycle ----------------------------------------------------------

    def get_stats(self) -> dict[str, Any]:
        stats = self.cache.stats
        return {
            "cache_size": stats.size,
            "cache_max_entries": stats.max_entries,
            "cache_hits": stats.hits,
            "cache_misses": stats.misses,
            "cache_evictions": stats.evictions,
            "cache_hit_rate": stats.hit_rate,
            "pending_debounces": self.pending_debounces,
            "memory_usage": self._memory_total,
        }

    def dispose(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self.cache.clear()
        self._memory.clear()
        self._memory_total = 0

