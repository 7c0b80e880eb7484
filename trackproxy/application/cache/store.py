"""Process-local response store with per-entry expiry and LRU bound."""

import time
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional

import anyio

from .models import CacheEntry
from .statistics import CacheStatistics
from ...constants import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_CLEANUP_INTERVAL_SECONDS,
)
from ...logging import debug, info, warning, LogRecord, LogEvent


class CacheStore:
    """
    Key -> response body table where every entry carries its own TTL.

    Expired entries are never returned: ``get`` drops them lazily and
    ``run_cleanup_loop`` sweeps the rest periodically. The table is bounded
    by ``max_entries``; when full, the least recently used entry is evicted.
    All operations share one lock and bodies are immutable ``bytes``, so a
    write racing a read returns either the old or the new body, whole.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        cleanup_interval_seconds: int = DEFAULT_CACHE_CLEANUP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._max_entries = max_entries
        self._cleanup_interval = cleanup_interval_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = anyio.Lock()
        self._statistics = CacheStatistics()

    async def get(self, key: str) -> Optional[bytes]:
        """Return the stored body for ``key`` if present and not expired."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._statistics.record_miss()
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                self._statistics.record_expiration()
                self._statistics.record_miss()
                return None

            self._entries.move_to_end(key)
            self._statistics.record_hit()
            return entry.body

    async def put(self, key: str, body: bytes, ttl_seconds: int) -> bool:
        """
        Store ``body`` under ``key`` for ``ttl_seconds``.

        A TTL of zero or less is a no-op and leaves any prior entry in place.

        Returns:
            True if the body was stored, False if the write was skipped.
        """
        if ttl_seconds <= 0:
            self._statistics.record_skipped_store()
            debug(
                LogRecord(
                    event=LogEvent.CACHE_EVENT.value,
                    message="Caching disabled for response",
                    data={"cache_key": key, "ttl_seconds": ttl_seconds},
                )
            )
            return False

        entry = CacheEntry(
            key=key,
            body=bytes(body),
            stored_at=self._clock(),
            ttl_seconds=ttl_seconds,
        )

        async with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self._max_entries:
                self._evict_lru()
            self._entries[key] = entry
            self._statistics.record_store()

        debug(
            LogRecord(
                event=LogEvent.CACHE_EVENT.value,
                message="Response cached",
                data={
                    "cache_key": key,
                    "ttl_seconds": ttl_seconds,
                    "size_bytes": entry.size_bytes,
                },
            )
        )
        return True

    def _evict_lru(self) -> None:
        key, entry = self._entries.popitem(last=False)
        self._statistics.record_eviction()
        debug(
            LogRecord(
                event=LogEvent.CACHE_EVENT.value,
                message="Evicted LRU cache entry",
                data={"evicted_key": key, "size_bytes": entry.size_bytes},
            )
        )

    async def evict_expired(self) -> List[str]:
        """
        Remove every expired entry.

        Returns:
            List of evicted keys
        """
        async with self._lock:
            now = self._clock()
            expired_keys = [
                key for key, entry in self._entries.items() if entry.is_expired(now)
            ]
            for key in expired_keys:
                del self._entries[key]

        if expired_keys:
            self._statistics.record_expiration(len(expired_keys))
            info(
                LogRecord(
                    event=LogEvent.CACHE_EVENT.value,
                    message=f"Evicted {len(expired_keys)} expired entries",
                    data={"evicted_count": len(expired_keys)},
                )
            )
        return expired_keys

    async def run_cleanup_loop(self) -> None:
        """Sweep expired entries every ``cleanup_interval_seconds`` until cancelled."""
        while True:
            await anyio.sleep(self._cleanup_interval)
            try:
                await self.evict_expired()
            except Exception as e:
                warning(
                    LogRecord(
                        event=LogEvent.CACHE_EVENT.value,
                        message=f"Error in cache cleanup: {str(e)}",
                    ),
                    exc=e,
                )

    async def clear(self) -> None:
        """Remove all entries and reset statistics."""
        async with self._lock:
            self._entries.clear()
        self._statistics.reset()
        info(
            LogRecord(
                event=LogEvent.CACHE_EVENT.value,
                message="Cache cleared",
                data={},
            )
        )

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        stats = self._statistics.get_stats()
        stats["cache_size"] = len(self._entries)
        stats["max_entries"] = self._max_entries
        stats["memory_usage_bytes"] = sum(
            entry.size_bytes for entry in self._entries.values()
        )
        return stats
