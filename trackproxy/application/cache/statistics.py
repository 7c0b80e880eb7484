"""Cache statistics tracking and reporting."""

from typing import Dict, Any
import time


class CacheStatistics:
    """Tracks and manages cache performance statistics."""

    def __init__(self):
        """Initialize cache statistics."""
        self.cache_hits = 0
        self.cache_misses = 0
        self.stores = 0
        self.skipped_stores = 0
        self.expirations = 0
        self.evictions = 0
        self.start_time = time.time()

    def record_hit(self):
        """Record a cache hit."""
        self.cache_hits += 1

    def record_miss(self):
        """Record a cache miss."""
        self.cache_misses += 1

    def record_store(self):
        """Record a body written to the cache."""
        self.stores += 1

    def record_skipped_store(self):
        """Record a write suppressed by a zero TTL."""
        self.skipped_stores += 1

    def record_expiration(self, count: int = 1):
        """Record entries removed because their TTL elapsed."""
        self.expirations += count

    def record_eviction(self, count: int = 1):
        """Record entries removed to respect the size bound."""
        self.evictions += count

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.cache_hits + self.cache_misses
        if total == 0:
            return 0.0
        return self.cache_hits / total

    @property
    def uptime_seconds(self) -> float:
        return time.time() - self.start_time

    def get_stats(self) -> Dict[str, Any]:
        """Get all statistics as a dictionary."""
        return {
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": round(self.hit_rate, 3),
            "stores": self.stores,
            "skipped_stores": self.skipped_stores,
            "expirations": self.expirations,
            "evictions": self.evictions,
            "uptime_seconds": round(self.uptime_seconds, 1),
        }

    def reset(self):
        """Reset all statistics."""
        self.cache_hits = 0
        self.cache_misses = 0
        self.stores = 0
        self.skipped_stores = 0
        self.expirations = 0
        self.evictions = 0
        self.start_time = time.time()
