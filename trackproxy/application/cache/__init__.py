"""Cache module for response caching with per-entry TTL."""

from .store import CacheStore
from .context import CacheContext
from .models import CacheEntry
from .statistics import CacheStatistics

__all__ = ["CacheStore", "CacheContext", "CacheEntry", "CacheStatistics"]
