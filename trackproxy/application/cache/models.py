"""Data models for the cache module."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CacheEntry:
    """A stored response body with its expiry metadata."""

    key: str
    body: bytes
    stored_at: float
    ttl_seconds: int
    size_bytes: int = field(default=0, compare=False)

    def __post_init__(self):
        if self.size_bytes == 0:
            object.__setattr__(self, "size_bytes", len(self.body))

    @property
    def expires_at(self) -> float:
        return self.stored_at + self.ttl_seconds

    def is_expired(self, now: float) -> bool:
        """An entry is valid only while ``now < stored_at + ttl_seconds``."""
        return now >= self.expires_at
