"""Per-request cache policy shared between route handlers and the cache middleware."""

from typing import Optional


class CacheContext:
    """
    Carries the TTL override for one response.

    Handlers (and the error classifier on their behalf) may set the override
    any number of times while the request is being handled; the cache
    middleware reads it once the response body has been produced and then
    freezes the context. ``None`` means "use the middleware default" and
    ``0`` means "do not cache this response".
    """

    __slots__ = ("_ttl_override", "_finalized")

    def __init__(self) -> None:
        self._ttl_override: Optional[int] = None
        self._finalized = False

    @property
    def ttl_override(self) -> Optional[int]:
        return self._ttl_override

    @property
    def finalized(self) -> bool:
        return self._finalized

    def set_ttl(self, seconds: int) -> None:
        """Override the cache duration of the current response.

        Raises:
            ValueError: If ``seconds`` is not a non-negative integer.
            RuntimeError: If the response has already been finalized.
        """
        if isinstance(seconds, bool) or not isinstance(seconds, int):
            raise ValueError(f"TTL override must be an integer, got {seconds!r}")
        if seconds < 0:
            raise ValueError(f"TTL override must be >= 0, got {seconds}")
        if self._finalized:
            raise RuntimeError("TTL override set after the response was finalized")
        self._ttl_override = seconds

    def disable(self) -> None:
        """Do not cache the current response."""
        self.set_ttl(0)

    def effective_ttl(self, default_ttl: int) -> int:
        """Freeze the context and return the TTL to store the response with."""
        self._finalized = True
        if self._ttl_override is None:
            return default_ttl
        return self._ttl_override
