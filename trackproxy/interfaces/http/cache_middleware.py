"""Response cache middleware for the tracking routes."""

from __future__ import annotations

import json
from typing import Any, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp, Scope
from fastapi import Request

from ...application.cache.context import CacheContext
from ...application.cache.store import CacheStore
from ...constants import (
    CACHEABLE_STATUS_CODES,
    CACHE_STATUS_HEADER,
    DEFAULT_CACHE_PATH_PREFIX,
    DEFAULT_CACHE_TTL_SECONDS,
)
from ...enums import CacheStatus
from ...logging import debug, warning, LogRecord, LogEvent


def build_cache_key(scope: Scope) -> str:
    """Return the raw request target (path plus query string) as sent by the client.

    The query string is used verbatim, so the same parameters in a different
    order produce a different key.
    """
    raw_path: Optional[bytes] = scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else scope["path"]
    query_string: bytes = scope.get("query_string", b"")
    if query_string:
        return f"{path}?{query_string.decode('latin-1')}"
    return path


def _status_for_cached_body(body: bytes) -> int:
    try:
        payload: Any = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        # only JSON bodies carry an error field; anything else replays as a success
        debug(
            LogRecord(
                event=LogEvent.CACHE_EVENT.value,
                message="Cached body is not JSON, replaying with status 200",
                data={"size_bytes": len(body)},
            )
        )
        return 200
    if isinstance(payload, dict) and payload.get("error"):
        return 400
    return 200


class ResponseCacheMiddleware(BaseHTTPMiddleware):
    """Caches GET responses under ``path_prefix`` keyed by the raw request URL.

    On a hit the stored body is replayed without calling the route. On a
    miss the route runs with a fresh :class:`CacheContext` on
    ``request.state.cache_context``; once its body has been produced the
    context's TTL override (or ``default_ttl_seconds``) decides how long the
    body is stored. The response is delivered unchanged either way.
    """

    def __init__(
        self,
        app: ASGIApp,
        store: CacheStore,
        default_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        path_prefix: str = DEFAULT_CACHE_PATH_PREFIX,
    ) -> None:
        """Initializes the response cache middleware.

        Args:
            app: Downstream ASGI application instance
            store: Store the response bodies are kept in
            default_ttl_seconds: TTL used when the route sets no override
            path_prefix: Only requests under this path are cached
        """
        super().__init__(app)
        self._store = store
        self._default_ttl = default_ttl_seconds
        self._path_prefix = path_prefix.rstrip("/")

    def _is_cacheable_request(self, request: Request) -> bool:
        if request.method != "GET":
            return False
        path = request.url.path
        return path == self._path_prefix or path.startswith(self._path_prefix + "/")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self._is_cacheable_request(request):
            return await call_next(request)

        key = build_cache_key(request.scope)
        request_id = getattr(request.state, "request_id", None)

        cached_body = await self._store.get(key)
        if cached_body is not None:
            debug(
                LogRecord(
                    event=LogEvent.CACHE_EVENT.value,
                    message="Cache hit",
                    request_id=request_id,
                    data={"cache_key": key},
                )
            )
            return Response(
                content=cached_body,
                status_code=_status_for_cached_body(cached_body),
                media_type="application/json",
                headers={CACHE_STATUS_HEADER: CacheStatus.Hit.value},
            )

        context = CacheContext()
        request.state.cache_context = context

        response = await call_next(request)

        chunks = []
        async for chunk in response.body_iterator:  # type: ignore[attr-defined]
            chunks.append(chunk if isinstance(chunk, bytes) else chunk.encode("utf-8"))
        body = b"".join(chunks)

        ttl_seconds = context.effective_ttl(self._default_ttl)
        if response.status_code in CACHEABLE_STATUS_CODES:
            try:
                await self._store.put(key, body, ttl_seconds)
            except Exception as e:
                warning(
                    LogRecord(
                        event=LogEvent.CACHE_EVENT.value,
                        message="Failed to cache response",
                        request_id=request_id,
                        data={"cache_key": key},
                    ),
                    exc=e,
                )

        replayed = Response(
            content=body,
            status_code=response.status_code,
            background=response.background,
        )
        # raw headers keep repeated names such as Set-Cookie
        replayed.raw_headers = list(response.raw_headers)
        replayed.headers[CACHE_STATUS_HEADER] = CacheStatus.Miss.value
        return replayed
