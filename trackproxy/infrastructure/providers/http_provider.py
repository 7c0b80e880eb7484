"""
Tracking provider backed by an HTTP tracking backend.
Converts transport and upstream failures into error signals at this boundary.
"""

import json
from typing import Any, Dict, Optional

import httpx

from ...config import Settings
from ...domain.exceptions import ProviderError
from ...enums import ErrorCategory
from ...constants import ERROR_SIGNAL_SEPARATOR
from ...logging import debug, warning, LogRecord, LogEvent


def _signal(category: ErrorCategory, detail: str) -> str:
    return f"{category.value}{ERROR_SIGNAL_SEPARATOR}{detail}"


class HttpTrackingProvider:
    """
    Fetches ``GET {base_url}/{slug}?id=...[&postalcode=...]`` from the tracking backend.

    The backend answers with the tracking payload as JSON, or with
    ``{"error": "<TOKEN> - <detail>"}`` when the carrier lookup failed.
    Failures are raised as :class:`ProviderError`:

    - timeouts -> ``BUSY``
    - connection failures -> ``DOWN``
    - 5xx without a signal -> ``UNAVAILABLE``
    - empty body -> ``EMPTY``
    - undecodable body -> ``PARSER``
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings
        self._client = client or httpx.AsyncClient(
            base_url=settings.upstream_base_url,
            timeout=httpx.Timeout(settings.upstream_timeout_seconds),
            headers={"User-Agent": f"{settings.app_name}/{settings.app_version}"},
        )

    async def get_info(
        self, slug: str, tracking_id: str, postal_code: Optional[str] = None
    ) -> Dict[str, Any]:
        params = {"id": tracking_id}
        if postal_code is not None:
            params["postalcode"] = postal_code

        debug(
            LogRecord(
                event=LogEvent.PROVIDER_REQUEST.value,
                message=f"Requesting tracking data from {slug}",
                data={"provider": slug, "params": params},
            )
        )

        try:
            response = await self._client.get(f"/{slug}", params=params)
        except httpx.TimeoutException as e:
            raise self._failure(
                slug, _signal(ErrorCategory.Busy, str(e) or "timeout"), e
            ) from e
        except httpx.TransportError as e:
            raise self._failure(
                slug, _signal(ErrorCategory.Down, str(e) or "connection failed"), e
            ) from e

        if not response.content.strip():
            raise self._failure(
                slug,
                _signal(ErrorCategory.Empty, f"empty response ({response.status_code})"),
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise self._failure(
                slug,
                _signal(ErrorCategory.Parser, "invalid JSON from tracking backend"),
                e,
                status_code=response.status_code,
            ) from e

        if isinstance(payload, dict) and isinstance(payload.get("error"), str):
            raise self._failure(
                slug, payload["error"], status_code=response.status_code
            )

        if response.status_code >= 500:
            raise self._failure(
                slug,
                _signal(ErrorCategory.Unavailable, f"HTTP {response.status_code}"),
                status_code=response.status_code,
            )

        if response.is_error:
            raise self._failure(
                slug,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if not isinstance(payload, dict):
            raise self._failure(
                slug,
                _signal(ErrorCategory.Parser, "unexpected payload shape"),
                status_code=response.status_code,
            )

        return payload

    def _failure(
        self,
        slug: str,
        signal: str,
        cause: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ) -> ProviderError:
        warning(
            LogRecord(
                event=LogEvent.PROVIDER_ERROR.value,
                message=f"Tracking lookup failed for {slug}",
                data={"provider": slug, "signal": signal, "status_code": status_code},
            ),
            exc=cause,
        )
        return ProviderError(signal, provider_slug=slug, status_code=status_code)

    async def close(self) -> None:
        await self._client.aclose()
