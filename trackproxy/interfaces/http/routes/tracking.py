from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from ....application.cache.context import CacheContext
from ....application.error_classifier import ErrorClassifier
from ....application.pending_ids import PendingIdLog
from ....application.provider_registry import POSTAL_CODE_PROVIDERS, get_provider
from ....domain.exceptions import ProviderError
from ....infrastructure.providers.base import TrackingProvider
from ....logging import warning, LogRecord, LogEvent
from ..dependencies import (
    get_cache_context,
    get_error_classifier,
    get_pending_ids,
    get_tracking_provider,
    require_id,
    require_postal_code,
)

router = APIRouter()


async def _fetch(
    request: Request,
    provider: TrackingProvider,
    classifier: ErrorClassifier,
    cache_context: CacheContext,
    slug: str,
    display_name: str,
    tracking_id: str,
    postal_code: Optional[str] = None,
) -> Union[Dict[str, Any], JSONResponse]:
    """Look up tracking data, or the classified error response when the lookup fails."""
    request_id = getattr(request.state, "request_id", None)
    try:
        return await provider.get_info(slug, tracking_id, postal_code)
    except ProviderError as e:
        return classifier.respond(e.signal, display_name, cache_context, request_id)
    except Exception as e:
        warning(
            LogRecord(
                event=LogEvent.PROVIDER_ERROR.value,
                message=f"Unexpected failure from provider {slug}",
                request_id=request_id,
                data={"provider": slug},
            ),
            exc=e,
        )
        return classifier.respond(str(e), display_name, cache_context, request_id)


async def _postal_code_lookup(
    slug: str,
    request: Request,
    tracking_id: str,
    postal_code: str,
    cache_context: CacheContext,
    provider: TrackingProvider,
    classifier: ErrorClassifier,
) -> JSONResponse:
    result = await _fetch(
        request,
        provider,
        classifier,
        cache_context,
        slug,
        POSTAL_CODE_PROVIDERS[slug],
        tracking_id,
        postal_code,
    )
    if isinstance(result, JSONResponse):
        return result
    return JSONResponse(content=result)


@router.get("/correos", response_model=None)
async def correos(
    request: Request,
    tracking_id: str = Depends(require_id),
    postal_code: str = Depends(require_postal_code),
    cache_context: CacheContext = Depends(get_cache_context),
    provider: TrackingProvider = Depends(get_tracking_provider),
    classifier: ErrorClassifier = Depends(get_error_classifier),
) -> JSONResponse:
    """Correos Express tracking data."""
    return await _postal_code_lookup(
        "correos", request, tracking_id, postal_code, cache_context, provider, classifier
    )


@router.get("/correosOld", response_model=None)
async def correos_old(
    request: Request,
    tracking_id: str = Depends(require_id),
    postal_code: str = Depends(require_postal_code),
    cache_context: CacheContext = Depends(get_cache_context),
    provider: TrackingProvider = Depends(get_tracking_provider),
    classifier: ErrorClassifier = Depends(get_error_classifier),
) -> JSONResponse:
    """Tracking data from the previous Correos Express system."""
    return await _postal_code_lookup(
        "correosOld", request, tracking_id, postal_code, cache_context, provider, classifier
    )


@router.get("/adicional", response_model=None)
async def adicional(
    request: Request,
    tracking_id: str = Depends(require_id),
    postal_code: str = Depends(require_postal_code),
    cache_context: CacheContext = Depends(get_cache_context),
    provider: TrackingProvider = Depends(get_tracking_provider),
    classifier: ErrorClassifier = Depends(get_error_classifier),
) -> JSONResponse:
    """Adicional tracking data."""
    return await _postal_code_lookup(
        "adicional", request, tracking_id, postal_code, cache_context, provider, classifier
    )


@router.get("/{provider_slug}", response_model=None)
async def track(
    provider_slug: str,
    request: Request,
    tracking_id: str = Depends(require_id),
    cache_context: CacheContext = Depends(get_cache_context),
    provider: TrackingProvider = Depends(get_tracking_provider),
    classifier: ErrorClassifier = Depends(get_error_classifier),
    pending_ids: PendingIdLog = Depends(get_pending_ids),
) -> JSONResponse:
    """Tracking data for providers that only need an ID.

    The payload is extended with the provider's display name (``provider``)
    and background colour class (``color``).
    """
    provider_info = get_provider(provider_slug)
    if provider_info is None:
        cache_context.disable()
        raise HTTPException(status_code=404, detail=f"Unknown provider '{provider_slug}'")

    result = await _fetch(
        request,
        provider,
        classifier,
        cache_context,
        provider_slug,
        provider_info.name,
        tracking_id,
    )
    if isinstance(result, JSONResponse):
        return result

    if provider_slug == "cainiao" and not result.get("states"):
        if await pending_ids.record(tracking_id, result):
            cache_context.disable()

    result["provider"] = provider_info.name
    result["color"] = provider_info.css_class
    return JSONResponse(content=result)
