"""FastAPI dependencies shared by the tracking routes."""

from typing import Optional

from fastapi import Query, Request

from ...application.cache.context import CacheContext
from ...application.error_classifier import ErrorClassifier
from ...application.pending_ids import PendingIdLog
from ...constants import MISSING_ID_MESSAGE, MISSING_POSTAL_CODE_MESSAGE
from ...domain.exceptions import MissingParameterError
from ...infrastructure.providers.base import TrackingProvider


def get_cache_context(request: Request) -> CacheContext:
    """Return the cache context of the current request.

    The cache middleware installs one before calling the route; requests it
    does not intercept get a fresh context that nothing reads.
    """
    context = getattr(request.state, "cache_context", None)
    if context is None:
        context = CacheContext()
        request.state.cache_context = context
    return context


def get_tracking_provider(request: Request) -> TrackingProvider:
    return request.app.state.tracking_provider


def get_error_classifier(request: Request) -> ErrorClassifier:
    return request.app.state.error_classifier


def get_pending_ids(request: Request) -> PendingIdLog:
    return request.app.state.pending_ids


def require_id(tracking_id: Optional[str] = Query(None, alias="id")) -> str:
    if not tracking_id:
        raise MissingParameterError(MISSING_ID_MESSAGE, parameter="id")
    return tracking_id


def require_postal_code(
    postal_code: Optional[str] = Query(None, alias="postalcode"),
) -> str:
    if not postal_code:
        raise MissingParameterError(MISSING_POSTAL_CODE_MESSAGE, parameter="postalcode")
    return postal_code
