import time
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from ...domain.exceptions import MissingParameterError
from ...domain.models import ErrorResponse
from ...logging import error, warning, LogRecord, LogEvent
from .dependencies import get_cache_context


def build_error_response(
    status_code: int, message: str, provider: Optional[str] = None
) -> JSONResponse:
    """Creates a JSONResponse with the ``{error, provider}`` payload."""
    payload = ErrorResponse(error=message, provider=provider)
    return JSONResponse(
        status_code=status_code, content=payload.model_dump(exclude_none=True)
    )


async def log_and_return_error_response(
    request: Request,
    status_code: int,
    error_message: str,
    caught_exception: Optional[Exception] = None,
    provider: Optional[str] = None,
) -> JSONResponse:
    """Log a failed request and build its error response.

    The response is never cached: the request's cache context is disabled
    before the response leaves the handler.
    """
    request_id = getattr(request.state, "request_id", "unknown")
    start_time_mono = getattr(request.state, "start_time_monotonic", time.monotonic())
    duration_ms = (time.monotonic() - start_time_mono) * 1000

    context = get_cache_context(request)
    if not context.finalized:
        context.disable()

    log_data = {
        "status_code": status_code,
        "duration_ms": duration_ms,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    record = LogRecord(
        event=LogEvent.REQUEST_FAILURE.value,
        message=f"Request failed: {error_message}",
        request_id=request_id,
        data=log_data,
    )
    if status_code >= 500:
        error(record, exc=caught_exception)
    else:
        warning(record, exc=caught_exception)

    return build_error_response(status_code, error_message, provider)


async def missing_parameter_handler(
    request: Request, exc: MissingParameterError
) -> JSONResponse:
    """Reject a request that lacks a required query parameter with 400."""
    warning(
        LogRecord(
            event=LogEvent.VALIDATION_FAILURE.value,
            message=exc.message,
            request_id=getattr(request.state, "request_id", None),
            data={"parameter": exc.parameter, "path": request.url.path},
        )
    )
    get_cache_context(request).disable()
    return build_error_response(400, exc.message)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return await log_and_return_error_response(
        request,
        500,
        "An unexpected internal server error occurred.",
        caught_exception=exc,
    )
