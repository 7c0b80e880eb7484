"""Maps upstream error signals to user-facing responses and cache policy."""

from typing import Dict, Optional

from fastapi.responses import JSONResponse

from .cache.context import CacheContext
from ..constants import (
    CLASSIFIED_ERROR_STATUS_CODE,
    DEFAULT_CACHE_TTL_SECONDS,
    ERROR_MESSAGES,
    ERROR_SIGNAL_SEPARATOR,
)
from ..domain.models import ClassifiedError, ErrorResponse
from ..enums import ErrorCategory, MessageLocale
from ..logging import info, LogRecord, LogEvent


def get_error_type(signal: str) -> str:
    """Return the token before the first ``" - "`` of an error signal.

    A signal without the separator yields an empty token, which classifies
    as :attr:`ErrorCategory.NoData`.
    """
    idx = signal.find(ERROR_SIGNAL_SEPARATOR)
    if idx < 0:
        return ""
    return signal[:idx]


class ErrorClassifier:
    """Turns error signals such as ``"BUSY - timeout"`` into classified responses.

    Every category answers with status 400. ``BUSY`` responses are never
    cached since the upstream is expected to recover within seconds; every
    other category is cached for the default TTL.
    """

    def __init__(
        self,
        default_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        locale: MessageLocale = MessageLocale.English,
    ):
        self._default_ttl = default_ttl_seconds
        self._messages: Dict[ErrorCategory, str] = ERROR_MESSAGES[MessageLocale(locale)]
        self._ttls: Dict[ErrorCategory, int] = {
            category: self._default_ttl for category in ErrorCategory
        }
        self._ttls[ErrorCategory.Busy] = 0

    def categorize(self, signal: str) -> ErrorCategory:
        try:
            return ErrorCategory(get_error_type(signal))
        except ValueError:
            return ErrorCategory.NoData

    def classify(self, signal: str) -> ClassifiedError:
        category = self.categorize(signal)
        return ClassifiedError(
            category=category,
            message=self._messages[category],
            status_code=CLASSIFIED_ERROR_STATUS_CODE,
            cache_ttl=self._ttls[category],
        )

    def respond(
        self,
        signal: str,
        provider_name: str,
        cache_context: CacheContext,
        request_id: Optional[str] = None,
    ) -> JSONResponse:
        """Classify ``signal``, record its cache TTL on ``cache_context`` and build the response.

        Args:
            signal: Error signal raised by the provider lookup.
            provider_name: Display name of the provider, echoed in the payload.
            cache_context: Cache policy of the current request.
            request_id: Optional request ID for logging.

        Returns:
            JSONResponse with ``{"error": message, "provider": provider_name}``.
        """
        classified = self.classify(signal)
        cache_context.set_ttl(classified.cache_ttl)

        info(
            LogRecord(
                event=LogEvent.CLASSIFIED_ERROR.value,
                message=f"Provider error classified as {classified.category.value}",
                request_id=request_id,
                data={
                    "signal": signal,
                    "provider": provider_name,
                    "category": classified.category.value,
                    "cache_ttl": classified.cache_ttl,
                },
            )
        )

        payload = ErrorResponse(error=classified.message, provider=provider_name)
        return JSONResponse(
            status_code=classified.status_code, content=payload.model_dump()
        )
