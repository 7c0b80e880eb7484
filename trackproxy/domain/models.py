from typing import Optional
from pydantic import BaseModel

from ..enums import ErrorCategory


class ProviderInfo(BaseModel):
    """Display metadata for a tracking provider.

    Attributes:
        name (str): Name shown to the user, e.g. 'Sky56'.
        css_class (str): Background colour class for the UI (bootstrap names).
    """

    name: str
    css_class: str


class ErrorResponse(BaseModel):
    """Wire shape of every error response.

    Attributes:
        error (str): User-facing message.
        provider (Optional[str]): Display name of the provider that failed;
            absent for request validation errors.
    """

    error: str
    provider: Optional[str] = None


class ClassifiedError(BaseModel):
    """Outcome of classifying an upstream error signal.

    Attributes:
        category (ErrorCategory): Category the signal's token maps to.
        message (str): Localized user-facing message.
        status_code (int): HTTP status of the response, always 400.
        cache_ttl (int): Seconds the error response may be cached; 0 disables caching.
    """

    category: ErrorCategory
    message: str
    status_code: int
    cache_ttl: int
