"""Custom exception hierarchy for TrackProxy.

Provider failures carry an error signal (``"<TOKEN> - <detail>"``) that the
error classifier turns into a user-facing response; the remaining types
cover request validation and configuration problems.
"""

from typing import Optional, Dict, Any


class TrackProxyException(Exception):
    """Base exception for all TrackProxy-specific exceptions."""

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id
        self.details = details or {}


class ProviderError(TrackProxyException):
    """Raised when a tracking provider lookup fails.

    The message is the error signal itself, e.g. ``"BUSY - upstream timed out"``.
    """

    def __init__(
        self,
        signal: str,
        provider_slug: Optional[str] = None,
        status_code: Optional[int] = None,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(signal, request_id, details)
        self.signal = signal
        self.provider_slug = provider_slug
        self.status_code = status_code


class MissingParameterError(TrackProxyException):
    """Raised when a required query parameter is absent from the request."""

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, request_id, details)
        self.parameter = parameter


class ConfigurationError(TrackProxyException):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, request_id, details)
        self.config_key = config_key
