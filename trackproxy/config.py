from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices, field_validator
from typing import Optional, List, Union, Any

from urllib.parse import urlparse

from .constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_CLEANUP_INTERVAL_SECONDS,
    DEFAULT_CACHE_PATH_PREFIX,
    DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
)
from .domain.exceptions import ConfigurationError
from .enums import MessageLocale

__all__ = ["Settings", "ConfigurationError"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
        populate_by_name=True,
    )

    app_name: str = "TrackProxy"
    app_version: str = "1.0.0"
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL"))
    log_file_path: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LOG_FILE_PATH")
    )
    error_log_file_path: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("ERROR_LOG_FILE_PATH")
    )
    log_pretty_console: bool = Field(
        default=False, validation_alias=AliasChoices("LOG_PRETTY_CONSOLE")
    )
    host: str = "127.0.0.1"
    port: int = Field(default=3000, validation_alias=AliasChoices("PORT"))
    reload: bool = False

    redact_log_fields: Union[List[str], str] = Field(
        default_factory=lambda: ["authorization", "cookie"],
        validation_alias=AliasChoices("REDACT_LOG_FIELDS"),
    )

    # Response cache
    cache_default_ttl_seconds: int = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        validation_alias=AliasChoices("CACHE_DEFAULT_TTL_SECONDS"),
    )
    cache_max_entries: int = Field(
        default=DEFAULT_CACHE_MAX_ENTRIES,
        validation_alias=AliasChoices("CACHE_MAX_ENTRIES"),
    )
    cache_cleanup_interval_seconds: int = Field(
        default=DEFAULT_CACHE_CLEANUP_INTERVAL_SECONDS,
        validation_alias=AliasChoices("CACHE_CLEANUP_INTERVAL_SECONDS"),
    )
    cache_path_prefix: str = Field(
        default=DEFAULT_CACHE_PATH_PREFIX,
        validation_alias=AliasChoices("CACHE_PATH_PREFIX"),
    )

    error_message_locale: MessageLocale = Field(
        default=MessageLocale.English,
        validation_alias=AliasChoices("ERROR_MESSAGE_LOCALE"),
    )

    # Upstream tracking backend
    upstream_base_url: str = Field(
        default="http://127.0.0.1:8080",
        validation_alias=AliasChoices("UPSTREAM_BASE_URL"),
    )
    upstream_timeout_seconds: float = Field(
        default=DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
        validation_alias=AliasChoices("UPSTREAM_TIMEOUT_SECONDS"),
    )

    cainiao_ids_file_path: Optional[str] = Field(
        default="cainiaoids.txt",
        validation_alias=AliasChoices("CAINIAO_IDS_FILE_PATH"),
    )

    @field_validator("redact_log_fields")
    @classmethod
    def parse_comma_separated(cls, v: Union[List[str], str]) -> List[str]:
        """Parse a comma-separated string into a list of stripped, non-empty items."""
        if isinstance(v, str):
            if v.strip() == "":
                return []
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    def __init__(self, **kwargs: Any) -> None:
        """Initialize settings and validate cache and upstream configuration.

        Raises:
            ConfigurationError: If any setting is out of range.
        """
        super().__init__(**kwargs)
        self._validate_cache()
        self._validate_upstream()

    def _validate_cache(self) -> None:
        errors = []

        if self.cache_default_ttl_seconds < 0:
            errors.append("CACHE_DEFAULT_TTL_SECONDS must be zero or positive.")
        if self.cache_max_entries < 1:
            errors.append("CACHE_MAX_ENTRIES must be at least 1.")
        if self.cache_cleanup_interval_seconds < 1:
            errors.append("CACHE_CLEANUP_INTERVAL_SECONDS must be at least 1.")
        if not self.cache_path_prefix.startswith("/"):
            errors.append("CACHE_PATH_PREFIX must start with '/'.")

        if errors:
            raise ConfigurationError("\n".join(errors), config_key="cache")

    def _validate_upstream(self) -> None:
        parsed = urlparse(self.upstream_base_url)
        if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
            raise ConfigurationError(
                "UPSTREAM_BASE_URL must be an http(s) URL.",
                config_key="upstream_base_url",
            )
        if self.upstream_timeout_seconds <= 0:
            raise ConfigurationError(
                "UPSTREAM_TIMEOUT_SECONDS must be positive.",
                config_key="upstream_timeout_seconds",
            )
