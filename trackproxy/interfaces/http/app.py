import logging
from contextlib import asynccontextmanager
from typing import Optional

import anyio
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from ...config import Settings
from ...logging import init_logging
from ...application.cache.store import CacheStore
from ...application.error_classifier import ErrorClassifier
from ...application.pending_ids import PendingIdLog
from ...domain.exceptions import MissingParameterError
from ...infrastructure.providers.base import TrackingProvider
from ...infrastructure.providers.http_provider import HttpTrackingProvider
from .cache_middleware import ResponseCacheMiddleware
from .middleware import logging_middleware
from .errors import missing_parameter_handler, generic_exception_handler
from .routes.tracking import router as tracking_router
from .routes.health import router as health_router
from .routes.monitoring import router as monitoring_router


def create_app(
    settings: Settings, tracking_provider: Optional[TrackingProvider] = None
) -> FastAPI:
    """Creates and configures the FastAPI application instance.

    Initializes logging, the response cache, the error classifier and the
    upstream tracking provider, then registers middleware and routes.

    Args:
        settings: Configuration settings object
        tracking_provider: Provider to use instead of the HTTP tracking backend

    Returns:
        Fully configured FastAPI application instance
    """
    init_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with anyio.create_task_group() as tg:
            logging.info("Starting response cache cleanup task")
            tg.start_soon(app.state.cache_store.run_cleanup_loop)
            try:
                yield
            finally:
                logging.info("Initiating application shutdown")
                tg.cancel_scope.cancel()

        try:
            await app.state.tracking_provider.close()
        except Exception as e:
            logging.error(f"Failed to close tracking provider: {str(e)}")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=None,
        redoc_url=None,
        description="Caches and normalizes parcel tracking lookups.",
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
    )
    app.state.settings = settings
    app.state.cache_store = CacheStore(
        max_entries=settings.cache_max_entries,
        cleanup_interval_seconds=settings.cache_cleanup_interval_seconds,
    )
    app.state.error_classifier = ErrorClassifier(
        default_ttl_seconds=settings.cache_default_ttl_seconds,
        locale=settings.error_message_locale,
    )
    app.state.tracking_provider = tracking_provider or HttpTrackingProvider(settings)
    app.state.pending_ids = PendingIdLog(settings.cainiao_ids_file_path)

    # Order: request id/timing (outermost) -> response cache -> routes
    app.add_middleware(
        ResponseCacheMiddleware,
        store=app.state.cache_store,
        default_ttl_seconds=settings.cache_default_ttl_seconds,
        path_prefix=settings.cache_path_prefix,
    )
    app.middleware("http")(logging_middleware)
    logging.info(
        f"Response cache enabled for {settings.cache_path_prefix} "
        f"(default TTL {settings.cache_default_ttl_seconds}s)"
    )

    app.include_router(
        tracking_router, prefix=settings.cache_path_prefix.rstrip("/"), tags=["Tracking"]
    )
    app.include_router(health_router, tags=["Health"])
    app.include_router(monitoring_router, tags=["Monitoring"])

    app.add_exception_handler(MissingParameterError, missing_parameter_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)

    return app
