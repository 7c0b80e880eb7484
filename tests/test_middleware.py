"""Tests for the request ID / timing middleware."""

import time
import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from fastapi.responses import JSONResponse

from trackproxy.interfaces.http.middleware import logging_middleware


def _app_with_middleware() -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def middleware(request: Request, call_next):
        return await logging_middleware(request, call_next)

    return app


class TestLoggingMiddleware:
    """Test logging middleware functionality."""

    def test_adds_request_id_to_state(self):
        app = _app_with_middleware()

        @app.get("/test")
        async def endpoint(request: Request):
            assert isinstance(request.state.request_id, str)
            return {"request_id": request.state.request_id}

        client = TestClient(app)
        response = client.get("/test")
        assert response.status_code == 200
        assert response.json()["request_id"] == response.headers["X-Request-ID"]

    def test_adds_response_time_header(self):
        app = _app_with_middleware()

        @app.get("/test")
        async def endpoint():
            return {"ok": True}

        client = TestClient(app)
        response = client.get("/test")
        assert float(response.headers["X-Response-Time-ms"]) >= 0

    def test_preserves_existing_request_id(self):
        app = FastAPI()
        existing_id = "existing-request-id-123"

        @app.middleware("http")
        async def set_id_first(request: Request, call_next):
            request.state.request_id = existing_id
            return await call_next(request)

        @app.middleware("http")
        async def middleware(request: Request, call_next):
            return await logging_middleware(request, call_next)

        @app.get("/test")
        async def endpoint(request: Request):
            return {"request_id": request.state.request_id}

        client = TestClient(app)
        response = client.get("/test")
        assert response.json()["request_id"] == existing_id
        assert response.headers["X-Request-ID"] == existing_id

    def test_preserves_existing_start_time(self):
        app = FastAPI()
        existing_time = time.monotonic()

        @app.middleware("http")
        async def set_time_first(request: Request, call_next):
            request.state.start_time_monotonic = existing_time
            return await call_next(request)

        @app.middleware("http")
        async def middleware(request: Request, call_next):
            return await logging_middleware(request, call_next)

        @app.get("/test")
        async def endpoint(request: Request):
            return {"start_time": request.state.start_time_monotonic}

        client = TestClient(app)
        assert client.get("/test").json()["start_time"] == existing_time

    @pytest.mark.parametrize("status_code", [400, 404])
    def test_headers_on_error_responses(self, status_code):
        app = _app_with_middleware()

        @app.get("/error")
        async def error_endpoint():
            return JSONResponse(status_code=status_code, content={"error": "Bad request"})

        client = TestClient(app)
        response = client.get("/error")
        assert response.status_code == status_code
        assert "X-Request-ID" in response.headers
        assert "X-Response-Time-ms" in response.headers
