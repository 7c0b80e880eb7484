"""Tests for the HTTP tracking provider and its error signals."""

import httpx
import pytest
import respx

from trackproxy.application.error_classifier import get_error_type
from trackproxy.domain.exceptions import ProviderError
from trackproxy.infrastructure.providers.http_provider import HttpTrackingProvider


@pytest.fixture
def provider(test_settings) -> HttpTrackingProvider:
    return HttpTrackingProvider(test_settings)


async def _signal_for(provider: HttpTrackingProvider, slug: str = "sky") -> ProviderError:
    with pytest.raises(ProviderError) as exc_info:
        await provider.get_info(slug, "RR123")
    return exc_info.value


class TestHttpTrackingProvider:
    @pytest.mark.anyio
    @respx.mock
    async def test_success(self, provider):
        route = respx.get("http://tracking.test/sky").mock(
            return_value=httpx.Response(200, json={"id": "RR123", "states": []})
        )

        result = await provider.get_info("sky", "RR123")

        assert result == {"id": "RR123", "states": []}
        assert route.called
        assert route.calls.last.request.url.params["id"] == "RR123"
        assert "postalcode" not in route.calls.last.request.url.params

    @pytest.mark.anyio
    @respx.mock
    async def test_postal_code_is_forwarded(self, provider):
        route = respx.get("http://tracking.test/correos").mock(
            return_value=httpx.Response(200, json={"id": "PQ1"})
        )

        await provider.get_info("correos", "PQ1", "1000")

        params = route.calls.last.request.url.params
        assert params["id"] == "PQ1"
        assert params["postalcode"] == "1000"

    @pytest.mark.anyio
    @respx.mock
    async def test_upstream_signal_is_passed_through(self, provider):
        respx.get("http://tracking.test/sky").mock(
            return_value=httpx.Response(200, json={"error": "PARSER - bad markup"})
        )

        error = await _signal_for(provider)

        assert error.signal == "PARSER - bad markup"
        assert error.provider_slug == "sky"
        assert error.status_code == 200

    @pytest.mark.anyio
    @respx.mock
    async def test_upstream_signal_on_error_status(self, provider):
        respx.get("http://tracking.test/sky").mock(
            return_value=httpx.Response(502, json={"error": "DOWN - carrier offline"})
        )

        error = await _signal_for(provider)

        assert error.signal == "DOWN - carrier offline"
        assert error.status_code == 502

    @pytest.mark.anyio
    @respx.mock
    async def test_timeout_is_busy(self, provider):
        respx.get("http://tracking.test/sky").mock(
            side_effect=httpx.ReadTimeout("read timed out")
        )

        error = await _signal_for(provider)

        assert get_error_type(error.signal) == "BUSY"

    @pytest.mark.anyio
    @respx.mock
    async def test_connection_failure_is_down(self, provider):
        respx.get("http://tracking.test/sky").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        error = await _signal_for(provider)

        assert get_error_type(error.signal) == "DOWN"
        assert error.signal == "DOWN - connection refused"

    @pytest.mark.anyio
    @respx.mock
    async def test_server_error_is_unavailable(self, provider):
        respx.get("http://tracking.test/sky").mock(
            return_value=httpx.Response(503, json={"message": "maintenance"})
        )

        error = await _signal_for(provider)

        assert error.signal == "UNAVAILABLE - HTTP 503"
        assert error.status_code == 503

    @pytest.mark.anyio
    @respx.mock
    async def test_empty_body_is_empty(self, provider):
        respx.get("http://tracking.test/sky").mock(return_value=httpx.Response(200))

        error = await _signal_for(provider)

        assert get_error_type(error.signal) == "EMPTY"

    @pytest.mark.anyio
    @respx.mock
    async def test_invalid_json_is_parser(self, provider):
        respx.get("http://tracking.test/sky").mock(
            return_value=httpx.Response(200, text="<html>oops</html>")
        )

        error = await _signal_for(provider)

        assert get_error_type(error.signal) == "PARSER"

    @pytest.mark.anyio
    @respx.mock
    async def test_non_object_payload_is_parser(self, provider):
        respx.get("http://tracking.test/sky").mock(
            return_value=httpx.Response(200, json=["a", "b"])
        )

        error = await _signal_for(provider)

        assert get_error_type(error.signal) == "PARSER"

    @pytest.mark.anyio
    @respx.mock
    async def test_client_error_without_signal_has_no_token(self, provider):
        respx.get("http://tracking.test/sky").mock(
            return_value=httpx.Response(404, json={"message": "not found"})
        )

        error = await _signal_for(provider)

        assert error.signal == "HTTP 404"
        assert get_error_type(error.signal) == ""

    @pytest.mark.anyio
    async def test_close_closes_client(self, test_settings):
        client = httpx.AsyncClient(base_url=test_settings.upstream_base_url)
        provider = HttpTrackingProvider(test_settings, client=client)

        await provider.close()

        assert client.is_closed
