from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from unittest.mock import MagicMock, patch
import pytest

from trackproxy.config import Settings


# Configure anyio to only use asyncio backend
@pytest.fixture
def anyio_backend() -> str:
    """Force tests to use asyncio backend only."""
    return "asyncio"


@pytest.fixture(autouse=True, scope="session")
def mock_logger() -> Iterator[MagicMock]:
    with patch("trackproxy.logging._logger", MagicMock()) as mock_logger:
        mock_logger.log.return_value = None
        yield mock_logger


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTrackingProvider:
    """In-memory tracking provider returning canned payloads or raising canned errors."""

    def __init__(self, results: Optional[Dict[str, Union[Dict[str, Any], Exception]]] = None):
        self.results = results or {}
        self.calls: List[Tuple[str, str, Optional[str]]] = []
        self.closed = False

    async def get_info(
        self, slug: str, tracking_id: str, postal_code: Optional[str] = None
    ) -> Dict[str, Any]:
        self.calls.append((slug, tracking_id, postal_code))
        result = self.results[slug]
        if isinstance(result, Exception):
            raise result
        return dict(result)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        cainiao_ids_file_path=str(tmp_path / "cainiaoids.txt"),
        upstream_base_url="http://tracking.test",
    )
