from typing import Any, Dict, Optional
from typing_extensions import Protocol


class TrackingProvider(Protocol):
    """Looks up tracking data; raises ``ProviderError`` carrying an error signal on failure."""

    async def get_info(
        self, slug: str, tracking_id: str, postal_code: Optional[str] = None
    ) -> Dict[str, Any]: ...

    async def close(self) -> None: ...
