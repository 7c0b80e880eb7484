"""Records Cainiao tracking IDs that came back without any state.

Cainiao sometimes needs a manual action before it returns data for a
parcel. The first empty answer for an ID is logged to a file so it can be
handled by hand, and that answer is not cached so the next lookup hits the
carrier again.
"""

import json
from typing import Any, Dict, Optional, Set

import aiofiles  # type: ignore[import-untyped]
import anyio

from ..logging import info, warning, LogRecord, LogEvent


class PendingIdLog:
    def __init__(self, file_path: Optional[str] = None) -> None:
        self._file_path = file_path
        self._seen: Set[str] = set()
        self._lock = anyio.Lock()

    def __contains__(self, tracking_id: str) -> bool:
        return tracking_id in self._seen

    async def record(self, tracking_id: str, entity: Dict[str, Any]) -> bool:
        """Remember ``tracking_id`` and append it to the log file.

        Returns:
            True the first time an ID is recorded, False afterwards.
        """
        async with self._lock:
            if tracking_id in self._seen:
                return False
            self._seen.add(tracking_id)

        if self._file_path:
            line = f"{tracking_id}: {json.dumps(entity, ensure_ascii=False)}\n\n"
            try:
                async with aiofiles.open(self._file_path, "a", encoding="utf-8") as f:
                    await f.write(line)
            except OSError as e:
                warning(
                    LogRecord(
                        event=LogEvent.CAINIAO_PENDING_ID.value,
                        message="Failed to write pending Cainiao ID",
                        data={"id": tracking_id, "file": self._file_path},
                    ),
                    exc=e,
                )

        info(
            LogRecord(
                event=LogEvent.CAINIAO_PENDING_ID.value,
                message="Cainiao ID without states recorded",
                data={"id": tracking_id},
            )
        )
        return True
