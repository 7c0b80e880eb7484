"""Tests for the Cainiao pending ID log."""

import pytest

from trackproxy.application.pending_ids import PendingIdLog


class TestPendingIdLog:
    @pytest.mark.anyio
    async def test_first_record_returns_true(self, tmp_path):
        log = PendingIdLog(str(tmp_path / "ids.txt"))

        assert await log.record("LP1", {"id": "LP1", "states": []}) is True
        assert "LP1" in log

    @pytest.mark.anyio
    async def test_repeated_record_returns_false(self, tmp_path):
        path = tmp_path / "ids.txt"
        log = PendingIdLog(str(path))

        await log.record("LP1", {"id": "LP1"})
        assert await log.record("LP1", {"id": "LP1"}) is False

        assert path.read_text(encoding="utf-8") == 'LP1: {"id": "LP1"}\n\n'

    @pytest.mark.anyio
    async def test_appends_each_new_id(self, tmp_path):
        path = tmp_path / "ids.txt"
        log = PendingIdLog(str(path))

        await log.record("LP1", {"id": "LP1"})
        await log.record("LP2", {"id": "LP2", "destino": "Lisboa"})

        assert path.read_text(encoding="utf-8") == (
            'LP1: {"id": "LP1"}\n\n' 'LP2: {"id": "LP2", "destino": "Lisboa"}\n\n'
        )

    @pytest.mark.anyio
    async def test_without_file_only_tracks_ids(self):
        log = PendingIdLog(None)

        assert await log.record("LP1", {}) is True
        assert await log.record("LP1", {}) is False

    @pytest.mark.anyio
    async def test_unwritable_file_does_not_raise(self, tmp_path):
        log = PendingIdLog(str(tmp_path / "missing-dir" / "ids.txt"))

        assert await log.record("LP1", {"id": "LP1"}) is True
        assert "LP1" in log
