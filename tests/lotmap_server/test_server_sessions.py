"""Tests for SessionManager — create/get/remove/evict."""

import asyncio

import pytest

from lotmap.config import MapConfig
from lotmap.loader import LOAD_FAILURE_NOTICE
from lotmap_server.sessions import SessionManager


@pytest.fixture
def manager(lots_file):
    return SessionManager(MapConfig(), str(lots_file), max_sessions=3)


@pytest.mark.unit
class TestSessionManager:
    """Session registry operations."""

    def test_create_loads_lots(self, manager):
        session = asyncio.run(manager.create(1280, 800))
        assert session.engine.loaded
        assert manager.get(session.session_id) is session
        assert session.created_at

    def test_state(self, manager):
        session = asyncio.run(manager.create())
        state = session.state()
        assert state["session_id"] == session.session_id
        assert state["loading"] is False
        assert state["notice"] is None
        assert state["panel"] == {"visible": False, "details": None}
        assert set(state["features"]) == {"f1", "f2", "f3", "open", "f5"}

    def test_mobile_viewport_starts_further_out(self, tmp_path):
        manager = SessionManager(MapConfig(), str(tmp_path / "missing.geojson"))
        session = asyncio.run(manager.create(375, 667))
        assert session.surface.get_view().zoom == 16

    def test_failed_load_still_creates_session(self, tmp_path):
        manager = SessionManager(MapConfig(), str(tmp_path / "missing.geojson"))
        session = asyncio.run(manager.create())
        assert session.engine.loaded is False
        assert session.state()["notice"] == LOAD_FAILURE_NOTICE
        assert manager.get(session.session_id) is session

    def test_sessions_are_independent(self, manager):
        first = asyncio.run(manager.create())
        second = asyncio.run(manager.create())
        first.engine.activate("f1")
        assert second.engine.selected_id is None

    def test_remove(self, manager):
        session = asyncio.run(manager.create())
        assert manager.remove(session.session_id) is True
        assert manager.get(session.session_id) is None
        assert manager.remove(session.session_id) is False

    def test_oldest_evicted(self, manager):
        sessions = [asyncio.run(manager.create()) for _ in range(4)]
        ids = [s.session_id for s in manager.list_sessions()]
        assert sessions[0].session_id not in ids
        assert ids == [s.session_id for s in sessions[1:]]
