"""Tests for the map session router.

Each test builds a bare FastAPI app with the router and a SessionManager
over a temporary lots file.
"""
from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import ValidationError

from lotmap.config import MapConfig
from lotmap_server.routers.map import (
    CreateSessionRequest,
    OutsideClickRequest,
    PointerEventRequest,
    router,
)
from lotmap_server.sessions import SessionManager


def _make_app(lots_source: str, config: MapConfig | None = None) -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    app.state.sessions = SessionManager(config or MapConfig(), lots_source)
    return app


@pytest.fixture
def client(lots_file):
    return TestClient(_make_app(str(lots_file)))


@pytest.fixture
def session_id(client):
    resp = client.post("/api/map/sessions", json={"width": 1280, "height": 800})
    assert resp.status_code == 200
    return resp.json()["session_id"]


def _event(client, session_id, kind, feature_id):
    return client.post(
        f"/api/map/sessions/{session_id}/events",
        json={"kind": kind, "feature_id": feature_id},
    )


# ---------------------------------------------------------------------------
# Pydantic Models
# ---------------------------------------------------------------------------

@pytest.mark.unit
class TestModels:
    """Request model validation."""

    def test_create_defaults(self):
        r = CreateSessionRequest()
        assert (r.width, r.height) == (1280, 800)

    def test_create_rejects_zero(self):
        with pytest.raises(ValidationError):
            CreateSessionRequest(width=0)

    def test_pointer_kind(self):
        assert PointerEventRequest(kind="touchend", feature_id="a").kind == "touchend"
        with pytest.raises(ValidationError):
            PointerEventRequest(kind="dblclick", feature_id="a")

    def test_outside_click_defaults(self):
        r = OutsideClickRequest()
        assert r.in_map is False and r.in_panel is False


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@pytest.mark.unit
class TestConfigEndpoint:

    def test_config(self, client):
        data = client.get("/api/map/config").json()
        assert data["basemap"] == "satellite"
        assert "satellite" in data["basemaps"]
        assert data["label_min_zoom"] == 18
        assert data["fly"] == {"duration": 1.2, "ease_linearity": 0.25}

    def test_not_initialised(self):
        app = FastAPI()
        app.include_router(router)
        resp = TestClient(app).get("/api/map/config")
        assert resp.status_code == 503


@pytest.mark.unit
class TestSessionEndpoints:

    def test_create(self, client):
        data = client.post("/api/map/sessions", json={}).json()
        assert data["loaded"] is True
        assert data["loading"] is False
        assert data["home_view"] == data["camera"]
        assert len(data["labels"]) == 4

    def test_create_with_missing_lots(self, tmp_path):
        client = TestClient(_make_app(str(tmp_path / "missing.geojson")))
        data = client.post("/api/map/sessions", json={}).json()
        assert data["loaded"] is False
        assert data["notice"] == "Error loading property data. Please refresh the page."
        assert data["features"] == {}

    def test_get_and_list(self, client, session_id):
        assert client.get(f"/api/map/sessions/{session_id}").json()["session_id"] == session_id
        assert session_id in client.get("/api/map/sessions").json()

    def test_delete(self, client, session_id):
        assert client.delete(f"/api/map/sessions/{session_id}").status_code == 200
        assert client.get(f"/api/map/sessions/{session_id}").status_code == 404
        assert client.delete(f"/api/map/sessions/{session_id}").status_code == 404

    def test_unknown_session(self, client):
        assert client.get("/api/map/sessions/nope").status_code == 404
        assert client.post("/api/map/sessions/nope/reset").status_code == 404


@pytest.mark.unit
class TestInteractionEndpoints:

    def test_click_selects(self, client, session_id):
        data = _event(client, session_id, "click", "f3").json()
        assert data["selected_id"] == "f3"
        assert data["panel"]["visible"] is True
        assert data["panel"]["details"]["lot_number"] == "3"
        assert data["panel"]["details"]["status"] == "Sold"
        assert data["features"]["f3"]["style"]["fillOpacity"] == 0.7
        assert data["animation"]["duration"] == 1.2

    def test_touch_prevents_default(self, client, session_id):
        data = _event(client, session_id, "touchend", "f2").json()
        assert data["default_prevented"] is True
        assert data["selected_id"] == "f2"

    def test_hover_below_label_zoom_opens_tooltip(self, client, session_id):
        client.post(f"/api/map/sessions/{session_id}/zoom", json={"zoom": 16})
        data = _event(client, session_id, "mouseover", "f1").json()
        assert data["labels_visible"] is False
        assert data["features"]["f1"]["tooltip_open"] is True
        assert data["cursor"] == "pointer"

        data = client.post(f"/api/map/sessions/{session_id}/zoom", json={"zoom": 18}).json()
        assert data["labels_visible"] is True
        assert data["features"]["f1"]["tooltip_open"] is False

    def test_unknown_feature(self, client, session_id):
        assert _event(client, session_id, "click", "nope").status_code == 404

    def test_bad_kind(self, client, session_id):
        assert _event(client, session_id, "dblclick", "f1").status_code == 422

    def test_events_before_load(self, tmp_path):
        client = TestClient(_make_app(str(tmp_path / "missing.geojson")))
        sid = client.post("/api/map/sessions", json={}).json()["session_id"]
        assert _event(client, sid, "click", "f1").status_code == 409

    def test_close(self, client, session_id):
        _event(client, session_id, "click", "f1")
        data = client.post(f"/api/map/sessions/{session_id}/close").json()
        assert data["selected_id"] is None
        assert data["panel"]["visible"] is False
        assert data["features"]["f1"]["style"]["fillOpacity"] == 0.3

    def test_reset_twice(self, client, session_id):
        _event(client, session_id, "click", "f1")
        first = client.post(f"/api/map/sessions/{session_id}/reset").json()
        second = client.post(f"/api/map/sessions/{session_id}/reset").json()
        assert first["camera"] == first["home_view"]
        assert second["camera"] == first["camera"]
        assert second["panel"]["visible"] is False

    def test_outside_click(self, client, session_id):
        _event(client, session_id, "click", "f1")
        data = client.post(
            f"/api/map/sessions/{session_id}/outside-click",
            json={"in_map": True},
        ).json()
        assert data["panel"]["visible"] is True

        camera = data["camera"]
        data = client.post(
            f"/api/map/sessions/{session_id}/outside-click", json={}
        ).json()
        assert data["panel"]["visible"] is False
        assert data["camera"] == camera
