"""Map session API — create a lot map and drive it with user events.

Every mutating endpoint returns the session's full state (camera, lot
styles, tooltips, labels, details panel, loading notice) so the browser
client can re-render from a single response.
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger
from pydantic import BaseModel, Field

from lotmap.errors import UnknownFeatureError
from lotmap_server.config import BASEMAPS
from lotmap_server.sessions import MapSession, SessionManager

router = APIRouter(prefix="/api/map", tags=["map"])


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class CreateSessionRequest(BaseModel):
    """Viewport of the client map, in CSS pixels."""
    width: int = Field(default=1280, gt=0, le=10000)
    height: int = Field(default=800, gt=0, le=10000)


class PointerEventRequest(BaseModel):
    """A pointer event on one lot polygon."""
    kind: Literal["mouseover", "mouseout", "click", "touchend"]
    feature_id: str


class ZoomRequest(BaseModel):
    """User zoom (wheel or +/- control)."""
    zoom: float = Field(ge=0, le=24)


class OutsideClickRequest(BaseModel):
    """A page click; where it landed relative to the map and the panel."""
    in_map: bool = False
    in_panel: bool = False


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def get_sessions(request: Request) -> SessionManager:
    sessions = getattr(request.app.state, "sessions", None)
    if sessions is None:
        raise HTTPException(status_code=503, detail="Map sessions not initialised")
    return sessions


def _session_or_404(sessions: SessionManager, session_id: str) -> MapSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/config")
async def get_config(sessions: SessionManager = Depends(get_sessions)):
    """Basemaps and interaction thresholds for the client."""
    config = sessions.config
    return {
        "basemap": config.basemap,
        "basemaps": BASEMAPS,
        "label_min_zoom": config.label_min_zoom,
        "label_anchor": config.label_anchor,
        "select_min_zoom": config.select_min_zoom,
        "fly": {
            "duration": config.fly.duration,
            "ease_linearity": config.fly.ease_linearity,
        },
    }


@router.post("/sessions")
async def create_session(
    body: CreateSessionRequest,
    sessions: SessionManager = Depends(get_sessions),
):
    """Create a map session and load the lots into it."""
    session = await sessions.create(width=body.width, height=body.height)
    logger.info(f"Map session {session.session_id} created ({body.width}x{body.height})")
    return session.state()


@router.get("/sessions")
async def list_sessions(sessions: SessionManager = Depends(get_sessions)):
    return [s.session_id for s in sessions.list_sessions()]


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, sessions: SessionManager = Depends(get_sessions)):
    return _session_or_404(sessions, session_id).state()


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, sessions: SessionManager = Depends(get_sessions)):
    if not sessions.remove(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"deleted": session_id}


@router.post("/sessions/{session_id}/events")
async def pointer_event(
    session_id: str,
    body: PointerEventRequest,
    sessions: SessionManager = Depends(get_sessions),
):
    """Deliver a pointer event for one lot."""
    session = _session_or_404(sessions, session_id)
    if not session.engine.loaded:
        raise HTTPException(status_code=409, detail="Lots not loaded")
    try:
        event = session.surface.emit(body.kind, body.feature_id)
    except UnknownFeatureError as e:
        raise HTTPException(status_code=404, detail=str(e))
    state = session.state()
    state["default_prevented"] = event.default_prevented
    return state


@router.post("/sessions/{session_id}/zoom")
async def zoom(
    session_id: str,
    body: ZoomRequest,
    sessions: SessionManager = Depends(get_sessions),
):
    session = _session_or_404(sessions, session_id)
    session.surface.zoom_to(body.zoom)
    return session.state()


@router.post("/sessions/{session_id}/close")
async def close_panel(session_id: str, sessions: SessionManager = Depends(get_sessions)):
    """Close button on the details panel."""
    session = _session_or_404(sessions, session_id)
    session.engine.close_panel()
    return session.state()


@router.post("/sessions/{session_id}/reset")
async def reset_view(session_id: str, sessions: SessionManager = Depends(get_sessions)):
    """Reset-view control: close the panel and fly home."""
    session = _session_or_404(sessions, session_id)
    session.engine.reset_view()
    return session.state()


@router.post("/sessions/{session_id}/outside-click")
async def outside_click(
    session_id: str,
    body: OutsideClickRequest,
    sessions: SessionManager = Depends(get_sessions),
):
    session = _session_or_404(sessions, session_id)
    session.engine.click_outside(in_map=body.in_map, in_panel=body.in_panel)
    return session.state()
