"""SessionManager — registry of live map sessions.

Each browser tab gets its own MapSession: a headless surface, a details
drawer, a loading indicator and an engine bootstrapped from the lot
source. Sessions never share state.
"""

from __future__ import annotations

import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone

from loguru import logger

from lotmap.config import MapConfig
from lotmap.details import DetailsDrawer
from lotmap.engine import LotMapEngine
from lotmap.headless import HeadlessSurface
from lotmap.loader import LoadingIndicator, bootstrap


@dataclass
class MapSession:
    """One interactive map instance.

    Attributes:
        session_id: Unique identifier for this session.
        surface: The in-memory rendering surface.
        panel: Details drawer for the selected lot.
        indicator: Loading spinner and failure notice.
        engine: The interaction engine driving all of the above.
        created_at: ISO8601 creation timestamp.
    """

    session_id: str
    surface: HeadlessSurface
    panel: DetailsDrawer
    indicator: LoadingIndicator
    engine: LotMapEngine
    created_at: str = field(default="")

    def state(self) -> dict:
        state = self.engine.snapshot()
        state["session_id"] = self.session_id
        state["panel"] = self.panel.as_dict()
        state.update(self.indicator.to_dict())
        return state


class SessionManager:
    """Registry of active map sessions."""

    def __init__(
        self,
        config: MapConfig,
        lots_source: str,
        max_sessions: int = 256,
        max_zoom: float = 21,
    ) -> None:
        self._config = config
        self._lots_source = lots_source
        self._max_sessions = max_sessions
        self._max_zoom = max_zoom
        self._sessions: OrderedDict[str, MapSession] = OrderedDict()

    @property
    def config(self) -> MapConfig:
        return self._config

    async def create(self, width: int = 1280, height: int = 800) -> MapSession:
        """Create a session and load the lots into it.

        A failed load still returns the session (basemap only, with the
        failure notice set) so the client can show it.
        """
        surface = HeadlessSurface(
            width=width,
            height=height,
            view=self._config.initial_view_for(width),
            max_zoom=self._max_zoom,
        )
        panel = DetailsDrawer()
        session = MapSession(
            session_id=f"map-{uuid.uuid4().hex[:12]}",
            surface=surface,
            panel=panel,
            indicator=LoadingIndicator(),
            engine=LotMapEngine(surface, panel, self._config),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        await bootstrap(session.engine, self._lots_source, session.indicator)
        self._add(session)
        return session

    def _add(self, session: MapSession) -> None:
        self._sessions[session.session_id] = session
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Evicted map session {evicted}")

    def get(self, session_id: str) -> MapSession | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        """Remove a session; False if it didn't exist."""
        if session_id in self._sessions:
            del self._sessions[session_id]
            return True
        return False

    def list_sessions(self) -> list[MapSession]:
        return list(self._sessions.values())
