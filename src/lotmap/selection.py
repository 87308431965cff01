"""Single-selection state machine over the lot layer.

States: idle -> selected(f) -> idle

    hover-enter(f)   restyle f hovered (unless selected), raise, cursor
    hover-leave(f)   restyle f default (unless selected), close tooltip
    activate(f)      deselect previous, select f, fly to f, show panel
    close            deselect, hide panel

Every transition restyles through resolve_style(), for both the feature
leaving a state and the one entering it. A deselected lot always returns
to default, even under the pointer; it is hovered again on the next
hover-enter.
"""

from __future__ import annotations

from typing import Mapping

from loguru import logger

from lotmap.config import MapConfig
from lotmap.details import LotDetails
from lotmap.errors import InvalidGeometry, UnknownFeatureError
from lotmap.geometry import to_latlng
from lotmap.labels import LabelController
from lotmap.layers import LotFeature, LotLayer
from lotmap.styles import InteractionState, resolve_style
from lotmap.surface import DetailsPanel, FeatureHandle, MapSurface

POINTER_CURSOR = "pointer"


class SelectionController:
    """Tracks at most one selected lot and the lot under the pointer."""

    def __init__(
        self,
        surface: MapSurface,
        panel: DetailsPanel,
        labels: LabelController,
        config: MapConfig,
    ) -> None:
        self._surface = surface
        self._panel = panel
        self._labels = labels
        self._config = config
        self._layer: LotLayer | None = None
        self._handles: Mapping[str, FeatureHandle] = {}
        self._selected_id: str | None = None
        self._hovered_id: str | None = None

    def attach(self, layer: LotLayer, handles: Mapping[str, FeatureHandle]) -> None:
        self._layer = layer
        self._handles = handles

    # -- state --------------------------------------------------------------

    @property
    def state(self) -> str:
        return "idle" if self._selected_id is None else "selected"

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def hovered_id(self) -> str | None:
        return self._hovered_id

    def interaction_state(self, feature_id: str) -> InteractionState:
        if feature_id == self._selected_id:
            return InteractionState.SELECTED
        if feature_id == self._hovered_id:
            return InteractionState.HOVERED
        return InteractionState.DEFAULT

    def _lookup(self, feature_id: str) -> tuple[LotFeature, FeatureHandle]:
        feature = self._layer.get(feature_id) if self._layer else None
        handle = self._handles.get(feature_id)
        if feature is None or handle is None:
            raise UnknownFeatureError(feature_id)
        return feature, handle

    def _restyle(self, feature_id: str) -> None:
        feature, handle = self._lookup(feature_id)
        handle.set_style(resolve_style(feature.status, self.interaction_state(feature_id)))

    # -- transitions --------------------------------------------------------

    def _deselect(self, feature_id: str) -> None:
        if self._hovered_id == feature_id:
            self._hovered_id = None
        self._restyle(feature_id)

    def hover_enter(self, feature_id: str) -> None:
        _, handle = self._lookup(feature_id)
        previous = self._hovered_id
        self._hovered_id = feature_id
        # Pointer moved on without a hover-leave for the previous lot
        if previous is not None and previous != feature_id and previous != self._selected_id:
            self._restyle(previous)
        if feature_id != self._selected_id:
            self._restyle(feature_id)
        handle.bring_to_front()
        self._surface.set_cursor(POINTER_CURSOR)
        self._labels.hover_enter(handle)

    def hover_leave(self, feature_id: str) -> None:
        _, handle = self._lookup(feature_id)
        if self._hovered_id == feature_id:
            self._hovered_id = None
        if feature_id != self._selected_id:
            self._restyle(feature_id)
        self._surface.set_cursor(None)
        self._labels.hover_leave(handle)

    def activate(self, feature_id: str) -> None:
        """Select a lot, fly to it and show its details.

        Re-activating the selected lot repeats the move and panel update.
        """
        feature, handle = self._lookup(feature_id)
        handle.close_tooltip()

        previous = self._selected_id
        self._selected_id = feature_id
        if previous is not None and previous != feature_id:
            self._deselect(previous)
        self._restyle(feature_id)

        try:
            center = to_latlng(feature.bounds().center())
        except InvalidGeometry as e:
            logger.warning(f"Not moving camera to lot {feature_id}: {e}")
        else:
            zoom = max(self._surface.get_view().zoom, self._config.select_min_zoom)
            self._surface.fly_to(center, zoom, self._config.fly)

        self._panel.show(LotDetails.from_properties(feature.properties))
        logger.debug(f"Selected lot {feature_id} (previous: {previous})")

    def close(self) -> None:
        """Deselect the current lot (if any) and hide the panel."""
        previous = self._selected_id
        self._selected_id = None
        if previous is not None:
            self._deselect(previous)
            logger.debug(f"Deselected lot {previous}")
        self._panel.hide()
