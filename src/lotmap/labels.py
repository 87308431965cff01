"""Label/tooltip controller.

At any zoom exactly one affordance names a lot: its persistent label (at
or above the label zoom) or its hover tooltip (below it). The rule is
re-evaluated on every zoom-change event and applied to the whole layer.
"""

from __future__ import annotations

from typing import Mapping

from loguru import logger

from lotmap.config import MapConfig
from lotmap.errors import InvalidGeometry
from lotmap.geometry import centroid, to_latlng, top_anchor
from lotmap.layers import LotFeature, LotLayer
from lotmap.surface import FeatureHandle, LabelMarker, MapSurface

_ANCHORS = {
    "centroid": centroid,
    "top": top_anchor,
}


class LabelController:
    """Owns the placed label markers and the labels/tooltips switch."""

    def __init__(self, surface: MapSurface, config: MapConfig) -> None:
        self._surface = surface
        self._config = config
        self._anchor = _ANCHORS[config.label_anchor]
        self._labels: dict[str, LabelMarker] = {}
        self._handles: Mapping[str, FeatureHandle] = {}
        self._labels_visible = config.labels_always_on

    @property
    def labels(self) -> dict[str, LabelMarker]:
        return dict(self._labels)

    @property
    def labels_visible(self) -> bool:
        return self._labels_visible

    def anchor_for(self, feature: LotFeature) -> tuple[float, float]:
        """Label position (lat, lng) for a feature; raises InvalidGeometry."""
        return to_latlng(self._anchor(feature.ring()))

    def place(self, layer: LotLayer, handles: Mapping[str, FeatureHandle]) -> int:
        """Bind tooltips and place one label per lot with a lot number.

        A lot whose geometry can't be anchored keeps its tooltip but gets
        no label; the rest of the layer is unaffected.

        Returns:
            Number of labels placed.
        """
        self._handles = handles
        for feature in layer:
            text = feature.label_text
            if text is None:
                continue
            handle = handles.get(feature.feature_id)
            if handle is not None:
                handle.bind_tooltip(text)
            try:
                position = self.anchor_for(feature)
            except InvalidGeometry as e:
                logger.warning(f"No label for lot {feature.feature_id}: {e}")
                continue
            self._labels[feature.feature_id] = self._surface.add_label(position, text)
        logger.info(f"Placed {len(self._labels)} lot labels")
        return len(self._labels)

    def refresh(self) -> bool:
        """Re-evaluate against the surface's current zoom."""
        return self.on_zoom_changed(self._surface.get_view().zoom)

    def on_zoom_changed(self, zoom: float) -> bool:
        """Apply the labels/tooltips rule for a new zoom level.

        Returns:
            Whether labels are now visible.
        """
        self._labels_visible = self._config.labels_visible_at(zoom)
        opacity = 1.0 if self._labels_visible else 0.0
        for label in self._labels.values():
            label.set_opacity(opacity)
        if self._labels_visible:
            for handle in self._handles.values():
                if handle.tooltip_open:
                    handle.close_tooltip()
        return self._labels_visible

    def hover_enter(self, handle: FeatureHandle) -> None:
        # Label already shows the same text when visible
        if not self._labels_visible:
            handle.open_tooltip()

    def hover_leave(self, handle: FeatureHandle) -> None:
        handle.close_tooltip()
