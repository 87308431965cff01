"""In-memory MapSurface.

HeadlessSurface keeps the whole rendered state (camera, per-feature style,
tooltips, z-order, labels, cursor) as plain Python values. The server
mirrors it to browser clients through snapshot(), and tests drive it with
emit() and zoom_to() the way a user would drive a real map.

Camera math follows Web Mercator with 256 px tiles and integer zoom
snapping for bounds-fit, like Leaflet.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from loguru import logger

from lotmap.geometry import Bounds, LatLng
from lotmap.layers import LotLayer
from lotmap.styles import Style
from lotmap.surface import (
    CameraView,
    EventFn,
    FeatureHandle,
    FlyOptions,
    LabelMarker,
    MapSurface,
    PointerEvent,
    StyleFn,
    ZoomFn,
)

TILE_SIZE = 256
MAX_LATITUDE = 85.0511287798


def _project(latlng: LatLng, zoom: float) -> tuple[float, float]:
    """(lat, lng) to Web Mercator pixel coordinates at the given zoom."""
    scale = TILE_SIZE * 2 ** zoom
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, latlng[0]))
    s = math.sin(math.radians(lat))
    x = (latlng[1] + 180.0) / 360.0 * scale
    y = (0.5 - math.log((1 + s) / (1 - s)) / (4 * math.pi)) * scale
    return (x, y)


def _unproject(x: float, y: float, zoom: float) -> LatLng:
    scale = TILE_SIZE * 2 ** zoom
    lng = x / scale * 360.0 - 180.0
    n = math.pi - 2 * math.pi * y / scale
    lat = math.degrees(math.atan(math.sinh(n)))
    return (lat, lng)


@dataclass(frozen=True)
class Animation:
    """The last fly-to issued to the surface."""

    center: LatLng
    zoom: float
    duration: float
    ease_linearity: float


class HeadlessFeature(FeatureHandle):
    """Rendered state of one lot polygon."""

    def __init__(self, surface: HeadlessSurface, feature_id: str, style: Style) -> None:
        self._surface = surface
        self.feature_id = feature_id
        self.style = style
        self.z_index = 0
        self.tooltip_content: str | None = None
        self._tooltip_open = False

    def set_style(self, style: Style) -> None:
        self.style = style

    def bring_to_front(self) -> None:
        self.z_index = self._surface._next_z()

    def bind_tooltip(self, content: str) -> None:
        self.tooltip_content = content
        self._tooltip_open = False

    def open_tooltip(self) -> None:
        if self.tooltip_content is not None:
            self._tooltip_open = True

    def close_tooltip(self) -> None:
        self._tooltip_open = False

    @property
    def has_tooltip(self) -> bool:
        return self.tooltip_content is not None

    @property
    def tooltip_open(self) -> bool:
        return self._tooltip_open

    def to_dict(self) -> dict:
        return {
            "style": self.style.to_dict(),
            "z_index": self.z_index,
            "tooltip": self.tooltip_content,
            "tooltip_open": self._tooltip_open,
        }


class HeadlessLabel(LabelMarker):
    """A placed label marker."""

    interactive = False

    def __init__(self, position: LatLng, text: str) -> None:
        self.position = position
        self.text = text
        self._opacity = 1.0

    def set_opacity(self, opacity: float) -> None:
        self._opacity = opacity

    @property
    def opacity(self) -> float:
        return self._opacity

    def to_dict(self) -> dict:
        return {
            "position": [self.position[0], self.position[1]],
            "text": self.text,
            "opacity": self._opacity,
        }


class HeadlessSurface(MapSurface):
    """MapSurface held entirely in memory.

    Usage:
        surface = HeadlessSurface(width=1280, height=800,
                                  view=CameraView((40.2, -83.0), 18))
        engine = LotMapEngine(surface, DetailsDrawer())
        engine.load(layer)
        surface.emit("click", "lot-12")
    """

    def __init__(
        self,
        width: int = 1280,
        height: int = 800,
        view: CameraView | None = None,
        min_zoom: float = 0,
        max_zoom: float = 21,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Viewport size must be positive")
        self.width = width
        self.height = height
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self._view = view or CameraView((0.0, 0.0), min_zoom)
        self._zoom_callbacks: list[ZoomFn] = []
        self._on_event: EventFn | None = None
        self._z_counter = 0
        self.features: dict[str, HeadlessFeature] = {}
        self.labels: list[HeadlessLabel] = []
        self.cursor: str | None = None
        self.animation: Animation | None = None
        self.animation_count = 0

    # -- camera -------------------------------------------------------------

    def _clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def _fire_zoom_end(self) -> None:
        zoom = self._view.zoom
        for callback in list(self._zoom_callbacks):
            callback(zoom)

    def get_view(self) -> CameraView:
        return self._view

    def set_view(self, view: CameraView) -> None:
        zoom = self._clamp_zoom(view.zoom)
        zoom_changed = zoom != self._view.zoom
        self._view = CameraView(view.center, zoom)
        if zoom_changed:
            self._fire_zoom_end()

    def fly_to(self, center: LatLng, zoom: float, options: FlyOptions) -> None:
        # No frames to interpolate here: the move lands at once and simply
        # replaces whatever animation was issued before it.
        self.animation = Animation(
            center=center,
            zoom=self._clamp_zoom(zoom),
            duration=options.duration,
            ease_linearity=options.ease_linearity,
        )
        self.animation_count += 1
        self._view = CameraView(center, self.animation.zoom)
        self._fire_zoom_end()

    def zoom_to(self, zoom: float) -> None:
        """User zoom (wheel, +/- buttons) keeping the current center."""
        self.set_view(CameraView(self._view.center, zoom))

    def fit_bounds(self, bounds: Bounds, padding: tuple[int, int]) -> CameraView:
        sw, ne = bounds.south_west, bounds.north_east
        avail_w = max(1, self.width - 2 * padding[0])
        avail_h = max(1, self.height - 2 * padding[1])

        x1, y1 = _project(sw, 0)
        x2, y2 = _project(ne, 0)
        dx, dy = abs(x2 - x1), abs(y2 - y1)
        if dx == 0 and dy == 0:
            zoom = self.max_zoom
        else:
            scale = min(
                avail_w / dx if dx else math.inf,
                avail_h / dy if dy else math.inf,
            )
            zoom = math.floor(math.log2(scale))
        zoom = self._clamp_zoom(zoom)

        px1, py1 = _project(sw, zoom)
        px2, py2 = _project(ne, zoom)
        center = _unproject((px1 + px2) / 2, (py1 + py2) / 2, zoom)
        self.set_view(CameraView(center, zoom))
        logger.debug(f"fit_bounds -> center={center}, zoom={zoom}")
        return self._view

    def on_zoom_end(self, callback: ZoomFn) -> None:
        self._zoom_callbacks.append(callback)

    # -- layers -------------------------------------------------------------

    def _next_z(self) -> int:
        self._z_counter += 1
        return self._z_counter

    def add_vector_layer(
        self, layer: LotLayer, style_fn: StyleFn, on_event: EventFn
    ) -> dict[str, FeatureHandle]:
        self._on_event = on_event
        for feature in layer:
            self.features[feature.feature_id] = HeadlessFeature(
                self, feature.feature_id, style_fn(feature)
            )
        return dict(self.features)

    def add_label(self, position: LatLng, text: str) -> LabelMarker:
        label = HeadlessLabel(position, text)
        self.labels.append(label)
        return label

    def set_cursor(self, cursor: str | None) -> None:
        self.cursor = cursor

    # -- input --------------------------------------------------------------

    def emit(self, kind: str, feature_id: str) -> PointerEvent:
        """Dispatch a pointer event for a feature, as the map widget would."""
        if self._on_event is None:
            raise RuntimeError("No vector layer has been added")
        event = PointerEvent(kind=kind, feature_id=feature_id)
        self._on_event(event)
        return event

    def snapshot(self) -> dict:
        return {
            "camera": self._view.to_dict(),
            "viewport": {"width": self.width, "height": self.height},
            "cursor": self.cursor,
            "animation": (
                {
                    "center": list(self.animation.center),
                    "zoom": self.animation.zoom,
                    "duration": self.animation.duration,
                    "ease_linearity": self.animation.ease_linearity,
                }
                if self.animation
                else None
            ),
            "features": {fid: f.to_dict() for fid, f in self.features.items()},
            "labels": [label.to_dict() for label in self.labels],
        }
