"""Rendering-surface contract consumed by the engine.

The engine never touches a map widget directly. A surface implementation
(a browser bridge, a notebook widget, or lotmap.headless.HeadlessSurface)
provides camera control, a vector layer whose per-feature handles can be
styled and carry a tooltip, non-interactive label markers, and zoom-end
notifications. All positions crossing this boundary are (lat, lng).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from lotmap.geometry import Bounds, LatLng
from lotmap.styles import Style

if TYPE_CHECKING:
    from lotmap.details import LotDetails
    from lotmap.layers import LotFeature, LotLayer

POINTER_KINDS = ("mouseover", "mouseout", "click", "touchend")


@dataclass(frozen=True)
class CameraView:
    """Camera center (lat, lng) and zoom level."""

    center: LatLng
    zoom: float

    def to_dict(self) -> dict:
        return {"center": [self.center[0], self.center[1]], "zoom": self.zoom}


@dataclass(frozen=True)
class FlyOptions:
    """Animated camera move parameters (seconds, Leaflet-style easing)."""

    duration: float = 1.2
    ease_linearity: float = 0.25


@dataclass
class PointerEvent:
    """A pointer event dispatched by the vector layer for one feature.

    Attributes:
        kind: One of "mouseover", "mouseout", "click", "touchend".
        feature_id: Id of the feature under the pointer.
        default_prevented: Set by prevent_default(); the surface must then
            suppress its own default handling (synthetic click, scroll).
    """

    kind: str
    feature_id: str
    default_prevented: bool = field(default=False)

    def __post_init__(self) -> None:
        if self.kind not in POINTER_KINDS:
            raise ValueError(f"Unsupported pointer event: {self.kind}")

    def prevent_default(self) -> None:
        self.default_prevented = True


StyleFn = Callable[["LotFeature"], Style]
EventFn = Callable[[PointerEvent], None]
ZoomFn = Callable[[float], None]


class FeatureHandle(ABC):
    """Rendered polygon for one feature, tagged with its feature id."""

    feature_id: str

    @abstractmethod
    def set_style(self, style: Style) -> None:
        """Restyle the polygon."""

    @abstractmethod
    def bring_to_front(self) -> None:
        """Raise the polygon above its neighbours."""

    @abstractmethod
    def bind_tooltip(self, content: str) -> None:
        """Attach a (closed) hover tooltip."""

    @abstractmethod
    def open_tooltip(self) -> None:
        """Open the bound tooltip; no-op without one."""

    @abstractmethod
    def close_tooltip(self) -> None:
        """Close the bound tooltip; idempotent."""

    @property
    @abstractmethod
    def has_tooltip(self) -> bool:
        """Whether a tooltip is bound."""

    @property
    @abstractmethod
    def tooltip_open(self) -> bool:
        """Whether the bound tooltip is currently open."""


class LabelMarker(ABC):
    """Non-interactive text marker placed at a fixed position."""

    position: LatLng
    text: str

    @abstractmethod
    def set_opacity(self, opacity: float) -> None:
        """0.0 hides the label, 1.0 shows it."""

    @property
    @abstractmethod
    def opacity(self) -> float:
        """Current opacity."""


class DetailsPanel(ABC):
    """Passive display target for the selected lot's attributes."""

    @abstractmethod
    def show(self, details: LotDetails) -> None:
        """Display the details and make the panel visible."""

    @abstractmethod
    def hide(self) -> None:
        """Hide the panel."""

    @property
    @abstractmethod
    def visible(self) -> bool:
        """Whether the panel is currently shown."""


class MapSurface(ABC):
    """Camera, vector layer and label primitives of a map widget."""

    @abstractmethod
    def get_view(self) -> CameraView:
        """Current camera view."""

    @abstractmethod
    def set_view(self, view: CameraView) -> None:
        """Jump (no animation) to a view."""

    @abstractmethod
    def fly_to(self, center: LatLng, zoom: float, options: FlyOptions) -> None:
        """Animated camera move; a new call retargets any move in flight."""

    @abstractmethod
    def fit_bounds(self, bounds: Bounds, padding: tuple[int, int]) -> CameraView:
        """Set the camera to contain bounds with pixel padding."""

    @abstractmethod
    def on_zoom_end(self, callback: ZoomFn) -> None:
        """Subscribe to zoom-change events (called with the new zoom)."""

    @abstractmethod
    def add_vector_layer(
        self, layer: LotLayer, style_fn: StyleFn, on_event: EventFn
    ) -> dict[str, FeatureHandle]:
        """Render every feature and route its pointer events to on_event.

        Returns:
            Handles keyed by feature id.
        """

    @abstractmethod
    def add_label(self, position: LatLng, text: str) -> LabelMarker:
        """Place a non-interactive label marker."""

    @abstractmethod
    def set_cursor(self, cursor: str | None) -> None:
        """Pointer cursor feedback; None restores the default."""
