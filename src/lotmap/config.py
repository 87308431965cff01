"""Engine configuration and the built-in map variants."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from lotmap.geometry import LatLng
from lotmap.surface import CameraView, FlyOptions

LABEL_ANCHORS = ("centroid", "top")


@dataclass(frozen=True)
class MapConfig:
    """Knobs for one lot map.

    Attributes:
        basemap: Key of the default tile layer (see lotmap_server BASEMAPS).
        label_min_zoom: Labels show at or above this zoom, tooltips below.
            None keeps labels on at every zoom.
        label_anchor: "centroid" or "top" (north-biased) label placement.
        select_min_zoom: Selection fly-to never zooms out past this level.
        fly: Animation used for selection and reset moves.
        fit_padding: Pixel padding for the initial bounds-fit.
        home_zoom_bias: Levels added to the fitted zoom for the home view.
        initial_center: Camera center before the lots load.
        initial_zoom: Camera zoom before the lots load (desktop).
        mobile_initial_zoom: Same, for viewports at or below the breakpoint.
        mobile_breakpoint: Viewport width (px) treated as mobile.
    """

    basemap: str = "satellite"
    label_min_zoom: float | None = 18
    label_anchor: str = "centroid"
    select_min_zoom: float = 18
    fly: FlyOptions = field(default_factory=FlyOptions)
    fit_padding: tuple[int, int] = (50, 50)
    home_zoom_bias: float = 1
    initial_center: LatLng = (40.23305, -83.02365)
    initial_zoom: float = 18
    mobile_initial_zoom: float = 16
    mobile_breakpoint: int = 768

    def __post_init__(self) -> None:
        if self.label_anchor not in LABEL_ANCHORS:
            raise ValueError(
                f"label_anchor must be one of {LABEL_ANCHORS}, got {self.label_anchor!r}"
            )
        if self.fly.duration <= 0:
            raise ValueError("fly duration must be positive")
        if not 0 < self.fly.ease_linearity <= 1:
            raise ValueError("fly ease_linearity must be in (0, 1]")
        if min(self.fit_padding) < 0:
            raise ValueError("fit_padding must be non-negative")

    @property
    def labels_always_on(self) -> bool:
        return self.label_min_zoom is None

    def labels_visible_at(self, zoom: float) -> bool:
        return self.label_min_zoom is None or zoom >= self.label_min_zoom

    def initial_view_for(self, viewport_width: int) -> CameraView:
        """Pre-load camera view; narrow viewports start one step further out."""
        if viewport_width <= self.mobile_breakpoint:
            return CameraView(self.initial_center, self.mobile_initial_zoom)
        return CameraView(self.initial_center, self.initial_zoom)

    def with_overrides(self, **overrides) -> MapConfig:
        """Copy with the given fields replaced (None values are ignored)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


# The three deployments this engine replaces: satellite imagery with
# zoom-gated labels, a street basemap one level further out, and a grey
# basemap with labels always on.
VARIANTS: dict[str, MapConfig] = {
    "satellite": MapConfig(),
    "street": MapConfig(
        basemap="street",
        label_min_zoom=17,
        initial_zoom=17,
        mobile_initial_zoom=15,
    ),
    "always_labels": MapConfig(
        basemap="grey",
        label_min_zoom=None,
    ),
}


def get_variant(name: str) -> MapConfig:
    """Return a built-in variant, raising KeyError for unknown names."""
    try:
        return VARIANTS[name]
    except KeyError:
        raise KeyError(f"Unknown map variant: {name}") from None
