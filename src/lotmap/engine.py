"""LotMapEngine — one interactive lot map.

Owns everything a map instance needs (surface, details panel, config, the
loaded layer and its handles, the label and selection controllers, the
home view) so several maps can live side by side and each can be tested
without global reset logic.

Usage:
    surface = HeadlessSurface(width=1280, height=800)
    engine = LotMapEngine(surface, DetailsDrawer(), VARIANTS["satellite"])
    engine.load(parse_lots(geojson_text))
    engine.activate("lot-12")
    engine.reset_view()
"""

from __future__ import annotations

from loguru import logger

from lotmap.config import MapConfig
from lotmap.errors import LotMapError, UnknownFeatureError
from lotmap.labels import LabelController
from lotmap.layers import LotFeature, LotLayer
from lotmap.selection import SelectionController
from lotmap.styles import InteractionState, resolve_style
from lotmap.surface import (
    CameraView,
    DetailsPanel,
    FeatureHandle,
    MapSurface,
    PointerEvent,
)


class LotMapEngine:
    """Feature-interaction engine for a single map surface."""

    def __init__(
        self,
        surface: MapSurface,
        panel: DetailsPanel,
        config: MapConfig | None = None,
    ) -> None:
        self.surface = surface
        self.panel = panel
        self.config = config or MapConfig()
        self.labels = LabelController(surface, self.config)
        self.selection = SelectionController(surface, panel, self.labels, self.config)
        self._layer: LotLayer | None = None
        self._handles: dict[str, FeatureHandle] = {}
        self._home_view: CameraView | None = None

    # -- properties ---------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self._layer is not None

    @property
    def layer(self) -> LotLayer | None:
        return self._layer

    @property
    def handles(self) -> dict[str, FeatureHandle]:
        return dict(self._handles)

    @property
    def home_view(self) -> CameraView | None:
        return self._home_view

    @property
    def labels_visible(self) -> bool:
        return self.labels.labels_visible

    @property
    def selected_id(self) -> str | None:
        return self.selection.selected_id

    def interaction_state(self, feature_id: str) -> InteractionState:
        if self._layer is None or feature_id not in self._layer:
            raise UnknownFeatureError(feature_id)
        return self.selection.interaction_state(feature_id)

    # -- load ---------------------------------------------------------------

    def load(self, layer: LotLayer) -> CameraView:
        """Render the lots, place labels, fit the camera, capture home.

        Returns:
            The captured home view.

        Raises:
            LotMapError: If this engine already holds a layer.
        """
        if self._layer is not None:
            raise LotMapError("Lots already loaded; create a new engine to reload")

        bounds = layer.bounds()
        handles = self.surface.add_vector_layer(layer, self._default_style, self.dispatch)
        self.selection.attach(layer, handles)

        self.labels.place(layer, handles)
        self.labels.refresh()
        self.surface.on_zoom_end(self.labels.on_zoom_changed)

        if bounds is not None:
            fitted = self.surface.fit_bounds(bounds, self.config.fit_padding)
            self.surface.set_view(
                CameraView(fitted.center, fitted.zoom + self.config.home_zoom_bias)
            )
        else:
            logger.warning(f"Layer {layer.layer_id} has no geometry to fit")
        self._home_view = self.surface.get_view()
        # Marked loaded only once every step above has succeeded
        self._layer = layer
        self._handles = handles

        logger.info(
            f"Loaded {len(layer)} lots; home view {self._home_view.center} "
            f"z{self._home_view.zoom}"
        )
        return self._home_view

    @staticmethod
    def _default_style(feature: LotFeature):
        return resolve_style(feature.status, InteractionState.DEFAULT)

    # -- pointer events -----------------------------------------------------

    def dispatch(self, event: PointerEvent) -> None:
        """Route a vector-layer pointer event to its transition."""
        if event.kind == "mouseover":
            self.hover_enter(event.feature_id)
        elif event.kind == "mouseout":
            self.hover_leave(event.feature_id)
        elif event.kind == "click":
            self.activate(event.feature_id)
        elif event.kind == "touchend":
            self.touch_activate(event.feature_id, event)

    def hover_enter(self, feature_id: str) -> None:
        self.selection.hover_enter(feature_id)

    def hover_leave(self, feature_id: str) -> None:
        self.selection.hover_leave(feature_id)

    def activate(self, feature_id: str) -> None:
        self.selection.activate(feature_id)

    def touch_activate(self, feature_id: str, event: PointerEvent | None = None) -> None:
        """Tap on a lot: same as a click, with the surface's default
        touch handling suppressed so it isn't also seen as a click."""
        if event is not None:
            event.prevent_default()
        self.selection.activate(feature_id)

    # -- controls -----------------------------------------------------------

    def close_panel(self) -> None:
        self.selection.close()

    def reset_view(self) -> None:
        """Close any selection, then fly back to the home view."""
        self.selection.close()
        if self._home_view is None:
            logger.debug("reset_view before load; camera unchanged")
            return
        self.surface.fly_to(self._home_view.center, self._home_view.zoom, self.config.fly)

    def click_outside(self, in_map: bool, in_panel: bool) -> bool:
        """A click somewhere on the page.

        Closes the panel only when the click is outside both the map and
        the panel while the panel is open. Never moves the camera.

        Returns:
            Whether the panel was closed.
        """
        if in_map or in_panel or not self.panel.visible:
            return False
        self.selection.close()
        return True

    # -- state --------------------------------------------------------------

    def snapshot(self) -> dict:
        state: dict = {}
        snapshot = getattr(self.surface, "snapshot", None)
        if callable(snapshot):
            state.update(snapshot())
        state.update(
            {
                "loaded": self.loaded,
                "labels_visible": self.labels_visible,
                "selected_id": self.selected_id,
                "home_view": self._home_view.to_dict() if self._home_view else None,
            }
        )
        return state
