"""Tests for HeadlessSurface — camera math, zoom events, handles, labels."""

import math

import pytest

from lotmap.geometry import Bounds
from lotmap.headless import HeadlessSurface, _project, _unproject
from lotmap.layers import parse_lots
from lotmap.styles import resolve_style
from lotmap.surface import CameraView, FlyOptions, PointerEvent

LOTS_BOUNDS = Bounds(-83.0245, 40.2326, -83.0234, 40.2334)


def _fits(bounds: Bounds, zoom: float, width: int, height: int, pad: int) -> bool:
    x1, y1 = _project(bounds.south_west, zoom)
    x2, y2 = _project(bounds.north_east, zoom)
    return abs(x2 - x1) <= width - 2 * pad and abs(y2 - y1) <= height - 2 * pad


@pytest.fixture
def surface():
    return HeadlessSurface(width=1280, height=800, view=CameraView((40.23, -83.02), 18))


@pytest.mark.unit
class TestProjection:
    """Web Mercator helpers."""

    def test_round_trip(self):
        lat, lng = _unproject(*_project((40.2331, -83.0241), 18), 18)
        assert lat == pytest.approx(40.2331)
        assert lng == pytest.approx(-83.0241)

    def test_origin(self):
        x, y = _project((0.0, 0.0), 0)
        assert x == pytest.approx(128)
        assert y == pytest.approx(128)


@pytest.mark.unit
class TestFitBounds:
    """Leaflet-style bounds fitting."""

    def test_largest_integer_zoom_that_fits(self, surface):
        view = surface.fit_bounds(LOTS_BOUNDS, (50, 50))
        assert view.zoom == math.floor(view.zoom)
        assert _fits(LOTS_BOUNDS, view.zoom, 1280, 800, 50)
        assert not _fits(LOTS_BOUNDS, view.zoom + 1, 1280, 800, 50)

    def test_centered_on_bounds(self, surface):
        view = surface.fit_bounds(LOTS_BOUNDS, (50, 50))
        assert view.center[0] == pytest.approx(40.2330, abs=1e-5)
        assert view.center[1] == pytest.approx(-83.02395, abs=1e-9)

    def test_more_padding_never_zooms_in(self):
        a = HeadlessSurface(800, 600).fit_bounds(LOTS_BOUNDS, (0, 0))
        b = HeadlessSurface(800, 600).fit_bounds(LOTS_BOUNDS, (250, 250))
        assert b.zoom <= a.zoom

    def test_point_bounds_use_max_zoom(self):
        s = HeadlessSurface(max_zoom=19)
        view = s.fit_bounds(Bounds(-83.0, 40.0, -83.0, 40.0), (50, 50))
        assert view.zoom == 19

    def test_sets_the_camera(self, surface):
        view = surface.fit_bounds(LOTS_BOUNDS, (50, 50))
        assert surface.get_view() == view


@pytest.mark.unit
class TestCamera:
    """set_view / fly_to / zoom events."""

    def test_zoom_clamped(self, surface):
        surface.set_view(CameraView((40.0, -83.0), 30))
        assert surface.get_view().zoom == 21

    def test_set_view_fires_only_on_zoom_change(self, surface):
        seen = []
        surface.on_zoom_end(seen.append)
        surface.set_view(CameraView((40.1, -83.1), 18))
        assert seen == []
        surface.set_view(CameraView((40.1, -83.1), 17))
        assert seen == [17]

    def test_fly_to_always_fires(self, surface):
        seen = []
        surface.on_zoom_end(seen.append)
        surface.fly_to((40.1, -83.1), 18, FlyOptions())
        assert seen == [18]

    def test_fly_to_records_animation(self, surface):
        surface.fly_to((40.1, -83.1), 19, FlyOptions(duration=1.2, ease_linearity=0.25))
        assert surface.animation.center == (40.1, -83.1)
        assert surface.animation.zoom == 19
        assert surface.animation.duration == 1.2
        assert surface.animation.ease_linearity == 0.25
        assert surface.get_view() == CameraView((40.1, -83.1), 19)

    def test_new_fly_to_retargets(self, surface):
        surface.fly_to((40.1, -83.1), 19, FlyOptions())
        surface.fly_to((40.2, -83.2), 20, FlyOptions())
        assert surface.animation.center == (40.2, -83.2)
        assert surface.animation_count == 2
        assert surface.get_view() == CameraView((40.2, -83.2), 20)

    def test_zoom_to_keeps_center(self, surface):
        surface.zoom_to(16)
        assert surface.get_view() == CameraView((40.23, -83.02), 16)

    def test_invalid_viewport(self):
        with pytest.raises(ValueError):
            HeadlessSurface(width=0)


@pytest.mark.unit
class TestLayerPrimitives:
    """Feature handles, labels and pointer input."""

    def _add(self, surface, two_lots, events=None):
        layer = parse_lots(two_lots)
        sink = events if events is not None else []
        return surface.add_vector_layer(
            layer, lambda f: resolve_style(f.status), sink.append
        )

    def test_handles_keyed_by_feature_id(self, surface, two_lots):
        handles = self._add(surface, two_lots)
        assert set(handles) == {"a", "b"}
        assert handles["a"].feature_id == "a"
        assert handles["a"].style == resolve_style("sold")

    def test_bring_to_front_orders(self, surface, two_lots):
        handles = self._add(surface, two_lots)
        handles["a"].bring_to_front()
        handles["b"].bring_to_front()
        assert handles["b"].z_index > handles["a"].z_index

    def test_tooltip_requires_binding(self, surface, two_lots):
        handle = self._add(surface, two_lots)["a"]
        handle.open_tooltip()
        assert handle.tooltip_open is False
        handle.bind_tooltip("12")
        handle.open_tooltip()
        assert handle.tooltip_open is True
        handle.close_tooltip()
        handle.close_tooltip()
        assert handle.tooltip_open is False

    def test_labels(self, surface):
        label = surface.add_label((40.2, -83.0), "12")
        assert label.opacity == 1.0
        assert label.interactive is False
        label.set_opacity(0)
        assert label.opacity == 0
        assert surface.labels == [label]

    def test_emit_routes_events(self, surface, two_lots):
        events = []
        self._add(surface, two_lots, events)
        event = surface.emit("click", "a")
        assert events == [event]
        assert isinstance(event, PointerEvent)

    def test_emit_without_layer(self, surface):
        with pytest.raises(RuntimeError):
            surface.emit("click", "a")

    def test_unknown_event_kind(self):
        with pytest.raises(ValueError):
            PointerEvent(kind="dblclick", feature_id="a")

    def test_snapshot(self, surface, two_lots):
        self._add(surface, two_lots)
        surface.set_cursor("pointer")
        snap = surface.snapshot()
        assert snap["camera"] == {"center": [40.23, -83.02], "zoom": 18}
        assert snap["cursor"] == "pointer"
        assert snap["animation"] is None
        assert set(snap["features"]) == {"a", "b"}
        assert snap["features"]["a"]["style"]["fillColor"] == "#e74c3c"
