"""Shared fixtures for lot map tests."""

from __future__ import annotations

import json

import pytest

from lotmap.config import MapConfig
from lotmap.details import DetailsDrawer
from lotmap.engine import LotMapEngine
from lotmap.headless import HeadlessSurface
from lotmap.layers import parse_lots


def square(x: float, y: float, size: float = 0.0003) -> list:
    """Closed square ring with its south-west corner at (x, y), [lng, lat]."""
    return [
        [x, y + size],
        [x + size, y + size],
        [x + size, y],
        [x, y],
        [x, y + size],
    ]


def lot(feature_id: str, ring: list, multi: bool = True, **properties) -> dict:
    geometry = (
        {"type": "MultiPolygon", "coordinates": [[ring]]}
        if multi
        else {"type": "Polygon", "coordinates": [ring]}
    )
    return {
        "type": "Feature",
        "id": feature_id,
        "properties": properties,
        "geometry": geometry,
    }


@pytest.fixture
def two_lots() -> dict:
    """Lot A (sold, #12) and lot B (spec home, #22) side by side."""
    return {
        "type": "FeatureCollection",
        "features": [
            lot("a", square(-83.0245, 40.2331), lot_no="12", status="sold", acreage=0.5),
            lot("b", square(-83.0241, 40.2331), lot_no="22", status="spec_home",
                dimensions="110' x 242'"),
        ],
    }


@pytest.fixture
def subdivision() -> dict:
    """Five lots: three numbered, one without lot_no, one without status."""
    return {
        "type": "FeatureCollection",
        "name": "Test Subdivision",
        "features": [
            lot("f1", square(-83.0245, 40.2331), lot_no="1", status="available"),
            lot("f2", square(-83.0241, 40.2331), lot_no="2", status="pending"),
            lot("f3", square(-83.0237, 40.2331), lot_no="3", status="sold"),
            lot("open", square(-83.0245, 40.2326), multi=False, status="sold"),
            lot("f5", square(-83.0241, 40.2326), multi=False, lot_no="5"),
        ],
    }


@pytest.fixture
def lots_file(tmp_path, subdivision):
    path = tmp_path / "lots.geojson"
    path.write_text(json.dumps(subdivision))
    return path


@pytest.fixture
def make_engine():
    """Factory: build and load an engine over a HeadlessSurface."""

    def _make(geojson: dict, config: MapConfig | None = None,
              width: int = 1280, height: int = 800) -> LotMapEngine:
        config = config or MapConfig()
        surface = HeadlessSurface(
            width=width, height=height, view=config.initial_view_for(width)
        )
        engine = LotMapEngine(surface, DetailsDrawer(), config)
        engine.load(parse_lots(geojson))
        return engine

    return _make


@pytest.fixture
def make_lot():
    return lot


@pytest.fixture
def make_square():
    return square
