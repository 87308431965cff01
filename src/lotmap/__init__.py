"""Lot map — feature-interaction engine for subdivision lot maps.

Turns a static lot FeatureCollection into a zoom-aware, single-selection
interactive layer: label placement, label/tooltip switching, hover and
selection styling, camera fly-to and the details panel.
"""

from lotmap.config import VARIANTS, MapConfig, get_variant
from lotmap.details import DetailsDrawer, LotDetails, format_acreage
from lotmap.engine import LotMapEngine
from lotmap.errors import (
    FeatureCollectionError,
    InvalidGeometry,
    LotMapError,
    UnknownFeatureError,
)
from lotmap.geometry import centroid, top_anchor
from lotmap.headless import HeadlessSurface
from lotmap.layers import LotFeature, LotLayer, parse_lots
from lotmap.loader import LoadingIndicator, bootstrap, fetch_lots
from lotmap.styles import InteractionState, LotStatus, Style, resolve_style
from lotmap.surface import CameraView, FlyOptions, PointerEvent

__all__ = [
    "VARIANTS",
    "CameraView",
    "DetailsDrawer",
    "FeatureCollectionError",
    "FlyOptions",
    "HeadlessSurface",
    "InteractionState",
    "InvalidGeometry",
    "LoadingIndicator",
    "LotDetails",
    "LotFeature",
    "LotLayer",
    "LotMapEngine",
    "LotMapError",
    "LotStatus",
    "MapConfig",
    "PointerEvent",
    "Style",
    "UnknownFeatureError",
    "bootstrap",
    "centroid",
    "fetch_lots",
    "format_acreage",
    "get_variant",
    "parse_lots",
    "resolve_style",
    "top_anchor",
]
