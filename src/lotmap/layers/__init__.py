"""Lot data layer — the static polygon collection the map is built from."""

from lotmap.layers.layer import LotFeature, LotLayer
from lotmap.layers.geojson import parse_lots

__all__ = ["LotFeature", "LotLayer", "parse_lots"]
