"""Parse a GeoJSON (RFC 7946) lot collection into a LotLayer.

Handles FeatureCollection and a lone Feature with Polygon/MultiPolygon
geometries. Coordinates are already in [lng, lat] order.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import replace

from loguru import logger

from lotmap.errors import FeatureCollectionError
from lotmap.layers.layer import LotFeature, LotLayer

_POLYGON_TYPES = ("Polygon", "MultiPolygon")


def parse_lots(geojson: str | bytes | dict) -> LotLayer:
    """Parse GeoJSON content into a LotLayer.

    Args:
        geojson: Raw GeoJSON (string/bytes) or an already-decoded dict.

    Returns:
        LotLayer with every polygon feature. Features without a polygon
        geometry are skipped with a warning.

    Raises:
        FeatureCollectionError: On invalid JSON or a non-GeoJSON document.
    """
    if isinstance(geojson, (str, bytes)):
        try:
            data = json.loads(geojson)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FeatureCollectionError(f"Invalid GeoJSON: {e}") from e
    else:
        data = geojson

    if not isinstance(data, dict):
        raise FeatureCollectionError("GeoJSON root must be an object")

    kind = data.get("type")
    if kind == "FeatureCollection":
        raw_features = data.get("features")
        if not isinstance(raw_features, list):
            raise FeatureCollectionError("FeatureCollection has no features array")
    elif kind == "Feature":
        raw_features = [data]
    else:
        raise FeatureCollectionError(f"Unsupported GeoJSON type: {kind!r}")

    features: list[LotFeature] = []
    seen: set[str] = set()
    for idx, raw in enumerate(raw_features):
        feature = _parse_feature(raw, idx)
        if feature is None:
            logger.warning(f"Skipping feature {idx}: no polygon geometry")
            continue
        if feature.feature_id in seen:
            new_id = f"{feature.feature_id}-{idx}"
            while new_id in seen:
                new_id = f"{new_id}-{idx}"
            feature = replace(feature, feature_id=new_id)
        seen.add(feature.feature_id)
        features.append(feature)

    name = data.get("name", "")
    if not isinstance(name, str):
        name = str(name)

    return LotLayer(
        layer_id=f"lots-{uuid.uuid4().hex[:8]}",
        name=name,
        features=features,
    )


def _parse_feature(raw: dict, idx: int) -> LotFeature | None:
    """Parse a single GeoJSON Feature dict into a LotFeature."""
    if not isinstance(raw, dict):
        return None

    geometry = raw.get("geometry")
    if not isinstance(geometry, dict):
        return None

    geom_type = geometry.get("type", "")
    coordinates = geometry.get("coordinates")
    if geom_type not in _POLYGON_TYPES or not isinstance(coordinates, list):
        return None

    properties = raw.get("properties") or {}
    if not isinstance(properties, dict):
        properties = {}

    feature_id = raw.get("id")
    if feature_id is None or feature_id == "":
        feature_id = f"lot-{idx}"
    elif not isinstance(feature_id, str):
        feature_id = str(feature_id)

    return LotFeature(
        feature_id=feature_id,
        geometry_type=geom_type,
        coordinates=coordinates,
        properties=properties,
    )
