"""Pure geometry helpers for lot polygons.

All inputs follow the GeoJSON convention: [lng, lat] (x first). The only
place that flips to the (lat, lng) order expected by the rendering surface
is to_latlng(); nothing else in the engine reorders coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from lotmap.errors import InvalidGeometry

Coordinate = tuple[float, float]
LatLng = tuple[float, float]

# Fraction of the way from the centroid up to the north-most vertex
TOP_ANCHOR_BLEND = 0.85


def _is_sequence(value) -> bool:
    return isinstance(value, (list, tuple))


def _xy(point: Sequence[float]) -> Coordinate:
    if not _is_sequence(point):
        raise InvalidGeometry(f"Invalid vertex: {point!r}")
    try:
        return (float(point[0]), float(point[1]))
    except (TypeError, IndexError, ValueError) as e:
        raise InvalidGeometry(f"Invalid vertex: {point!r}") from e


def _vertices(ring: Sequence[Sequence[float]] | None) -> list[Coordinate]:
    if not _is_sequence(ring):
        raise InvalidGeometry(f"Ring is not a vertex list: {ring!r}")
    if not ring:
        raise InvalidGeometry("Ring has no vertices")
    return [_xy(p) for p in ring]


def centroid(ring: Sequence[Sequence[float]]) -> Coordinate:
    """Arithmetic mean of the ring's vertices (not area-weighted).

    Args:
        ring: Non-empty sequence of (x, y) pairs.

    Returns:
        (x, y) in the same order as the input.

    Raises:
        InvalidGeometry: If the ring is empty or a vertex is malformed.
    """
    points = _vertices(ring)
    n = len(points)
    sx = sum(p[0] for p in points)
    sy = sum(p[1] for p in points)
    return (sx / n, sy / n)


def top_anchor(ring: Sequence[Sequence[float]]) -> Coordinate:
    """Label anchor biased toward the polygon's upper edge.

    Keeps the centroid's x and moves y 85% of the way from the centroid
    toward the north-most vertex.
    """
    points = _vertices(ring)
    cx, cy = centroid(points)
    max_y = max(p[1] for p in points)
    return (cx, cy + (max_y - cy) * TOP_ANCHOR_BLEND)


def first_ring(geometry_type: str, coordinates) -> list:
    """Return the first ring used for label placement.

    Polygon: coordinates[0]. MultiPolygon: coordinates[0][0].
    """
    try:
        if geometry_type == "Polygon":
            ring = coordinates[0]
        elif geometry_type == "MultiPolygon":
            ring = coordinates[0][0]
        else:
            raise InvalidGeometry(f"Unsupported geometry type: {geometry_type}")
    except (TypeError, IndexError, KeyError) as e:
        raise InvalidGeometry(f"{geometry_type} has no rings") from e
    if not ring:
        raise InvalidGeometry(f"{geometry_type} first ring is empty")
    return ring


def to_latlng(point: Sequence[float]) -> LatLng:
    """Flip a (lng, lat) pair into the surface's (lat, lng) order."""
    x, y = _xy(point)
    return (y, x)


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned box in (x, y) = (lng, lat) space."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def center(self) -> Coordinate:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def union(self, other: Bounds) -> Bounds:
        return Bounds(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    @property
    def south_west(self) -> LatLng:
        return (self.min_y, self.min_x)

    @property
    def north_east(self) -> LatLng:
        return (self.max_y, self.max_x)


def ring_bounds(ring: Sequence[Sequence[float]]) -> Bounds:
    points = _vertices(ring)
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return Bounds(min(xs), min(ys), max(xs), max(ys))


def geometry_bounds(geometry_type: str, coordinates) -> Bounds:
    """Bounding box over the outer ring of every polygon in the geometry.

    Raises:
        InvalidGeometry: If no polygon has a usable outer ring.
    """
    if geometry_type == "Polygon":
        polygons = [coordinates]
    elif geometry_type == "MultiPolygon":
        polygons = list(coordinates or [])
    else:
        raise InvalidGeometry(f"Unsupported geometry type: {geometry_type}")

    result: Bounds | None = None
    for polygon in polygons:
        if not _is_sequence(polygon) or not polygon or not polygon[0]:
            continue
        b = ring_bounds(polygon[0])
        result = b if result is None else result.union(b)
    if result is None:
        raise InvalidGeometry(f"{geometry_type} has no usable rings")
    return result
