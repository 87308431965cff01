"""LotFeature and LotLayer dataclasses for the lot map.

All coordinates are stored in GeoJSON convention: [lng, lat].
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from lotmap.geometry import Bounds, first_ring, geometry_bounds
from lotmap.errors import InvalidGeometry
from lotmap.styles import LotStatus, label_text, normalize_status


@dataclass(frozen=True)
class LotFeature:
    """A single lot polygon.

    Attributes:
        feature_id: Stable identifier, unique within its layer.
        geometry_type: "Polygon" or "MultiPolygon".
        coordinates: GeoJSON-style coordinate arrays.
            Polygon: [[[lng, lat], ...], ...]  (list of rings)
            MultiPolygon: [[[[lng, lat], ...], ...], ...]
        properties: lot_no, status, acreage, dimensions (all optional).
    """

    feature_id: str
    geometry_type: str
    coordinates: list
    properties: dict = field(default_factory=dict)

    @property
    def lot_no(self) -> str | None:
        value = self.properties.get("lot_no")
        return None if value in (None, "") else str(value)

    @property
    def status(self) -> LotStatus:
        return normalize_status(self.properties.get("status"))

    @property
    def acreage(self) -> Any:
        return self.properties.get("acreage")

    @property
    def dimensions(self) -> str | None:
        return self.properties.get("dimensions")

    @property
    def label_text(self) -> str | None:
        return label_text(self.properties)

    def ring(self) -> list:
        """First ring of the first polygon (raises InvalidGeometry)."""
        return first_ring(self.geometry_type, self.coordinates)

    def bounds(self) -> Bounds:
        return geometry_bounds(self.geometry_type, self.coordinates)


@dataclass
class LotLayer:
    """The loaded lot collection, indexed by feature id.

    Attributes:
        layer_id: Unique identifier for this layer.
        name: Human-readable name (the collection's "name", if any).
        features: LotFeature instances in source order.
        metadata: Arbitrary key-value metadata about the layer.
    """

    layer_id: str
    name: str
    features: list[LotFeature]
    metadata: dict = field(default_factory=dict)
    _index: dict[str, LotFeature] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._index = {f.feature_id: f for f in self.features}
        if len(self._index) != len(self.features):
            raise ValueError(f"Duplicate feature ids in layer {self.layer_id}")

    def get(self, feature_id: str) -> LotFeature | None:
        return self._index.get(feature_id)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._index

    def __iter__(self) -> Iterator[LotFeature]:
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)

    def bounds(self) -> Bounds | None:
        """Union of all feature bounds; None when no feature has geometry."""
        result: Bounds | None = None
        for feature in self.features:
            try:
                b = feature.bounds()
            except InvalidGeometry:
                continue
            result = b if result is None else result.union(b)
        return result
