"""Exception hierarchy for the lot map engine."""

from __future__ import annotations


class LotMapError(Exception):
    """Base class for all engine errors."""


class InvalidGeometry(LotMapError, ValueError):
    """A ring or polygon cannot be used for placement (empty, malformed)."""


class FeatureCollectionError(LotMapError):
    """The lot feature collection could not be fetched or parsed."""


class UnknownFeatureError(LotMapError, KeyError):
    """An event referenced a feature id that is not in the loaded layer."""

    def __init__(self, feature_id: str) -> None:
        super().__init__(feature_id)
        self.feature_id = feature_id

    def __str__(self) -> str:
        return f"Unknown feature: {self.feature_id}"
