"""Details-panel formatting and the in-memory drawer."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from lotmap.styles import status_display_name
from lotmap.surface import DetailsPanel

NOT_AVAILABLE = "N/A"


def format_acreage(value: Any) -> str:
    """'0.5' -> '0.5 acres'; missing, empty or zero -> 'N/A'."""
    if not value:
        return NOT_AVAILABLE
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value} acres"


def _text_or_na(value: Any) -> str:
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)


@dataclass(frozen=True)
class LotDetails:
    """Display strings for the details panel."""

    lot_number: str
    acreage: str
    dimensions: str
    status: str

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> LotDetails:
        return cls(
            lot_number=_text_or_na(properties.get("lot_no")),
            acreage=format_acreage(properties.get("acreage")),
            dimensions=_text_or_na(properties.get("dimensions")),
            status=status_display_name(properties.get("status")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


class DetailsDrawer(DetailsPanel):
    """Details panel that just holds what it was told to show."""

    def __init__(self) -> None:
        self._details: LotDetails | None = None
        self._visible = False

    def show(self, details: LotDetails) -> None:
        self._details = details
        self._visible = True

    def hide(self) -> None:
        self._visible = False

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def details(self) -> LotDetails | None:
        return self._details

    def as_dict(self) -> dict:
        return {
            "visible": self._visible,
            "details": self._details.to_dict() if self._details else None,
        }
