"""Lot status vocabulary and the style resolver.

Every style applied to a lot polygon comes from resolve_style(); callers
never build Style values by hand, so hover/selected/default can't drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class LotStatus(str, Enum):
    """Sale state of a lot."""

    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"
    SPEC_HOME = "spec_home"


class InteractionState(str, Enum):
    """Transient per-feature UI state."""

    DEFAULT = "default"
    HOVERED = "hovered"
    SELECTED = "selected"


STATUS_COLORS: dict[LotStatus, str] = {
    LotStatus.AVAILABLE: "#2ecc71",   # green
    LotStatus.PENDING: "#f39c12",     # amber
    LotStatus.SOLD: "#e74c3c",        # red
    LotStatus.SPEC_HOME: "#3498db",   # blue
}

STATUS_DISPLAY_NAMES: dict[LotStatus, str] = {
    LotStatus.AVAILABLE: "Available",
    LotStatus.PENDING: "Pending",
    LotStatus.SOLD: "Sold",
    LotStatus.SPEC_HOME: "Spec Home",
}

STROKE_COLOR = "#1a1a1a"
STROKE_OPACITY = 1.0

STROKE_WEIGHTS: dict[InteractionState, int] = {
    InteractionState.DEFAULT: 2,
    InteractionState.HOVERED: 3,
    InteractionState.SELECTED: 3,
}

FILL_OPACITIES: dict[InteractionState, float] = {
    InteractionState.DEFAULT: 0.3,
    InteractionState.HOVERED: 0.6,
    InteractionState.SELECTED: 0.7,
}

SPEC_HOME_GLYPH = "★"


def normalize_status(value: Any) -> LotStatus:
    """Map a raw status value to LotStatus, falling back to AVAILABLE."""
    if isinstance(value, LotStatus):
        return value
    try:
        return LotStatus(value)
    except (ValueError, TypeError):
        return LotStatus.AVAILABLE


def _interaction(value: InteractionState | str) -> InteractionState:
    if isinstance(value, InteractionState):
        return value
    return InteractionState(value)


@dataclass(frozen=True)
class Style:
    """Rendered style of a single lot polygon."""

    fill_color: str
    stroke_color: str
    stroke_weight: int
    stroke_opacity: float
    fill_opacity: float

    def to_dict(self) -> dict:
        return {
            "fillColor": self.fill_color,
            "strokeColor": self.stroke_color,
            "strokeWeight": self.stroke_weight,
            "strokeOpacity": self.stroke_opacity,
            "fillOpacity": self.fill_opacity,
        }


def resolve_style(
    status: Any,
    interaction_state: InteractionState | str = InteractionState.DEFAULT,
) -> Style:
    """Resolve the style for a (status, interaction state) pair.

    Unknown or missing status uses the available colour. Raises ValueError
    only for an interaction state outside default/hovered/selected.
    """
    state = _interaction(interaction_state)
    return Style(
        fill_color=STATUS_COLORS[normalize_status(status)],
        stroke_color=STROKE_COLOR,
        stroke_weight=STROKE_WEIGHTS[state],
        stroke_opacity=STROKE_OPACITY,
        fill_opacity=FILL_OPACITIES[state],
    )


def status_display_name(status: Any) -> str:
    return STATUS_DISPLAY_NAMES[normalize_status(status)]


def label_text(properties: Mapping[str, Any]) -> str | None:
    """Label/tooltip text: the lot number, starred for spec homes."""
    lot_no = properties.get("lot_no")
    if lot_no in (None, ""):
        return None
    if normalize_status(properties.get("status")) is LotStatus.SPEC_HOME:
        return f"{lot_no} {SPEC_HOME_GLYPH}"
    return str(lot_no)
