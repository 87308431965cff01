"""Configuration management using Pydantic settings."""

from dataclasses import replace
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from lotmap.config import MapConfig, get_variant
from lotmap.surface import FlyOptions

DEFAULT_LABEL_MIN_ZOOM = 18

# Tile layers offered to clients; "satellite" is the default basemap.
BASEMAPS: dict[str, dict] = {
    "satellite": {
        "name": "Satellite",
        "url": "https://mt1.google.com/vt/lyrs=s&x={x}&y={y}&z={z}",
        "attribution": "Google Satellite",
        "max_zoom": 21,
        "subdomains": ["mt0", "mt1", "mt2", "mt3"],
    },
    "grey": {
        "name": "Grey",
        "url": "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png",
        "attribution": "&copy; OpenStreetMap contributors &copy; CARTO",
        "max_zoom": 20,
        "subdomains": ["a", "b", "c", "d"],
    },
    "street": {
        "name": "Street",
        "url": "https://tile.openstreetmap.org/{z}/{x}/{y}.png",
        "attribution": "&copy; OpenStreetMap contributors",
        "max_zoom": 19,
        "subdomains": [],
    },
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "LOTMAP"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Lot data (http(s) URL or local path), fetched once per session
    lots_source: str = "data/lots.geojson"

    # Map variant preset
    variant: Literal["satellite", "street", "always_labels"] = "satellite"

    # Per-deployment overrides of the variant preset (unset = preset value)
    label_min_zoom: Optional[float] = None
    always_show_labels: Optional[bool] = None
    label_anchor: Optional[Literal["centroid", "top"]] = None
    select_min_zoom: Optional[float] = None
    home_zoom_bias: Optional[float] = None
    fly_duration: Optional[float] = None   # seconds
    fly_ease_linearity: Optional[float] = None
    fit_padding_px: Optional[int] = None

    # Sessions
    max_sessions: int = 256
    max_zoom: float = 21

    def map_config(self) -> MapConfig:
        """Engine config: the variant preset with any overrides applied."""
        base = get_variant(self.variant)
        fly = None
        if self.fly_duration is not None or self.fly_ease_linearity is not None:
            fly = FlyOptions(
                duration=self.fly_duration if self.fly_duration is not None else base.fly.duration,
                ease_linearity=(
                    self.fly_ease_linearity
                    if self.fly_ease_linearity is not None
                    else base.fly.ease_linearity
                ),
            )
        padding = None
        if self.fit_padding_px is not None:
            padding = (self.fit_padding_px, self.fit_padding_px)

        config = base.with_overrides(
            label_min_zoom=self.label_min_zoom,
            label_anchor=self.label_anchor,
            select_min_zoom=self.select_min_zoom,
            home_zoom_bias=self.home_zoom_bias,
            fly=fly,
            fit_padding=padding,
        )
        if self.always_show_labels:
            config = replace(config, label_min_zoom=None)
        elif self.always_show_labels is False and config.labels_always_on:
            config = replace(config, label_min_zoom=DEFAULT_LABEL_MIN_ZOOM)
        return config


settings = Settings()
