"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "mapty"
    debug: bool = False
    log_level: str = "INFO"

    # Durable storage
    storage_dir: str = "data"
    storage_key: str = "workouts"

    # Map presentation
    map_zoom_level: int = 13
    tile_url: str = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
    tile_attribution: str = (
        '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
    )
    popup_max_width: int = 250
    popup_min_width: int = 100

    model_config = {"env_prefix": "MAPTY_"}


settings = Settings()
