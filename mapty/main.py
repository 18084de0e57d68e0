"""mapty — workout logging on a map.

This is the application entry point.  It wires durable storage, the
workout repository, the formatter and the WebSocket/REST endpoints
together.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from mapty.api.workouts import create_workouts_router
from mapty.api.ws_map import create_map_router
from mapty.config import Settings, settings
from mapty.render.formatter import WorkoutFormatter
from mapty.store.repository import WorkoutRepository
from mapty.store.storage import FileStorage, KeyValueStorage

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)


def create_app(storage: KeyValueStorage, config: Settings = settings) -> FastAPI:
    """Build the FastAPI app around *storage*."""

    # ── State ────────────────────────────────────────────────────────────

    repository = WorkoutRepository(storage, key=config.storage_key)
    formatter = WorkoutFormatter(
        popup_max_width=config.popup_max_width,
        popup_min_width=config.popup_min_width,
    )

    # ── App ──────────────────────────────────────────────────────────────

    application = FastAPI(
        title=config.app_name,
        description="Log running and cycling workouts on a map",
        version="0.1.0",
        debug=config.debug,
    )

    # ── Routes ───────────────────────────────────────────────────────────

    application.include_router(create_map_router(
        storage,
        config.storage_key,
        formatter,
        zoom_level=config.map_zoom_level,
    ))
    application.include_router(create_workouts_router(repository, formatter))

    @application.get("/api/map")
    async def map_config() -> dict:
        """Tile layer and zoom the front-end should initialise the map with."""
        return {
            "tile_url": config.tile_url,
            "attribution": config.tile_attribution,
            "zoom_level": config.map_zoom_level,
        }

    # ── Health ───────────────────────────────────────────────────────────

    @application.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "stored_workouts": len(repository.load()),
        }

    return application


app = create_app(FileStorage(settings.storage_dir))
