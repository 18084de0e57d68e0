"""REST endpoints over the persisted workout log.

Paths:
    GET    /api/workouts               list every stored workout as a card
    GET    /api/workouts/{workout_id}  one workout
    DELETE /api/workouts               purge the stored log

These read the durable snapshot directly.  Live map sessions keep their
own in-memory log until they reconnect.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from mapty.render.formatter import WorkoutFormatter
from mapty.store.repository import WorkoutRepository

logger = logging.getLogger(__name__)


def create_workouts_router(
    repository: WorkoutRepository,
    formatter: WorkoutFormatter,
) -> APIRouter:
    """Factory that wires the workout endpoints to a repository."""

    router = APIRouter(prefix="/api", tags=["workouts"])

    @router.get("/workouts")
    async def list_workouts() -> dict[str, Any]:
        workouts = repository.load()
        cards = [formatter.card(w).model_dump(mode="json") for w in workouts]
        return {"workouts": cards, "count": len(cards)}

    @router.get("/workouts/{workout_id}")
    async def get_workout(workout_id: str) -> dict[str, Any]:
        for workout in repository.load():
            if workout.workout_id == workout_id:
                return formatter.card(workout).model_dump(mode="json")
        raise HTTPException(status_code=404, detail=f"Workout {workout_id} not found")

    @router.delete("/workouts")
    async def purge_workouts() -> dict[str, Any]:
        repository.purge()
        logger.info("Workout log purged via REST")
        return {"status": "purged"}

    return router
