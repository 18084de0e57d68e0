"""Snapshot codec — the on-disk form of a workout log.

A snapshot holds only constructor inputs plus the ``kind`` discriminant
for each workout.  Decoding dispatches on ``kind`` and runs the variant's
full construction path, so derived metrics and descriptions are always
recomputed, never trusted from storage.

Two layouts are recognised:

    version 1 (written by mapty)::

        {"version": 1, "workouts": [{"kind": "running", "workout_id": ..., ...}]}

    legacy (a bare array written by the browser app)::

        [{"type": "running", "id": "...", "date": "...", "coords": [lat, lng],
          "distance": 5, "duration": 25, "cadence": 178, ...}]
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Iterable, Literal

from pydantic import BaseModel, Field, ValidationError

from mapty.domain.enums import WorkoutKind
from mapty.domain.workout import WORKOUT_TYPES, Workout

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotError(ValueError):
    """Raised when a stored snapshot cannot be turned back into workouts."""


class Snapshot(BaseModel):
    """Versioned envelope around the stored workout records."""

    version: Literal[1] = SNAPSHOT_VERSION
    workouts: list[dict[str, Any]] = Field(default_factory=list)


# ── Encoding ─────────────────────────────────────────────────────────────────

def encode_snapshot(workouts: Iterable[Workout]) -> str:
    """Serialise *workouts*, in order, to a JSON snapshot string."""
    snapshot = Snapshot(workouts=[w.to_record() for w in workouts])
    return snapshot.model_dump_json()


# ── Decoding ─────────────────────────────────────────────────────────────────

def decode_workout(record: dict[str, Any]) -> Workout:
    """Rebuild one workout by replaying its variant's construction."""
    raw_kind = record.get("kind")
    try:
        kind = WorkoutKind(raw_kind)
    except ValueError:
        raise SnapshotError(f"Unknown workout kind in snapshot: {raw_kind!r}") from None
    try:
        return WORKOUT_TYPES[kind].model_validate(record)
    except ValidationError as exc:
        raise SnapshotError(
            f"Invalid {kind.value} record {record.get('workout_id')!r}: {exc.error_count()} error(s)"
        ) from exc


def decode_snapshot(text: str) -> list[Workout]:
    """Parse a snapshot string into workouts, preserving stored order.

    Raises:
        SnapshotError: If the text is not valid JSON, has an unknown layout,
            or any version 1 record fails validation.  A version 1 snapshot
            is accepted whole or not at all; invalid legacy records are
            dropped individually.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc.msg}") from exc

    if isinstance(data, list):
        workouts = _decode_legacy(data)
    elif isinstance(data, dict):
        try:
            records = Snapshot.model_validate(data).workouts
        except ValidationError as exc:
            raise SnapshotError(f"Unsupported snapshot envelope: {exc.error_count()} error(s)") from exc
        workouts = [decode_workout(record) for record in records]
    else:
        raise SnapshotError(f"Unsupported snapshot layout: {type(data).__name__}")

    seen: set[str] = set()
    for workout in workouts:
        if workout.workout_id in seen:
            raise SnapshotError(f"Duplicate workout id in snapshot: {workout.workout_id}")
        seen.add(workout.workout_id)
    return workouts


def _decode_legacy(items: list[Any]) -> list[Workout]:
    # The browser app accepted records mapty rejects (negative climbs,
    # fractional cadence); those are dropped one by one, the rest are kept
    workouts: list[Workout] = []
    for position, item in enumerate(items):
        try:
            workouts.append(decode_workout(_upgrade_legacy(item)))
        except SnapshotError as exc:
            logger.warning("Dropping legacy record #%d: %s", position, exc)
    return workouts


def _upgrade_legacy(item: Any) -> dict[str, Any]:
    """Map a record written by the browser app onto the version 1 fields."""
    if not isinstance(item, dict):
        raise SnapshotError(f"Legacy record is not an object: {type(item).__name__}")

    record: dict[str, Any] = {
        "kind": item.get("type"),
        "coordinates": item.get("coords"),
        "distance_km": item.get("distance"),
        "duration_min": item.get("duration"),
    }
    if item.get("id") is not None:
        record["workout_id"] = str(item["id"])
    if item.get("date") is not None:
        record["created_at"] = _parse_legacy_date(item["date"])
    if item.get("cadence") is not None:
        record["cadence_spm"] = item["cadence"]
    if item.get("elevationGain") is not None:
        record["elevation_gain_m"] = item["elevationGain"]
    return record


def _parse_legacy_date(value: Any) -> datetime:
    # Browser dates are UTC ISO strings; descriptions were shown in local time
    if not isinstance(value, str):
        raise SnapshotError(f"Legacy date is not a string: {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise SnapshotError(f"Legacy date is not ISO 8601: {value!r}") from exc
    return parsed.astimezone()
