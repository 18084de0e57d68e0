"""Workout — a single logged activity placed on the map.

A Workout is immutable after construction.  Its derived metric (pace for
running, speed for cycling) and its description are computed exactly once,
in that order, while the model is being validated.  Any path that builds a
Workout — a fresh form submission or a snapshot reload — goes through the
same validation, so a reloaded record behaves exactly like the original.

Only constructor inputs are fields.  The kind discriminant is a class
attribute; the derived values live in private attributes and are never
read back from storage.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator

from mapty.domain.enums import MetricName, WorkoutKind
from mapty.foundation.clock import local_now
from mapty.foundation.identifiers import new_id

# ── Constants ────────────────────────────────────────────────────────────────

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


# ── Coordinates ──────────────────────────────────────────────────────────────

class Coordinates(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    lat: float = Field(..., ge=-90.0, le=90.0, allow_inf_nan=False)
    lng: float = Field(..., ge=-180.0, le=180.0, allow_inf_nan=False)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def accept_pair(cls, data: Any) -> Any:
        # Map widgets hand out [lat, lng] arrays
        if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
            if len(data) != 2:
                raise ValueError(f"coordinates need exactly 2 values, got {len(data)}")
            return {"lat": data[0], "lng": data[1]}
        return data

    def as_pair(self) -> tuple[float, float]:
        return (self.lat, self.lng)

    def __str__(self) -> str:
        return f"{self.lat:.5f},{self.lng:.5f}"


# ── Workout ──────────────────────────────────────────────────────────────────

class Workout(BaseModel, ABC):
    """Base class for a logged workout.

    Subclasses declare ``kind`` and ``metric_name`` and implement
    ``_calc_metric``.
    """

    kind: ClassVar[WorkoutKind]
    metric_name: ClassVar[MetricName]

    workout_id: str = Field(default_factory=new_id, min_length=1, max_length=64)
    created_at: datetime = Field(default_factory=lambda: local_now())
    coordinates: Coordinates
    distance_km: float = Field(..., gt=0.0, allow_inf_nan=False)
    duration_min: float = Field(..., gt=0.0, allow_inf_nan=False)

    _metric: float = PrivateAttr()
    _description: str = PrivateAttr()

    model_config = {"frozen": True}

    # ── Validators ───────────────────────────────────────────────────────

    @field_validator("created_at")
    @classmethod
    def created_at_must_be_aware(cls, v: datetime) -> datetime:
        # Naive timestamps are taken as host-local time
        if v.tzinfo is None:
            v = v.astimezone()
        return v

    # ── Construction ─────────────────────────────────────────────────────

    def model_post_init(self, __context: Any) -> None:
        self._metric = self._calc_metric()
        self._description = self._describe()

    @abstractmethod
    def _calc_metric(self) -> float:
        """Compute the kind-specific derived metric from the base fields."""
        ...

    def _describe(self) -> str:
        return f"{self.kind.label} on {MONTHS[self.created_at.month - 1]} {self.created_at.day}"

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def description(self) -> str:
        """Human-readable label, e.g. "Running on April 14"."""
        return self._description

    @property
    def metric_value(self) -> float:
        """The derived metric, whatever the kind."""
        return self._metric

    def to_record(self) -> dict[str, Any]:
        """Constructor inputs plus the discriminant, JSON-ready."""
        return {"kind": self.kind.value, **self.model_dump(mode="json")}


class Running(Workout):
    kind: ClassVar[WorkoutKind] = WorkoutKind.RUNNING
    metric_name: ClassVar[MetricName] = MetricName.PACE

    cadence_spm: int = Field(..., gt=0, description="Steps per minute")

    def _calc_metric(self) -> float:
        return self.duration_min / self.distance_km

    @property
    def pace_min_per_km(self) -> float:
        return self._metric


class Cycling(Workout):
    kind: ClassVar[WorkoutKind] = WorkoutKind.CYCLING
    metric_name: ClassVar[MetricName] = MetricName.SPEED

    elevation_gain_m: float = Field(..., ge=0.0, allow_inf_nan=False, description="Metres climbed")

    def _calc_metric(self) -> float:
        return self.distance_km / (self.duration_min / 60)

    @property
    def speed_km_per_h(self) -> float:
        return self._metric


WORKOUT_TYPES: dict[WorkoutKind, type[Workout]] = {
    WorkoutKind.RUNNING: Running,
    WorkoutKind.CYCLING: Cycling,
}
