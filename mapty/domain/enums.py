"""Controlled enumerations for the mapty domain.

Every categorical field in the domain MUST reference an enum defined here.
Free-form strings are not acceptable for classification fields.
"""

from __future__ import annotations

from enum import Enum


class WorkoutKind(str, Enum):
    """The two kinds of workout a user can log."""

    RUNNING = "running"
    CYCLING = "cycling"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class MetricName(str, Enum):
    """Derived metric reported by each workout kind."""

    PACE = "pace_min_per_km"
    SPEED = "speed_km_per_h"
