"""Workout factory — turns raw user input into a validated Workout.

Architectural rules:
    1. Validation is all-or-nothing.  Any failing field rejects the whole
       submission with a single WorkoutValidationError listing every problem.
    2. No silent coercion: empty or non-numeric text is an error, never zero,
       and a boolean is never read as 0 or 1.
    3. The factory never touches the store.  Callers append the result.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from pydantic import BaseModel, Field, StrictBool, ValidationError

from mapty.domain.enums import WorkoutKind
from mapty.domain.workout import WORKOUT_TYPES, Coordinates, Workout

logger = logging.getLogger(__name__)

CoordinatesLike = Union[Coordinates, tuple[float, float], list[float], dict[str, float]]
# Booleans are kept as booleans so the factory can reject them by name
FieldValue = Union[str, StrictBool, float, int, None]

# Which constructor argument carries each kind's extra input
EXTRA_FIELD: dict[WorkoutKind, str] = {
    WorkoutKind.RUNNING: "cadence_spm",
    WorkoutKind.CYCLING: "elevation_gain_m",
}


class FieldError(BaseModel):
    """One rejected input field."""

    field: str
    message: str


class WorkoutValidationError(ValueError):
    """Raised when a submission fails the workout constraints."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        fields = ", ".join(e.field for e in errors) or "input"
        super().__init__(f"Invalid workout input: {fields}")

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> WorkoutValidationError:
        errors = [
            FieldError(
                field=".".join(str(part) for part in err["loc"]) or "input",
                message=err["msg"],
            )
            for err in exc.errors()
        ]
        return cls(errors)


class FormFields(BaseModel):
    """Raw values read off the workout form.

    Everything arrives as the user typed it.  Numbers are parsed by the
    Workout model itself, so blank or non-numeric text is rejected there.
    """

    kind: str = Field(default=WorkoutKind.RUNNING.value, description="Kind selector value")
    distance: FieldValue = None
    duration: FieldValue = None
    cadence: FieldValue = None
    elevation: FieldValue = None


def _blank_to_missing(value: FieldValue) -> Any:
    # Blank text means the user left the box empty: report it as missing
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return value.strip() if isinstance(value, str) else value


def create_workout(
    kind: Union[WorkoutKind, str],
    coordinates: CoordinatesLike,
    distance_km: FieldValue,
    duration_min: FieldValue,
    extra: FieldValue,
) -> Workout:
    """Validate inputs and construct the Workout variant for *kind*.

    *extra* is the cadence (steps/min) for running or the elevation gain
    (metres) for cycling.

    Raises:
        WorkoutValidationError: If any input is missing, non-finite, out of
            range, or the kind is unknown.
    """
    try:
        workout_kind = WorkoutKind(kind)
    except ValueError:
        raise WorkoutValidationError(
            [FieldError(field="kind", message=f"Unknown workout kind: {kind!r}")]
        ) from None

    payload: dict[str, Any] = {"coordinates": coordinates}
    rejected: list[FieldError] = []
    for name, value in (
        ("distance_km", distance_km),
        ("duration_min", duration_min),
        (EXTRA_FIELD[workout_kind], extra),
    ):
        if isinstance(value, bool):
            rejected.append(FieldError(field=name, message="Input should be a number, not a boolean"))
            continue
        value = _blank_to_missing(value)
        if value is not None:
            payload[name] = value

    try:
        workout = WORKOUT_TYPES[workout_kind].model_validate(payload)
    except ValidationError as exc:
        skipped = {e.field for e in rejected}
        error = WorkoutValidationError(
            rejected + [e for e in WorkoutValidationError.from_pydantic(exc).errors if e.field not in skipped]
        )
        logger.debug("Rejected %s workout: %s", workout_kind.value, error.errors)
        raise error from exc
    if rejected:
        logger.debug("Rejected %s workout: %s", workout_kind.value, rejected)
        raise WorkoutValidationError(rejected)

    logger.debug("Created %s workout %s", workout_kind.value, workout.workout_id)
    return workout


def workout_from_form(fields: FormFields, coordinates: CoordinatesLike) -> Workout:
    """Build a Workout from a form submission at *coordinates*.

    Only the extra field matching the selected kind is read; the hidden
    one is ignored, whatever it contains.
    """
    extra = fields.cadence
    if fields.kind == WorkoutKind.CYCLING.value:
        extra = fields.elevation
    return create_workout(
        fields.kind,
        coordinates,
        fields.distance,
        fields.duration,
        extra,
    )
