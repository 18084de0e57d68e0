"""WorkoutFormatter — view models for rendered workouts and markers.

Renderers never reach into Workout internals or branch on the kind
themselves.  They get a flat WorkoutCard (list entry) or MarkerView
(map popup) with values already rounded and units attached.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mapty.domain.enums import WorkoutKind
from mapty.domain.workout import Coordinates, Cycling, Running, Workout

# Units shown next to each value on a card
METRIC_UNITS: dict[WorkoutKind, str] = {
    WorkoutKind.RUNNING: "min/km",
    WorkoutKind.CYCLING: "km/h",
}


class CardDetail(BaseModel):
    """One value/unit pair on a workout card."""

    name: str
    value: str
    unit: str


class WorkoutCard(BaseModel):
    """Everything a list entry shows for one workout."""

    workout_id: str
    kind: WorkoutKind
    description: str
    coordinates: Coordinates
    details: list[CardDetail] = Field(default_factory=list)

    model_config = {"frozen": True}


class PopupOptions(BaseModel):
    max_width: int = 250
    min_width: int = 100
    auto_close: bool = False
    close_on_click: bool = False
    class_name: str = ""


class MarkerView(BaseModel):
    """A map marker with its popup."""

    coordinates: Coordinates
    label: str
    kind: WorkoutKind | None = None
    popup: PopupOptions = Field(default_factory=PopupOptions)


def _number(value: float) -> str:
    # Whole numbers without a trailing ".0", as typed
    return str(int(value)) if float(value).is_integer() else str(value)


class WorkoutFormatter:
    """Builds view models from workouts.

    Args:
        popup_max_width: Maximum popup width in pixels.
        popup_min_width: Minimum popup width in pixels.
    """

    def __init__(self, popup_max_width: int = 250, popup_min_width: int = 100) -> None:
        self._popup_max_width = popup_max_width
        self._popup_min_width = popup_min_width

    @staticmethod
    def card(workout: Workout) -> WorkoutCard:
        details = [
            CardDetail(name="distance", value=_number(workout.distance_km), unit="km"),
            CardDetail(name="duration", value=_number(workout.duration_min), unit="min"),
            CardDetail(
                name=workout.metric_name.value,
                value=f"{workout.metric_value:.1f}",
                unit=METRIC_UNITS[workout.kind],
            ),
        ]
        if isinstance(workout, Running):
            details.append(CardDetail(name="cadence", value=str(workout.cadence_spm), unit="spm"))
        elif isinstance(workout, Cycling):
            details.append(
                CardDetail(name="elevation_gain", value=_number(workout.elevation_gain_m), unit="m")
            )
        return WorkoutCard(
            workout_id=workout.workout_id,
            kind=workout.kind,
            description=workout.description,
            coordinates=workout.coordinates,
            details=details,
        )

    def marker(
        self,
        coordinates: Coordinates,
        label: str,
        kind: WorkoutKind | None = None,
    ) -> MarkerView:
        popup = PopupOptions(
            max_width=self._popup_max_width,
            min_width=self._popup_min_width,
            class_name=f"{kind.value}-popup" if kind is not None else "",
        )
        return MarkerView(coordinates=coordinates, label=label, kind=kind, popup=popup)

    @staticmethod
    def format_plain(workout: Workout) -> str:
        """One-line text summary, suitable for logs."""
        card = WorkoutFormatter.card(workout)
        parts = [f"{d.value} {d.unit}" for d in card.details]
        return f"{card.description} @ {workout.coordinates}: " + ", ".join(parts)
