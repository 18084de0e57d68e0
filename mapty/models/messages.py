"""Pydantic models for the map WebSocket protocol.

Inbound events come from the browser front-end and are discriminated on
``type``.  Outbound commands tell the front-end what to draw.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from mapty.domain.factory import FormFields
from mapty.domain.workout import Coordinates
from mapty.render.formatter import MarkerView, WorkoutCard


# ── Inbound (client → server) ────────────────────────────────────────────────

class PositionReport(BaseModel):
    """Answer to request_position: the browser's geolocation fix."""

    type: Literal["position"] = "position"
    lat: float
    lng: float


class PositionUnavailable(BaseModel):
    """Answer to request_position when the browser denies or fails."""

    type: Literal["position_error"] = "position_error"
    message: str = ""


class LocationChosen(BaseModel):
    type: Literal["location_chosen"] = "location_chosen"
    lat: float
    lng: float


class SubmitForm(BaseModel):
    type: Literal["submit"] = "submit"
    fields: FormFields = Field(default_factory=FormFields)


class CancelForm(BaseModel):
    type: Literal["cancel"] = "cancel"


class SelectWorkout(BaseModel):
    type: Literal["select_workout"] = "select_workout"
    workout_id: str = Field(..., min_length=1)


class ResetLog(BaseModel):
    type: Literal["reset"] = "reset"


InboundMessage = Annotated[
    Union[
        PositionReport,
        PositionUnavailable,
        LocationChosen,
        SubmitForm,
        CancelForm,
        SelectWorkout,
        ResetLog,
    ],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


# ── Outbound (server → client) ───────────────────────────────────────────────

class RequestPosition(BaseModel):
    type: Literal["request_position"] = "request_position"


class CenterOn(BaseModel):
    type: Literal["center_on"] = "center_on"
    coordinates: Coordinates
    zoom: int
    animate: bool = True


class RenderMarker(BaseModel):
    type: Literal["render_marker"] = "render_marker"
    marker: MarkerView


class RenderWorkout(BaseModel):
    type: Literal["render_workout"] = "render_workout"
    card: WorkoutCard


class ClearMarkers(BaseModel):
    type: Literal["clear_markers"] = "clear_markers"


class ClearWorkouts(BaseModel):
    type: Literal["clear_workouts"] = "clear_workouts"


class ShowForm(BaseModel):
    type: Literal["show_form"] = "show_form"


class HideForm(BaseModel):
    type: Literal["hide_form"] = "hide_form"


class ShowError(BaseModel):
    """A message meant for the user (alert-style)."""

    type: Literal["show_error"] = "show_error"
    message: str


class ProtocolError(BaseModel):
    """The client sent something the server could not understand."""

    type: Literal["error"] = "error"
    detail: str
