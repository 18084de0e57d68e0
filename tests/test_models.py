"""Smoke tests for the WebSocket message models."""

import pytest
from pydantic import ValidationError

from mapty.domain.workout import Coordinates
from mapty.models.messages import (
    CenterOn,
    LocationChosen,
    ResetLog,
    SelectWorkout,
    SubmitForm,
    inbound_adapter,
)


def test_inbound_dispatch_on_type() -> None:
    message = inbound_adapter.validate_python({"type": "location_chosen", "lat": 1.5, "lng": 2.5})
    assert isinstance(message, LocationChosen)
    assert message.lat == 1.5


def test_submit_carries_form_fields() -> None:
    message = inbound_adapter.validate_json(
        '{"type": "submit", "fields": {"kind": "cycling", "distance": "20", "duration": 60}}'
    )
    assert isinstance(message, SubmitForm)
    assert message.fields.kind == "cycling"
    assert message.fields.distance == "20"
    assert message.fields.elevation is None


def test_reset_and_select() -> None:
    assert isinstance(inbound_adapter.validate_python({"type": "reset"}), ResetLog)
    select = inbound_adapter.validate_python({"type": "select_workout", "workout_id": "abc"})
    assert isinstance(select, SelectWorkout)


def test_unknown_type_rejected() -> None:
    with pytest.raises(ValidationError):
        inbound_adapter.validate_python({"type": "teleport"})


def test_invalid_json_rejected() -> None:
    with pytest.raises(ValidationError):
        inbound_adapter.validate_json("{nope")


def test_center_on_dumps_type() -> None:
    payload = CenterOn(coordinates=Coordinates(lat=1, lng=2), zoom=13).model_dump(mode="json")
    assert payload == {
        "type": "center_on",
        "coordinates": {"lat": 1.0, "lng": 2.0},
        "zoom": 13,
        "animate": True,
    }
