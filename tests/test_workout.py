"""Tests for the Workout domain model."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from mapty.domain.enums import MetricName, WorkoutKind
from mapty.domain.workout import Coordinates, Cycling, Running, Workout

_APRIL_14 = datetime(2026, 4, 14, 9, 30, 0, tzinfo=timezone.utc)


def _valid_running(**overrides) -> dict:
    """Return valid Running constructor inputs, with optional overrides."""
    base = {
        "coordinates": {"lat": 10.0, "lng": 20.0},
        "distance_km": 5.0,
        "duration_min": 30.0,
        "cadence_spm": 178,
        "created_at": _APRIL_14.isoformat(),
    }
    base.update(overrides)
    return base


def _valid_cycling(**overrides) -> dict:
    """Return valid Cycling constructor inputs, with optional overrides."""
    base = {
        "coordinates": {"lat": 48.85, "lng": 2.35},
        "distance_km": 20.0,
        "duration_min": 60.0,
        "elevation_gain_m": 250.0,
        "created_at": _APRIL_14.isoformat(),
    }
    base.update(overrides)
    return base


class TestRunning:
    def test_pace_is_duration_over_distance(self) -> None:
        run = Running.model_validate(_valid_running())
        assert run.pace_min_per_km == 6.0
        assert run.metric_value == 6.0

    def test_kind_and_metric_name(self) -> None:
        run = Running.model_validate(_valid_running())
        assert run.kind == WorkoutKind.RUNNING
        assert run.metric_name == MetricName.PACE

    def test_description(self) -> None:
        run = Running.model_validate(_valid_running())
        assert run.description == "Running on April 14"

    def test_zero_cadence_rejected(self) -> None:
        with pytest.raises(Exception):
            Running.model_validate(_valid_running(cadence_spm=0))

    def test_fractional_cadence_rejected(self) -> None:
        with pytest.raises(Exception):
            Running.model_validate(_valid_running(cadence_spm=177.5))


class TestCycling:
    def test_speed_is_distance_per_hour(self) -> None:
        ride = Cycling.model_validate(_valid_cycling())
        assert ride.speed_km_per_h == 20.0

    def test_speed_for_short_ride(self) -> None:
        ride = Cycling.model_validate(_valid_cycling(distance_km=10.0, duration_min=30.0))
        assert ride.speed_km_per_h == 20.0

    def test_zero_elevation_accepted(self) -> None:
        ride = Cycling.model_validate(_valid_cycling(elevation_gain_m=0))
        assert ride.elevation_gain_m == 0.0

    def test_negative_elevation_rejected(self) -> None:
        with pytest.raises(Exception):
            Cycling.model_validate(_valid_cycling(elevation_gain_m=-5))

    def test_description(self) -> None:
        ride = Cycling.model_validate(_valid_cycling())
        assert ride.description == "Cycling on April 14"


class TestWorkoutBase:
    def test_base_class_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            Workout(coordinates={"lat": 0, "lng": 0}, distance_km=1, duration_min=1)

    def test_workout_is_immutable(self) -> None:
        run = Running.model_validate(_valid_running())
        with pytest.raises(Exception):
            run.distance_km = 10.0

    def test_ids_are_unique(self) -> None:
        a = Running.model_validate(_valid_running())
        b = Running.model_validate(_valid_running())
        assert a.workout_id != b.workout_id

    @pytest.mark.parametrize("field", ["distance_km", "duration_min"])
    @pytest.mark.parametrize("value", [0, -1, float("nan"), float("inf")])
    def test_non_positive_or_non_finite_rejected(self, field: str, value: float) -> None:
        with pytest.raises(Exception):
            Running.model_validate(_valid_running(**{field: value}))

    def test_created_at_defaults_to_clock(self) -> None:
        frozen = datetime(2026, 7, 3, 18, 0, 0, tzinfo=timezone.utc)
        payload = _valid_running()
        del payload["created_at"]
        with patch("mapty.domain.workout.local_now", return_value=frozen):
            run = Running.model_validate(payload)
        assert run.created_at == frozen
        assert run.description == "Running on July 3"

    def test_naive_created_at_gets_timezone(self) -> None:
        run = Running.model_validate(_valid_running(created_at=datetime(2026, 4, 14, 9, 30)))
        assert run.created_at.tzinfo is not None

    def test_description_uses_stored_offset(self) -> None:
        late = datetime(2026, 4, 14, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        run = Running.model_validate(_valid_running(created_at=late.isoformat()))
        assert run.description == "Running on April 14"

    def test_to_record_has_inputs_and_kind_only(self) -> None:
        record = Cycling.model_validate(_valid_cycling()).to_record()
        assert record["kind"] == "cycling"
        assert record["elevation_gain_m"] == 250.0
        assert "speed_km_per_h" not in record
        assert "description" not in record


class TestCoordinates:
    def test_accepts_pair(self) -> None:
        coords = Coordinates.model_validate([51.5, -0.12])
        assert coords.as_pair() == (51.5, -0.12)

    def test_wrong_length_pair_rejected(self) -> None:
        with pytest.raises(Exception):
            Coordinates.model_validate([1.0, 2.0, 3.0])

    @pytest.mark.parametrize("lat,lng", [(91, 0), (-91, 0), (0, 181), (0, -181)])
    def test_out_of_range_rejected(self, lat: float, lng: float) -> None:
        with pytest.raises(Exception):
            Coordinates(lat=lat, lng=lng)

    def test_edges_accepted(self) -> None:
        coords = Coordinates(lat=-90, lng=180)
        assert coords.lat == -90.0

    def test_str_format(self) -> None:
        assert str(Coordinates(lat=10, lng=20)) == "10.00000,20.00000"
