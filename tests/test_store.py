"""Tests for the WorkoutStore."""

import json

import pytest

from mapty.domain.factory import create_workout
from mapty.domain.workout import Workout
from mapty.store.repository import WorkoutRepository
from mapty.store.storage import InMemoryStorage
from mapty.store.workout_store import DuplicateWorkoutError, WorkoutStore


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage: InMemoryStorage) -> WorkoutStore:
    return WorkoutStore(WorkoutRepository(storage))


def _run(**kw) -> Workout:
    return create_workout("running", kw.get("coords", (10.0, 20.0)), 5, 25, 178)


class FailingStorage(InMemoryStorage):
    def set_item(self, key: str, value: str) -> None:
        raise OSError("disk full")


class TestWorkoutStore:
    def test_new_store_is_empty(self, store: WorkoutStore) -> None:
        assert store.all() == ()
        assert len(store) == 0

    def test_append_is_monotonic(self, store: WorkoutStore) -> None:
        first, second = _run(), _run()
        store.append(first)
        before = store.all()
        store.append(second)
        assert store.all() == before + (second,)
        assert len(store) == 2

    def test_append_persists(self, store: WorkoutStore, storage: InMemoryStorage) -> None:
        workout = _run()
        store.append(workout)
        assert WorkoutRepository(storage).load() == [workout]

    def test_duplicate_id_rejected(self, store: WorkoutStore) -> None:
        workout = _run()
        store.append(workout)
        with pytest.raises(DuplicateWorkoutError):
            store.append(workout)
        assert len(store) == 1

    def test_failed_write_leaves_log_untouched(self) -> None:
        store = WorkoutStore(WorkoutRepository(FailingStorage()))
        with pytest.raises(OSError):
            store.append(_run())
        assert len(store) == 0

    def test_get_returns_exact_record(self, store: WorkoutStore) -> None:
        workout = _run()
        store.append(workout)
        assert store.get(workout.workout_id) is workout
        assert workout.workout_id in store

    def test_get_returns_none_for_unknown(self, store: WorkoutStore) -> None:
        assert store.get("no-such-id") is None

    def test_all_is_read_only_view(self, store: WorkoutStore) -> None:
        store.append(_run())
        view = store.all()
        assert isinstance(view, tuple)
        assert len(store.all()) == len(view)

    def test_reset_empties_and_purges(self, store: WorkoutStore, storage: InMemoryStorage) -> None:
        store.append(_run())
        store.reset()
        assert store.all() == ()
        assert WorkoutRepository(storage).load() == []
        assert "workouts" not in storage

    def test_restore_rebuilds_from_storage(self, storage: InMemoryStorage) -> None:
        original = WorkoutStore(WorkoutRepository(storage))
        workouts = [_run(), _run(coords=(1.0, 2.0))]
        for w in workouts:
            original.append(w)

        reopened = WorkoutStore(WorkoutRepository(storage))
        assert reopened.restore() == 2
        assert list(reopened) == workouts
        assert reopened.get(workouts[1].workout_id) == workouts[1]
        assert reopened.get("missing") is None

    def test_restore_replaces_contents(self, store: WorkoutStore) -> None:
        store.append(_run())
        store.reset()
        assert store.restore() == 0
        assert len(store) == 0

    def test_legacy_import_survives_next_append(self, storage: InMemoryStorage) -> None:
        storage.set_item("workouts", json.dumps([
            {"type": "running", "id": "1234567890", "date": "2026-04-14T09:30:00.000Z",
             "coords": [10.0, 20.0], "distance": 5, "duration": 25, "cadence": 178},
            {"type": "cycling", "id": "1234567891", "date": "2026-04-15T09:30:00.000Z",
             "coords": [10.0, 20.0], "distance": 20, "duration": 60, "elevationGain": -5},
        ]))
        store = WorkoutStore(WorkoutRepository(storage))
        assert store.restore() == 1

        store.append(_run())

        reopened = WorkoutStore(WorkoutRepository(storage))
        assert reopened.restore() == 2
        assert reopened.get("1234567890") is not None
