"""Tests for the durable key-value storage backends."""

import pytest

from mapty.store.storage import FileStorage, InMemoryStorage


class TestInMemoryStorage:
    def test_missing_key_is_none(self) -> None:
        assert InMemoryStorage().get_item("workouts") is None

    def test_set_then_get(self) -> None:
        storage = InMemoryStorage()
        storage.set_item("workouts", "[]")
        assert storage.get_item("workouts") == "[]"

    def test_remove_absent_key_is_noop(self) -> None:
        storage = InMemoryStorage()
        storage.remove_item("workouts")
        assert "workouts" not in storage


class TestFileStorage:
    def test_round_trip(self, tmp_path) -> None:
        storage = FileStorage(tmp_path / "data")
        storage.set_item("workouts", '{"version": 1}')
        assert storage.get_item("workouts") == '{"version": 1}'
        assert (tmp_path / "data" / "workouts.json").exists()

    def test_overwrite_replaces_value(self, tmp_path) -> None:
        storage = FileStorage(tmp_path)
        storage.set_item("workouts", "first")
        storage.set_item("workouts", "second")
        assert storage.get_item("workouts") == "second"
        assert not (tmp_path / "workouts.json.tmp").exists()

    def test_missing_file_is_none(self, tmp_path) -> None:
        assert FileStorage(tmp_path).get_item("workouts") is None

    def test_remove(self, tmp_path) -> None:
        storage = FileStorage(tmp_path)
        storage.set_item("workouts", "x")
        storage.remove_item("workouts")
        storage.remove_item("workouts")
        assert storage.get_item("workouts") is None

    @pytest.mark.parametrize("key", ["", "../escape", "a/b", "with space"])
    def test_unsafe_keys_rejected(self, tmp_path, key: str) -> None:
        with pytest.raises(ValueError):
            FileStorage(tmp_path).set_item(key, "x")
