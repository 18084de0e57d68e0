"""WorkoutRepository — mirrors the session store into durable storage.

Design notes:
    - save() is a full replace.  The whole ordered log is written under a
      single key every time; there are no incremental writes.
    - load() never raises.  A missing snapshot is simply empty; a corrupt
      or unreadable one is logged and treated as empty so startup always
      succeeds.
    - Records are rebuilt through the snapshot codec, which replays each
      variant's construction.  See mapty.store.snapshot.
"""

from __future__ import annotations

import logging
from typing import Iterable

from mapty.domain.workout import Workout
from mapty.store.snapshot import SnapshotError, decode_snapshot, encode_snapshot
from mapty.store.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_KEY = "workouts"


class WorkoutRepository:
    """Persistence adapter between a WorkoutStore and a KeyValueStorage.

    Args:
        storage: Durable key-value backend.
        key: Slot under which the snapshot is kept.
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_KEY) -> None:
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def save(self, workouts: Iterable[Workout]) -> None:
        """Overwrite the stored snapshot with *workouts*, in order."""
        workouts = list(workouts)
        self._storage.set_item(self._key, encode_snapshot(workouts))
        logger.debug("Saved snapshot of %d workout(s) under %r", len(workouts), self._key)

    def load(self) -> list[Workout]:
        """Return the stored workouts, or an empty list if there are none."""
        try:
            text = self._storage.get_item(self._key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read snapshot %r, starting empty: %s", self._key, exc)
            return []

        if text is None or not text.strip():
            logger.debug("No snapshot under %r", self._key)
            return []

        try:
            workouts = decode_snapshot(text)
        except SnapshotError as exc:
            logger.warning("Discarding corrupt snapshot %r, starting empty: %s", self._key, exc)
            return []

        logger.debug("Loaded %d workout(s) from %r", len(workouts), self._key)
        return workouts

    def purge(self) -> None:
        """Remove the stored snapshot entirely."""
        self._storage.remove_item(self._key)
        logger.info("Purged snapshot %r", self._key)
