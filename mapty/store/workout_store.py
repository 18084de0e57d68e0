"""In-memory workout log for one running application instance.

Design notes:
    - The store is the single source of truth for the UI.  It is ordered
      by insertion, which is the chronological log order.
    - It is append-only.  The only other mutation is reset(), which also
      purges durable storage.
    - Every append writes a full snapshot through the repository.  The
      store never serialises anything itself.
    - There is exactly one writer (the controller, serialised by the event
      loop), so no locking is done here.
"""

from __future__ import annotations

import logging
from typing import Iterator

from mapty.domain.workout import Workout
from mapty.store.repository import WorkoutRepository

logger = logging.getLogger(__name__)


class DuplicateWorkoutError(ValueError):
    """Raised when appending a workout whose id is already in the store."""

    def __init__(self, workout_id: str) -> None:
        self.workout_id = workout_id
        super().__init__(f"Workout {workout_id} is already logged")


class WorkoutStore:
    """Ordered, append-only collection of workouts.

    Args:
        repository: Persistence adapter mirrored after every append.
    """

    def __init__(self, repository: WorkoutRepository) -> None:
        self._repository = repository
        self._workouts: list[Workout] = []
        self._index: dict[str, Workout] = {}

    # ── Public API ───────────────────────────────────────────────────────

    def append(self, workout: Workout) -> None:
        """Add *workout* to the end of the log and persist the whole log."""
        if workout.workout_id in self._index:
            raise DuplicateWorkoutError(workout.workout_id)
        # Persist first so a failed write leaves the log untouched
        self._repository.save([*self._workouts, workout])
        self._workouts.append(workout)
        self._index[workout.workout_id] = workout
        logger.info(
            "Logged %s workout %s (%d total)",
            workout.kind.value,
            workout.workout_id,
            len(self._workouts),
        )

    def get(self, workout_id: str) -> Workout | None:
        """Retrieve a workout by ID, or None if it is not in the log."""
        return self._index.get(workout_id)

    def all(self) -> tuple[Workout, ...]:
        """Read-only view of the log in insertion order."""
        return tuple(self._workouts)

    def reset(self) -> None:
        """Empty the log and purge its durable snapshot."""
        count = len(self._workouts)
        self._workouts.clear()
        self._index.clear()
        self._repository.purge()
        logger.info("Reset workout log (%d workout(s) discarded)", count)

    def restore(self) -> int:
        """Replace the contents with the persisted snapshot.

        Returns the number of workouts restored.
        """
        workouts = self._repository.load()
        self._workouts = list(workouts)
        self._index = {w.workout_id: w for w in workouts}
        logger.info("Restored %d workout(s) from storage", len(workouts))
        return len(workouts)

    # ── Container protocol ───────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._workouts)

    def __iter__(self) -> Iterator[Workout]:
        return iter(tuple(self._workouts))

    def __contains__(self, workout_id: object) -> bool:
        return workout_id in self._index
