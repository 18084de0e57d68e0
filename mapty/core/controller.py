"""WorkoutController — the interaction state machine.

States:
    IDLE                 no placement pending; the form is hidden
    AWAITING_SUBMISSION  a map location was chosen and the form is open

Transitions:
    location chosen   IDLE/AWAITING → AWAITING (captures coordinates)
    submit (valid)    AWAITING → IDLE (workout appended and rendered)
    submit (invalid)  AWAITING → AWAITING (error shown, store untouched)
    submit (unsaved)  AWAITING → AWAITING (storage write failed, error shown)
    cancel            AWAITING → IDLE

Map-dependent events (choosing a location, selecting a workout) are
ignored until the geolocation request has succeeded and the map has been
centred.  If geolocation fails the controller stays IDLE for the rest of
the session; there is no retry.

The controller owns its WorkoutStore.  All collaborator references are
passed in; nothing here is process-global.
"""

from __future__ import annotations

import logging
from enum import Enum

from mapty.core.collaborators import (
    FormSurface,
    GeolocationFailure,
    GeolocationSource,
    MapWidget,
    WorkoutListView,
)
from mapty.domain.factory import WorkoutValidationError, workout_from_form
from mapty.domain.workout import Coordinates, Workout
from mapty.store.workout_store import WorkoutStore

logger = logging.getLogger(__name__)

HERE_LABEL = "You are here"
POSITION_ERROR_MESSAGE = "Could not get your position"
SAVE_ERROR_MESSAGE = "Could not save workout"


class ControllerState(str, Enum):
    IDLE = "idle"
    AWAITING_SUBMISSION = "awaiting_submission"


class WorkoutController:
    """Orchestrates store, factory and collaborators in response to events.

    Args:
        store: The session's workout log.  Restored from storage on start().
        geolocation: Source of the user's starting position.
        map_widget: Map surface for markers and centring.
        form: Workout entry form.
        workout_list: Rendered list of logged workouts.
        zoom_level: Zoom used whenever the map is centred.
    """

    def __init__(
        self,
        store: WorkoutStore,
        geolocation: GeolocationSource,
        map_widget: MapWidget,
        form: FormSurface,
        workout_list: WorkoutListView,
        zoom_level: int = 13,
    ) -> None:
        self._store = store
        self._geolocation = geolocation
        self._map = map_widget
        self._form = form
        self._list = workout_list
        self._zoom_level = zoom_level

        self._state = ControllerState.IDLE
        self._pending: Coordinates | None = None
        self._position: Coordinates | None = None
        self._started = False
        self._geolocation_failed = False

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def pending_coordinates(self) -> Coordinates | None:
        """Where the next workout will be placed, while the form is open."""
        return self._pending

    @property
    def position(self) -> Coordinates | None:
        """The user's position, once geolocation has succeeded."""
        return self._position

    @property
    def map_ready(self) -> bool:
        return self._position is not None

    @property
    def geolocation_failed(self) -> bool:
        return self._geolocation_failed

    @property
    def store(self) -> WorkoutStore:
        return self._store

    # ── Startup ──────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Restore the log, render it, subscribe to events, then locate the user.

        List entries are rendered immediately; markers only once the map
        has a position to centre on.
        """
        if self._started:
            raise RuntimeError("WorkoutController.start() may only be called once")
        self._started = True

        self._store.restore()
        for workout in self._store.all():
            await self._list.render_workout(workout)

        self._map.on_location_chosen(self.handle_location_chosen)
        self._form.on_submit(self.handle_submit)
        self._form.on_cancel(self.handle_cancel)
        self._list.on_select(self.handle_workout_selected)

        try:
            position = await self._geolocation.request_position()
        except GeolocationFailure as exc:
            self._geolocation_failed = True
            logger.warning("Geolocation failed, map stays unavailable: %s", exc)
            await self._form.show_error(POSITION_ERROR_MESSAGE)
            return

        await self._load_map(position)

    async def _load_map(self, position: Coordinates) -> None:
        self._position = position
        await self._map.center_on(position, self._zoom_level)
        await self._map.render_marker(position, HERE_LABEL)
        for workout in self._store.all():
            await self._render_marker(workout)
        logger.info("Map ready at %s with %d workout marker(s)", position, len(self._store))

    # ── Event handlers ───────────────────────────────────────────────────

    async def handle_location_chosen(self, coordinates: Coordinates) -> None:
        """Open the form for a workout at *coordinates*."""
        if not self.map_ready:
            logger.debug("Ignoring location %s: map not ready", coordinates)
            return
        self._pending = coordinates
        self._state = ControllerState.AWAITING_SUBMISSION
        await self._form.show()
        logger.debug("Awaiting submission at %s", coordinates)

    async def handle_submit(self) -> None:
        """Validate the form and log the workout, or report why not."""
        if self._state is not ControllerState.AWAITING_SUBMISSION or self._pending is None:
            logger.debug("Ignoring submit while %s", self._state.value)
            return

        fields = self._form.read_fields()
        try:
            workout = workout_from_form(fields, self._pending)
        except WorkoutValidationError as exc:
            logger.warning("Rejected submission: %s", exc)
            await self._form.show_error(str(exc))
            return

        try:
            self._store.append(workout)
        except OSError as exc:
            logger.warning("Could not save workout %s: %s", workout.workout_id, exc)
            await self._form.show_error(SAVE_ERROR_MESSAGE)
            return

        await self._render_marker(workout)
        await self._list.render_workout(workout)
        await self._close_form()

    async def handle_cancel(self) -> None:
        """Close the form without logging anything."""
        if self._state is not ControllerState.AWAITING_SUBMISSION:
            return
        await self._close_form()
        logger.debug("Submission cancelled")

    async def handle_workout_selected(self, workout_id: str) -> None:
        """Centre the map on a logged workout.  Unknown ids are ignored."""
        if not self.map_ready:
            logger.debug("Ignoring selection of %s: map not ready", workout_id)
            return
        workout = self._store.get(workout_id)
        if workout is None:
            logger.warning("Selected workout %s is not in the log", workout_id)
            return
        await self._map.center_on(workout.coordinates, self._zoom_level)

    async def reset(self) -> None:
        """Discard every workout, in memory and in storage."""
        self._store.reset()
        await self._list.clear()
        await self._map.clear_markers()
        if self._position is not None:
            await self._map.render_marker(self._position, HERE_LABEL)
        if self._state is ControllerState.AWAITING_SUBMISSION:
            await self._close_form()

    # ── Internals ────────────────────────────────────────────────────────

    async def _render_marker(self, workout: Workout) -> None:
        await self._map.render_marker(workout.coordinates, workout.description, workout.kind)

    async def _close_form(self) -> None:
        self._pending = None
        self._state = ControllerState.IDLE
        await self._form.hide()
