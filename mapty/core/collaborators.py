"""Protocols for the platform pieces the controller drives.

Geolocation, the map widget, the workout form and the rendered workout
list are external.  The controller depends on these protocols only;
mapty.api.ws_map provides one implementation that relays everything over
a WebSocket to a browser front-end, and tests supply simple fakes.

Event subscriptions take async callbacks.  A collaborator delivers events
one at a time and awaits each callback before delivering the next.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol

from mapty.domain.enums import WorkoutKind
from mapty.domain.factory import FormFields
from mapty.domain.workout import Coordinates, Workout

LocationCallback = Callable[[Coordinates], Awaitable[None]]
SelectCallback = Callable[[str], Awaitable[None]]
FormCallback = Callable[[], Awaitable[None]]


class GeolocationFailure(Exception):
    """Raised when the platform cannot or will not provide a position."""


class GeolocationSource(Protocol):
    async def request_position(self) -> Coordinates:
        """Ask for the user's current position.  Single-shot.

        Raises:
            GeolocationFailure: If the position is denied or unavailable.
        """
        ...


class MapWidget(Protocol):
    def on_location_chosen(self, callback: LocationCallback) -> None:
        """Subscribe to clicks on the map."""
        ...

    async def center_on(self, coordinates: Coordinates, zoom: int) -> None:
        ...

    async def render_marker(
        self,
        coordinates: Coordinates,
        label: str,
        kind: WorkoutKind | None = None,
    ) -> None:
        """Drop a marker with an open popup showing *label*."""
        ...

    async def clear_markers(self) -> None:
        ...


class FormSurface(Protocol):
    def on_submit(self, callback: FormCallback) -> None:
        ...

    def on_cancel(self, callback: FormCallback) -> None:
        ...

    def read_fields(self) -> FormFields:
        """Return the values currently entered in the form."""
        ...

    async def show(self) -> None:
        ...

    async def hide(self) -> None:
        """Hide the form and clear its inputs."""
        ...

    async def show_error(self, message: str) -> None:
        ...


class WorkoutListView(Protocol):
    def on_select(self, callback: SelectCallback) -> None:
        """Subscribe to clicks on a rendered workout entry (by workout id)."""
        ...

    async def render_workout(self, workout: Workout) -> None:
        ...

    async def clear(self) -> None:
        ...
