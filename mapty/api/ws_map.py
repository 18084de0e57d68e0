"""WebSocket endpoint for an interactive map session.

Path: /ws/map

One connection is one application instance, like one browser tab.  The
front-end owns the real map, form and geolocation; this module relays
between them and a WorkoutController:

    FE  →  position / location_chosen / submit / cancel / select_workout / reset
    FE  ←  request_position / center_on / render_marker / render_workout / ...

Each connection gets its own WorkoutStore, restored from the shared
durable storage when the controller starts.  Malformed frames are
answered with an ``error`` frame; the session stays open.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from mapty.core.collaborators import (
    FormCallback,
    GeolocationFailure,
    LocationCallback,
    SelectCallback,
)
from mapty.core.controller import WorkoutController
from mapty.domain.enums import WorkoutKind
from mapty.domain.factory import FormFields
from mapty.domain.workout import Coordinates, Workout
from mapty.models.messages import (
    CancelForm,
    CenterOn,
    ClearMarkers,
    ClearWorkouts,
    HideForm,
    InboundMessage,
    LocationChosen,
    PositionReport,
    PositionUnavailable,
    ProtocolError,
    RenderMarker,
    RenderWorkout,
    RequestPosition,
    ResetLog,
    SelectWorkout,
    ShowError,
    ShowForm,
    SubmitForm,
    inbound_adapter,
)
from mapty.render.formatter import WorkoutFormatter
from mapty.store.repository import WorkoutRepository
from mapty.store.storage import KeyValueStorage
from mapty.store.workout_store import WorkoutStore

logger = logging.getLogger(__name__)


class WebSocketMapClient:
    """Geolocation, map, form and list collaborators backed by one WebSocket."""

    def __init__(self, websocket: WebSocket, formatter: WorkoutFormatter) -> None:
        self._ws = websocket
        self._formatter = formatter
        self._position_request: asyncio.Future[Coordinates] | None = None
        self._fields = FormFields()
        self._location_callbacks: list[LocationCallback] = []
        self._submit_callbacks: list[FormCallback] = []
        self._cancel_callbacks: list[FormCallback] = []
        self._select_callbacks: list[SelectCallback] = []

    async def send(self, message: BaseModel) -> None:
        await self._ws.send_json(message.model_dump(mode="json"))

    # ── GeolocationSource ────────────────────────────────────────────────

    async def request_position(self) -> Coordinates:
        if self._position_request is not None:
            raise GeolocationFailure("A position request is already in flight")
        request: asyncio.Future[Coordinates] = asyncio.get_running_loop().create_future()
        self._position_request = request
        try:
            await self.send(RequestPosition())
            return await request
        finally:
            self._position_request = None

    # ── MapWidget ────────────────────────────────────────────────────────

    def on_location_chosen(self, callback: LocationCallback) -> None:
        self._location_callbacks.append(callback)

    async def center_on(self, coordinates: Coordinates, zoom: int) -> None:
        await self.send(CenterOn(coordinates=coordinates, zoom=zoom))

    async def render_marker(
        self,
        coordinates: Coordinates,
        label: str,
        kind: WorkoutKind | None = None,
    ) -> None:
        await self.send(RenderMarker(marker=self._formatter.marker(coordinates, label, kind)))

    async def clear_markers(self) -> None:
        await self.send(ClearMarkers())

    # ── FormSurface ──────────────────────────────────────────────────────

    def on_submit(self, callback: FormCallback) -> None:
        self._submit_callbacks.append(callback)

    def on_cancel(self, callback: FormCallback) -> None:
        self._cancel_callbacks.append(callback)

    def read_fields(self) -> FormFields:
        return self._fields

    async def show(self) -> None:
        await self.send(ShowForm())

    async def hide(self) -> None:
        self._fields = FormFields()
        await self.send(HideForm())

    async def show_error(self, message: str) -> None:
        await self.send(ShowError(message=message))

    # ── WorkoutListView ──────────────────────────────────────────────────

    def on_select(self, callback: SelectCallback) -> None:
        self._select_callbacks.append(callback)

    async def render_workout(self, workout: Workout) -> None:
        logger.debug("Rendering %s", WorkoutFormatter.format_plain(workout))
        await self.send(RenderWorkout(card=self._formatter.card(workout)))

    async def clear(self) -> None:
        await self.send(ClearWorkouts())

    # ── Inbound events ───────────────────────────────────────────────────

    async def dispatch(self, message: InboundMessage) -> None:
        """Deliver one inbound event to whoever subscribed to it."""
        if isinstance(message, PositionReport):
            self._resolve_position(message)
        elif isinstance(message, PositionUnavailable):
            self._fail_position(message.message or "Position unavailable")
        elif isinstance(message, LocationChosen):
            try:
                coordinates = Coordinates(lat=message.lat, lng=message.lng)
            except ValidationError:
                await self.send(ProtocolError(detail="Chosen location is out of range"))
                return
            for location_cb in self._location_callbacks:
                await location_cb(coordinates)
        elif isinstance(message, SubmitForm):
            self._fields = message.fields
            for form_cb in self._submit_callbacks:
                await form_cb()
        elif isinstance(message, CancelForm):
            for form_cb in self._cancel_callbacks:
                await form_cb()
        elif isinstance(message, SelectWorkout):
            for select_cb in self._select_callbacks:
                await select_cb(message.workout_id)

    def _resolve_position(self, report: PositionReport) -> None:
        request = self._position_request
        if request is None or request.done():
            logger.debug("Ignoring unsolicited position report")
            return
        try:
            request.set_result(Coordinates(lat=report.lat, lng=report.lng))
        except ValidationError:
            request.set_exception(GeolocationFailure("Reported position is out of range"))

    def _fail_position(self, reason: str) -> None:
        request = self._position_request
        if request is None or request.done():
            logger.debug("Ignoring unsolicited position error: %s", reason)
            return
        request.set_exception(GeolocationFailure(reason))

    def cancel_pending(self) -> None:
        if self._position_request is not None and not self._position_request.done():
            self._position_request.cancel()


def _log_startup_failure(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.error("Map session startup failed: %s", task.exception())


def create_map_router(
    storage: KeyValueStorage,
    storage_key: str,
    formatter: WorkoutFormatter,
    zoom_level: int = 13,
) -> APIRouter:
    """Factory that wires the map endpoint to durable storage.

    Args:
        storage: Durable key-value backend shared by all sessions.
        storage_key: Slot holding the workout snapshot.
        formatter: Builds cards and markers for the front-end.
        zoom_level: Zoom used whenever the map is centred.
    """

    router = APIRouter()

    @router.websocket("/ws/map")
    async def map_session(websocket: WebSocket) -> None:
        await websocket.accept()
        logger.info("Map client connected")

        client = WebSocketMapClient(websocket, formatter)
        controller = WorkoutController(
            store=WorkoutStore(WorkoutRepository(storage, storage_key)),
            geolocation=client,
            map_widget=client,
            form=client,
            workout_list=client,
            zoom_level=zoom_level,
        )
        startup = asyncio.create_task(controller.start())
        startup.add_done_callback(_log_startup_failure)

        try:
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000), frame.get("reason"))
                text = frame.get("text")
                if text is None:
                    await client.send(ProtocolError(detail="Binary frames are not supported"))
                    continue

                # ── Validate at the boundary ─────────────────────────────
                try:
                    message = inbound_adapter.validate_json(text)
                except ValidationError as exc:
                    await client.send(ProtocolError(
                        detail=f"Unrecognised message: {exc.error_count()} error(s)",
                    ))
                    continue

                # ── Route to the controller ──────────────────────────────
                if isinstance(message, ResetLog):
                    await controller.reset()
                else:
                    await client.dispatch(message)

        except WebSocketDisconnect:
            logger.info("Map client disconnected")
        finally:
            client.cancel_pending()
            startup.cancel()

    return router
