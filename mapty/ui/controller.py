"""Controller wiring the workout store to the map, form and list."""

from __future__ import annotations

from loguru import logger

from mapty.core.geolocation import GeolocationProvider, GeolocationUnavailable
from mapty.core.state import ControllerState
from mapty.ui.collaborators import BlobStore, InputSource, MapView, Notifier, RenderSink
from mapty.workout import codec
from mapty.workout.display import entry_for, marker_label
from mapty.workout.form import build_workout
from mapty.workout.model import Coordinates, ValidationError, Workout
from mapty.workout.store import NotFoundError, WorkoutStore

MAP_ZOOM_LEVEL = 13
LOCATION_UNAVAILABLE_MESSAGE = "Could not get your location!"


class WorkoutController:
    def __init__(
        self,
        *,
        map_view: MapView,
        input_source: InputSource,
        render_sink: RenderSink,
        blob_store: BlobStore,
        notify: Notifier,
        store: WorkoutStore | None = None,
    ) -> None:
        self._map = map_view
        self._form = input_source
        self._list = render_sink
        self._blobs = blob_store
        self._notify = notify
        self.store = store if store is not None else WorkoutStore()
        self.state = ControllerState()

    def start(self) -> None:
        self._map.on_click(self.handle_map_click)
        self._map.on_ready(self.handle_map_ready)
        self._form.on_submit(self.handle_submit)
        self._list.on_entry_activated(self.handle_entry_activated)

        self.store.replace_all(self._load_persisted().all())
        for workout in self.store.all():
            self._list.render_entry(entry_for(workout))
        logger.info(f"Restored {len(self.store)} workouts")

    def _load_persisted(self) -> WorkoutStore:
        blob = self._blobs.get(codec.STORAGE_KEY)
        if blob is None:
            return WorkoutStore()
        try:
            return codec.decode(blob)
        except codec.CorruptDataError as exc:
            logger.warning(f"Discarding stored workouts: {exc}")
            return WorkoutStore()

    def handle_position(self, coordinates: Coordinates) -> None:
        logger.info(f"Centering map at {coordinates.lat:.5f},{coordinates.lng:.5f}")
        self.state.map_center = coordinates
        self._map.set_center(coordinates, MAP_ZOOM_LEVEL)

    def handle_position_unavailable(self, exc: GeolocationUnavailable) -> None:
        logger.warning(f"Geolocation unavailable: {exc}")
        self._notify(LOCATION_UNAVAILABLE_MESSAGE)

    def handle_map_ready(self) -> None:
        if self.state.map_ready:
            return
        self.state.map_ready = True
        for workout in self.store.all():
            self._place_marker(workout)

    def handle_map_click(self, coordinates: Coordinates) -> None:
        self.state.pending = coordinates
        self.state.phase = "awaiting_input"
        self._form.show()

    def handle_submit(self) -> None:
        if self.state.phase != "awaiting_input" or self.state.pending is None:
            logger.debug("Ignoring form submit without a selected map location")
            return

        try:
            workout = build_workout(self._form.read_fields(), self.state.pending)
        except ValidationError as exc:
            self._notify(str(exc))
            return

        self.store.append(workout)
        if self.state.map_ready:
            self._place_marker(workout)
        self._list.render_entry(entry_for(workout))
        self._form.clear_and_hide()
        self.state.phase = "idle"
        self.state.pending = None
        self.persist()
        logger.info(f"Logged {workout.kind} workout {workout.id}: {workout.description}")

    def handle_entry_activated(self, workout_id: str) -> None:
        try:
            workout = self.store.find_by_id(workout_id)
        except NotFoundError as exc:
            logger.error(f"List entry points at a missing workout: {exc}")
            return
        self.state.map_center = workout.coordinates
        self._map.set_center(workout.coordinates, MAP_ZOOM_LEVEL)

    def persist(self) -> None:
        self._blobs.set(codec.STORAGE_KEY, codec.encode(self.store))

    def _place_marker(self, workout: Workout) -> None:
        self._map.place_marker(workout.coordinates, workout.kind, marker_label(workout))


async def initialize_map(controller: WorkoutController, provider: GeolocationProvider) -> None:
    try:
        coordinates = await provider.locate()
    except GeolocationUnavailable as exc:
        controller.handle_position_unavailable(exc)
        return
    controller.handle_position(coordinates)
