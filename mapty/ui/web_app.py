"""NiceGUI web UI for Mapty."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from loguru import logger
from nicegui import ui

from mapty.core.blob_store import FileBlobStore
from mapty.core.geolocation import FixedLocation, GeolocationProvider, GeolocationUnavailable
from mapty.ui.controller import MAP_ZOOM_LEVEL, WorkoutController, initialize_map
from mapty.workout.display import WorkoutEntry
from mapty.workout.form import WorkoutFormFields
from mapty.workout.model import Coordinates, WorkoutKind

GEOLOCATION_TIMEOUT_SEC = 15.0
FALLBACK_CENTER = Coordinates(51.505, -0.09)

_GEOLOCATION_JS = """
new Promise((resolve) => {
  if (!navigator.geolocation) { resolve(null); return; }
  navigator.geolocation.getCurrentPosition(
    (position) => resolve([position.coords.latitude, position.coords.longitude]),
    () => resolve(null),
  );
})
"""

_HEAD_HTML = """
<style>
  :root {
    --mt-brand-cycling: #ffb545;
    --mt-brand-running: #00c46a;
    --mt-dark-1: #2d3439;
    --mt-dark-2: #42484d;
    --mt-light: #ececec;
  }
  body { background: var(--mt-dark-1); color: var(--mt-light); font-family: Manrope, Arial, sans-serif; }
  .mt-sidebar { background: var(--mt-dark-1); width: 32rem; height: calc(100vh - 2rem); overflow-y: auto; }
  .mt-form, .mt-entry { background: var(--mt-dark-2); border-radius: 6px; color: var(--mt-light); }
  .mt-entry { cursor: pointer; }
  .mt-entry--running { border-left: 5px solid var(--mt-brand-running); }
  .mt-entry--cycling { border-left: 5px solid var(--mt-brand-cycling); }
  .mt-entry__unit { color: #aaa; font-size: 0.8rem; text-transform: uppercase; }
  .mt-map { height: calc(100vh - 2rem); flex: 1; }
  .leaflet-popup .leaflet-popup-content-wrapper { background: var(--mt-dark-1); color: var(--mt-light); border-radius: 5px; }
  .running-popup .leaflet-popup-content-wrapper { border-left: 5px solid var(--mt-brand-running); }
  .cycling-popup .leaflet-popup-content-wrapper { border-left: 5px solid var(--mt-brand-cycling); }
</style>
"""


class BrowserGeolocation:
    def __init__(self, timeout: float = GEOLOCATION_TIMEOUT_SEC) -> None:
        self._timeout = timeout

    async def locate(self) -> Coordinates:
        try:
            result = await ui.run_javascript(_GEOLOCATION_JS, timeout=self._timeout)
        except TimeoutError as exc:
            raise GeolocationUnavailable("Browser did not answer the location request") from exc
        if not isinstance(result, list) or len(result) != 2:
            raise GeolocationUnavailable("Browser refused the location request")
        return Coordinates(float(result[0]), float(result[1]))


class LeafletMapView:
    """Leaflet map that stays hidden until it is first centered."""

    def __init__(self) -> None:
        self._map = ui.leaflet(center=FALLBACK_CENTER, zoom=MAP_ZOOM_LEVEL).classes("mt-map")
        self._map.set_visibility(False)
        self._ready_handlers: list[Callable[[], None]] = []
        self._ready = False

    def set_center(self, coordinates: Coordinates, zoom: int) -> None:
        if not self._ready:
            self._map.set_visibility(True)
            self._map.run_map_method("invalidateSize")
        self._map.set_center(coordinates)
        self._map.set_zoom(zoom)
        if not self._ready:
            self._ready = True
            for handler in self._ready_handlers:
                handler()

    def place_marker(self, coordinates: Coordinates, icon_kind: WorkoutKind, label_text: str) -> None:
        marker = self._map.marker(latlng=coordinates)
        marker.run_method(
            "bindPopup",
            label_text,
            {
                "maxWidth": 300,
                "minWidth": 100,
                "maxHeight": 200,
                "autoClose": False,
                "closeOnClick": False,
                "className": f"{icon_kind}-popup",
            },
        )
        marker.run_method("openPopup")

    def on_click(self, handler: Callable[[Coordinates], None]) -> None:
        def _on_map_click(event: Any) -> None:
            latlng = event.args["latlng"]
            handler(Coordinates(float(latlng["lat"]), float(latlng["lng"])))

        self._map.on("map-click", _on_map_click)

    def on_ready(self, handler: Callable[[], None]) -> None:
        self._ready_handlers.append(handler)
        if self._ready:
            handler()


class WorkoutForm:
    def __init__(self) -> None:
        self._submit_handlers: list[Callable[[], None]] = []
        with ui.card().classes("mt-form w-full") as self._card:
            with ui.grid(columns=2).classes("w-full gap-2"):
                self._type = ui.select(
                    {"running": "Running", "cycling": "Cycling"},
                    value="running",
                    label="Type",
                )
                self._distance = ui.input("Distance", placeholder="km")
                self._duration = ui.input("Duration", placeholder="min")
                self._cadence = ui.input("Cadence", placeholder="step/min")
                self._elevation = ui.input("Elev Gain", placeholder="meters")
            ui.button("OK", on_click=self._emit_submit).props("flat dense")
        for field in (self._distance, self._duration, self._cadence, self._elevation):
            field.on("keydown.enter", self._emit_submit)
        self._type.on_value_change(lambda _: self._toggle_variant_fields())
        self._toggle_variant_fields()
        self._card.set_visibility(False)

    def _toggle_variant_fields(self) -> None:
        running = self._type.value == "running"
        self._cadence.set_visibility(running)
        self._elevation.set_visibility(not running)

    def _emit_submit(self) -> None:
        for handler in self._submit_handlers:
            handler()

    def read_fields(self) -> WorkoutFormFields:
        return WorkoutFormFields(
            activity_type=str(self._type.value or ""),
            distance=str(self._distance.value or ""),
            duration=str(self._duration.value or ""),
            cadence=str(self._cadence.value or ""),
            elevation=str(self._elevation.value or ""),
        )

    def on_submit(self, handler: Callable[[], None]) -> None:
        self._submit_handlers.append(handler)

    def show(self) -> None:
        self._card.set_visibility(True)
        self._distance.run_method("focus")

    def clear_and_hide(self) -> None:
        for field in (self._distance, self._duration, self._cadence, self._elevation):
            field.value = ""
        self._card.set_visibility(False)


class WorkoutList:
    def __init__(self) -> None:
        self._activated_handlers: list[Callable[[str], None]] = []
        self._container = ui.column().classes("w-full gap-3")

    def render_entry(self, entry: WorkoutEntry) -> None:
        with self._container:
            card = ui.card().classes(f"mt-entry mt-entry--{entry.kind} w-full")
            with card:
                ui.label(entry.title).classes("text-lg font-semibold")
                with ui.row().classes("gap-4"):
                    for detail in entry.details:
                        with ui.row().classes("items-baseline gap-1"):
                            ui.label(detail.icon)
                            ui.label(detail.value).classes("font-semibold")
                            ui.label(detail.unit).classes("mt-entry__unit")
            card.on("click", lambda _, workout_id=entry.workout_id: self._emit_activated(workout_id))
        # Newest first, like the form sits on top of the list.
        card.move(target_index=0)

    def _emit_activated(self, workout_id: str) -> None:
        for handler in self._activated_handlers:
            handler(workout_id)

    def on_entry_activated(self, handler: Callable[[str], None]) -> None:
        self._activated_handlers.append(handler)


def _notify(message: str) -> None:
    ui.notify(message, color="negative")


def run_web_ui(
    *,
    host: str = "127.0.0.1",
    port: int = 8088,
    storage_dir: Path | None = None,
    start_location: Coordinates | None = None,
) -> int:
    blob_store = FileBlobStore(storage_dir)

    @ui.page("/")
    async def index() -> None:
        ui.add_head_html(_HEAD_HTML)
        with ui.row().classes("w-full no-wrap gap-4"):
            with ui.column().classes("mt-sidebar gap-3 p-4"):
                ui.label("Mapty").classes("text-2xl font-bold")
                form = WorkoutForm()
                workout_list = WorkoutList()
            map_view = LeafletMapView()

        controller = WorkoutController(
            map_view=map_view,
            input_source=form,
            render_sink=workout_list,
            blob_store=blob_store,
            notify=_notify,
        )
        controller.start()

        geolocation: GeolocationProvider
        if start_location is not None:
            geolocation = FixedLocation(start_location)
        else:
            geolocation = BrowserGeolocation()
        await ui.context.client.connected()
        await initialize_map(controller, geolocation)

    logger.info(f"Serving Mapty on http://{host}:{port}")
    ui.run(host=host, port=port, reload=False, title="Mapty", show=False)
    return 0
