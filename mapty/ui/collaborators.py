"""Interfaces the workout controller drives.

The NiceGUI adapters in ``mapty.ui.web_app`` implement these; tests use
in-memory fakes.
"""

from __future__ import annotations

from typing import Callable, Protocol

from mapty.workout.display import WorkoutEntry
from mapty.workout.form import WorkoutFormFields
from mapty.workout.model import Coordinates, WorkoutKind


class MapView(Protocol):
    def set_center(self, coordinates: Coordinates, zoom: int) -> None: ...

    def place_marker(self, coordinates: Coordinates, icon_kind: WorkoutKind, label_text: str) -> None: ...

    def on_click(self, handler: Callable[[Coordinates], None]) -> None: ...

    def on_ready(self, handler: Callable[[], None]) -> None:
        """Register a handler fired once, after the map is initialised."""
        ...


class InputSource(Protocol):
    def read_fields(self) -> WorkoutFormFields: ...

    def on_submit(self, handler: Callable[[], None]) -> None: ...

    def show(self) -> None: ...

    def clear_and_hide(self) -> None: ...


class RenderSink(Protocol):
    def render_entry(self, entry: WorkoutEntry) -> None: ...

    def on_entry_activated(self, handler: Callable[[str], None]) -> None: ...


class BlobStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


Notifier = Callable[[str], None]
