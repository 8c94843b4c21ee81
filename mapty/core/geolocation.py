"""Starting-location lookup for the map view."""

from __future__ import annotations

from typing import Protocol

from mapty.workout.model import Coordinates


class GeolocationUnavailable(RuntimeError):
    """Raised when no starting coordinate can be obtained."""


class GeolocationProvider(Protocol):
    async def locate(self) -> Coordinates:
        """Resolve once with the current position or raise GeolocationUnavailable."""
        ...


class FixedLocation:
    def __init__(self, coordinates: Coordinates) -> None:
        self._coordinates = coordinates

    async def locate(self) -> Coordinates:
        return self._coordinates
