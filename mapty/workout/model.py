"""Workout domain models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Iterable, Literal, NamedTuple

WorkoutKind = Literal["running", "cycling"]

# Epoch milliseconds stay 13 digits until the year 2286.
MAX_ID_DIGITS = 13

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


class ValidationError(ValueError):
    """Raised when a workout cannot be built from the given values."""


class Coordinates(NamedTuple):
    lat: float
    lng: float


class _MonotonicIds:
    """Issues timestamp ids that never repeat within the process."""

    def __init__(self) -> None:
        self._last_ms = 0

    def next_id(self, created_at: datetime) -> str:
        ms = int(created_at.timestamp() * 1000)
        # Same-millisecond constructions get bumped past the last issued id.
        if ms <= self._last_ms:
            ms = self._last_ms + 1
        self._last_ms = ms
        return str(ms)

    def observe(self, workout_id: str) -> None:
        # Only epoch-millisecond ids move the counter; anything longer is ignored.
        if workout_id.isdigit() and len(workout_id) <= MAX_ID_DIGITS:
            self._last_ms = max(self._last_ms, int(workout_id))


_ids = _MonotonicIds()


def reserve_ids(workout_ids: Iterable[str]) -> None:
    """Keep later ids ahead of ids restored from storage."""
    for workout_id in workout_ids:
        _ids.observe(workout_id)


def now_local() -> datetime:
    return datetime.now().astimezone()


def _require_number(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValidationError(f"{field_name} is too large") from exc
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return value


def _require_positive(value: object, field_name: str) -> float:
    number = _require_number(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} must be > 0")
    return number


def _describe(kind: WorkoutKind, created_at: datetime) -> str:
    return f"{kind.capitalize()} on {MONTHS[created_at.month - 1]}, {created_at.day}"


@dataclass(frozen=True)
class Workout:
    """One logged activity. Use RunningWorkout or CyclingWorkout.

    ``created_at`` defaults to now and an empty ``id`` is issued from it.
    Passing both replays construction for a stored workout; derived fields
    are always computed here and never on read.
    """

    kind: ClassVar[WorkoutKind]

    coordinates: Coordinates
    distance_km: float
    duration_min: float
    id: str = field(default="", kw_only=True)
    created_at: datetime = field(default_factory=now_local, kw_only=True)
    description: str = field(init=False)

    def __post_init__(self) -> None:
        if type(self) is Workout:
            raise TypeError("Workout is abstract; build a RunningWorkout or CyclingWorkout")

        try:
            lat, lng = self.coordinates
        except (TypeError, ValueError) as exc:
            raise ValidationError("coordinates must be a (lat, lng) pair") from exc
        coordinates = Coordinates(
            float(_require_number(lat, "latitude")),
            float(_require_number(lng, "longitude")),
        )
        _require_positive(self.distance_km, "distance_km")
        _require_positive(self.duration_min, "duration_min")
        self._validate_variant()

        object.__setattr__(self, "coordinates", coordinates)
        if not self.id:
            object.__setattr__(self, "id", _ids.next_id(self.created_at))
        object.__setattr__(self, "description", _describe(self.kind, self.created_at))
        self._derive()

    def _validate_variant(self) -> None:
        raise NotImplementedError

    def _derive(self) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class RunningWorkout(Workout):
    kind: ClassVar[WorkoutKind] = "running"

    cadence_spm: int
    pace_min_per_km: float = field(init=False)

    def _validate_variant(self) -> None:
        cadence = _require_positive(self.cadence_spm, "cadence_spm")
        if cadence != int(cadence):
            raise ValidationError("cadence_spm must be a whole number")
        object.__setattr__(self, "cadence_spm", int(cadence))

    def _derive(self) -> None:
        object.__setattr__(self, "pace_min_per_km", self.duration_min / self.distance_km)


@dataclass(frozen=True)
class CyclingWorkout(Workout):
    kind: ClassVar[WorkoutKind] = "cycling"

    elevation_gain_m: float
    speed_kmh: float = field(init=False)

    def _validate_variant(self) -> None:
        _require_number(self.elevation_gain_m, "elevation_gain_m")

    def _derive(self) -> None:
        object.__setattr__(self, "speed_kmh", self.distance_km / (self.duration_min / 60))
