"""Workout store <-> persisted JSON blob."""

from __future__ import annotations

import json
import math
from datetime import datetime
from typing import Any, Callable

from mapty.workout.model import (
    Coordinates,
    CyclingWorkout,
    RunningWorkout,
    ValidationError,
    Workout,
    reserve_ids,
)
from mapty.workout.store import DuplicateWorkoutError, WorkoutStore

STORAGE_KEY = "workouts"


class CorruptDataError(ValueError):
    """Raised when a persisted blob cannot be turned back into workouts."""


def encode(store: WorkoutStore) -> str:
    return json.dumps([_encode_workout(w) for w in store.all()], ensure_ascii=True)


def decode(text: str) -> WorkoutStore:
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise CorruptDataError(f"Invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise CorruptDataError("Stored workouts must be an array")

    workouts = [_decode_workout(raw, index=i) for i, raw in enumerate(data)]
    try:
        store = WorkoutStore(workouts)
    except DuplicateWorkoutError as exc:
        raise CorruptDataError(str(exc)) from exc
    reserve_ids(w.id for w in workouts)
    return store


def _encode_workout(workout: Workout) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "kind": workout.kind,
        "id": workout.id,
        "created_at": workout.created_at.isoformat(),
        "coordinates": [workout.coordinates.lat, workout.coordinates.lng],
        "distance_km": workout.distance_km,
        "duration_min": workout.duration_min,
        "description": workout.description,
    }
    if isinstance(workout, RunningWorkout):
        payload["cadence_spm"] = workout.cadence_spm
        payload["pace_min_per_km"] = workout.pace_min_per_km
    elif isinstance(workout, CyclingWorkout):
        payload["elevation_gain_m"] = workout.elevation_gain_m
        payload["speed_kmh"] = workout.speed_kmh
    return payload


def _decode_running(raw: dict[str, Any], index: int) -> dict[str, Any]:
    return {"cadence_spm": _number_field(raw, "cadence_spm", index=index)}


def _decode_cycling(raw: dict[str, Any], index: int) -> dict[str, Any]:
    return {"elevation_gain_m": _number_field(raw, "elevation_gain_m", index=index)}


_VARIANTS: dict[str, tuple[type[Workout], Callable[[dict[str, Any], int], dict[str, Any]]]] = {
    "running": (RunningWorkout, _decode_running),
    "cycling": (CyclingWorkout, _decode_cycling),
}


def _decode_workout(raw: object, *, index: int) -> Workout:
    if not isinstance(raw, dict):
        raise CorruptDataError(f"Entry {index + 1}: must be an object")

    kind = raw.get("kind")
    if not isinstance(kind, str) or kind not in _VARIANTS:
        raise CorruptDataError(f"Entry {index + 1}: unknown kind {kind!r}")
    workout_cls, decode_variant = _VARIANTS[kind]

    workout_id = raw.get("id")
    if not isinstance(workout_id, str) or not workout_id:
        raise CorruptDataError(f"Entry {index + 1}: missing id")

    created_raw = raw.get("created_at")
    if not isinstance(created_raw, str):
        raise CorruptDataError(f"Entry {index + 1}: missing created_at")
    try:
        created_at = datetime.fromisoformat(created_raw)
    except ValueError as exc:
        raise CorruptDataError(f"Entry {index + 1}: invalid created_at") from exc

    coords_raw = raw.get("coordinates")
    if not isinstance(coords_raw, list) or len(coords_raw) != 2:
        raise CorruptDataError(f"Entry {index + 1}: coordinates must be [lat, lng]")
    coordinates = Coordinates(
        _number(coords_raw[0], "latitude", index=index),
        _number(coords_raw[1], "longitude", index=index),
    )

    try:
        return workout_cls(
            coordinates,
            _number_field(raw, "distance_km", index=index),
            _number_field(raw, "duration_min", index=index),
            **decode_variant(raw, index),
            id=workout_id,
            created_at=created_at,
        )
    except ValidationError as exc:
        raise CorruptDataError(f"Entry {index + 1}: {exc}") from exc


def _number_field(raw: dict[str, Any], field_name: str, *, index: int) -> float:
    if field_name not in raw:
        raise CorruptDataError(f"Entry {index + 1}: missing {field_name}")
    return _number(raw[field_name], field_name, index=index)


def _number(value: object, field_name: str, *, index: int) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptDataError(f"Entry {index + 1}: {field_name} must be a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise CorruptDataError(f"Entry {index + 1}: {field_name} is too large") from exc
    if not math.isfinite(number):
        raise CorruptDataError(f"Entry {index + 1}: {field_name} must be finite")
    return value
