"""Workout form parsing (raw field strings -> workout)."""

from __future__ import annotations

import math
from dataclasses import dataclass

from mapty.workout.model import (
    Coordinates,
    CyclingWorkout,
    RunningWorkout,
    ValidationError,
    Workout,
)


@dataclass(frozen=True)
class WorkoutFormFields:
    activity_type: str
    distance: str
    duration: str
    cadence: str = ""
    elevation: str = ""


def build_workout(fields: WorkoutFormFields, coordinates: Coordinates) -> Workout:
    activity_type = fields.activity_type.strip().lower()
    if activity_type not in ("running", "cycling"):
        raise ValidationError("Choose a workout type: running or cycling")

    distance_km = _parse_number(fields.distance, label="Distance", positive=True)
    duration_min = _parse_number(fields.duration, label="Duration", positive=True)

    if activity_type == "running":
        cadence_spm = _parse_number(fields.cadence, label="Cadence", positive=True)
        if cadence_spm != int(cadence_spm):
            raise ValidationError("Cadence has to be a whole number!")
        return RunningWorkout(coordinates, distance_km, duration_min, int(cadence_spm))

    elevation_gain_m = _parse_number(fields.elevation, label="Elevation", positive=False)
    return CyclingWorkout(coordinates, distance_km, duration_min, elevation_gain_m)


def _parse_number(raw: str | None, *, label: str, positive: bool) -> float:
    text = (raw or "").strip()
    if not text:
        raise ValidationError(f"{label} is required!")
    try:
        value = float(text)
    except ValueError as exc:
        raise ValidationError(f"{label} has to be a number!") from exc
    if not math.isfinite(value):
        raise ValidationError(f"{label} has to be a finite number!")
    if positive and value <= 0:
        raise ValidationError(f"{label} has to be a positive number!")
    return value
