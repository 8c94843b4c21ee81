"""List entry and marker projections of a workout."""

from __future__ import annotations

from dataclasses import dataclass

from mapty.workout.model import CyclingWorkout, RunningWorkout, Workout, WorkoutKind

KIND_ICONS: dict[str, str] = {
    "running": "🏃‍♂️",
    "cycling": "🚴‍♀️",
}


@dataclass(frozen=True)
class EntryDetail:
    icon: str
    value: str
    unit: str


@dataclass(frozen=True)
class WorkoutEntry:
    workout_id: str
    kind: WorkoutKind
    title: str
    details: tuple[EntryDetail, ...]


def _fmt_number(value: float, digits: int | None = None) -> str:
    if digits is not None:
        return f"{value:.{digits}f}"
    # Whole numbers typed as "5" should not show up as "5.0".
    if float(value).is_integer():
        return f"{int(value)}"
    return f"{value:g}"


def entry_for(workout: Workout) -> WorkoutEntry:
    details = [
        EntryDetail(KIND_ICONS[workout.kind], _fmt_number(workout.distance_km), "km"),
        EntryDetail("⏱", _fmt_number(workout.duration_min), "min"),
    ]
    if isinstance(workout, RunningWorkout):
        details.append(EntryDetail("⚡️", _fmt_number(workout.pace_min_per_km, 1), "min/km"))
        details.append(EntryDetail("🦶🏼", _fmt_number(workout.cadence_spm), "spm"))
    elif isinstance(workout, CyclingWorkout):
        details.append(EntryDetail("⚡️", _fmt_number(workout.speed_kmh, 1), "km/h"))
        details.append(EntryDetail("⛰", _fmt_number(workout.elevation_gain_m), "m"))
    return WorkoutEntry(
        workout_id=workout.id,
        kind=workout.kind,
        title=workout.description,
        details=tuple(details),
    )


def marker_label(workout: Workout) -> str:
    return f"{KIND_ICONS[workout.kind]} {workout.description}"
