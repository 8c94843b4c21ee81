"""In-memory collection of logged workouts."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from mapty.workout.model import Workout


class NotFoundError(LookupError):
    """Raised when no workout has the requested id."""


class DuplicateWorkoutError(ValueError):
    """Raised when two workouts share an id."""


class _InsertionOrderView:
    def __init__(self, items: list[Workout]) -> None:
        self._items = items

    def __iter__(self) -> Iterator[Workout]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


class WorkoutStore:
    """Workouts in display order, indexed by id."""

    def __init__(self, workouts: Iterable[Workout] = ()) -> None:
        self._items: list[Workout] = []
        self._by_id: dict[str, Workout] = {}
        self.replace_all(workouts)

    def append(self, workout: Workout) -> None:
        if workout.id in self._by_id:
            raise DuplicateWorkoutError(f"Duplicate workout id '{workout.id}'")
        self._items.append(workout)
        self._by_id[workout.id] = workout

    def find_by_id(self, workout_id: str) -> Workout:
        try:
            return self._by_id[workout_id]
        except KeyError as exc:
            raise NotFoundError(f"No workout with id '{workout_id}'") from exc

    def all(self) -> Iterable[Workout]:
        return _InsertionOrderView(self._items)

    def replace_all(self, workouts: Iterable[Workout]) -> None:
        items = list(workouts)
        by_id: dict[str, Workout] = {}
        for workout in items:
            if workout.id in by_id:
                raise DuplicateWorkoutError(f"Duplicate workout id '{workout.id}'")
            by_id[workout.id] = workout
        # Fresh containers so views handed out earlier keep the old contents.
        self._items = items
        self._by_id = by_id

    def clear(self) -> None:
        self.replace_all(())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, workout_id: object) -> bool:
        return workout_id in self._by_id
