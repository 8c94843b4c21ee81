from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from mapty.workout import codec
from mapty.workout.model import MAX_ID_DIGITS, Coordinates, CyclingWorkout, RunningWorkout
from mapty.workout.store import WorkoutStore

NYC = Coordinates(40.7, -74.0)
CREATED = datetime(2026, 4, 12, 7, 15, 30, 123000, tzinfo=timezone(timedelta(hours=-4)))


def _sample_store() -> WorkoutStore:
    return WorkoutStore(
        [
            RunningWorkout(NYC, 5, 30, 150, created_at=CREATED),
            CyclingWorkout(Coordinates(40.71, -73.99), 20, 60, 200, created_at=CREATED),
            RunningWorkout(NYC, 3.3, 21.5, 168, created_at=CREATED + timedelta(days=1)),
        ]
    )


def test_round_trip_restores_typed_workouts() -> None:
    original = _sample_store()

    restored = codec.decode(codec.encode(original))

    before = list(original.all())
    after = list(restored.all())
    assert len(after) == len(before)
    for old, new in zip(before, after):
        assert type(new) is type(old)
        assert new.id == old.id
        assert new.kind == old.kind
        assert new.created_at == old.created_at
        assert new.description == old.description
        assert new == old
    assert after[0].pace_min_per_km == pytest.approx(6.0)
    assert after[1].speed_kmh == pytest.approx(20.0)
    assert restored.find_by_id(before[1].id).kind == "cycling"


def test_encode_is_idempotent() -> None:
    store = _sample_store()

    assert codec.encode(store) == codec.encode(store)
    assert codec.encode(codec.decode(codec.encode(store))) == codec.encode(store)


def test_encoded_entries_carry_kind_tag() -> None:
    payload = json.loads(codec.encode(_sample_store()))

    assert [item["kind"] for item in payload] == ["running", "cycling", "running"]
    assert payload[0]["coordinates"] == [40.7, -74.0]
    assert payload[0]["cadence_spm"] == 150
    assert payload[1]["elevation_gain_m"] == 200
    assert payload[0]["created_at"] == CREATED.isoformat()


def test_decode_ignores_stored_derived_values() -> None:
    payload = json.loads(codec.encode(_sample_store()))
    payload[0]["pace_min_per_km"] = 99.0
    payload[0]["description"] = "tampered"

    restored = list(codec.decode(json.dumps(payload)).all())

    assert restored[0].pace_min_per_km == pytest.approx(6.0)
    assert restored[0].description == "Running on April, 12"


def test_decode_empty_array() -> None:
    assert len(codec.decode("[]")) == 0


def _mutated(mutate) -> str:  # type: ignore[no-untyped-def]
    payload = json.loads(codec.encode(_sample_store()))
    mutate(payload)
    return json.dumps(payload)


@pytest.mark.parametrize(
    "blob",
    [
        '[{"kind": "running"',
        "not json",
        '{"kind": "running"}',
        "[1, 2]",
        _mutated(lambda p: p[0].pop("kind")),
        _mutated(lambda p: p[1].update(kind="swimming")),
        _mutated(lambda p: p[1].update(kind=["cycling"])),
        _mutated(lambda p: p[0].pop("cadence_spm")),
        _mutated(lambda p: p[1].pop("elevation_gain_m")),
        _mutated(lambda p: p[0].pop("id")),
        _mutated(lambda p: p[0].update(created_at="yesterday")),
        _mutated(lambda p: p[0].update(coordinates=[40.7])),
        _mutated(lambda p: p[0].update(distance_km="5")),
        _mutated(lambda p: p[0].update(distance_km=0)),
        _mutated(lambda p: p[2].update(id=p[0]["id"])),
        '[{"kind": "running", "id": "1", "created_at": "2026-04-12T07:15:30+00:00", '
        '"coordinates": [1, 2], "distance_km": NaN, "duration_min": 30, "cadence_spm": 150}]',
        _mutated(lambda p: p[0].update(distance_km=10**400)),
        _mutated(lambda p: p[1].update(elevation_gain_m=-(10**400))),
        _mutated(lambda p: p[0].update(coordinates=[10**400, 2.0])),
        '[{"kind": "running", "distance_km": ' + "1" * 5000 + "}]",
    ],
)
def test_decode_rejects_corrupt_blobs(blob: str) -> None:
    with pytest.raises(codec.CorruptDataError):
        codec.decode(blob)


def test_failed_decode_leaves_id_generation_alone() -> None:
    payload = json.loads(codec.encode(_sample_store()))
    payload[0]["id"] = "9800000000000"
    payload.append({"kind": "swimming"})

    with pytest.raises(codec.CorruptDataError):
        codec.decode(json.dumps(payload))

    fresh = RunningWorkout(NYC, 5, 30, 150, created_at=CREATED)
    assert int(fresh.id) < 9800000000000


def test_decode_keeps_later_ids_ahead_of_restored_ones() -> None:
    payload = json.loads(codec.encode(_sample_store()))
    payload[0]["id"] = "9100000000000"
    payload[1]["id"] = "99999999999999999999"

    restored = codec.decode(json.dumps(payload))
    fresh = RunningWorkout(NYC, 5, 30, 150, created_at=CREATED)

    assert "99999999999999999999" in restored
    assert int(fresh.id) > 9100000000000
    assert len(fresh.id) == MAX_ID_DIGITS
