from __future__ import annotations

from pathlib import Path

import pytest

from mapty.cli.main import build_parser, main
from mapty.core.blob_store import FileBlobStore
from mapty.workout import codec
from mapty.workout.model import Coordinates, CyclingWorkout, RunningWorkout
from mapty.workout.store import WorkoutStore


@pytest.fixture(autouse=True)
def _keep_test_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("mapty.cli.main.setup_logger", lambda **_: None)


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])

    assert args.host == "127.0.0.1"
    assert args.port == 8088
    assert args.list is False
    assert args.start_lat is None


def test_list_prints_stored_workouts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    spot = Coordinates(40.7, -74.0)
    store = WorkoutStore([RunningWorkout(spot, 5, 30, 150), CyclingWorkout(spot, 20, 60, 200)])
    FileBlobStore(tmp_path / "storage").set(codec.STORAGE_KEY, codec.encode(store))

    assert main(["--data-dir", str(tmp_path), "--list"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert len(out) == 2
    assert "Running on" in out[0]
    assert "6.0 min/km" in out[0]
    assert "20.0 km/h" in out[1]


def test_list_with_corrupt_data(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    FileBlobStore(tmp_path / "storage").set(codec.STORAGE_KEY, "[{")

    assert main(["--data-dir", str(tmp_path), "--list", "--log-level", "ERROR"]) == 0

    assert "No workouts stored yet" in capsys.readouterr().out


def test_start_location_needs_both_coordinates(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--data-dir", str(tmp_path), "--start-lat", "40.7"])
