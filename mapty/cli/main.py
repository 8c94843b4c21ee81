"""Terminal CLI entrypoint for Mapty."""

from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger

from mapty.core.blob_store import FileBlobStore, default_data_dir
from mapty.core.logger import setup_logger
from mapty.workout import codec
from mapty.workout.display import entry_for
from mapty.workout.model import Coordinates


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mapty: log workouts on a map")
    parser.add_argument("--host", default="127.0.0.1", help="Host bind for the web UI")
    parser.add_argument("--port", type=int, default=8088, help="Port for the web UI")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help=f"Directory for stored workouts and logs (default: {default_data_dir()})",
    )
    parser.add_argument(
        "--start-lat",
        type=float,
        default=None,
        help="Start the map here instead of asking the browser for a location",
    )
    parser.add_argument("--start-lon", type=float, default=None, help="Longitude for --start-lat")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Console log level",
    )
    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Also write a rotating log file under the data directory",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print stored workouts and exit",
    )
    return parser


def run_list(blob_store: FileBlobStore) -> int:
    blob = blob_store.get(codec.STORAGE_KEY)
    if blob is None:
        print("No workouts stored yet")
        return 0
    try:
        store = codec.decode(blob)
    except codec.CorruptDataError as exc:
        logger.warning(f"Stored workouts are unreadable: {exc}")
        print("No workouts stored yet")
        return 0

    for workout in store.all():
        entry = entry_for(workout)
        details = "  ".join(f"{d.value} {d.unit}" for d in entry.details)
        print(f"{workout.id:<14} {entry.title:<28} {details}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    data_dir: Path = args.data_dir or default_data_dir()
    setup_logger(
        level=args.log_level,
        log_file=(data_dir / "logs" / "mapty.log") if args.log_file else None,
    )
    blob_store = FileBlobStore(data_dir / "storage")

    if args.list:
        return run_list(blob_store)

    if (args.start_lat is None) != (args.start_lon is None):
        parser.error("--start-lat and --start-lon must be given together")
    start_location = None
    if args.start_lat is not None:
        start_location = Coordinates(args.start_lat, args.start_lon)

    from mapty.ui.web_app import run_web_ui

    return run_web_ui(
        host=args.host,
        port=args.port,
        storage_dir=data_dir / "storage",
        start_location=start_location,
    )


if __name__ == "__main__":
    raise SystemExit(main())
