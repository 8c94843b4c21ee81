"""String-keyed blob storage for persisted app data."""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path


def default_data_dir() -> Path:
    return Path.home() / ".mapty"


class MemoryBlobStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self.blobs[key] = value


class FileBlobStore:
    """One file per key; writes replace the whole file atomically."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self._root = base_dir or (default_data_dir() / "storage")

    def _path_for(self, key: str) -> Path:
        if not re.fullmatch(r"[A-Za-z0-9_.-]+", key) or key.startswith("."):
            raise ValueError(f"Invalid storage key '{key}'")
        return self._root / f"{key}.json"

    def get(self, key: str) -> str | None:
        target = self._path_for(key)
        if not target.exists():
            return None
        return target.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        target = self._path_for(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{key}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
