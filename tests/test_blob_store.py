from __future__ import annotations

from pathlib import Path

import pytest

from mapty.core.blob_store import FileBlobStore, MemoryBlobStore


def test_file_blob_store_set_get_overwrite(tmp_path: Path) -> None:
    store = FileBlobStore(tmp_path / "storage")

    assert store.get("workouts") is None

    store.set("workouts", '[{"kind":"running"}]')
    store.set("workouts", "[]")

    assert store.get("workouts") == "[]"
    assert sorted(p.name for p in (tmp_path / "storage").iterdir()) == ["workouts.json"]


def test_file_blob_store_rejects_path_like_keys(tmp_path: Path) -> None:
    store = FileBlobStore(tmp_path)

    with pytest.raises(ValueError):
        store.set("../escape", "x")


def test_memory_blob_store() -> None:
    store = MemoryBlobStore({"a": "1"})
    store.set("b", "2")

    assert store.get("a") == "1"
    assert store.get("b") == "2"
    assert store.get("c") is None
