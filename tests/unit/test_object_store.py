"""Tests for the filesystem object store."""

from pathlib import Path

import pytest

from locallens.errors import ValidationFailure
from locallens.storage.objects import LocalObjectStore, object_path


def test_object_path_keeps_extension() -> None:
    key = object_path("avatars", "Me At The Fort.JPG")

    folder, name = key.split("/")
    assert folder == "avatars"
    assert name.endswith(".jpg")
    assert len(name) == 32 + len(".jpg")


def test_object_path_is_random() -> None:
    assert object_path("verification", "id.pdf") != object_path("verification", "id.pdf")


def test_object_path_without_extension() -> None:
    assert "." not in object_path("verification", "scan").split("/")[1]


def test_object_path_unknown_folder() -> None:
    with pytest.raises(ValidationFailure):
        object_path("secrets", "x.png")


def test_upload_writes_file_and_returns_public_url(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path, "http://localhost:8000/storage/")

    url = store.upload("verification", "licence.pdf", b"%PDF-1.4")

    assert url.startswith("http://localhost:8000/storage/guide-docs/verification/")
    key = url.removeprefix("http://localhost:8000/storage/guide-docs/")
    assert (tmp_path / "guide-docs" / key).read_bytes() == b"%PDF-1.4"


def test_upload_empty_file_rejected(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path, "http://localhost:8000/storage")

    with pytest.raises(ValidationFailure, match="empty"):
        store.upload("avatars", "me.png", b"")

    assert not (tmp_path / "guide-docs").exists()
