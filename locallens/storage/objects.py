"""Object storage for guide avatars and verification documents."""

import logging
import uuid
from pathlib import Path
from typing import Literal, Protocol

from locallens.errors import ValidationFailure

logger = logging.getLogger(__name__)

Folder = Literal["avatars", "verification"]

BUCKET = "guide-docs"
FOLDERS: tuple[str, ...] = ("avatars", "verification")


class ObjectStore(Protocol):
    """Uploads files and hands back a public URL."""

    def upload(self, folder: Folder, filename: str, content: bytes) -> str:
        """Store ``content`` under ``folder`` and return its public URL."""
        ...


def object_path(folder: str, filename: str) -> str:
    """Random object key that keeps the uploaded file's extension."""
    if folder not in FOLDERS:
        raise ValidationFailure(f"Unknown upload folder '{folder}'")

    ext = Path(filename).suffix.lstrip(".").lower()
    name = uuid.uuid4().hex
    return f"{folder}/{name}.{ext}" if ext else f"{folder}/{name}"


class LocalObjectStore:
    """Filesystem-backed store served under ``public_base_url``."""

    def __init__(self, root: str | Path, public_base_url: str, bucket: str = BUCKET) -> None:
        self._root = Path(root)
        self._public_base_url = public_base_url.rstrip("/")
        self._bucket = bucket

    @property
    def root(self) -> Path:
        return self._root

    def upload(self, folder: Folder, filename: str, content: bytes) -> str:
        """Write the file and return its public URL."""
        if not content:
            raise ValidationFailure("Uploaded file is empty")

        key = object_path(folder, filename)
        target = self._root / self._bucket / key
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

        logger.info(f"[storage] stored {len(content)} bytes at {self._bucket}/{key}")
        return self.public_url(key)

    def public_url(self, key: str) -> str:
        return f"{self._public_base_url}/{self._bucket}/{key}"
