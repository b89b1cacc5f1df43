"""Mock image storage for local development and tests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from app.adapters.storage.base import ImageStorage, ImageStorageError


@dataclass(slots=True)
class UploadedImage:
    path: str
    filename: str | None
    size: int
    url: str


class MockImageStorage(ImageStorage):
    """Records uploads in memory; ``failure_message`` makes the next upload fail."""

    def __init__(self, base_url: str = "https://images.example.test", folder: str = "blogs") -> None:
        self._base_url = base_url.rstrip("/")
        self._folder = folder
        self.uploads: list[UploadedImage] = []
        self.failure_message: str | None = None

    def upload_image(self, path: str, *, filename: str | None = None) -> str:
        if self.failure_message is not None:
            message = self.failure_message
            self.failure_message = None
            raise ImageStorageError(message)

        source = Path(path)
        if not source.is_file():
            raise ImageStorageError("Upload source file is missing")

        url = f"{self._base_url}/{self._folder}/{uuid4().hex}{source.suffix}"
        self.uploads.append(UploadedImage(path=path, filename=filename, size=source.stat().st_size, url=url))
        return url


__all__ = ["MockImageStorage", "UploadedImage"]
