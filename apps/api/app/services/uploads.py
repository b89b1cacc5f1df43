"""Image upload staging and hand-off to object storage."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
import logging
import os
from pathlib import Path
import tempfile
from typing import BinaryIO

from app.adapters.storage import ImageStorage, ImageStorageError
from app.errors import ApiError

logger = logging.getLogger(__name__)

_ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
_CHUNK_SIZE = 64 * 1024


@dataclass(slots=True)
class ImageUpload:
    filename: str | None
    content_type: str | None
    stream: BinaryIO


def _invalid_image(message: str) -> ApiError:
    return ApiError(status_code=400, code="INVALID_IMAGE", message=message)


class ImageUploader:
    def __init__(self, storage: ImageStorage, *, tmp_dir: str | None = None, max_bytes: int = 5 * 1024 * 1024) -> None:
        self._storage = storage
        self._tmp_dir = tmp_dir
        self._max_bytes = max_bytes

    @contextmanager
    def stage(self, upload: ImageUpload) -> Iterator[str]:
        """Copy the upload to a temporary file that is removed on every exit path."""
        if (upload.content_type or "").lower() not in _ALLOWED_IMAGE_TYPES:
            raise _invalid_image("Only JPEG, PNG, GIF or WebP images are accepted")

        suffix = Path(upload.filename or "").suffix.lower()
        fd, path = tempfile.mkstemp(prefix="upload-", suffix=suffix, dir=self._tmp_dir)
        try:
            written = 0
            with os.fdopen(fd, "wb") as handle:
                while chunk := upload.stream.read(_CHUNK_SIZE):
                    written += len(chunk)
                    if written > self._max_bytes:
                        raise _invalid_image(f"Image exceeds the {self._max_bytes} byte limit")
                    handle.write(chunk)
            if written == 0:
                raise _invalid_image("Image file is empty")
            yield path
        finally:
            Path(path).unlink(missing_ok=True)

    @contextmanager
    def uploaded(self, upload: ImageUpload | None) -> Iterator[str | None]:
        """Yield the stored image URL while the staged file is still held.

        Work done inside the block (persisting the post) runs before cleanup, so
        a failure there still releases the temporary file.
        """
        if upload is None:
            yield None
            return

        with self.stage(upload) as path:
            try:
                url = self._storage.upload_image(path, filename=upload.filename)
            except ImageStorageError as exc:
                logger.warning("upload.storage_failed reason=%s", exc)
                raise ApiError(status_code=502, code="IMAGE_UPLOAD_FAILED", message="Image upload failed") from exc
            logger.info("upload.stored content_type=%s", upload.content_type)
            yield url


__all__ = ["ImageUpload", "ImageUploader"]
