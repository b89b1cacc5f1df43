"""Object storage interfaces."""

from abc import ABC, abstractmethod


class ImageStorageError(Exception):
    """Raised when the storage provider rejects or fails an upload."""


class ImageStorage(ABC):
    """Uploads a local image file and returns its public reference URL."""

    @abstractmethod
    def upload_image(self, path: str, *, filename: str | None = None) -> str:
        """Upload the file at ``path`` and return the stored URL."""


__all__ = ["ImageStorage", "ImageStorageError"]
