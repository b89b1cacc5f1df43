"""Object storage adapters for post images."""

from .base import ImageStorage, ImageStorageError
from .cloudinary_storage import CloudinaryImageStorage
from .mock_storage import MockImageStorage

__all__ = ["CloudinaryImageStorage", "ImageStorage", "ImageStorageError", "MockImageStorage"]
