"""Cloudinary image storage adapter."""

from __future__ import annotations

from app.adapters.storage.base import ImageStorage, ImageStorageError


class CloudinaryImageStorage(ImageStorage):
    def __init__(
        self,
        *,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        folder: str = "blogs",
    ) -> None:
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder

    def upload_image(self, path: str, *, filename: str | None = None) -> str:
        try:
            import cloudinary.uploader
        except ImportError as exc:  # pragma: no cover - depends on optional package
            raise ImageStorageError("Cloudinary client is unavailable") from exc

        if not (self._cloud_name and self._api_key and self._api_secret):
            raise ImageStorageError("Cloudinary credentials are not configured")

        try:
            result = cloudinary.uploader.upload(
                path,
                folder=self._folder,
                resource_type="image",
                cloud_name=self._cloud_name,
                api_key=self._api_key,
                api_secret=self._api_secret,
            )
        except Exception as exc:  # pragma: no cover - provider exception surface
            raise ImageStorageError("Cloudinary upload failed") from exc

        secure_url = result.get("secure_url") if isinstance(result, dict) else None
        if not secure_url:
            raise ImageStorageError("Cloudinary response missing secure_url")
        return str(secure_url)


__all__ = ["CloudinaryImageStorage"]
