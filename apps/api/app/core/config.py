"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_ttl_minutes: int = 60 * 24 * 30

    identity_provider: Literal["mock", "google", "firebase"] = "google"
    google_client_id: str | None = None
    firebase_project_id: str | None = None
    firebase_audience: str | None = None

    storage_provider: Literal["mock", "cloudinary"] = "cloudinary"
    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    cloudinary_folder: str = "blogs"
    upload_tmp_dir: str | None = None
    max_image_bytes: int = 5 * 1024 * 1024

    allow_admin_registration: bool = False

    model_config = SettingsConfigDict(env_prefix="BLOGX_", extra="ignore")


class ServerSettings(BaseSettings):
    """HTTP server options needed while the application object is built."""

    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = SettingsConfigDict(env_prefix="BLOGX_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
