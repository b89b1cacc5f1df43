"""Shared fixtures for API tests."""

from __future__ import annotations

import os
import shutil
import tempfile
import unittest
from uuid import uuid4

from fastapi.testclient import TestClient

from app.adapters.storage import MockImageStorage
from app.core.config import get_settings
from app.main import create_app
from app.routes.dependencies import get_image_storage

API = "/api/v1"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "BLOGX_JWT_SECRET",
        "BLOGX_IDENTITY_PROVIDER",
        "BLOGX_STORAGE_PROVIDER",
        "BLOGX_ALLOW_ADMIN_REGISTRATION",
        "BLOGX_UPLOAD_TMP_DIR",
        "BLOGX_MAX_IMAGE_BYTES",
        "BLOGX_GOOGLE_CLIENT_ID",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        self.upload_dir = tempfile.mkdtemp(prefix="blogx-uploads-")
        os.environ["BLOGX_JWT_SECRET"] = "test-jwt-secret-with-enough-length-for-hs256"
        os.environ["BLOGX_IDENTITY_PROVIDER"] = "mock"
        os.environ["BLOGX_STORAGE_PROVIDER"] = "mock"
        os.environ["BLOGX_ALLOW_ADMIN_REGISTRATION"] = "true"
        os.environ["BLOGX_UPLOAD_TMP_DIR"] = self.upload_dir
        os.environ["BLOGX_MAX_IMAGE_BYTES"] = "4096"
        os.environ.pop("BLOGX_GOOGLE_CLIENT_ID", None)
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()
        shutil.rmtree(self.upload_dir, ignore_errors=True)


class ApiCase(SettingsEnvCase):
    """Fresh app, client and mock image storage per test."""

    def setUp(self) -> None:
        super().setUp()
        self.app = create_app()
        self.storage = MockImageStorage()
        self.app.dependency_overrides[get_image_storage] = lambda: self.storage
        self.client = TestClient(self.app)
        self.store = self.app.state.store

    def register(self, username: str, *, admin: bool = False, password: str = "secret123") -> dict:
        path = f"{API}/users/register-admin" if admin else f"{API}/users/register"
        response = self.client.post(
            path,
            json={"username": username, "email": f"{username}@example.com", "password": password},
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    @staticmethod
    def headers(session: dict) -> dict[str, str]:
        return {"Authorization": f"Bearer {session['token']}"}

    def create_post(
        self,
        session: dict,
        title: str,
        *,
        content: str = "<p>Body</p>",
        category: str | None = None,
        tags: str | None = None,
    ) -> dict:
        form = {"title": title, "content": content}
        if category is not None:
            form["category"] = category
        if tags is not None:
            form["tags"] = tags
        response = self.client.post(f"{API}/posts", headers=self.headers(session), data=form)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def upload_dir_entries(self) -> list[str]:
        return os.listdir(self.upload_dir)


def random_id() -> str:
    return str(uuid4())
