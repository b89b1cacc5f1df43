"""Identity and image storage adapter tests."""

from __future__ import annotations

import sys
import types
import unittest
from unittest.mock import patch

from app.adapters.identity import (
    FirebaseIdentityVerifier,
    GoogleIdentityVerifier,
    IdentityProviderUnavailable,
    IdentityVerificationError,
    MockIdentityVerifier,
)
from app.adapters.storage import CloudinaryImageStorage, ImageStorageError, MockImageStorage
from app.core.config import Settings
from app.routes.dependencies import get_identity_verifier, get_image_storage
from support import API, ApiCase


class MockIdentityVerifierTests(unittest.TestCase):
    def test_normalizes_assertion_with_display_name(self) -> None:
        identity = MockIdentityVerifier().verify_assertion("mock:g-1:jane@example.com:Jane Doe")

        self.assertEqual(identity.subject, "g-1")
        self.assertEqual(identity.email, "jane@example.com")
        self.assertEqual(identity.name, "Jane Doe")
        self.assertEqual(identity.avatar_url, "https://avatars.example.test/g-1.png")

    def test_name_defaults_to_mailbox(self) -> None:
        identity = MockIdentityVerifier().verify_assertion("mock:g-2:writer@example.com")

        self.assertEqual(identity.name, "writer")

    def test_rejects_malformed_assertions(self) -> None:
        for credential in ("invalid", "mock::a@example.com", "mock:g-1:no-at-sign", "other:g-1:a@example.com"):
            with self.subTest(credential=credential):
                with self.assertRaises(IdentityVerificationError):
                    MockIdentityVerifier().verify_assertion(credential)


class AdapterSelectionTests(unittest.TestCase):
    @staticmethod
    def _settings(**overrides) -> Settings:
        return Settings(jwt_secret="secret", **overrides)

    def test_identity_provider_selection(self) -> None:
        cases = {
            "google": GoogleIdentityVerifier,
            "firebase": FirebaseIdentityVerifier,
            "mock": MockIdentityVerifier,
        }
        for provider, expected in cases.items():
            with self.subTest(provider=provider):
                verifier = get_identity_verifier(self._settings(identity_provider=provider))
                self.assertIsInstance(verifier, expected)

    def test_image_storage_selection(self) -> None:
        self.assertIsInstance(get_image_storage(self._settings(storage_provider="cloudinary")), CloudinaryImageStorage)
        self.assertIsInstance(get_image_storage(self._settings(storage_provider="mock")), MockImageStorage)

    def test_defaults_target_real_providers(self) -> None:
        settings = self._settings()

        self.assertEqual(settings.identity_provider, "google")
        self.assertEqual(settings.storage_provider, "cloudinary")
        self.assertFalse(settings.allow_admin_registration)


class GoogleVerifierUnitTests(unittest.TestCase):
    @staticmethod
    def _fake_google_modules(claims: dict | None = None, *, failure: str | None = None) -> dict[str, types.ModuleType]:
        fake_google = types.ModuleType("google")
        fake_auth = types.ModuleType("google.auth")
        fake_exceptions = types.ModuleType("google.auth.exceptions")
        fake_transport = types.ModuleType("google.auth.transport")
        fake_requests = types.ModuleType("google.auth.transport.requests")
        fake_oauth2 = types.ModuleType("google.oauth2")
        fake_id_token = types.ModuleType("google.oauth2.id_token")

        class GoogleAuthError(Exception):
            pass

        class TransportError(GoogleAuthError):
            pass

        class Request:
            pass

        def verify_oauth2_token(token: str, request: object, audience: str | None = None) -> dict:
            if not isinstance(request, Request):
                raise AssertionError("transport request expected")
            if failure == "transport":
                raise TransportError("certs unreachable")
            if token != "valid-id-token" or audience != "client-a":
                raise ValueError("Token has wrong audience")
            return dict(claims or {})

        fake_exceptions.GoogleAuthError = GoogleAuthError
        fake_exceptions.TransportError = TransportError
        fake_requests.Request = Request
        fake_id_token.verify_oauth2_token = verify_oauth2_token

        fake_google.auth = fake_auth
        fake_google.oauth2 = fake_oauth2
        fake_auth.exceptions = fake_exceptions
        fake_auth.transport = fake_transport
        fake_transport.requests = fake_requests
        fake_oauth2.id_token = fake_id_token

        return {
            "google": fake_google,
            "google.auth": fake_auth,
            "google.auth.exceptions": fake_exceptions,
            "google.auth.transport": fake_transport,
            "google.auth.transport.requests": fake_requests,
            "google.oauth2": fake_oauth2,
            "google.oauth2.id_token": fake_id_token,
        }

    _claims = {
        "sub": "google-user-1",
        "email": "writer@example.com",
        "email_verified": True,
        "name": "Writer One",
        "picture": "https://lh3.example.test/photo.jpg",
    }

    def test_google_verifier_normalizes_identity(self) -> None:
        with patch.dict(sys.modules, self._fake_google_modules(self._claims)):
            identity = GoogleIdentityVerifier(client_id="client-a").verify_assertion("valid-id-token")

        self.assertEqual(identity.subject, "google-user-1")
        self.assertEqual(identity.email, "writer@example.com")
        self.assertEqual(identity.name, "Writer One")
        self.assertEqual(identity.avatar_url, "https://lh3.example.test/photo.jpg")

    def test_google_verifier_rejects_invalid_token(self) -> None:
        with patch.dict(sys.modules, self._fake_google_modules(self._claims)):
            with self.assertRaises(IdentityVerificationError):
                GoogleIdentityVerifier(client_id="client-a").verify_assertion("forged")

    def test_google_verifier_rejects_unverified_email(self) -> None:
        claims = {**self._claims, "email_verified": False}

        with patch.dict(sys.modules, self._fake_google_modules(claims)):
            with self.assertRaises(IdentityVerificationError):
                GoogleIdentityVerifier(client_id="client-a").verify_assertion("valid-id-token")

    def test_google_verifier_maps_transport_error_to_unavailable(self) -> None:
        with patch.dict(sys.modules, self._fake_google_modules(self._claims, failure="transport")):
            with self.assertRaises(IdentityProviderUnavailable):
                GoogleIdentityVerifier(client_id="client-a").verify_assertion("valid-id-token")

    def test_google_verifier_requires_client_id(self) -> None:
        with patch.dict(sys.modules, self._fake_google_modules(self._claims)):
            with self.assertRaises(IdentityProviderUnavailable):
                GoogleIdentityVerifier(client_id=None).verify_assertion("valid-id-token")

    def test_google_verifier_rejects_malformed_email_claim(self) -> None:
        claims = {**self._claims, "email": "not@valid@"}

        with patch.dict(sys.modules, self._fake_google_modules(claims)):
            with self.assertRaises(IdentityVerificationError):
                GoogleIdentityVerifier(client_id="client-a").verify_assertion("valid-id-token")


def fake_firebase_modules(
    decoded_token: dict[str, str],
    *,
    init_error: Exception | None = None,
    certificate_fetch_fails: bool = False,
) -> dict[str, types.ModuleType]:
    fake_admin = types.ModuleType("firebase_admin")
    fake_auth = types.ModuleType("firebase_admin.auth")

    fake_admin._apps = []

    class CertificateFetchError(Exception):
        pass

    def initialize_app() -> object:
        if init_error is not None:
            raise init_error
        app_handle = object()
        fake_admin._apps.append(app_handle)
        return app_handle

    def verify_id_token(token: str, check_revoked: bool = True) -> dict[str, str]:
        if certificate_fetch_fails:
            raise CertificateFetchError("public keys unreachable")
        if token != "valid-jwt":
            raise ValueError("invalid token")
        if not check_revoked:
            raise ValueError("must validate revoked tokens")
        return decoded_token

    fake_admin.initialize_app = initialize_app
    fake_admin.auth = fake_auth
    fake_auth.CertificateFetchError = CertificateFetchError
    fake_auth.verify_id_token = verify_id_token

    return {
        "firebase_admin": fake_admin,
        "firebase_admin.auth": fake_auth,
    }


class FirebaseVerifierUnitTests(unittest.TestCase):
    def test_firebase_verifier_normalizes_identity(self) -> None:
        fake_modules = fake_firebase_modules(
            {
                "uid": "firebase-user-1",
                "email": "writer@example.com",
                "aud": "aud-a",
                "iss": "https://securetoken.google.com/project-a",
            }
        )

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseIdentityVerifier(project_id="project-a", audience="aud-a")
            identity = verifier.verify_assertion("valid-jwt")

        self.assertEqual(identity.subject, "firebase-user-1")
        self.assertEqual(identity.email, "writer@example.com")
        self.assertEqual(identity.name, "writer")
        self.assertEqual(len(fake_modules["firebase_admin"]._apps), 1)

    def test_firebase_verifier_rejects_invalid_audience(self) -> None:
        fake_modules = fake_firebase_modules(
            {
                "uid": "firebase-user-1",
                "email": "writer@example.com",
                "aud": "unexpected-aud",
                "iss": "https://securetoken.google.com/project-a",
            }
        )

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseIdentityVerifier(project_id="project-a", audience="aud-a")
            with self.assertRaises(IdentityVerificationError):
                verifier.verify_assertion("valid-jwt")

    def test_firebase_verifier_requires_email_claim(self) -> None:
        fake_modules = fake_firebase_modules({"uid": "firebase-user-1", "aud": "aud-a"})

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseIdentityVerifier(project_id=None, audience="aud-a")
            with self.assertRaises(IdentityVerificationError):
                verifier.verify_assertion("valid-jwt")

    def test_firebase_initialization_failure_is_unavailable(self) -> None:
        fake_modules = fake_firebase_modules({}, init_error=ValueError("no default credentials"))

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseIdentityVerifier(project_id="project-a", audience="aud-a")
            with self.assertRaises(IdentityProviderUnavailable):
                verifier.verify_assertion("valid-jwt")

    def test_firebase_certificate_fetch_failure_is_unavailable(self) -> None:
        fake_modules = fake_firebase_modules({}, certificate_fetch_fails=True)

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseIdentityVerifier(project_id="project-a", audience="aud-a")
            with self.assertRaises(IdentityProviderUnavailable):
                verifier.verify_assertion("valid-jwt")

    def test_firebase_malformed_email_claim_is_rejected(self) -> None:
        fake_modules = fake_firebase_modules({"uid": "firebase-user-1", "email": "not@valid@", "aud": "aud-a"})

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseIdentityVerifier(project_id=None, audience="aud-a")
            with self.assertRaises(IdentityVerificationError):
                verifier.verify_assertion("valid-jwt")


class CloudinaryStorageUnitTests(unittest.TestCase):
    @staticmethod
    def _fake_cloudinary_modules(calls: list[tuple[str, dict]], result: object) -> dict[str, types.ModuleType]:
        fake_cloudinary = types.ModuleType("cloudinary")
        fake_uploader = types.ModuleType("cloudinary.uploader")

        def upload(file: str, **options) -> object:
            calls.append((file, options))
            if isinstance(result, Exception):
                raise result
            return result

        fake_uploader.upload = upload
        fake_cloudinary.uploader = fake_uploader
        return {"cloudinary": fake_cloudinary, "cloudinary.uploader": fake_uploader}

    def _storage(self) -> CloudinaryImageStorage:
        return CloudinaryImageStorage(cloud_name="demo", api_key="key", api_secret="shh", folder="blogs")

    def test_upload_returns_secure_url(self) -> None:
        calls: list[tuple[str, dict]] = []
        fake_modules = self._fake_cloudinary_modules(calls, {"secure_url": "https://res.example.test/blogs/a.png"})

        with patch.dict(sys.modules, fake_modules):
            url = self._storage().upload_image("/tmp/upload-a.png", filename="a.png")

        self.assertEqual(url, "https://res.example.test/blogs/a.png")
        self.assertEqual(calls[0][0], "/tmp/upload-a.png")
        self.assertEqual(calls[0][1]["folder"], "blogs")
        self.assertEqual(calls[0][1]["resource_type"], "image")

    def test_provider_failure_is_storage_error(self) -> None:
        fake_modules = self._fake_cloudinary_modules([], RuntimeError("rate limited"))

        with patch.dict(sys.modules, fake_modules):
            with self.assertRaises(ImageStorageError):
                self._storage().upload_image("/tmp/upload-a.png")

    def test_missing_credentials_is_storage_error(self) -> None:
        storage = CloudinaryImageStorage(cloud_name=None, api_key=None, api_secret=None)

        with patch.dict(sys.modules, self._fake_cloudinary_modules([], {})):
            with self.assertRaises(ImageStorageError):
                storage.upload_image("/tmp/upload-a.png")


class FederatedProviderFailureApiTests(ApiCase):
    def test_firebase_initialization_failure_returns_502(self) -> None:
        self.app.dependency_overrides[get_identity_verifier] = lambda: FirebaseIdentityVerifier(
            project_id="project-a",
            audience="aud-a",
        )
        fake_modules = fake_firebase_modules({}, init_error=ValueError("no default credentials"))

        with patch.dict(sys.modules, fake_modules):
            response = self.client.post(f"{API}/users/federated", json={"credential": "valid-jwt", "mode": "register"})

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["code"], "IDENTITY_PROVIDER_FAILED")
        self.assertEqual(self.store.accounts, {})

    def test_malformed_email_claim_returns_401(self) -> None:
        response = self.client.post(
            f"{API}/users/federated",
            json={"credential": "mock:g-9:not@valid@", "mode": "register"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "UNAUTHORIZED")
        self.assertEqual(self.store.accounts, {})


if __name__ == "__main__":
    unittest.main()
