"""Application wiring tests: health, correlation ids, error envelopes."""

from __future__ import annotations

import inspect
import unittest

from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from app.core.config import ServerSettings
from app.main import create_app
from support import API, ApiCase


class AppWiringTests(ApiCase):
    def test_health_is_public(self) -> None:
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_correlation_id_is_echoed_or_generated(self) -> None:
        echoed = self.client.get("/health", headers={"X-Correlation-Id": "req-fixed"})
        self.assertEqual(echoed.headers["X-Correlation-Id"], "req-fixed")

        generated = self.client.get("/health")
        self.assertTrue(generated.headers["X-Correlation-Id"].startswith("req-"))

    def test_access_log_line_is_emitted(self) -> None:
        with self.assertLogs("app.access", level="INFO") as captured:
            self.client.get("/health", headers={"X-Correlation-Id": "req-logged"})

        self.assertTrue(any("request.completed" in line and "status=200" in line for line in captured.output))
        self.assertFalse(any("req-logged" in line for line in captured.output))

    def test_validation_error_uses_error_envelope(self) -> None:
        response = self.client.post(f"{API}/users/register", json={"username": "x"})

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["code"], "VALIDATION_ERROR")
        locations = [error["loc"] for error in body["details"]["errors"]]
        self.assertIn(["body", "email"], locations)
        self.assertNotIn("is_blocked", body)

    def test_each_app_gets_its_own_store(self) -> None:
        self.register("solo")

        other = create_app()

        self.assertEqual(other.state.store.accounts, {})
        self.assertEqual(len(self.store.accounts), 1)

    def test_blocking_handlers_run_in_threadpool(self) -> None:
        blocking = {
            ("POST", f"{API}/users/register"),
            ("POST", f"{API}/users/register-admin"),
            ("POST", f"{API}/users/login"),
            ("POST", f"{API}/users/federated"),
            ("POST", f"{API}/posts"),
            ("PUT", f"{API}/posts/{{postId}}"),
        }
        endpoints = {
            (method, route.path): route.endpoint
            for route in self.app.routes
            if isinstance(route, APIRoute)
            for method in route.methods
        }

        for key in blocking:
            with self.subTest(route=key):
                self.assertIn(key, endpoints)
                self.assertFalse(inspect.iscoroutinefunction(endpoints[key]))


class CorsTests(unittest.TestCase):
    def test_configured_origin_is_allowed(self) -> None:
        client = TestClient(create_app(ServerSettings(cors_origins=["https://blog.example.com"])))

        response = client.options(
            "/health",
            headers={"Origin": "https://blog.example.com", "Access-Control-Request-Method": "GET"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["access-control-allow-origin"], "https://blog.example.com")


if __name__ == "__main__":
    unittest.main()
