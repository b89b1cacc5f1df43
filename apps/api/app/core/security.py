"""Credential hashing and access token issuance."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import hashlib
import secrets
from uuid import uuid4

import jwt

from app.schemas.auth import AuthPrincipal, Role

_PBKDF2_ITERATIONS = 100_000


class InvalidTokenError(Exception):
    """Raised when a bearer token fails signature, expiry or claim checks."""


def hash_password(password: str) -> str:
    """Hash a password with salted PBKDF2-SHA256 as ``salt:hash``."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations=_PBKDF2_ITERATIONS,
    )
    return f"{salt}:{digest.hex()}"


def verify_password(password: str, password_hash: str | None) -> bool:
    """Constant-time check of ``password`` against a stored hash.

    Accounts created through federated identity carry no hash and never match.
    """
    if not password_hash:
        return False
    try:
        salt, stored = password_hash.split(":")
    except ValueError:
        return False

    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations=_PBKDF2_ITERATIONS,
    )
    return secrets.compare_digest(digest.hex(), stored)


class AccessTokenService:
    """Issues and validates signed, time-scoped bearer tokens."""

    def __init__(self, *, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=30)) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    @property
    def expires_in(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, account_id: str, role: Role) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": account_id,
            "role": Role(role).value,
            "iat": now,
            "exp": now + self._ttl,
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def validate(self, token: str) -> AuthPrincipal:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Bearer token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid bearer token") from exc

        account_id = str(claims.get("sub") or "").strip()
        if not account_id:
            raise InvalidTokenError("Bearer token missing account identity")
        try:
            role = Role(claims.get("role"))
        except ValueError as exc:
            raise InvalidTokenError("Bearer token carries an unknown role") from exc

        return AuthPrincipal(user_id=account_id, role=role)


__all__ = ["AccessTokenService", "InvalidTokenError", "hash_password", "verify_password"]
