"""Google Sign-In ID token verifier adapter."""

from __future__ import annotations

from pydantic import ValidationError

from app.adapters.identity.base import IdentityProviderUnavailable, IdentityVerificationError, IdentityVerifier
from app.schemas.auth import FederatedIdentity


class GoogleIdentityVerifier(IdentityVerifier):
    """Verifies Google ID tokens against the configured OAuth client id."""

    def __init__(self, client_id: str | None) -> None:
        self._client_id = client_id

    def verify_assertion(self, credential: str) -> FederatedIdentity:
        try:
            from google.auth import exceptions as google_exceptions
            from google.auth.transport import requests as google_requests
            from google.oauth2 import id_token
        except ImportError as exc:  # pragma: no cover - depends on optional package
            raise IdentityProviderUnavailable("Google identity verifier is unavailable") from exc

        if not self._client_id:
            raise IdentityProviderUnavailable("Google client id is not configured")

        try:
            claims = id_token.verify_oauth2_token(credential, google_requests.Request(), audience=self._client_id)
        except google_exceptions.TransportError as exc:
            raise IdentityProviderUnavailable("Google certificate endpoint unreachable") from exc
        except (ValueError, google_exceptions.GoogleAuthError) as exc:
            raise IdentityVerificationError("Invalid identity assertion") from exc

        subject = str(claims.get("sub") or "").strip()
        email = str(claims.get("email") or "").strip()
        if not subject or not email:
            raise IdentityVerificationError("Identity assertion missing subject or email")
        if claims.get("email_verified") is False:
            raise IdentityVerificationError("Identity assertion email is not verified")

        try:
            return FederatedIdentity(
                subject=subject,
                email=email,
                name=str(claims.get("name") or email.partition("@")[0]),
                avatar_url=claims.get("picture"),
            )
        except ValidationError as exc:
            raise IdentityVerificationError("Identity assertion has malformed claims") from exc


__all__ = ["GoogleIdentityVerifier"]
