"""Firebase Auth ID token verifier adapter."""

from __future__ import annotations

from pydantic import ValidationError

from app.adapters.identity.base import IdentityProviderUnavailable, IdentityVerificationError, IdentityVerifier
from app.schemas.auth import FederatedIdentity


class FirebaseIdentityVerifier(IdentityVerifier):
    """Verifies Firebase ID tokens and normalizes identity claims."""

    def __init__(self, project_id: str | None, audience: str | None) -> None:
        self._project_id = project_id
        self._audience = audience

    def verify_assertion(self, credential: str) -> FederatedIdentity:
        try:
            import firebase_admin
            from firebase_admin import auth as firebase_auth
        except ImportError as exc:  # pragma: no cover - depends on optional package
            raise IdentityProviderUnavailable("Firebase identity verifier is unavailable") from exc

        if not firebase_admin._apps:
            try:
                firebase_admin.initialize_app()
            except ValueError as exc:
                raise IdentityProviderUnavailable("Firebase app could not be initialized") from exc

        try:
            decoded = firebase_auth.verify_id_token(credential, check_revoked=True)
        except firebase_auth.CertificateFetchError as exc:
            raise IdentityProviderUnavailable("Firebase public keys unreachable") from exc
        except Exception as exc:  # pragma: no cover - provider exception surface
            raise IdentityVerificationError("Invalid identity assertion") from exc

        if self._audience and decoded.get("aud") != self._audience:
            raise IdentityVerificationError("Invalid identity assertion audience")

        if self._project_id:
            issuer = str(decoded.get("iss", ""))
            audience = str(decoded.get("aud", ""))
            if self._project_id not in issuer and audience != self._project_id:
                raise IdentityVerificationError("Invalid identity assertion issuer")

        subject = str(decoded.get("uid") or decoded.get("sub") or "").strip()
        email = str(decoded.get("email") or "").strip()
        if not subject or not email:
            raise IdentityVerificationError("Identity assertion missing subject or email")

        try:
            return FederatedIdentity(
                subject=subject,
                email=email,
                name=str(decoded.get("name") or email.partition("@")[0]),
                avatar_url=decoded.get("picture"),
            )
        except ValidationError as exc:
            raise IdentityVerificationError("Identity assertion has malformed claims") from exc


__all__ = ["FirebaseIdentityVerifier"]
