"""Mock identity verifier for local development and tests."""

from pydantic import ValidationError

from app.adapters.identity.base import IdentityVerificationError, IdentityVerifier
from app.schemas.auth import FederatedIdentity


class MockIdentityVerifier(IdentityVerifier):
    """Accepts deterministic test assertions only.

    Expected assertion format:
    - ``mock:<subject>:<email>``
    - ``mock:<subject>:<email>:<display name>``
    """

    def verify_assertion(self, credential: str) -> FederatedIdentity:
        parts = credential.split(":", 3)
        if len(parts) not in (3, 4) or parts[0] != "mock":
            raise IdentityVerificationError("Invalid identity assertion")

        subject = parts[1].strip()
        email = parts[2].strip()
        if not subject:
            raise IdentityVerificationError("Identity assertion missing subject")
        if "@" not in email:
            raise IdentityVerificationError("Identity assertion missing email")

        name = parts[3].strip() if len(parts) == 4 and parts[3].strip() else email.partition("@")[0]
        try:
            return FederatedIdentity(
                subject=subject,
                email=email,
                name=name,
                avatar_url=f"https://avatars.example.test/{subject}.png",
            )
        except ValidationError as exc:
            raise IdentityVerificationError("Identity assertion has malformed claims") from exc


__all__ = ["MockIdentityVerifier"]
