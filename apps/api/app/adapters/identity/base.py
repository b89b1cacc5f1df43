"""Federated identity provider interfaces."""

from abc import ABC, abstractmethod

from app.schemas.auth import FederatedIdentity


class IdentityVerificationError(Exception):
    """Raised when an identity assertion is rejected by the provider."""


class IdentityProviderUnavailable(Exception):
    """Raised when the provider cannot be reached or is not configured."""


class IdentityVerifier(ABC):
    """Provider-neutral identity assertion verification interface."""

    @abstractmethod
    def verify_assertion(self, credential: str) -> FederatedIdentity:
        """Verify assertion and return normalized identity claims."""


__all__ = ["IdentityProviderUnavailable", "IdentityVerificationError", "IdentityVerifier"]
