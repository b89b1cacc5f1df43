"""Federated identity verifier adapters."""

from .base import IdentityProviderUnavailable, IdentityVerificationError, IdentityVerifier
from .firebase_identity import FirebaseIdentityVerifier
from .google_identity import GoogleIdentityVerifier
from .mock_identity import MockIdentityVerifier

__all__ = [
    "IdentityProviderUnavailable",
    "IdentityVerificationError",
    "IdentityVerifier",
    "FirebaseIdentityVerifier",
    "GoogleIdentityVerifier",
    "MockIdentityVerifier",
]
