"""Dependency wiring for routes."""

from __future__ import annotations

from datetime import timedelta
import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.identity import (
    FirebaseIdentityVerifier,
    GoogleIdentityVerifier,
    IdentityVerifier,
    MockIdentityVerifier,
)
from app.adapters.storage import CloudinaryImageStorage, ImageStorage, MockImageStorage
from app.core.config import Settings, get_settings
from app.core.logging_safety import safe_log_identifier
from app.core.security import AccessTokenService, InvalidTokenError
from app.errors import ApiError, account_blocked
from app.repositories.memory import InMemoryStore
from app.schemas.auth import AuthPrincipal
from app.services.accounts import AccountService
from app.services.comments import CommentService
from app.services.moderation import ModerationService
from app.services.posts import PostService
from app.services.uploads import ImageUploader

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)


def _auth_error(message: str) -> ApiError:
    return ApiError(status_code=401, code="UNAUTHORIZED", message=message)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_request_correlation_id(request: Request) -> str:
    return _request_correlation_id(request)


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_access_token_service(settings: Annotated[Settings, Depends(get_settings)]) -> AccessTokenService:
    return AccessTokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.access_token_ttl_minutes),
    )


def get_identity_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> IdentityVerifier:
    """Resolve identity provider adapter from configuration."""
    if settings.identity_provider == "google":
        return GoogleIdentityVerifier(client_id=settings.google_client_id)
    if settings.identity_provider == "firebase":
        return FirebaseIdentityVerifier(
            project_id=settings.firebase_project_id,
            audience=settings.firebase_audience,
        )
    return MockIdentityVerifier()


def get_image_storage(settings: Annotated[Settings, Depends(get_settings)]) -> ImageStorage:
    """Resolve object storage adapter from configuration."""
    if settings.storage_provider == "cloudinary":
        return CloudinaryImageStorage(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
        )
    return MockImageStorage(folder=settings.cloudinary_folder)


async def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    tokens: Annotated[AccessTokenService, Depends(get_access_token_service)],
) -> AuthPrincipal:
    """Validate bearer token and attach the token principal to request context."""
    safe_correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error("Invalid or missing bearer token")

    try:
        principal = tokens.validate(credentials.credentials)
    except InvalidTokenError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_validation_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error(str(exc) or "Invalid bearer token") from exc

    request.state.auth_principal = principal
    return principal


async def get_active_principal(
    request: Request,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    store: Annotated[InMemoryStore, Depends(get_store)],
) -> AuthPrincipal:
    """Re-read the account so blocks and role changes after token issuance apply."""
    safe_correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    safe_principal_id = safe_log_identifier(principal.user_id, prefix="pid")
    account = store.get_account(principal.user_id)
    if account is None:
        logger.warning(
            "auth.rejected correlation_id=%s principal_id=%s reason=account_missing",
            safe_correlation_id,
            safe_principal_id,
        )
        raise _auth_error("Account no longer exists")
    if account.is_blocked:
        logger.warning(
            "auth.rejected correlation_id=%s principal_id=%s reason=account_blocked",
            safe_correlation_id,
            safe_principal_id,
        )
        raise account_blocked()

    active = AuthPrincipal(user_id=account.id, role=account.role)
    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_principal_id,
        active.role.value,
    )
    request.state.auth_principal = active
    return active


def get_account_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    tokens: Annotated[AccessTokenService, Depends(get_access_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AccountService:
    return AccountService(store, tokens, allow_admin_registration=settings.allow_admin_registration)


def get_image_uploader(
    storage: Annotated[ImageStorage, Depends(get_image_storage)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImageUploader:
    return ImageUploader(storage, tmp_dir=settings.upload_tmp_dir, max_bytes=settings.max_image_bytes)


def get_post_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    uploader: Annotated[ImageUploader, Depends(get_image_uploader)],
) -> PostService:
    return PostService(store, uploader)


def get_comment_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> CommentService:
    return CommentService(store)


def get_moderation_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> ModerationService:
    return ModerationService(store)
