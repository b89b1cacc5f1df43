"""Account registration, login and profile service layer."""

from __future__ import annotations

import logging
import re
import secrets

from app.adapters.identity import IdentityProviderUnavailable, IdentityVerificationError, IdentityVerifier
from app.core.logging_safety import safe_log_email, safe_log_identifier
from app.core.security import AccessTokenService, hash_password, verify_password
from app.errors import ApiError, account_blocked, not_found, persistence_failures
from app.repositories.memory import AccountRecord, DuplicateEmailError, InMemoryStore
from app.schemas.account import Account, Role, UpdateProfileRequest
from app.schemas.auth import AuthPrincipal, AuthSession, FederatedAuthRequest, LoginRequest, RegisterRequest
from app.schemas.post import Post
from app.services.posts import to_post

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def to_account(record: AccountRecord) -> Account:
    return Account(
        id=record.id,
        username=record.username,
        email=record.email,
        role=record.role,
        is_blocked=record.is_blocked,
        avatar_url=record.avatar_url,
        federated=record.federated_subject is not None,
        created_at=record.created_at,
    )


def federated_username(display_name: str) -> str:
    """Lower-cased display name without whitespace plus a 4-digit suffix."""
    base = _WHITESPACE.sub("", display_name).lower() or "user"
    return f"{base}{secrets.randbelow(10_000):04d}"


class AccountService:
    def __init__(
        self,
        store: InMemoryStore,
        tokens: AccessTokenService,
        *,
        allow_admin_registration: bool = False,
    ) -> None:
        self._store = store
        self._tokens = tokens
        self._allow_admin_registration = allow_admin_registration

    def register(self, payload: RegisterRequest, *, role: Role = Role.MEMBER) -> AuthSession:
        if role is Role.ADMIN and not self._allow_admin_registration:
            raise not_found()

        try:
            with persistence_failures("account.create"):
                record = self._store.create_account(
                    username=payload.username,
                    email=str(payload.email),
                    role=role,
                    password_hash=hash_password(payload.password),
                )
        except DuplicateEmailError as exc:
            logger.info("account.register_rejected email=%s reason=duplicate_email", safe_log_email(str(payload.email)))
            raise ApiError(status_code=409, code="EMAIL_ALREADY_REGISTERED", message="User already exists") from exc

        logger.info(
            "account.registered account_id=%s role=%s",
            safe_log_identifier(record.id, prefix="acct"),
            record.role.value,
        )
        return self._session(record)

    def login(self, payload: LoginRequest) -> AuthSession:
        record = self._store.get_account_by_email(str(payload.email))
        if record is None or not verify_password(payload.password, record.password_hash):
            logger.warning("account.login_rejected email=%s reason=invalid_credentials", safe_log_email(str(payload.email)))
            raise ApiError(status_code=401, code="INVALID_CREDENTIALS", message="Invalid credentials")
        if record.is_blocked:
            logger.warning(
                "account.login_rejected account_id=%s reason=blocked",
                safe_log_identifier(record.id, prefix="acct"),
            )
            raise account_blocked()

        return self._session(record)

    def federated(self, payload: FederatedAuthRequest, *, verifier: IdentityVerifier) -> AuthSession:
        try:
            identity = verifier.verify_assertion(payload.credential)
        except IdentityVerificationError as exc:
            logger.warning("federated.rejected mode=%s reason=%s", payload.mode, exc)
            raise ApiError(status_code=401, code="UNAUTHORIZED", message="Identity assertion rejected") from exc
        except IdentityProviderUnavailable as exc:
            logger.error("federated.provider_failed mode=%s reason=%s", payload.mode, exc)
            raise ApiError(
                status_code=502,
                code="IDENTITY_PROVIDER_FAILED",
                message="Identity provider authentication failed",
            ) from exc

        record = self._store.get_account_by_email(str(identity.email))

        if payload.mode == "register":
            if record is not None:
                raise ApiError(
                    status_code=409,
                    code="EMAIL_ALREADY_REGISTERED",
                    message="User already exists with this email",
                )
            try:
                with persistence_failures("account.create"):
                    record = self._store.create_account(
                        username=federated_username(identity.name),
                        email=str(identity.email),
                        federated_subject=identity.subject,
                        avatar_url=identity.avatar_url,
                    )
            except DuplicateEmailError as exc:
                raise ApiError(
                    status_code=409,
                    code="EMAIL_ALREADY_REGISTERED",
                    message="User already exists with this email",
                ) from exc
            logger.info("account.registered account_id=%s role=member federated=true", safe_log_identifier(record.id, prefix="acct"))
            return self._session(record)

        if record is None:
            raise not_found("No account found with this email. Please register first.")
        if record.is_blocked:
            raise account_blocked()
        if record.federated_subject is None:
            with persistence_failures("account.link_identity"):
                self._store.link_federated_identity(record.id, subject=identity.subject, avatar_url=identity.avatar_url)

        return self._session(record)

    def get_profile(self, *, principal: AuthPrincipal) -> Account:
        record = self._store.get_account(principal.user_id)
        if record is None:
            raise not_found("User not found")
        return to_account(record)

    def update_profile(self, *, principal: AuthPrincipal, payload: UpdateProfileRequest) -> Account:
        with persistence_failures("account.update_profile"):
            record = self._store.update_account_profile(
                principal.user_id,
                username=payload.username,
                avatar_url=payload.avatar_url,
            )
        if record is None:
            raise not_found("User not found")
        return to_account(record)

    def list_own_posts(self, *, principal: AuthPrincipal) -> list[Post]:
        return [to_post(self._store, record) for record in self._store.list_posts(owner_id=principal.user_id)]

    def _session(self, record: AccountRecord) -> AuthSession:
        return AuthSession(
            account=to_account(record),
            token=self._tokens.issue(record.id, record.role),
            expires_in=self._tokens.expires_in,
        )


__all__ = ["AccountService", "federated_username", "to_account"]
