"""Admin moderation of accounts and posts."""

import logging

from app.core.logging_safety import safe_log_identifier
from app.domain.authorization import Action, decide, ensure_allowed
from app.domain.identifiers import ensure_identifier
from app.errors import not_found, persistence_failures
from app.repositories.memory import AccountRecord, InMemoryStore
from app.schemas.account import Account
from app.schemas.auth import AuthPrincipal
from app.schemas.common import DeletionResult
from app.schemas.post import Post
from app.services.accounts import to_account
from app.services.posts import load_post, to_post

logger = logging.getLogger(__name__)


class ModerationService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_accounts(self, *, principal: AuthPrincipal) -> list[Account]:
        ensure_allowed(decide(principal, Action.LIST_ACCOUNTS))
        return [to_account(record) for record in self._store.list_accounts()]

    def delete_account(self, *, principal: AuthPrincipal, account_id: str) -> DeletionResult:
        """Remove an account; its posts and comments are left in place."""
        target = self._load_account(account_id)
        ensure_allowed(decide(principal, Action.DELETE_ACCOUNT, target))

        with persistence_failures("account.delete"):
            self._store.delete_account(target.id)

        logger.info(
            "account.deleted account_id=%s actor_id=%s",
            safe_log_identifier(target.id, prefix="acct"),
            safe_log_identifier(principal.user_id, prefix="pid"),
        )
        return DeletionResult(id=target.id, message="User deleted")

    def set_blocked(self, *, principal: AuthPrincipal, account_id: str, blocked: bool) -> Account:
        target = self._load_account(account_id)
        action = Action.BLOCK_ACCOUNT if blocked else Action.UNBLOCK_ACCOUNT
        ensure_allowed(decide(principal, action, target))

        with persistence_failures("account.block" if blocked else "account.unblock"):
            updated = self._store.set_account_blocked(target.id, blocked=blocked)
        if updated is None:
            raise not_found("User not found")

        logger.info(
            "account.%s account_id=%s actor_id=%s",
            "blocked" if blocked else "unblocked",
            safe_log_identifier(target.id, prefix="acct"),
            safe_log_identifier(principal.user_id, prefix="pid"),
        )
        return to_account(updated)

    def list_all_posts(self, *, principal: AuthPrincipal) -> list[Post]:
        ensure_allowed(decide(principal, Action.LIST_ALL_POSTS))
        return [to_post(self._store, record) for record in self._store.list_posts()]

    def delete_any_post(self, *, principal: AuthPrincipal, post_id: str) -> DeletionResult:
        record = load_post(self._store, post_id)
        ensure_allowed(decide(principal, Action.DELETE_ANY_POST, record))

        with persistence_failures("post.delete"):
            self._store.delete_post(record.id)

        logger.info(
            "post.deleted_by_admin post_id=%s actor_id=%s",
            safe_log_identifier(record.id, prefix="post"),
            safe_log_identifier(principal.user_id, prefix="pid"),
        )
        return DeletionResult(id=record.id, message="Post deleted by admin")

    def _load_account(self, account_id: str) -> AccountRecord:
        ensure_identifier(account_id, resource="user")
        record = self._store.get_account(account_id)
        if record is None:
            raise not_found("User not found")
        return record
