"""In-memory document store for accounts, posts and comments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from itertools import count
import threading
from uuid import UUID, uuid4

from app.schemas.account import Role


class DuplicateEmailError(Exception):
    """Raised when an account with the same email already exists."""


@dataclass(slots=True)
class AccountRecord:
    id: str
    username: str
    email: str
    role: Role
    created_at: datetime
    password_hash: str | None = None
    is_blocked: bool = False
    federated_subject: str | None = None
    avatar_url: str | None = None


@dataclass(slots=True)
class PostRecord:
    id: str
    owner_id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    sequence: int
    image_url: str | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    likes: list[str] = field(default_factory=list)
    comment_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class CommentRecord:
    id: str
    post_id: str
    author_id: str
    text: str
    created_at: datetime


def is_valid_identifier(value: str) -> bool:
    """Identifiers are canonical lower-case UUID strings."""
    try:
        return str(UUID(value)) == value
    except (TypeError, ValueError, AttributeError):
        return False


@dataclass(slots=True)
class InMemoryStore:
    """Deterministic persistence layer; every mutation runs under one lock."""

    accounts: dict[str, AccountRecord] = field(default_factory=dict)
    posts: dict[str, PostRecord] = field(default_factory=dict)
    comments: dict[str, CommentRecord] = field(default_factory=dict)
    account_ids_by_email: dict[str, str] = field(default_factory=dict)
    account_write_count: int = 0
    post_write_count: int = 0
    comment_write_count: int = 0
    write_failure_message: str | None = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _sequence: count = field(default_factory=count, repr=False)

    # Accounts

    def create_account(
        self,
        *,
        username: str,
        email: str,
        role: Role = Role.MEMBER,
        password_hash: str | None = None,
        federated_subject: str | None = None,
        avatar_url: str | None = None,
    ) -> AccountRecord:
        normalized_email = email.strip().lower()
        with self._lock:
            if normalized_email in self.account_ids_by_email:
                raise DuplicateEmailError(normalized_email)
            self._maybe_fail_write()

            account = AccountRecord(
                id=str(uuid4()),
                username=username,
                email=normalized_email,
                role=role,
                created_at=datetime.now(UTC),
                password_hash=password_hash,
                federated_subject=federated_subject,
                avatar_url=avatar_url,
            )
            self.accounts[account.id] = account
            self.account_ids_by_email[normalized_email] = account.id
            self.account_write_count += 1
            return account

    def get_account(self, account_id: str) -> AccountRecord | None:
        return self.accounts.get(account_id)

    def get_account_by_email(self, email: str) -> AccountRecord | None:
        account_id = self.account_ids_by_email.get(email.strip().lower())
        return self.accounts.get(account_id) if account_id else None

    def list_accounts(self) -> list[AccountRecord]:
        return sorted(self.accounts.values(), key=lambda record: record.created_at)

    def update_account_profile(
        self,
        account_id: str,
        *,
        username: str | None = None,
        avatar_url: str | None = None,
    ) -> AccountRecord | None:
        with self._lock:
            account = self.accounts.get(account_id)
            if account is None:
                return None
            self._maybe_fail_write()
            if username is not None:
                account.username = username
            if avatar_url is not None:
                account.avatar_url = avatar_url
            self.account_write_count += 1
            return account

    def link_federated_identity(self, account_id: str, *, subject: str, avatar_url: str | None) -> AccountRecord | None:
        with self._lock:
            account = self.accounts.get(account_id)
            if account is None:
                return None
            self._maybe_fail_write()
            account.federated_subject = subject
            if avatar_url is not None:
                account.avatar_url = avatar_url
            self.account_write_count += 1
            return account

    def set_account_blocked(self, account_id: str, *, blocked: bool) -> AccountRecord | None:
        with self._lock:
            account = self.accounts.get(account_id)
            if account is None:
                return None
            if blocked and account.role is Role.ADMIN:
                raise ValueError("Admin accounts cannot be blocked")
            self._maybe_fail_write()
            account.is_blocked = blocked
            self.account_write_count += 1
            return account

    def delete_account(self, account_id: str) -> bool:
        """Remove an account; posts and comments keep their owner references."""
        with self._lock:
            account = self.accounts.get(account_id)
            if account is None:
                return False
            self._maybe_fail_write()
            del self.accounts[account_id]
            self.account_ids_by_email.pop(account.email, None)
            self.account_write_count += 1
            return True

    # Posts

    def create_post(
        self,
        *,
        owner_id: str,
        title: str,
        content: str,
        image_url: str | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> PostRecord:
        with self._lock:
            self._maybe_fail_write()
            now = datetime.now(UTC)
            post = PostRecord(
                id=str(uuid4()),
                owner_id=owner_id,
                title=title,
                content=content,
                created_at=now,
                updated_at=now,
                sequence=next(self._sequence),
                image_url=image_url,
                category=category,
                tags=list(tags or []),
            )
            self.posts[post.id] = post
            self.post_write_count += 1
            return post

    def get_post(self, post_id: str) -> PostRecord | None:
        return self.posts.get(post_id)

    def list_posts(
        self,
        *,
        keyword: str | None = None,
        category: str | None = None,
        tag: str | None = None,
        owner_id: str | None = None,
    ) -> list[PostRecord]:
        """Conjunctive filter over posts, newest first."""
        needle = keyword.casefold() if keyword else None
        matches = []
        for post in list(self.posts.values()):
            if needle is not None and needle not in post.title.casefold():
                continue
            if category is not None and post.category != category:
                continue
            if tag is not None and tag not in post.tags:
                continue
            if owner_id is not None and post.owner_id != owner_id:
                continue
            matches.append(post)
        matches.sort(key=lambda record: (record.created_at, record.sequence), reverse=True)
        return matches

    def update_post(
        self,
        post_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
        image_url: str | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> PostRecord | None:
        """Apply the provided fields; ``None`` leaves a field unchanged."""
        with self._lock:
            post = self.posts.get(post_id)
            if post is None:
                return None
            self._maybe_fail_write()
            if title is not None:
                post.title = title
            if content is not None:
                post.content = content
            if image_url is not None:
                post.image_url = image_url
            if category is not None:
                post.category = category
            if tags is not None:
                post.tags = list(tags)
            post.updated_at = datetime.now(UTC)
            self.post_write_count += 1
            return post

    def delete_post(self, post_id: str) -> bool:
        """Remove the post only; its comments keep their parent post id."""
        with self._lock:
            post = self.posts.get(post_id)
            if post is None:
                return False
            self._maybe_fail_write()
            del self.posts[post_id]
            self.post_write_count += 1
            return True

    def add_like(self, post_id: str, account_id: str) -> bool:
        """Atomic set-add; ``False`` when the account already likes the post."""
        with self._lock:
            post = self.posts.get(post_id)
            if post is None or account_id in post.likes:
                return False
            self._maybe_fail_write()
            post.likes.append(account_id)
            self.post_write_count += 1
            return True

    def remove_like(self, post_id: str, account_id: str) -> bool:
        """Atomic set-remove; ``False`` when there was nothing to remove."""
        with self._lock:
            post = self.posts.get(post_id)
            if post is None or account_id not in post.likes:
                return False
            self._maybe_fail_write()
            post.likes.remove(account_id)
            self.post_write_count += 1
            return True

    # Comments

    def create_comment(self, *, post_id: str, author_id: str, text: str) -> CommentRecord | None:
        with self._lock:
            post = self.posts.get(post_id)
            if post is None:
                return None
            self._maybe_fail_write()
            comment = CommentRecord(
                id=str(uuid4()),
                post_id=post_id,
                author_id=author_id,
                text=text,
                created_at=datetime.now(UTC),
            )
            self.comments[comment.id] = comment
            post.comment_ids.append(comment.id)
            self.comment_write_count += 1
            return comment

    def get_comment(self, comment_id: str) -> CommentRecord | None:
        return self.comments.get(comment_id)

    def list_comments_for_post(self, post_id: str) -> list[CommentRecord]:
        post = self.posts.get(post_id)
        if post is None:
            return []
        return [self.comments[comment_id] for comment_id in post.comment_ids if comment_id in self.comments]

    def delete_comment(self, comment_id: str) -> bool:
        """Remove a comment and pull its reference from the parent post."""
        with self._lock:
            comment = self.comments.get(comment_id)
            if comment is None:
                return False
            self._maybe_fail_write()
            del self.comments[comment_id]
            post = self.posts.get(comment.post_id)
            if post is not None and comment_id in post.comment_ids:
                post.comment_ids.remove(comment_id)
            self.comment_write_count += 1
            return True

    def _maybe_fail_write(self) -> None:
        if self.write_failure_message is None:
            return

        message = self.write_failure_message
        self.write_failure_message = None
        raise RuntimeError(message)
