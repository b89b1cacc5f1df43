"""Post service layer."""

from __future__ import annotations

import logging

from app.core.logging_safety import safe_log_identifier
from app.domain.authorization import Action, decide, ensure_allowed
from app.domain.identifiers import ensure_identifier
from app.errors import ApiError, not_found, persistence_failures
from app.repositories.memory import CommentRecord, InMemoryStore, PostRecord
from app.schemas.account import AuthorSummary
from app.schemas.auth import AuthPrincipal
from app.schemas.comment import Comment
from app.schemas.common import DeletionResult
from app.schemas.post import LikeStatus, Post, PostDetail, PostDraft, PostPatch
from app.services.uploads import ImageUpload, ImageUploader

logger = logging.getLogger(__name__)


def author_summary(store: InMemoryStore, account_id: str) -> AuthorSummary | None:
    account = store.get_account(account_id)
    if account is None:
        return None
    return AuthorSummary(id=account.id, username=account.username)


def to_post(store: InMemoryStore, record: PostRecord) -> Post:
    return Post(
        id=record.id,
        title=record.title,
        content=record.content,
        image_url=record.image_url,
        author_id=record.owner_id,
        author=author_summary(store, record.owner_id),
        category=record.category,
        tags=list(record.tags),
        likes=list(record.likes),
        like_count=len(record.likes),
        comment_ids=list(record.comment_ids),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def to_comment(store: InMemoryStore, record: CommentRecord) -> Comment:
    return Comment(
        id=record.id,
        post_id=record.post_id,
        author_id=record.author_id,
        author=author_summary(store, record.author_id),
        text=record.text,
        created_at=record.created_at,
    )


def to_post_detail(store: InMemoryStore, record: PostRecord) -> PostDetail:
    post = to_post(store, record)
    comments = [to_comment(store, comment) for comment in store.list_comments_for_post(record.id)]
    return PostDetail(**post.model_dump(), comments=comments)


def load_post(store: InMemoryStore, post_id: str) -> PostRecord:
    ensure_identifier(post_id, resource="post")
    record = store.get_post(post_id)
    if record is None:
        raise not_found("Post not found")
    return record


class PostService:
    def __init__(self, store: InMemoryStore, uploader: ImageUploader) -> None:
        self._store = store
        self._uploader = uploader

    def create_post(self, *, principal: AuthPrincipal, draft: PostDraft, image: ImageUpload | None = None) -> Post:
        ensure_allowed(decide(principal, Action.CREATE_POST))

        with self._uploader.uploaded(image) as image_url:
            with persistence_failures("post.create"):
                record = self._store.create_post(
                    owner_id=principal.user_id,
                    title=draft.title,
                    content=draft.content,
                    image_url=image_url,
                    category=draft.category,
                    tags=draft.tags,
                )

        logger.info(
            "post.created post_id=%s owner_id=%s has_image=%s",
            safe_log_identifier(record.id, prefix="post"),
            safe_log_identifier(principal.user_id, prefix="pid"),
            record.image_url is not None,
        )
        return to_post(self._store, record)

    def list_posts(
        self,
        *,
        keyword: str | None = None,
        category: str | None = None,
        tag: str | None = None,
    ) -> list[Post]:
        records = self._store.list_posts(keyword=keyword or None, category=category or None, tag=tag or None)
        return [to_post(self._store, record) for record in records]

    def list_posts_by_author(self, *, author_id: str) -> list[Post]:
        ensure_identifier(author_id, resource="user")
        return [to_post(self._store, record) for record in self._store.list_posts(owner_id=author_id)]

    def get_post(self, *, post_id: str) -> PostDetail:
        return to_post_detail(self._store, load_post(self._store, post_id))

    def update_post(
        self,
        *,
        principal: AuthPrincipal,
        post_id: str,
        patch: PostPatch,
        image: ImageUpload | None = None,
    ) -> Post:
        record = load_post(self._store, post_id)
        ensure_allowed(decide(principal, Action.UPDATE_POST, record))

        with self._uploader.uploaded(image) as image_url:
            with persistence_failures("post.update"):
                updated = self._store.update_post(
                    record.id,
                    title=patch.title,
                    content=patch.content,
                    image_url=image_url,
                    category=patch.category,
                    tags=patch.tags,
                )
        if updated is None:
            raise not_found("Post not found")

        logger.info(
            "post.updated post_id=%s actor_id=%s role=%s",
            safe_log_identifier(record.id, prefix="post"),
            safe_log_identifier(principal.user_id, prefix="pid"),
            principal.role.value,
        )
        return to_post(self._store, updated)

    def delete_post(self, *, principal: AuthPrincipal, post_id: str) -> DeletionResult:
        record = load_post(self._store, post_id)
        ensure_allowed(decide(principal, Action.DELETE_POST, record))

        with persistence_failures("post.delete"):
            self._store.delete_post(record.id)

        logger.info(
            "post.deleted post_id=%s actor_id=%s role=%s",
            safe_log_identifier(record.id, prefix="post"),
            safe_log_identifier(principal.user_id, prefix="pid"),
            principal.role.value,
        )
        return DeletionResult(id=record.id, message="Post deleted")

    def like_post(self, *, principal: AuthPrincipal, post_id: str) -> LikeStatus:
        record = load_post(self._store, post_id)
        ensure_allowed(decide(principal, Action.LIKE_POST, record))

        with persistence_failures("post.like"):
            added = self._store.add_like(record.id, principal.user_id)
        if not added:
            # Lost a race with a concurrent like from the same account.
            raise ApiError(status_code=409, code="ALREADY_LIKED", message="Post already liked")

        return LikeStatus(post_id=record.id, liked=True, likes=len(record.likes))

    def unlike_post(self, *, principal: AuthPrincipal, post_id: str) -> LikeStatus:
        record = load_post(self._store, post_id)
        ensure_allowed(decide(principal, Action.UNLIKE_POST, record))

        with persistence_failures("post.unlike"):
            self._store.remove_like(record.id, principal.user_id)

        return LikeStatus(post_id=record.id, liked=False, likes=len(record.likes))


__all__ = ["PostService", "author_summary", "load_post", "to_comment", "to_post", "to_post_detail"]
