"""Comment service layer."""

import logging

from app.core.logging_safety import safe_log_identifier
from app.domain.authorization import Action, decide, ensure_allowed
from app.domain.identifiers import ensure_identifier
from app.errors import not_found, persistence_failures
from app.repositories.memory import InMemoryStore
from app.schemas.auth import AuthPrincipal
from app.schemas.comment import Comment
from app.schemas.post import PostDetail
from app.services.posts import load_post, to_comment, to_post_detail

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def create_comment(self, *, principal: AuthPrincipal, post_id: str, text: str) -> Comment:
        post = load_post(self._store, post_id)
        ensure_allowed(decide(principal, Action.CREATE_COMMENT, post))

        with persistence_failures("comment.create"):
            record = self._store.create_comment(post_id=post.id, author_id=principal.user_id, text=text)
        if record is None:
            raise not_found("Post not found")

        logger.info(
            "comment.created post_id=%s comment_id=%s author_id=%s",
            safe_log_identifier(post.id, prefix="post"),
            safe_log_identifier(record.id, prefix="cmt"),
            safe_log_identifier(principal.user_id, prefix="pid"),
        )
        return to_comment(self._store, record)

    def delete_comment(self, *, principal: AuthPrincipal, post_id: str, comment_id: str) -> PostDetail:
        """Delete a comment and return the parent post without it."""
        ensure_identifier(comment_id, resource="comment")
        post = load_post(self._store, post_id)
        comment = self._store.get_comment(comment_id)
        if comment is None or comment.post_id != post.id:
            raise not_found("Comment not found")
        ensure_allowed(decide(principal, Action.DELETE_COMMENT, comment))

        with persistence_failures("comment.delete"):
            self._store.delete_comment(comment.id)

        logger.info(
            "comment.deleted post_id=%s comment_id=%s actor_id=%s role=%s",
            safe_log_identifier(post.id, prefix="post"),
            safe_log_identifier(comment.id, prefix="cmt"),
            safe_log_identifier(principal.user_id, prefix="pid"),
            principal.role.value,
        )
        return to_post_detail(self._store, post)
