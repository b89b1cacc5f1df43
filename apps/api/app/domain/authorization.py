"""Access-control decisions for posts, comments and accounts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from app.errors import ApiError
from app.repositories.memory import AccountRecord, CommentRecord, PostRecord
from app.schemas.account import Role
from app.schemas.auth import AuthPrincipal


class Action(str, Enum):
    CREATE_POST = "create_post"
    CREATE_COMMENT = "create_comment"
    UPDATE_POST = "update_post"
    DELETE_POST = "delete_post"
    DELETE_COMMENT = "delete_comment"
    LIKE_POST = "like_post"
    UNLIKE_POST = "unlike_post"
    BLOCK_ACCOUNT = "block_account"
    UNBLOCK_ACCOUNT = "unblock_account"
    DELETE_ACCOUNT = "delete_account"
    LIST_ACCOUNTS = "list_accounts"
    LIST_ALL_POSTS = "list_all_posts"
    DELETE_ANY_POST = "delete_any_post"


class Denial(str, Enum):
    BLOCKED = "ACCOUNT_BLOCKED"
    NOT_OWNER = "NOT_OWNER"
    NOT_AUTHOR = "NOT_AUTHOR"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"
    ALREADY_LIKED = "ALREADY_LIKED"
    CANNOT_BLOCK_ADMIN = "CANNOT_BLOCK_ADMIN"


@dataclass(frozen=True, slots=True)
class Verdict:
    denial: Denial | None = None

    @property
    def allowed(self) -> bool:
        return self.denial is None


ALLOW = Verdict()

_ADMIN_ONLY_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.BLOCK_ACCOUNT,
        Action.UNBLOCK_ACCOUNT,
        Action.DELETE_ACCOUNT,
        Action.LIST_ACCOUNTS,
        Action.LIST_ALL_POSTS,
        Action.DELETE_ANY_POST,
    }
)

_DENIAL_RESPONSES: dict[Denial, tuple[int, str]] = {
    Denial.BLOCKED: (403, "Your account has been blocked by the administrator. Please contact support."),
    Denial.NOT_OWNER: (403, "Only the post owner or an admin can modify this post"),
    Denial.NOT_AUTHOR: (403, "Only the comment author or an admin can delete this comment"),
    Denial.ADMIN_REQUIRED: (403, "Admin role required"),
    Denial.ALREADY_LIKED: (409, "Post already liked"),
    Denial.CANNOT_BLOCK_ADMIN: (403, "Cannot block admin users"),
}

Resource = PostRecord | CommentRecord | AccountRecord | None


def decide(principal: AuthPrincipal, action: Action, resource: Resource = None) -> Verdict:
    """Return the verdict for ``principal`` performing ``action`` on ``resource``.

    Pure: no store access and no clock. Every ``Action`` member yields either
    ``ALLOW`` or a specific denial. Passing an action with no rule, or a
    resource of the wrong type for a post or comment action, is a programming
    error and raises ``ValueError`` or ``TypeError``.
    """
    if principal.is_blocked:
        return Verdict(Denial.BLOCKED)

    is_admin = principal.is_admin

    if action in _ADMIN_ONLY_ACTIONS:
        if not is_admin:
            return Verdict(Denial.ADMIN_REQUIRED)
        if action is Action.BLOCK_ACCOUNT and isinstance(resource, AccountRecord) and resource.role is Role.ADMIN:
            return Verdict(Denial.CANNOT_BLOCK_ADMIN)
        return ALLOW

    if action in (Action.CREATE_POST, Action.CREATE_COMMENT, Action.UNLIKE_POST):
        return ALLOW

    if action in (Action.UPDATE_POST, Action.DELETE_POST):
        post = _require_resource(resource, PostRecord, action)
        if principal.user_id == post.owner_id or is_admin:
            return ALLOW
        return Verdict(Denial.NOT_OWNER)

    if action is Action.DELETE_COMMENT:
        comment = _require_resource(resource, CommentRecord, action)
        if principal.user_id == comment.author_id or is_admin:
            return ALLOW
        return Verdict(Denial.NOT_AUTHOR)

    if action is Action.LIKE_POST:
        post = _require_resource(resource, PostRecord, action)
        if principal.user_id in post.likes:
            return Verdict(Denial.ALREADY_LIKED)
        return ALLOW

    raise ValueError(f"Unhandled action: {action}")


def ensure_allowed(verdict: Verdict) -> None:
    """Raise the API error mapped to a denial; no-op for ``ALLOW``."""
    if verdict.denial is None:
        return

    status_code, message = _DENIAL_RESPONSES[verdict.denial]
    raise ApiError(
        status_code=status_code,
        code=verdict.denial.value,
        message=message,
        is_blocked=True if verdict.denial is Denial.BLOCKED else None,
    )


def _require_resource(resource: Resource, expected: type, action: Action):
    if not isinstance(resource, expected):
        raise TypeError(f"{action.value} requires a {expected.__name__}")
    return resource
