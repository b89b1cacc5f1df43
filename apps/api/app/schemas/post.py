"""Post API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.account import AuthorSummary
from app.schemas.comment import Comment


class PostDraft(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    category: str | None = None
    tags: list[str] = Field(default_factory=list)


class PostPatch(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    category: str | None = None
    tags: list[str] | None = None


class Post(BaseModel):
    id: str
    title: str
    content: str
    image_url: str | None = None
    author_id: str
    author: AuthorSummary | None = None
    category: str | None = None
    tags: list[str]
    likes: list[str]
    like_count: int
    comment_ids: list[str]
    created_at: datetime
    updated_at: datetime


class PostDetail(Post):
    comments: list[Comment]


class LikeStatus(BaseModel):
    post_id: str
    liked: bool
    likes: int


def parse_tags(raw: str | None) -> list[str] | None:
    """Split a comma-separated tag field, dropping blanks; ``None`` when absent."""
    if raw is None:
        return None
    return [tag.strip() for tag in raw.split(",") if tag.strip()]
