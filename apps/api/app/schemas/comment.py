"""Comment API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.account import AuthorSummary


class CreateCommentRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2000)


class Comment(BaseModel):
    id: str
    post_id: str
    author_id: str
    author: AuthorSummary | None = None
    text: str
    created_at: datetime
