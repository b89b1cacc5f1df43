"""Account API schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    MEMBER = "member"
    ADMIN = "admin"


class Account(BaseModel):
    id: str
    username: str
    email: str
    role: Role
    is_blocked: bool
    avatar_url: str | None = None
    federated: bool = False
    created_at: datetime


class AuthorSummary(BaseModel):
    id: str
    username: str


class UpdateProfileRequest(BaseModel):
    username: str | None = Field(default=None, min_length=1, max_length=50)
    avatar_url: str | None = Field(default=None, max_length=2048)
