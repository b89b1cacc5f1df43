"""Authentication schemas."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from app.schemas.account import Account, Role


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal used by business services."""

    user_id: str = Field(min_length=1)
    role: Role = Role.MEMBER
    is_blocked: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class FederatedIdentity(BaseModel):
    """Identity claims extracted from a verified third-party assertion."""

    subject: str = Field(min_length=1)
    email: EmailStr
    name: str
    avatar_url: str | None = None


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class FederatedAuthRequest(BaseModel):
    credential: str = Field(min_length=1)
    mode: Literal["login", "register"] = "login"


class AuthSession(BaseModel):
    account: Account
    token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int
