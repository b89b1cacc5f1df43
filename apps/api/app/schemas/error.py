"""API error response schemas."""

from typing import Any
from typing import Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None
    is_blocked: bool | None = None


class BlockedAccountError(BaseModel):
    code: Literal["ACCOUNT_BLOCKED"]
    message: str
    is_blocked: Literal[True]


class NotFoundError(BaseModel):
    code: Literal["RESOURCE_NOT_FOUND"]
    message: str


class UpstreamFailureError(BaseModel):
    code: Literal["IDENTITY_PROVIDER_FAILED", "IMAGE_UPLOAD_FAILED"]
    message: str
