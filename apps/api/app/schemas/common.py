"""Shared response schemas."""

from pydantic import BaseModel


class DeletionResult(BaseModel):
    id: str
    deleted: bool = True
    message: str
