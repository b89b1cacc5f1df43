"""Application exception types."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging

from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict | None = None,
        *,
        is_blocked: bool | None = None,
    ) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details, is_blocked=is_blocked)
        super().__init__(message)


def not_found(message: str = "Resource not found") -> ApiError:
    return ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message=message)


def account_blocked() -> ApiError:
    return ApiError(
        status_code=403,
        code="ACCOUNT_BLOCKED",
        message="Your account has been blocked by the administrator. Please contact support.",
        is_blocked=True,
    )


@contextmanager
def persistence_failures(operation: str) -> Iterator[None]:
    """Translate store write failures into an ``INTERNAL_ERROR`` response."""
    try:
        yield
    except RuntimeError as exc:
        logger.error("store.write_failed operation=%s reason=%s", operation, type(exc).__name__)
        raise ApiError(status_code=500, code="INTERNAL_ERROR", message="Failed to persist changes") from exc


__all__ = ["ApiError", "account_blocked", "not_found", "persistence_failures"]
