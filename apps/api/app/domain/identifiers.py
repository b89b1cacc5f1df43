"""Path identifier validation."""

from app.errors import ApiError
from app.repositories.memory import is_valid_identifier


def ensure_identifier(value: str, *, resource: str) -> str:
    """Reject malformed identifiers before any lookup is attempted."""
    if not is_valid_identifier(value):
        raise ApiError(
            status_code=400,
            code="INVALID_IDENTIFIER",
            message=f"Invalid {resource} ID",
            details={"resource": resource},
        )
    return value
