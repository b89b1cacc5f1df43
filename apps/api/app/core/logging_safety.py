"""Helpers for log fields that must not expose account data."""

from __future__ import annotations

import hashlib
from typing import Any


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def safe_log_email(email: str | None) -> str:
    """Keep the domain of an email for diagnostics, hash the mailbox."""
    if not email or "@" not in email:
        return safe_log_identifier(email, prefix="mail")

    mailbox, _, domain = email.strip().lower().rpartition("@")
    return f"{safe_log_identifier(mailbox, prefix='mail')}@{domain}"
