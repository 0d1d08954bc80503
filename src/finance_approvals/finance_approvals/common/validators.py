from __future__ import annotations

from typing import Optional

from ..core.exceptions import InvalidRejectionReason


def require_rejection_reason(value: Optional[str]) -> str:
    """Return the reason unchanged, or raise if it is empty or blank."""
    if not value or not value.strip():
        raise InvalidRejectionReason()
    return value


def clean_note(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None
