"""Common utilities for the HostDesk backend."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def sanitize_string(value: str | None, max_length: int = 255) -> str | None:
    """Sanitize a string value by stripping whitespace and truncating."""
    if value is None:
        return None
    value = value.strip()
    if len(value) > max_length:
        return value[:max_length]
    return value
