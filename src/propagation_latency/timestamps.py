"""RFC 3339 timestamp helpers shared by the reader and the record store."""

from __future__ import annotations

from datetime import datetime, timezone


def to_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime | None) -> str:
    """Format as RFC 3339 in UTC (``2024-05-01T12:00:00Z``); ``None`` becomes an empty string."""
    if value is None:
        return ""
    text = to_utc(value).isoformat()
    return text.replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp. Raises ValueError on malformed input."""
    value = text.strip()
    if not value:
        raise ValueError("empty timestamp")
    if value[-1] in "Zz":
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp {text!r} has no UTC offset")
    return to_utc(parsed)
