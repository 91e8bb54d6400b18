"""Timestamp parsing for records written by the web client.

Approval timestamps arrive as JavaScript epoch milliseconds (numbers or
digit strings) or ISO-8601 strings. Everything returned is timezone-aware
UTC.
"""

from datetime import UTC, datetime
from typing import Any


def parse_store_timestamp(value: Any) -> datetime | None:
    """Parse a stored timestamp; None for anything unparseable.

    Out-of-range numbers and localized display strings ("12/03/2024 10:15")
    are treated as unparseable rather than guessed at.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            value = int(text)
        else:
            return _parse_iso(text) if text else None
    if not isinstance(value, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_iso(text: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
