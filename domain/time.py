"""
Domain time utilities.

Centralized timestamp helpers shared by every entity and store:
- UTC validation for timestamps held by domain entities.
- ISO-8601 parsing/serialization for timestamps travelling as text.
- Timestamp-derived entity ids and invoice numbers.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

import time
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Optional


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforce that a timestamp is UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso_utc(dt: datetime, *, name: str = "timestamp") -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp(name, dt)
    return dt.astimezone(timezone.utc).isoformat()


def parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a stored timestamp into a timezone-aware UTC datetime.

    Spreadsheet cells and JSON payloads carry ISO-8601 strings, sometimes
    with a trailing 'Z'. Plain calendar dates are read as midnight UTC.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_optional_utc_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_utc_datetime(value)


def parse_calendar_date(value: Any) -> date:
    """Parse a sale date cell (``YYYY-MM-DD``, or a full timestamp) into a date."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            return parse_utc_datetime(text).date()
        return date.fromisoformat(text)
    raise TypeError(f"Unsupported date type: {type(value)!r}")


class IdGenerator:
    """
    Mints entity ids from the millisecond wall clock.

    Ids are decimal strings. The sequence is strictly increasing for a single
    generator: when the clock has not moved past the previous id, the next id
    is the previous one plus one.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)


def new_invoice_number(clock: Callable[[], float] = time.time) -> str:
    """
    Human-readable invoice number: ``INV-`` plus the last six digits of the
    millisecond clock. Not globally unique.
    """

    return f"INV-{str(int(clock() * 1000))[-6:]}"


__all__ = [
    "IdGenerator",
    "new_invoice_number",
    "parse_calendar_date",
    "parse_optional_utc_datetime",
    "parse_utc_datetime",
    "require_utc_timestamp",
    "to_iso_utc",
    "utc_now",
]
