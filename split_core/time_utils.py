"""Time-of-day helpers used to derive worked hours from a start/end pair."""

from __future__ import annotations

from datetime import time
from decimal import ROUND_HALF_UP, Decimal

MINUTES_PER_DAY = 24 * 60
HOURS_QUANT = Decimal("0.01")


def parse_hhmm_to_minutes(value: str | time | None) -> int | None:
    """Parse HH:MM (or a ``datetime.time``) into minutes after midnight."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not value or ":" not in str(value):
        return None
    try:
        hh, mm = str(value).strip().split(":", 1)
        h = int(hh)
        m = int(mm)
    except (TypeError, ValueError):
        return None
    if h < 0 or h > 23 or m < 0 or m > 59:
        return None
    return h * 60 + m


def normalize_hhmm(value: str | time | None) -> str:
    """Return a zero-padded HH:MM string, raising ValueError for bad input."""
    minutes = parse_hhmm_to_minutes(value)
    if minutes is None:
        raise ValueError(f"Invalid time of day: {value!r} (expected HH:MM)")
    h, m = divmod(minutes, 60)
    return f"{h:02d}:{m:02d}"


def hours_between(start: str | time | None, end: str | time | None) -> Decimal:
    """Elapsed hours from ``start`` to ``end``, rounded to 2 decimals.

    An ``end`` earlier than ``start`` is read as crossing midnight. Equal
    times give 0 rather than 24, and unparseable times give 0.
    """
    s = parse_hhmm_to_minutes(start)
    e = parse_hhmm_to_minutes(end)
    if s is None or e is None:
        return Decimal("0.00")
    diff = e - s
    if diff < 0:
        diff += MINUTES_PER_DAY
    if diff <= 0:
        return Decimal("0.00")
    return (Decimal(diff) / Decimal(60)).quantize(HOURS_QUANT, rounding=ROUND_HALF_UP)
