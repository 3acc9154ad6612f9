"""Column constants and value formatting for roster exports."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..models import Member, RosterSnapshot, format_range

# ---------------------------------------------------------------------------
# Export column names
# ---------------------------------------------------------------------------

MEMBERS_COLS = [
    "member_id",
    "name",
    "hours",
    "time_range",
    "amount",
]

SUMMARY_FIELDS = [
    "total",
    "total_hours",
    "allocated",
    "remainder",
    "members",
]

TOTAL_LABEL = "TOTAL"

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def fmt_money(value: Decimal | None) -> str:
    """Format a money value with exactly two decimals. None -> 0.00."""
    if value is None:
        return "0.00"
    return f"{value:.2f}"


def fmt_hours(value: Decimal | None) -> str:
    """Format hours without trailing zeros (8.00 -> 8, 7.50 -> 7.5)."""
    if not value:
        return "0"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def member_row(index: int, m: Member) -> dict[str, Any]:
    """One export row. Unnamed members get a positional label."""
    return {
        "member_id": m.id,
        "name": m.name or f"Member {index + 1}",
        "hours": fmt_hours(m.hours),
        "time_range": format_range(m.time_range),
        "amount": fmt_money(m.amount),
    }


def summary_row(snapshot: RosterSnapshot) -> dict[str, Any]:
    return {
        "member_id": "",
        "name": TOTAL_LABEL,
        "hours": fmt_hours(snapshot.total_hours),
        "time_range": "",
        "amount": fmt_money(snapshot.allocated),
    }


def summary_values(snapshot: RosterSnapshot) -> dict[str, Any]:
    values = {
        "total": fmt_money(snapshot.total),
        "total_hours": fmt_hours(snapshot.total_hours),
        "allocated": fmt_money(snapshot.allocated),
        "remainder": fmt_money(snapshot.remainder),
        "members": len(snapshot.members),
    }
    return {key: values[key] for key in SUMMARY_FIELDS}
