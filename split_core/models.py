"""Roster data model: members, time ranges and read-only snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .time_utils import hours_between, normalize_hhmm

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Coerce a number or numeric string to Decimal. None/empty -> default."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def to_hours(value: Any) -> Decimal:
    """Coerce directly-entered hours. None -> 0, negatives clamp to 0."""
    hours = to_decimal(value)
    return hours if hours > 0 else ZERO


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class TimeRange:
    start: str
    end: str

    @classmethod
    def of(cls, start: Any, end: Any) -> "TimeRange":
        return cls(start=normalize_hhmm(start), end=normalize_hhmm(end))

    @property
    def hours(self) -> Decimal:
        return hours_between(self.start, self.end)

    def as_dict(self) -> dict[str, str]:
        return {"start": self.start, "end": self.end}


def format_range(time_range: TimeRange | None) -> str:
    """Short label shown next to hours derived from a range, e.g. 09:00–17:00."""
    if time_range is None:
        return ""
    return f"{time_range.start}–{time_range.end}"


@dataclass(frozen=True)
class Member:
    id: str
    name: str = ""
    hours: Decimal = ZERO
    time_range: TimeRange | None = None
    amount: Decimal = ZERO

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "hours": float(self.hours),
            "timeRange": self.time_range.as_dict() if self.time_range else None,
            "amount": float(self.amount),
        }


@dataclass(frozen=True)
class RosterSnapshot:
    """Immutable view of the roster handed to the presentation layer."""

    total: Decimal
    members: tuple[Member, ...] = field(default_factory=tuple)

    @property
    def total_hours(self) -> Decimal:
        return sum((m.hours for m in self.members), ZERO)

    @property
    def allocated(self) -> Decimal:
        return sum((m.amount for m in self.members), ZERO)

    @property
    def remainder(self) -> Decimal:
        """Part of the total not covered by shares (rounding slack, or all of it with no hours)."""
        return self.total - self.allocated

    def __len__(self) -> int:
        return len(self.members)

    def as_dict(self) -> dict[str, Any]:
        return {
            "total": float(self.total),
            "members": [m.as_dict() for m in self.members],
            "total_hours": float(self.total_hours),
            "allocated": float(self.allocated),
            "remainder": float(self.remainder),
        }
