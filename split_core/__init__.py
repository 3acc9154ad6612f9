"""Hours-proportional expense splitting core."""

from .allocation import allocate, total_hours
from .models import Member, RosterSnapshot, TimeRange, format_range
from .roster import DEFAULT_MEMBER_COUNT, RosterManager
from .time_utils import hours_between, normalize_hhmm, parse_hhmm_to_minutes

__all__ = [
    "DEFAULT_MEMBER_COUNT",
    "Member",
    "RosterManager",
    "RosterSnapshot",
    "TimeRange",
    "allocate",
    "format_range",
    "hours_between",
    "normalize_hhmm",
    "parse_hhmm_to_minutes",
    "total_hours",
]
