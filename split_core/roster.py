"""Session state for one split: the ordered member roster and the total.

``RosterManager`` is the only mutation surface. Every mutating call runs
lookup -> mutate -> recompute -> publish under one lock and returns the
resulting ``RosterSnapshot``, so no caller can observe amounts that are
stale relative to the current hours and total.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal
from typing import Any
from uuid import uuid4

from .allocation import allocate
from .models import ZERO, Member, RosterSnapshot, TimeRange, to_decimal, to_hours

logger = logging.getLogger(__name__)

DEFAULT_MEMBER_COUNT = 5
PATCHABLE_FIELDS = ("name", "hours", "time_range")
MAX_ID_ATTEMPTS = 100


def new_member_id() -> str:
    return f"m-{uuid4().hex}"


class RosterManager:
    def __init__(
        self,
        size: int = DEFAULT_MEMBER_COUNT,
        total: Any = None,
        *,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._id_factory = id_factory or new_member_id
        self._issued_ids: set[str] = set()
        self._total: Decimal = to_decimal(total)
        self._members: list[Member] = []
        self._snapshot = RosterSnapshot(total=self._total)
        self.resize(max(0, int(size)))

    # -- reading --

    def snapshot(self) -> RosterSnapshot:
        return self._snapshot

    @property
    def total(self) -> Decimal:
        return self._snapshot.total

    @property
    def members(self) -> tuple[Member, ...]:
        return self._snapshot.members

    def __len__(self) -> int:
        return len(self._snapshot.members)

    def member(self, member_id: str) -> Member:
        for m in self._snapshot.members:
            if m.id == member_id:
                return m
        raise KeyError(f"member_id not found: {member_id}")

    # -- mutation --

    def set_total(self, value: Any) -> RosterSnapshot:
        """Set the total (None -> 0) and recompute every share against it."""
        with self._lock:
            return self._publish(self._members, to_decimal(value))

    def resize(self, count: int) -> RosterSnapshot:
        """Grow with empty members or truncate from the tail.

        A negative count is ignored. Truncated members are discarded for
        good: growing again adds fresh members with new ids.
        """
        with self._lock:
            if count is None or count < 0:
                logger.debug("Ignoring resize to negative count %r", count)
                return self._snapshot
            count = int(count)
            current = len(self._members)
            members = list(self._members[:count])
            if count > current:
                members.extend(Member(id=self._next_id()) for _ in range(count - current))
            if count != current:
                logger.info("Roster resized from %d to %d members", current, count)
            return self._publish(members, self._total)

    def add_member(self) -> RosterSnapshot:
        with self._lock:
            return self.resize(len(self._members) + 1)

    def remove_last(self) -> RosterSnapshot:
        with self._lock:
            return self.resize(len(self._members) - 1)

    def patch_member(self, member_id: str, *, strict: bool = False, **fields: Any) -> RosterSnapshot:
        """Shallow-merge ``fields`` into one member and recompute all shares.

        Accepted fields are ``name``, ``hours`` and ``time_range``. A
        ``time_range`` (a ``TimeRange``, a ``(start, end)`` pair or None)
        takes precedence: hours are derived from it and any ``hours`` in
        the same patch are ignored; None clears the range and zeroes the
        hours. Patching ``hours`` alone is a direct edit and clears any
        stored range.

        An unknown ``member_id`` is a logged no-op, or a KeyError with
        ``strict=True``.
        """
        unknown = set(fields) - set(PATCHABLE_FIELDS)
        if unknown:
            raise ValueError(
                f"Unknown member field(s): {sorted(unknown)}. Allowed: {list(PATCHABLE_FIELDS)}"
            )

        with self._lock:
            index = self._index_of(member_id)
            if index is None:
                if strict:
                    raise KeyError(f"member_id not found: {member_id}")
                logger.warning("Ignoring patch for unknown member_id %s", member_id)
                return self._snapshot

            changes: dict[str, Any] = {}
            if "name" in fields:
                changes["name"] = "" if fields["name"] is None else str(fields["name"])
            if "time_range" in fields:
                time_range = _coerce_range(fields["time_range"])
                changes["time_range"] = time_range
                changes["hours"] = time_range.hours if time_range else ZERO
            elif "hours" in fields:
                changes["hours"] = to_hours(fields["hours"])
                changes["time_range"] = None

            members = list(self._members)
            members[index] = replace(members[index], **changes)
            return self._publish(members, self._total)

    def set_time_range(self, member_id: str, start: Any, end: Any, *, strict: bool = False) -> RosterSnapshot:
        return self.patch_member(member_id, strict=strict, time_range=TimeRange.of(start, end))

    def clear_time_range(self, member_id: str, *, strict: bool = False) -> RosterSnapshot:
        return self.patch_member(member_id, strict=strict, time_range=None)

    # -- internals --

    def _next_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            member_id = self._id_factory()
            if member_id not in self._issued_ids:
                break
        else:
            raise RuntimeError(f"id_factory returned no unused id in {MAX_ID_ATTEMPTS} attempts")
        self._issued_ids.add(member_id)
        return member_id

    def _index_of(self, member_id: str) -> int | None:
        for i, m in enumerate(self._members):
            if m.id == member_id:
                return i
        return None

    def _publish(self, members: list[Member], total: Decimal) -> RosterSnapshot:
        # state is committed only once allocation has succeeded
        allocated = allocate(members, total)
        self._members = allocated
        self._total = total
        self._snapshot = RosterSnapshot(total=total, members=tuple(allocated))
        return self._snapshot


def _coerce_range(value: Any) -> TimeRange | None:
    if value is None:
        return None
    if isinstance(value, TimeRange):
        return TimeRange.of(value.start, value.end)
    if isinstance(value, dict):
        return TimeRange.of(value.get("start"), value.get("end"))
    try:
        start, end = value
    except (TypeError, ValueError) as exc:
        raise ValueError(f"time_range must be a (start, end) pair, got {value!r}") from exc
    return TimeRange.of(start, end)
