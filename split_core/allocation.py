"""Proportional allocation of a total across members by hours worked."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from decimal import Decimal
from typing import Any

from .models import ZERO, Member, round_money, to_decimal

logger = logging.getLogger(__name__)


def total_hours(members: Iterable[Member]) -> Decimal:
    return sum((m.hours or ZERO for m in members), ZERO)


def allocate(members: Sequence[Member], total: Any) -> list[Member]:
    """Return copies of ``members`` with ``amount`` set to their share of ``total``.

    Each share is ``total * hours / total_hours`` rounded half-up to cents,
    independently per member, so the shares may miss the total by up to a
    cent each. With no hours entered every amount is 0. The sign of
    ``total`` is not checked.
    """
    total_dec = to_decimal(total)
    hours_sum = total_hours(members)
    logger.debug("Allocating %s over %d members (%s hours)", total_dec, len(members), hours_sum)

    if hours_sum <= 0:
        return [replace(m, amount=ZERO) for m in members]
    return [
        replace(m, amount=round_money(total_dec * (m.hours or ZERO) / hours_sum))
        for m in members
    ]
