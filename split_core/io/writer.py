"""Write a roster snapshot to CSV or JSON for sharing.

These are one-shot renderings of the current split, not a storage format:
nothing here is ever read back into a session.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path

from ..models import RosterSnapshot
from .schemas import MEMBERS_COLS, member_row, summary_row

logger = logging.getLogger(__name__)


def write_csv(snapshot: RosterSnapshot, path: Path) -> Path:
    """Write one row per member plus a trailing TOTAL row."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=MEMBERS_COLS)
        writer.writeheader()
        for i, m in enumerate(snapshot.members):
            writer.writerow(member_row(i, m))
        writer.writerow(summary_row(snapshot))
    logger.info("Wrote %d members to %s", len(snapshot.members), path)
    return path


def write_json(snapshot: RosterSnapshot, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(snapshot.as_dict(), fh, indent=2, ensure_ascii=False)
    logger.info("Wrote %d members to %s", len(snapshot.members), path)
    return path
