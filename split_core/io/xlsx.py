"""Render a roster snapshot to a one-sheet XLSX workbook."""

from __future__ import annotations

import logging
from pathlib import Path

from ..models import RosterSnapshot
from .schemas import MEMBERS_COLS, member_row, summary_row, summary_values

logger = logging.getLogger(__name__)


def _get_openpyxl():
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font, PatternFill
        return Workbook, Font, PatternFill
    except ImportError as exc:
        raise ImportError("openpyxl is required for XLSX export: pip install openpyxl") from exc


def _style_header(ws, Font, PatternFill) -> None:
    """Apply bold + blue fill to the header row."""
    header_font = Font(bold=True)
    header_fill = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill


def render_xlsx(snapshot: RosterSnapshot, path: Path) -> Path:
    """Render members and a summary block to ``path``.

    Sheet "Split": one row per member, a TOTAL row, then a blank row and
    the summary key/value pairs (total, total_hours, allocated, remainder).

    Returns the path to the written file.
    """
    Workbook, Font, PatternFill = _get_openpyxl()

    wb = Workbook()
    ws = wb.active
    ws.title = "Split"
    ws.append(MEMBERS_COLS)
    for i, m in enumerate(snapshot.members):
        row = member_row(i, m)
        ws.append([row[c] for c in MEMBERS_COLS])
    total = summary_row(snapshot)
    ws.append([total[c] for c in MEMBERS_COLS])
    for cell in ws[ws.max_row]:
        cell.font = Font(bold=True)

    ws.append([])
    for key, value in summary_values(snapshot).items():
        ws.append([key, value])

    _style_header(ws, Font, PatternFill)
    ws.column_dimensions["A"].width = 38
    ws.column_dimensions["B"].width = 24

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    logger.info("Wrote %d members to %s", len(snapshot.members), path)
    return path
