"""Export layer for roster snapshots.

Public API:
    write_csv(snapshot, path)    -- one row per member plus a TOTAL row
    write_json(snapshot, path)   -- the snapshot's dict form
    render_xlsx(snapshot, path)  -- one-sheet workbook (needs openpyxl)
"""

from .writer import write_csv, write_json

__all__ = [
    "render_xlsx",
    "write_csv",
    "write_json",
]

# Lazy import for the optional openpyxl dependency.
def render_xlsx(*args, **kwargs):
    from .xlsx import render_xlsx as _fn
    return _fn(*args, **kwargs)
