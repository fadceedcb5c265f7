"""
Date window filter for the funnel views.

Dates come from hand-maintained sheets, so they arrive as ``YYYY/M/D``,
``YYYY-MM-DD`` or day-first ``D/M/YYYY``. Anything that cannot be read as a
calendar date is treated as outside the window, never as an error.
"""
import re
from datetime import date
from typing import Optional

from app.schemas.common import DateRange

_SEPARATORS = re.compile(r"[/-]")


def parse_sheet_date(value: Optional[str]) -> Optional[date]:
    """Normalize a sheet date string to a ``date``; ``None`` when unreadable."""
    if not value:
        return None

    parts = [p.strip() for p in _SEPARATORS.split(value.strip())]
    if len(parts) != 3:
        return None

    year, month, day = parts
    # Day-first input: D/M/YYYY
    if len(year) < 4 and len(day) == 4:
        year, day = day, year

    if len(year) != 4 or not all(p.isdigit() for p in (year, month, day)):
        return None

    try:
        return date.fromisoformat(f"{year}-{month.zfill(2)}-{day.zfill(2)}")
    except ValueError:
        return None


def in_range(date_str: Optional[str], date_range: Optional[DateRange] = None) -> bool:
    """Inclusive membership test of ``date_str`` in ``date_range``.

    No window (or a window with neither bound) admits everything. An empty or
    unreadable date is never in a window. A bound that cannot be parsed is
    ignored.
    """
    if date_range is None or date_range.is_empty:
        return True
    if not date_str:
        return False

    value = parse_sheet_date(date_str)
    if value is None:
        return False

    lower = parse_sheet_date(date_range.date_from)
    if lower is not None and value < lower:
        return False

    upper = parse_sheet_date(date_range.date_to)
    if upper is not None and value > upper:
        return False

    return True
