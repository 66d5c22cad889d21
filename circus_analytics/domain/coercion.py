"""Total coercion of raw spreadsheet cells into numbers, text and calendar days.

Nothing here raises: a cell that cannot be read becomes 0, "" or None.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Any

EXCEL_EPOCH = date(1899, 12, 30)
MONTH_SHORT_NAMES: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
_DATE_FORMATS: tuple[str, ...] = ("%Y-%m-%d", "%Y/%m/%d", "%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y")


def coerce_numeric(value: Any) -> float:
    """Coerce a raw cell to a finite float; anything unusable becomes 0."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value != value:
        return ""
    return str(value)


def parse_day(value: Any) -> date | None:
    """Parse a raw date cell into a calendar day, or None when unparseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        # Excel serial day number
        if not math.isfinite(value) or value <= 0:
            return None
        try:
            return EXCEL_EPOCH + timedelta(days=int(value))
        except OverflowError:
            return None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text[:10], fmt).date()
        except ValueError:
            continue
    return None


def month_label(month_key: str) -> str:
    """Render a YYYY-MM key as the short axis label, e.g. "Jan 24"."""
    try:
        year = int(month_key[:4])
        month = int(month_key[5:7])
    except ValueError:
        return month_key
    if not 1 <= month <= 12:
        return month_key
    return f"{MONTH_SHORT_NAMES[month - 1]} {year % 100:02d}"
