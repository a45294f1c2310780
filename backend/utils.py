"""Helper utilities for dates, month ranges and rounding."""

import calendar
import math
from datetime import date, timedelta
from errors import ValidationError

# Spreadsheet exports render an empty date cell as day zero of the 1900 system.
SPREADSHEET_EPOCH = "1899-12-31"


def parse_day(value) -> date:
    """Parse a YYYY-MM-DD string into a date.

    Args:
        value: ISO date string, or a date which is returned unchanged

    Returns:
        The parsed date

    Raises:
        ValidationError: if the value is not a valid YYYY-MM-DD date
    """
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def is_spreadsheet_epoch(value) -> bool:
    return str(value).strip() == SPREADSHEET_EPOCH


def month_bounds(year: int, month: int):
    """First and last calendar day of a month, both inclusive."""
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year or month: {year}, {month}")
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def month_dates(year: int, month: int):
    """Every calendar day of the month in chronological order."""
    first, last = month_bounds(year, month)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def round_half_up(value: float) -> float:
    """Round to the nearest whole unit, halves away from zero.

    The built-in round() uses banker's rounding, which would make 2.5 -> 2.
    """
    if value < 0:
        return -float(math.floor(-value + 0.5))
    return float(math.floor(value + 0.5))


def normalize_day(value: str) -> str:
    """Normalise D/M/YYYY or YYYY-M-D strings to YYYY-MM-DD.

    Anything else is returned stripped but unchanged so that parse_day can
    reject it later.
    """
    text = str(value).strip()
    parts = text.replace("/", "-").split("-")
    if len(parts) != 3:
        return text
    first, middle, last = parts
    if len(last) == 4:
        return f"{last}-{middle.zfill(2)}-{first.zfill(2)}"
    if len(first) == 4:
        return f"{first}-{middle.zfill(2)}-{last.zfill(2)}"
    return text
