"""Period codes and calendar helpers for look-back windows."""

import calendar
from datetime import date, timedelta

# Look-back periods, all anchored at the latest snapshot's date.
PERIOD_CODES = ("1W", "1M", "3M", "6M", "YTD", "1Y", "3Y", "5Y", "ALL")
DEFAULT_PERIODS = ["1M", "3M", "1Y"]


def subtract_months(d: date, months: int) -> date:
    """Subtract months from a date, clamping to valid day."""
    year = d.year
    month = d.month - months
    while month <= 0:
        month += 12
        year -= 1
    # Clamp day to max days in target month
    max_day = calendar.monthrange(year, month)[1]
    day = min(d.day, max_day)
    return date(year, month, day)


def period_start(period: str, end_date: date, first_date: date | None = None) -> date:
    """Map a period code to the start of its window ending at *end_date*.

    ``YTD`` starts on Dec 31 of the prior year so a year-end snapshot can
    serve as the opening value. ``ALL`` starts at *first_date* (or
    *end_date* when no history is known).

    Raises:
        ValueError: If *period* is not a known code.
    """
    code = period.upper()
    if code == "1W":
        return end_date - timedelta(days=7)
    elif code == "1M":
        return subtract_months(end_date, 1)
    elif code == "3M":
        return subtract_months(end_date, 3)
    elif code == "6M":
        return subtract_months(end_date, 6)
    elif code == "YTD":
        return date(end_date.year - 1, 12, 31)
    elif code == "1Y":
        return subtract_months(end_date, 12)
    elif code == "3Y":
        return subtract_months(end_date, 36)
    elif code == "5Y":
        return subtract_months(end_date, 60)
    elif code == "ALL":
        return first_date or end_date
    else:
        raise ValueError(f"Unknown period: {period}")
