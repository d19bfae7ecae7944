"""Shared query parameter parsing utilities."""

import re
from datetime import date

from fastapi import HTTPException

from utils.periods import PERIOD_CODES

_CURRENCY_RE = re.compile(r"^[A-Za-z]{3}$")


def parse_currency(currency: str | None) -> str | None:
    """Validate an optional currency code query parameter.

    Returns:
        The upper-cased code, or None if not given.

    Raises:
        HTTPException: If the code is not three letters.
    """
    if currency is None or not currency.strip():
        return None
    code = currency.strip()
    if not _CURRENCY_RE.match(code):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid currency code: {currency}",
        )
    return code.upper()


def parse_periods(periods: str | None) -> list[str] | None:
    """Parse a comma-separated list of period codes.

    Raises:
        HTTPException: If any code is unknown.
    """
    if not periods:
        return None
    result = []
    for p in periods.split(","):
        p = p.strip().upper()
        if not p:
            continue
        if p not in PERIOD_CODES:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown period: {p}. Expected one of {', '.join(PERIOD_CODES)}",
            )
        result.append(p)
    return result if result else None


def validate_date_range(start_date: date | None, end_date: date | None) -> None:
    """Reject ranges whose start is after their end."""
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=400,
            detail="start_date must be on or before end_date",
        )
