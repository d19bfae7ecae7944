"""Pydantic schemas for exchange-rate endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class RateTableResponse(BaseModel):
    """The current rate table and how old it is."""

    provider: str
    base_currency: Optional[str] = None
    rates: dict[str, Decimal] = {}
    fetched_at: Optional[datetime] = None
    is_fallback: bool = False
    cache_age_seconds: Optional[int] = None
    is_stale: bool
