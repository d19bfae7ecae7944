"""ExchangeRate model - rate table captured for a snapshot."""

import json
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid


class ExchangeRate(Base):
    """Exchange rates near a snapshot's date.

    ``rates_json`` maps currency code to units of that currency per one
    unit of ``base_currency``, e.g. ``{"eur": 0.92, "twd": 32.1}``.
    """

    __tablename__ = "exchange_rates"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    snapshot_id = Column(String(36), ForeignKey("snapshots.id"), nullable=False, unique=True)
    base_currency = Column(String(3), nullable=False)
    rates_json = Column(Text, nullable=False, default="{}")
    fetch_date = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    is_fallback = Column(Boolean, nullable=False, default=False)

    # Relationships
    snapshot = relationship("Snapshot", back_populates="exchange_rate")

    @property
    def rates(self) -> dict[str, Decimal]:
        """Decoded rate map with lower-cased keys and Decimal values.

        Entries that are not finite numbers are left out, so their currency
        is treated like any other missing rate.
        """
        raw = json.loads(self.rates_json or "{}", parse_float=Decimal, parse_int=Decimal)
        rates: dict[str, Decimal] = {}
        for code, value in raw.items():
            if value is None or isinstance(value, (bool, dict, list)):
                continue
            try:
                rate = Decimal(value)
            except InvalidOperation:
                continue
            if rate.is_finite():
                rates[code.lower()] = rate
        return rates
