"""Currency conversion against a base-anchored rate table.

Every function here is pure. A missing rate never raises: ``convert``
returns ``None`` and callers decide how to degrade (usually by keeping
the unconverted value and flagging it).
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional


@dataclass(frozen=True)
class RateTable:
    """Units of each currency per one unit of ``base_currency``."""

    base_currency: str
    rates: Mapping[str, Decimal] = field(default_factory=dict)
    fetched_at: Optional[datetime] = None
    is_fallback: bool = False

    @classmethod
    def from_mapping(
        cls,
        base_currency: str,
        rates: Mapping[str, object],
        fetched_at: Optional[datetime] = None,
        is_fallback: bool = False,
    ) -> "RateTable":
        """Build a table, normalizing codes to lower case and values to Decimal."""
        normalized = {
            code.lower(): value if isinstance(value, Decimal) else Decimal(str(value))
            for code, value in rates.items()
        }
        return cls(
            base_currency=base_currency.lower(),
            rates=normalized,
            fetched_at=fetched_at,
            is_fallback=is_fallback,
        )

    def rate_for(self, currency: str) -> Decimal | None:
        """Rate of *currency* relative to the base, or None if unknown.

        The base currency always has rate 1. A zero rate is unusable and
        reported as missing.
        """
        code = currency.lower()
        if code == self.base_currency.lower():
            return Decimal("1")
        rate = self.rates.get(code)
        if rate is None or rate == 0:
            return None
        return rate


def convert(
    amount: Decimal,
    from_currency: str,
    to_currency: str,
    rate_table: RateTable | None,
) -> Decimal | None:
    """Convert *amount* between currencies.

    Same-currency conversion is the identity and needs no table. Otherwise
    both currencies must be resolvable in *rate_table*; the amount goes
    through the base currency: ``amount / rate[from] * rate[to]``.

    Returns:
        The converted amount, or None when the conversion is unavailable.
    """
    if from_currency.lower() == to_currency.lower():
        return amount
    if rate_table is None:
        return None

    from_rate = rate_table.rate_for(from_currency)
    to_rate = rate_table.rate_for(to_currency)
    if from_rate is None or to_rate is None:
        return None

    amount_in_base = amount / from_rate
    return amount_in_base * to_rate


def can_convert(
    from_currency: str, to_currency: str, rate_table: RateTable | None
) -> bool:
    """Whether ``convert`` would succeed for this currency pair."""
    return convert(Decimal("1"), from_currency, to_currency, rate_table) is not None


def effective_currency(currency: str | None, display_currency: str) -> str:
    """An empty currency code inherits the display currency."""
    return currency if currency else display_currency
