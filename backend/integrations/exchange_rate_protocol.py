"""Exchange-rate provider protocol definitions.

Defines the read interface the valuation endpoints use to obtain rate
tables. Fetching rates over the network is a separate concern; a provider
only has to hand back whatever table is currently available (possibly
none) so valuation never waits on I/O.
"""

from typing import Protocol

from sqlalchemy.orm import Session

from services.currency_conversion_service import RateTable


class ExchangeRateProvider(Protocol):
    """Protocol for exchange-rate sources."""

    @property
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'stored')."""
        ...

    def rate_table_for_snapshot(self, db: Session, snapshot_id: str) -> RateTable | None:
        """Return the rate table captured for a snapshot, or None."""
        ...

    def current_rate_table(self, db: Session) -> RateTable | None:
        """Return the most recent rate table available, or None."""
        ...
