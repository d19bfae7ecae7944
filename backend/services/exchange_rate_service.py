"""Exchange-rate service - serves stored rate tables and their age."""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from models import ExchangeRate, Snapshot
from services.currency_conversion_service import RateTable

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = timedelta(hours=1)


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _to_rate_table(record: ExchangeRate) -> RateTable:
    return RateTable.from_mapping(
        record.base_currency,
        record.rates,
        fetched_at=record.fetch_date,
        is_fallback=bool(record.is_fallback),
    )


class StoredExchangeRateProvider:
    """Exchange-rate provider backed by the rates saved with each snapshot.

    "Current" rates are those attached to the latest snapshot that has any.
    """

    @property
    def provider_name(self) -> str:
        return "stored"

    def rate_table_for_snapshot(self, db: Session, snapshot_id: str) -> RateTable | None:
        record = db.query(ExchangeRate).filter(ExchangeRate.snapshot_id == snapshot_id).first()
        if record is None:
            return None
        return _to_rate_table(record)

    def current_rate_table(self, db: Session) -> RateTable | None:
        record = (
            db.query(ExchangeRate)
            .join(Snapshot, ExchangeRate.snapshot_id == Snapshot.id)
            .order_by(Snapshot.date.desc())
            .first()
        )
        if record is None:
            logger.debug("No stored exchange rates")
            return None
        return _to_rate_table(record)

    @staticmethod
    def cache_age(table: RateTable | None, now: datetime | None = None) -> timedelta | None:
        """How long ago *table* was fetched, or None if unknown."""
        if table is None or table.fetched_at is None:
            return None
        now = now or datetime.now(timezone.utc)
        return _as_utc(now) - _as_utc(table.fetched_at)

    @classmethod
    def is_stale(
        cls,
        table: RateTable | None,
        max_age: timedelta = DEFAULT_MAX_AGE,
        now: datetime | None = None,
    ) -> bool:
        """A missing table, or one without a fetch time, counts as stale."""
        age = cls.cache_age(table, now)
        if age is None:
            return True
        return age > max_age
