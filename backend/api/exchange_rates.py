"""Exchange-rate API endpoints."""

from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from integrations.exchange_rate_protocol import ExchangeRateProvider
from schemas.exchange_rate import RateTableResponse
from services.exchange_rate_service import StoredExchangeRateProvider

router = APIRouter(prefix="/api/exchange-rates", tags=["exchange-rates"])


def get_rate_provider() -> ExchangeRateProvider:
    """Dependency that provides the exchange-rate source."""
    return StoredExchangeRateProvider()


@router.get("/current", response_model=RateTableResponse)
def get_current_rates(
    db: Session = Depends(get_db),
    provider: ExchangeRateProvider = Depends(get_rate_provider),
):
    """The most recent rate table with its age, so clients can decide to re-fetch."""
    table = provider.current_rate_table(db)
    max_age = timedelta(seconds=settings.EXCHANGE_RATE_MAX_AGE_SECONDS)
    age = StoredExchangeRateProvider.cache_age(table)

    if table is None:
        return RateTableResponse(provider=provider.provider_name, is_stale=True)

    return RateTableResponse(
        provider=provider.provider_name,
        base_currency=table.base_currency.upper(),
        rates={code.upper(): rate for code, rate in table.rates.items()},
        fetched_at=table.fetched_at,
        is_fallback=table.is_fallback,
        cache_age_seconds=int(age.total_seconds()) if age is not None else None,
        is_stale=StoredExchangeRateProvider.is_stale(table, max_age),
    )
