"""Integration tests for exchange-rate API endpoints."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.fixtures import create_snapshot


class TestCurrentRates:
    """Tests for GET /api/exchange-rates/current."""

    def test_no_rates(self, client: TestClient):
        response = client.get("/api/exchange-rates/current")

        assert response.status_code == 200
        data = response.json()
        assert data["provider"] == "stored"
        assert data["base_currency"] is None
        assert data["rates"] == {}
        assert data["is_stale"] is True

    def test_latest_table(self, client: TestClient, db: Session):
        create_snapshot(db, date(2025, 1, 31), rates={"eur": 0.9}, fetch_date=datetime(2025, 1, 31))
        create_snapshot(db, date(2025, 2, 28), rates={"eur": 0.95, "twd": 32.5})
        db.commit()

        data = client.get("/api/exchange-rates/current").json()

        assert data["base_currency"] == "USD"
        assert {k: Decimal(v) for k, v in data["rates"].items()} == {
            "EUR": Decimal("0.95"),
            "TWD": Decimal("32.5"),
        }
        assert data["is_stale"] is False
        assert data["is_fallback"] is False
        assert data["cache_age_seconds"] >= 0

    def test_old_table_is_stale(self, client: TestClient, db: Session):
        fetched = datetime.now(timezone.utc) - timedelta(days=2)
        create_snapshot(db, date(2025, 1, 31), rates={"eur": 0.9}, fetch_date=fetched)
        db.commit()

        data = client.get("/api/exchange-rates/current").json()

        assert data["is_stale"] is True
        assert data["cache_age_seconds"] >= 2 * 24 * 3600 - 5
