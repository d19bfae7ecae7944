"""Test fixtures and sample data."""
import json
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from models import (
    Asset,
    CashFlowOperation,
    Category,
    ExchangeRate,
    Snapshot,
    SnapshotAssetValue,
)


def create_category(
    db: Session,
    name: str,
    target_percent: Decimal | None = None,
    display_order: int = 0,
) -> Category:
    """Create a category, optionally with a target percentage."""
    category = Category(name=name, target_percent=target_percent, display_order=display_order)
    db.add(category)
    db.flush()
    return category


def create_asset(
    db: Session,
    name: str,
    platform: str = "",
    currency: str = "",
    category: Category | None = None,
) -> Asset:
    """Create an asset. An empty currency inherits the display currency."""
    asset = Asset(
        name=name,
        platform=platform,
        currency=currency,
        category_id=category.id if category else None,
    )
    db.add(asset)
    db.flush()
    return asset


def create_snapshot(
    db: Session,
    snapshot_date: date,
    values: list[tuple[Asset, Decimal]] | None = None,
    cash_flows: list[tuple[str, Decimal]] | None = None,
    rates: dict[str, float] | None = None,
    base_currency: str = "usd",
    fetch_date: datetime | None = None,
) -> Snapshot:
    """Create a snapshot with asset values, cash flows and an optional rate table.

    Args:
        db: Database session
        snapshot_date: Calendar date of the snapshot
        values: List of (asset, market_value) tuples in each asset's currency
        cash_flows: List of (description, amount) tuples; positive = deposit
        rates: Currency code -> units per one unit of base_currency
        base_currency: Base of the rate table
        fetch_date: When the rates were fetched (defaults to now)

    Returns:
        The created Snapshot
    """
    snapshot = Snapshot(date=snapshot_date)
    db.add(snapshot)
    db.flush()

    for asset, market_value in values or []:
        db.add(SnapshotAssetValue(
            snapshot_id=snapshot.id,
            asset_id=asset.id,
            market_value=market_value,
        ))

    for description, amount in cash_flows or []:
        db.add(CashFlowOperation(
            snapshot_id=snapshot.id,
            description=description,
            amount=amount,
        ))

    if rates is not None:
        db.add(ExchangeRate(
            snapshot_id=snapshot.id,
            base_currency=base_currency,
            rates_json=json.dumps(rates),
            fetch_date=fetch_date or datetime.now(timezone.utc),
        ))

    db.flush()
    return snapshot


def create_value_history(
    db: Session,
    asset: Asset,
    history: list[tuple[date, Decimal, Decimal]],
) -> list[Snapshot]:
    """Create one snapshot per (date, value, net_cash_flow) entry for a single asset."""
    snapshots = []
    for snapshot_date, value, flow in history:
        flows = [("Transfer", flow)] if flow != 0 else []
        snapshots.append(create_snapshot(db, snapshot_date, [(asset, value)], flows))
    db.commit()
    return snapshots


@pytest.fixture
def equities(db: Session) -> Category:
    """Create an Equities category targeting 60%."""
    category = create_category(db, "Equities", Decimal("60.00"), display_order=0)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def bonds(db: Session) -> Category:
    """Create a Bonds category targeting 40%."""
    category = create_category(db, "Bonds", Decimal("40.00"), display_order=1)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def usd_asset(db: Session, equities: Category) -> Asset:
    """Create a USD asset in the Equities category."""
    asset = create_asset(db, "Index Fund", platform="Brokerage A", currency="USD", category=equities)
    db.commit()
    db.refresh(asset)
    return asset
