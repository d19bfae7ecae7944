"""Read-only snapshot feed - loads store records into immutable inputs.

The analytics services never touch ORM objects directly. This module is
the single place that queries the store and freezes the results into
plain dataclasses, so every calculation downstream is a pure function of
its arguments.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from models import Asset, Category, Snapshot, SnapshotAssetValue
from services.currency_conversion_service import RateTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetRecord:
    """Asset attributes as seen at load time."""

    id: str
    name: str
    platform: str
    currency: str  # "" = inherits display currency
    category_id: Optional[str]
    category_name: Optional[str]


@dataclass(frozen=True)
class CategoryRecord:
    """Category metadata used for allocation and rebalancing."""

    id: str
    name: str
    target_percent: Optional[Decimal]
    display_order: int = 0


@dataclass(frozen=True)
class AssetValueRecord:
    """One asset's market value (own currency) at one snapshot."""

    asset: AssetRecord
    market_value: Decimal


@dataclass(frozen=True)
class CashFlowRecord:
    """A signed external cash flow (deposit > 0, withdrawal < 0)."""

    description: str
    amount: Decimal
    currency: str = ""


@dataclass(frozen=True)
class SnapshotSummary:
    """Identity and date of a snapshot."""

    id: str
    date: date


@dataclass(frozen=True)
class SnapshotRecord:
    """A snapshot with its direct asset values, cash flows and rates."""

    id: str
    date: date
    asset_values: tuple[AssetValueRecord, ...] = ()
    cash_flows: tuple[CashFlowRecord, ...] = ()
    rate_table: Optional[RateTable] = None


def _asset_record(asset: Asset) -> AssetRecord:
    return AssetRecord(
        id=asset.id,
        name=asset.name,
        platform=asset.platform or "",
        currency=(asset.currency or "").upper(),
        category_id=asset.category_id,
        category_name=asset.category.name if asset.category else None,
    )


def _snapshot_record(snapshot: Snapshot) -> SnapshotRecord:
    rate_table = None
    if snapshot.exchange_rate is not None:
        er = snapshot.exchange_rate
        rate_table = RateTable.from_mapping(
            er.base_currency,
            er.rates,
            fetched_at=er.fetch_date,
            is_fallback=bool(er.is_fallback),
        )

    values = tuple(
        AssetValueRecord(asset=_asset_record(sav.asset), market_value=Decimal(sav.market_value))
        for sav in snapshot.asset_values
        if sav.asset is not None
    )
    flows = tuple(
        CashFlowRecord(
            description=op.description,
            amount=Decimal(op.amount),
            currency=(op.currency or "").upper(),
        )
        for op in snapshot.cash_flow_operations
    )
    return SnapshotRecord(
        id=snapshot.id,
        date=snapshot.date,
        asset_values=values,
        cash_flows=flows,
        rate_table=rate_table,
    )


def _with_children(query):
    return query.options(
        selectinload(Snapshot.asset_values)
        .joinedload(SnapshotAssetValue.asset)
        .joinedload(Asset.category),
        selectinload(Snapshot.cash_flow_operations),
        joinedload(Snapshot.exchange_rate),
    )


class SnapshotFeed:
    """Read-only access to snapshots and categories."""

    @staticmethod
    def list_snapshots(db: Session) -> list[SnapshotSummary]:
        """All snapshots as (id, date), ascending by date."""
        rows = db.query(Snapshot.id, Snapshot.date).order_by(Snapshot.date).all()
        return [SnapshotSummary(id=row[0], date=row[1]) for row in rows]

    @staticmethod
    def get_snapshot(db: Session, snapshot_id: str) -> SnapshotRecord | None:
        """Load a single snapshot, or None if it does not exist."""
        snapshot = _with_children(db.query(Snapshot)).filter(Snapshot.id == snapshot_id).first()
        if snapshot is None:
            return None
        return _snapshot_record(snapshot)

    @staticmethod
    def load_history(db: Session) -> list[SnapshotRecord]:
        """Load every snapshot with its children, ascending by date."""
        snapshots = _with_children(db.query(Snapshot)).order_by(Snapshot.date).all()
        logger.debug("Loaded %d snapshots", len(snapshots))
        return [_snapshot_record(s) for s in snapshots]

    @staticmethod
    def list_categories(db: Session) -> list[CategoryRecord]:
        """All categories ordered by display order, then name."""
        categories = db.query(Category).order_by(Category.display_order, Category.name).all()
        return [
            CategoryRecord(
                id=c.id,
                name=c.name,
                target_percent=Decimal(c.target_percent) if c.target_percent is not None else None,
                display_order=c.display_order or 0,
            )
            for c in categories
        ]
