"""Snapshot valuation - total value and allocation breakdown of one snapshot."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from config import EngineConfig
from services.currency_conversion_service import convert, effective_currency
from services.snapshot_feed import SnapshotFeed, SnapshotRecord

logger = logging.getLogger(__name__)

UNCATEGORIZED_NAME = "Uncategorized"


@dataclass(frozen=True)
class ConvertedAssetValue:
    """An asset value expressed in the display currency."""

    asset_id: str
    asset_name: str
    platform: str
    category_id: Optional[str]
    category_name: str
    currency: str  # effective currency of the raw value
    raw_value: Decimal
    converted_value: Decimal
    is_converted: bool  # False = raw value used because no rate was available


@dataclass(frozen=True)
class CategoryAllocation:
    """Value and share of a category (or the Uncategorized bucket)."""

    category_id: Optional[str]  # None = Uncategorized
    name: str
    value: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class PlatformAllocation:
    """Value and share of a platform."""

    name: str
    value: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class ValuationResult:
    """Composite valuation of a single snapshot."""

    snapshot_id: str
    snapshot_date: date
    display_currency: str
    total_value: Decimal
    assets: list[ConvertedAssetValue] = field(default_factory=list)
    categories: list[CategoryAllocation] = field(default_factory=list)
    platforms: list[PlatformAllocation] = field(default_factory=list)
    unconverted_asset_ids: list[str] = field(default_factory=list)

    @property
    def asset_count(self) -> int:
        return len(self.assets)

    @property
    def uncategorized(self) -> CategoryAllocation | None:
        for allocation in self.categories:
            if allocation.category_id is None:
                return allocation
        return None


def allocation_percentage(value: Decimal, total_value: Decimal) -> Decimal:
    """``value / total * 100``, or 0 when the total is zero."""
    if total_value == 0:
        return Decimal("0")
    return value / total_value * 100


def convert_asset_values(
    snapshot: SnapshotRecord, display_currency: str
) -> list[ConvertedAssetValue]:
    """Convert every direct asset value of *snapshot* to *display_currency*.

    Uses only the snapshot's own rate table. When a conversion is
    unavailable the raw value is kept and flagged.
    """
    converted: list[ConvertedAssetValue] = []
    for av in snapshot.asset_values:
        asset = av.asset
        currency = effective_currency(asset.currency, display_currency)
        value = convert(av.market_value, currency, display_currency, snapshot.rate_table)
        is_converted = value is not None
        if not is_converted:
            logger.warning(
                "No exchange rate %s->%s for asset %s on snapshot %s; using raw value",
                currency,
                display_currency,
                asset.name,
                snapshot.date,
            )
            value = av.market_value

        converted.append(ConvertedAssetValue(
            asset_id=asset.id,
            asset_name=asset.name,
            platform=asset.platform,
            category_id=asset.category_id,
            category_name=asset.category_name if asset.category_id else UNCATEGORIZED_NAME,
            currency=currency,
            raw_value=av.market_value,
            converted_value=value,
            is_converted=is_converted,
        ))
    return converted


def net_cash_flow(snapshot: SnapshotRecord, display_currency: str) -> Decimal:
    """Sum of the snapshot's cash flows in the display currency.

    Flows that cannot be converted contribute their raw amount.
    """
    total = Decimal("0")
    for flow in snapshot.cash_flows:
        currency = effective_currency(flow.currency, display_currency)
        amount = convert(flow.amount, currency, display_currency, snapshot.rate_table)
        if amount is None:
            logger.warning(
                "No exchange rate %s->%s for cash flow '%s' on snapshot %s; using raw amount",
                currency,
                display_currency,
                flow.description,
                snapshot.date,
            )
            amount = flow.amount
        total += amount
    return total


def valuate(snapshot: SnapshotRecord, display_currency: str) -> ValuationResult:
    """Compute total value and category/platform allocations of *snapshot*.

    Only the snapshot's direct asset values count; categories or platforms
    missing from it contribute nothing.
    """
    assets = convert_asset_values(snapshot, display_currency)
    total_value = sum((a.converted_value for a in assets), Decimal("0"))

    by_category: dict[Optional[str], Decimal] = defaultdict(Decimal)
    category_names: dict[Optional[str], str] = {}
    by_platform: dict[str, Decimal] = defaultdict(Decimal)
    unconverted: list[str] = []

    for a in assets:
        by_category[a.category_id] += a.converted_value
        category_names[a.category_id] = a.category_name
        if a.platform:
            by_platform[a.platform] += a.converted_value
        if not a.is_converted and a.asset_id not in unconverted:
            unconverted.append(a.asset_id)

    categories = [
        CategoryAllocation(
            category_id=category_id,
            name=category_names[category_id],
            value=value,
            percentage=allocation_percentage(value, total_value),
        )
        for category_id, value in by_category.items()
    ]
    categories.sort(key=lambda c: (-c.value, c.name.casefold()))

    platforms = [
        PlatformAllocation(
            name=name,
            value=value,
            percentage=allocation_percentage(value, total_value),
        )
        for name, value in by_platform.items()
    ]
    platforms.sort(key=lambda p: (-p.value, p.name.casefold()))

    return ValuationResult(
        snapshot_id=snapshot.id,
        snapshot_date=snapshot.date,
        display_currency=display_currency,
        total_value=total_value,
        assets=assets,
        categories=categories,
        platforms=platforms,
        unconverted_asset_ids=unconverted,
    )


class SnapshotValuationService:
    """Values snapshots loaded from the store."""

    def __init__(self, feed: SnapshotFeed | None = None):
        self._feed = feed or SnapshotFeed()

    def valuate_snapshot(
        self, db: Session, snapshot_id: str, config: EngineConfig
    ) -> ValuationResult | None:
        """Value one snapshot, or return None if it does not exist."""
        snapshot = self._feed.get_snapshot(db, snapshot_id)
        if snapshot is None:
            return None
        result = valuate(snapshot, config.display_currency)
        if result.unconverted_asset_ids:
            logger.info(
                "Snapshot %s valued with %d unconverted assets",
                snapshot.date,
                len(result.unconverted_asset_ids),
            )
        return result

    def valuate_latest(self, db: Session, config: EngineConfig) -> ValuationResult | None:
        """Value the most recent snapshot, or return None if there are none."""
        summaries = self._feed.list_snapshots(db)
        if not summaries:
            return None
        return self.valuate_snapshot(db, summaries[-1].id, config)
