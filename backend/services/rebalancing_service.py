"""Rebalancing advisor - buy/sell suggestions toward target allocations.

Pure calculation over the latest snapshot's valuation; nothing is written
back to the store.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from config import EngineConfig
from services.snapshot_feed import CategoryRecord, SnapshotFeed
from services.snapshot_valuation_service import (
    CategoryAllocation,
    SnapshotValuationService,
    allocation_percentage,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = Decimal("1.00")
DEFAULT_TARGET_SUM_TOLERANCE = Decimal("0.01")
FULL_ALLOCATION = Decimal("100")


class RebalancingAction(str, Enum):
    """Suggested action for a category."""

    BUY = "buy"
    SELL = "sell"
    NO_ACTION = "no_action"


@dataclass(frozen=True)
class RebalancingSuggestion:
    """Adjustment for a category that has a target percentage."""

    category_id: str
    category_name: str
    current_value: Decimal
    current_percentage: Decimal
    target_percentage: Decimal
    target_value: Decimal
    difference: Decimal  # target_value - current_value; > 0 means buy
    action: RebalancingAction

    @property
    def amount(self) -> Decimal:
        """Absolute amount to buy or sell (0 for no action)."""
        if self.action == RebalancingAction.NO_ACTION:
            return Decimal("0")
        return abs(self.difference)


@dataclass(frozen=True)
class NoTargetRow:
    """Informational row for a category without a target."""

    category_id: str
    category_name: str
    current_value: Decimal
    current_percentage: Decimal


@dataclass(frozen=True)
class UncategorizedRow:
    """Informational row for assets without a category."""

    current_value: Decimal
    current_percentage: Decimal


@dataclass(frozen=True)
class TargetSumWarning:
    """Targets that are set do not add up to 100%."""

    target_sum: Decimal
    expected: Decimal = FULL_ALLOCATION

    @property
    def message(self) -> str:
        return f"Target allocations sum to {self.target_sum}%, expected {self.expected}%"


@dataclass(frozen=True)
class Transfer:
    """Money moved from an overweight category to an underweight one."""

    from_category: str
    to_category: str
    amount: Decimal


@dataclass
class RebalancingResult:
    """Everything the rebalancing screen shows."""

    total_value: Decimal
    suggestions: list[RebalancingSuggestion] = field(default_factory=list)
    no_target_rows: list[NoTargetRow] = field(default_factory=list)
    uncategorized_row: Optional[UncategorizedRow] = None
    sum_warning: Optional[TargetSumWarning] = None
    transfers: list[Transfer] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.suggestions and not self.no_target_rows and self.uncategorized_row is None


def target_sum_warning(
    categories: Sequence[CategoryRecord],
    tolerance: Decimal = DEFAULT_TARGET_SUM_TOLERANCE,
) -> TargetSumWarning | None:
    """Warn when the targets that are set do not sum to 100 (± tolerance).

    Categories without a target are ignored; with no targets set at all
    there is nothing to check.
    """
    targets = [c.target_percent for c in categories if c.target_percent is not None]
    if not targets:
        return None
    total = sum(targets, Decimal("0"))
    if abs(total - FULL_ALLOCATION) > tolerance:
        return TargetSumWarning(target_sum=total)
    return None


def classify(difference: Decimal, threshold: Decimal) -> RebalancingAction:
    """Buy above +threshold, sell below -threshold, otherwise no action."""
    if difference > threshold:
        return RebalancingAction.BUY
    if difference < -threshold:
        return RebalancingAction.SELL
    return RebalancingAction.NO_ACTION


def pair_transfers(
    suggestions: Sequence[RebalancingSuggestion],
    threshold: Decimal = DEFAULT_THRESHOLD,
) -> list[Transfer]:
    """Greedily match sells to buys, largest first.

    Each sell's surplus is spent on buys in order until exhausted; pieces
    smaller than *threshold* are dropped.
    """
    sells = sorted(
        (s for s in suggestions if s.action == RebalancingAction.SELL),
        key=lambda s: (-abs(s.difference), s.category_name.casefold()),
    )
    buys = sorted(
        (s for s in suggestions if s.action == RebalancingAction.BUY),
        key=lambda s: (-s.difference, s.category_name.casefold()),
    )
    if not sells or not buys:
        return []

    sell_remaining = [abs(s.difference) for s in sells]
    buy_remaining = [b.difference for b in buys]

    transfers: list[Transfer] = []
    for i, sell in enumerate(sells):
        for j, buy in enumerate(buys):
            amount = min(sell_remaining[i], buy_remaining[j])
            if amount >= threshold:
                sell_remaining[i] -= amount
                buy_remaining[j] -= amount
                transfers.append(Transfer(
                    from_category=sell.category_name,
                    to_category=buy.category_name,
                    amount=amount,
                ))
    return transfers


def suggest(
    current_allocations: Sequence[CategoryAllocation],
    categories: Sequence[CategoryRecord],
    total_value: Decimal,
    threshold: Decimal = DEFAULT_THRESHOLD,
    tolerance: Decimal = DEFAULT_TARGET_SUM_TOLERANCE,
) -> RebalancingResult:
    """Compute rebalancing suggestions.

    Args:
        current_allocations: Category allocations of the latest snapshot,
            including the Uncategorized bucket (``category_id is None``).
        categories: All categories, with or without targets.
        total_value: Total portfolio value in the display currency.
        threshold: Minimum absolute difference that triggers a buy/sell.
        tolerance: Allowed deviation of the sum of targets from 100.

    Returns:
        Suggestions sorted by descending absolute difference (ties by
        case-insensitive name), informational rows, the optional sum
        warning and paired transfers.
    """
    values_by_id: dict[str, Decimal] = {}
    uncategorized_value = Decimal("0")
    for allocation in current_allocations:
        if allocation.category_id is None:
            uncategorized_value += allocation.value
        else:
            values_by_id[allocation.category_id] = (
                values_by_id.get(allocation.category_id, Decimal("0")) + allocation.value
            )

    suggestions: list[RebalancingSuggestion] = []
    no_target_rows: list[NoTargetRow] = []

    for category in categories:
        current = values_by_id.get(category.id, Decimal("0"))
        current_pct = allocation_percentage(current, total_value)

        if category.target_percent is None:
            no_target_rows.append(NoTargetRow(
                category_id=category.id,
                category_name=category.name,
                current_value=current,
                current_percentage=current_pct,
            ))
            continue

        target_value = category.target_percent / 100 * total_value
        difference = target_value - current
        suggestions.append(RebalancingSuggestion(
            category_id=category.id,
            category_name=category.name,
            current_value=current,
            current_percentage=current_pct,
            target_percentage=category.target_percent,
            target_value=target_value,
            difference=difference,
            action=classify(difference, threshold),
        ))

    suggestions.sort(key=lambda s: (-abs(s.difference), s.category_name.casefold()))
    no_target_rows.sort(key=lambda r: r.category_name.casefold())

    warning = target_sum_warning(categories, tolerance)
    if warning is not None:
        logger.info(warning.message)

    return RebalancingResult(
        total_value=total_value,
        suggestions=suggestions,
        no_target_rows=no_target_rows,
        uncategorized_row=UncategorizedRow(
            current_value=uncategorized_value,
            current_percentage=allocation_percentage(uncategorized_value, total_value),
        ),
        sum_warning=warning,
        transfers=pair_transfers(suggestions, threshold),
    )


class RebalancingService:
    """Runs the rebalancing advisor against the latest snapshot."""

    def __init__(
        self,
        feed: SnapshotFeed | None = None,
        valuation_service: SnapshotValuationService | None = None,
    ):
        self._feed = feed or SnapshotFeed()
        self._valuation_service = valuation_service or SnapshotValuationService(self._feed)

    def rebalancing_suggestions(self, db: Session, config: EngineConfig) -> RebalancingResult:
        """Suggestions for the latest snapshot.

        With no snapshots the portfolio is treated as empty (total 0).
        """
        categories = self._feed.list_categories(db)
        valuation = self._valuation_service.valuate_latest(db, config)

        if valuation is None:
            allocations: list[CategoryAllocation] = []
            total = Decimal("0")
        else:
            allocations = valuation.categories
            total = valuation.total_value

        return suggest(
            allocations,
            categories,
            total,
            threshold=config.rebalance_threshold,
            tolerance=config.target_sum_tolerance,
        )
