"""Dashboard service - summary metrics across the whole snapshot history."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from config import EngineConfig
from services.goal_progress import GoalProgress, goal_progress
from services.performance_service import (
    PeriodPerformance,
    SnapshotPoint,
    period_performance,
    performance_series,
    snapshot_point,
)
from services.snapshot_feed import SnapshotFeed
from services.snapshot_valuation_service import CategoryAllocation, valuate
from utils.periods import DEFAULT_PERIODS

logger = logging.getLogger(__name__)

RECENT_SNAPSHOT_COUNT = 5


@dataclass(frozen=True)
class ValuePoint:
    date: date
    value: Decimal


@dataclass(frozen=True)
class RecentSnapshot:
    snapshot_id: str
    date: date
    total_value: Decimal
    asset_count: int


@dataclass
class DashboardMetrics:
    """Everything the dashboard shows, in one display currency."""

    display_currency: str
    is_empty: bool = True
    total_value: Decimal = Decimal("0")
    latest_snapshot_date: Optional[date] = None
    asset_count: int = 0
    cumulative_twr: Optional[Decimal] = None
    cagr: Optional[Decimal] = None
    periods: list[PeriodPerformance] = field(default_factory=list)
    category_allocations: list[CategoryAllocation] = field(default_factory=list)
    value_history: list[ValuePoint] = field(default_factory=list)
    twr_history: list[ValuePoint] = field(default_factory=list)
    category_value_history: dict[str, list[ValuePoint]] = field(default_factory=dict)
    recent_snapshots: list[RecentSnapshot] = field(default_factory=list)
    unconverted_asset_ids: list[str] = field(default_factory=list)
    goal: Optional[GoalProgress] = None


class DashboardService:
    """Builds dashboard metrics from the snapshot history."""

    def __init__(self, feed: SnapshotFeed | None = None):
        self._feed = feed or SnapshotFeed()

    def get_metrics(
        self,
        db: Session,
        config: EngineConfig,
        financial_goal: Decimal | None = None,
        periods: list[str] | None = None,
    ) -> DashboardMetrics:
        currency = config.display_currency
        metrics = DashboardMetrics(display_currency=currency)

        history = self._feed.load_history(db)
        if not history:
            metrics.goal = goal_progress(Decimal("0"), financial_goal)
            return metrics

        # Value each snapshot once and reuse the result everywhere below
        valuations = [valuate(s, currency) for s in history]
        points: list[SnapshotPoint] = [
            snapshot_point(s, v, currency) for s, v in zip(history, valuations)
        ]
        latest = valuations[-1]

        metrics.is_empty = False
        metrics.total_value = latest.total_value
        metrics.latest_snapshot_date = latest.snapshot_date
        metrics.asset_count = latest.asset_count
        metrics.category_allocations = latest.categories
        metrics.unconverted_asset_ids = latest.unconverted_asset_ids

        series = performance_series(points)
        metrics.cumulative_twr = series.cumulative_twr
        metrics.cagr = series.cagr
        metrics.twr_history = [
            ValuePoint(date=p.date, value=p.cumulative_twr)
            for p in series.points
            if p.cumulative_twr is not None
        ]
        metrics.periods = period_performance(points, periods or DEFAULT_PERIODS)

        metrics.value_history = [ValuePoint(date=p.date, value=p.total_value) for p in points]

        category_history: dict[str, list[ValuePoint]] = defaultdict(list)
        for valuation in valuations:
            for allocation in valuation.categories:
                category_history[allocation.name].append(
                    ValuePoint(date=valuation.snapshot_date, value=allocation.value)
                )
        metrics.category_value_history = dict(category_history)

        metrics.recent_snapshots = [
            RecentSnapshot(
                snapshot_id=v.snapshot_id,
                date=v.snapshot_date,
                total_value=v.total_value,
                asset_count=v.asset_count,
            )
            for v in reversed(valuations[-RECENT_SNAPSHOT_COUNT:])
        ]

        metrics.goal = goal_progress(latest.total_value, financial_goal)

        logger.debug(
            "Dashboard metrics: %d snapshots, total=%s %s",
            len(history),
            metrics.total_value,
            currency,
        )
        return metrics
