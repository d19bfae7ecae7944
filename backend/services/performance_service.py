"""Performance analytics over the ordered snapshot history.

Computes growth rate, Modified Dietz return, chained time-weighted return
(TWR), CAGR and a holding-period IRR. Every metric that needs two
snapshots returns ``None`` ("not available") when the window holds fewer;
nothing in here raises for sparse or zero-valued histories.

Cash flows are attached to snapshots, and a snapshot's flows are taken to
land on that snapshot's date, i.e. at the *end* of the sub-period that
finishes there.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import numpy as np
from sqlalchemy.orm import Session

from config import EngineConfig
from services.snapshot_feed import SnapshotFeed, SnapshotRecord
from services.snapshot_valuation_service import ValuationResult, net_cash_flow, valuate
from utils.periods import DEFAULT_PERIODS, period_start

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = Decimal("365")


@dataclass(frozen=True)
class SnapshotPoint:
    """Total value and net external cash flow at one snapshot."""

    snapshot_id: str
    date: date
    total_value: Decimal
    net_cash_flow: Decimal = Decimal("0")


@dataclass(frozen=True)
class SubPeriodReturn:
    """Return between two consecutive snapshots.

    ``rate`` is None when the opening value is not positive; such a
    sub-period contributes 0 to chained TWR.
    """

    start_date: date
    end_date: date
    rate: Optional[Decimal]


@dataclass(frozen=True)
class ResolvedWindow:
    """The snapshots that bound (and fall inside) a date window."""

    begin: SnapshotPoint
    end: SnapshotPoint
    points: tuple[SnapshotPoint, ...]

    @property
    def total_days(self) -> int:
        return (self.end.date - self.begin.date).days


@dataclass
class PerformancePoint:
    """One snapshot in a performance series."""

    date: date
    total_value: Decimal
    net_cash_flow: Decimal
    sub_period_return: Optional[Decimal] = None
    cumulative_twr: Optional[Decimal] = None


@dataclass
class PerformanceSeries:
    """Metrics and per-snapshot points for a date window."""

    start_date: Optional[date]
    end_date: Optional[date]
    growth_rate: Optional[Decimal] = None
    return_rate: Optional[Decimal] = None
    cumulative_twr: Optional[Decimal] = None
    cagr: Optional[Decimal] = None
    money_weighted_return: Optional[Decimal] = None
    undefined_sub_periods: int = 0
    points: list[PerformancePoint] = field(default_factory=list)

    @property
    def has_sufficient_data(self) -> bool:
        return self.cumulative_twr is not None


@dataclass
class PeriodPerformance:
    """Metrics for a named look-back period ending at the latest snapshot."""

    period: str
    start_date: date
    end_date: date
    begin_snapshot_date: Optional[date]
    end_snapshot_date: Optional[date]
    growth_rate: Optional[Decimal]
    return_rate: Optional[Decimal]
    cumulative_twr: Optional[Decimal]
    cagr: Optional[Decimal]
    money_weighted_return: Optional[Decimal]
    has_sufficient_data: bool


# ------------------------------------------------------------------
# Formulas
# ------------------------------------------------------------------

def growth_rate(begin_value: Decimal, end_value: Decimal) -> Decimal | None:
    """Simple change ``(end - begin) / begin``, cash flows included.

    None when the beginning value is zero or negative.
    """
    if begin_value <= 0:
        return None
    return (end_value - begin_value) / begin_value


def modified_dietz_return(
    begin_value: Decimal,
    end_value: Decimal,
    cash_flows: Sequence[tuple[Decimal, int]],
    total_days: int,
) -> Decimal | None:
    """Modified Dietz return ``(EMV - BMV - CF) / (BMV + sum(w_i * CF_i))``.

    Args:
        begin_value: Value at the start of the window (BMV).
        end_value: Value at the end of the window (EMV).
        cash_flows: ``(amount, days_since_start)`` pairs; a flow on the last
            day has weight 0, one on the first day weight 1.
        total_days: Calendar days in the window.

    Returns:
        The return as a fraction, or None when the window is empty or the
        beginning value / weighted denominator is not positive.
    """
    if begin_value <= 0 or total_days <= 0:
        return None

    days = Decimal(total_days)
    total_flow = sum((amount for amount, _ in cash_flows), Decimal("0"))
    weighted_flow = sum(
        (Decimal(total_days - since) / days * amount for amount, since in cash_flows),
        Decimal("0"),
    )

    denominator = begin_value + weighted_flow
    if denominator <= 0:
        return None
    return (end_value - begin_value - total_flow) / denominator


def sub_period_returns(points: Sequence[SnapshotPoint]) -> list[SubPeriodReturn]:
    """``R_i = (V_i - V_{i-1} - CF_i) / V_{i-1}`` for each consecutive pair."""
    returns: list[SubPeriodReturn] = []
    for prev, cur in zip(points, points[1:]):
        rate = None
        if prev.total_value > 0:
            rate = (cur.total_value - prev.total_value - cur.net_cash_flow) / prev.total_value
        else:
            logger.debug(
                "Sub-period %s -> %s has non-positive opening value; treated as 0",
                prev.date,
                cur.date,
            )
        returns.append(SubPeriodReturn(start_date=prev.date, end_date=cur.date, rate=rate))
    return returns


def cumulative_twr(returns: Iterable[Decimal | None]) -> Decimal:
    """Chain returns: ``prod(1 + r_i) - 1``. Undefined returns count as 0."""
    product = Decimal("1")
    for r in returns:
        if r is not None:
            product *= 1 + r
    return product - 1


def cagr(begin_value: Decimal, end_value: Decimal, days: int) -> Decimal | None:
    """Annualized growth ``(end / begin) ** (365 / days) - 1``, cash flows included.

    None when no time has elapsed, the beginning value is not positive,
    or the ending value is negative.
    """
    if days <= 0 or begin_value <= 0 or end_value < 0:
        return None
    ratio = end_value / begin_value
    if ratio == 0:
        return Decimal("-1")
    return ratio ** (DAYS_PER_YEAR / Decimal(days)) - 1


def money_weighted_return(window: ResolvedWindow) -> Decimal | None:
    """Holding-period IRR over *window* (not annualized).

    The opening value is an investment at t=0, each later snapshot's net
    flow an investment at its fraction of the window, and the closing
    value a withdrawal at t=1.
    """
    total_days = window.total_days
    if total_days <= 0 or window.begin.total_value <= 0:
        return None

    flows: list[tuple[float, float]] = [(0.0, -float(window.begin.total_value))]
    for p in window.points[1:]:
        if p.net_cash_flow != 0:
            t = (p.date - window.begin.date).days / total_days
            flows.append((t, -float(p.net_cash_flow)))
    flows.append((1.0, float(window.end.total_value)))

    times = np.array([f[0] for f in flows])
    amounts = np.array([f[1] for f in flows])

    rate = _newton_raphson_irr(times, amounts)
    if rate is None:
        return None
    return Decimal(str(round(rate, 8)))


def resolve_window(
    points: Sequence[SnapshotPoint], begin_date: date, end_date: date
) -> ResolvedWindow | None:
    """Pick the first snapshot on/after *begin_date* and the last on/before *end_date*.

    Returns None when fewer than two snapshots fall in the window.
    """
    inside = tuple(p for p in points if begin_date <= p.date <= end_date)
    if len(inside) < 2:
        return None
    return ResolvedWindow(begin=inside[0], end=inside[-1], points=inside)


# ------------------------------------------------------------------
# Series builders
# ------------------------------------------------------------------

def snapshot_point(
    snapshot: SnapshotRecord, valuation: ValuationResult, display_currency: str
) -> SnapshotPoint:
    """Pair a snapshot's valuation with its converted net cash flow."""
    return SnapshotPoint(
        snapshot_id=snapshot.id,
        date=snapshot.date,
        total_value=valuation.total_value,
        net_cash_flow=net_cash_flow(snapshot, display_currency),
    )


def build_points(
    history: Sequence[SnapshotRecord], display_currency: str
) -> list[SnapshotPoint]:
    """Value every snapshot once, in date order."""
    ordered = sorted(history, key=lambda s: s.date)
    return [
        snapshot_point(s, valuate(s, display_currency), display_currency)
        for s in ordered
    ]


def performance_series(
    points: Sequence[SnapshotPoint],
    start_date: date | None = None,
    end_date: date | None = None,
) -> PerformanceSeries:
    """Compute window metrics and per-snapshot TWR for ``[start_date, end_date]``.

    Missing bounds default to the first / last snapshot. TWR restarts at 0
    on the first snapshot in the window.
    """
    if not points:
        return PerformanceSeries(start_date=start_date, end_date=end_date)

    start = start_date or points[0].date
    end = end_date or points[-1].date
    inside = [p for p in points if start <= p.date <= end]
    series = PerformanceSeries(start_date=start, end_date=end)

    window = resolve_window(points, start, end)
    if window is None:
        series.points = [
            PerformancePoint(date=p.date, total_value=p.total_value, net_cash_flow=p.net_cash_flow)
            for p in inside
        ]
        return series

    sub_returns = sub_period_returns(window.points)
    series.points.append(PerformancePoint(
        date=window.begin.date,
        total_value=window.begin.total_value,
        net_cash_flow=window.begin.net_cash_flow,
        cumulative_twr=Decimal("0"),
    ))
    product = Decimal("1")
    for p, sub in zip(window.points[1:], sub_returns):
        if sub.rate is not None:
            product *= 1 + sub.rate
        series.points.append(PerformancePoint(
            date=p.date,
            total_value=p.total_value,
            net_cash_flow=p.net_cash_flow,
            sub_period_return=sub.rate,
            cumulative_twr=product - 1,
        ))

    cash_flows = [
        (p.net_cash_flow, (p.date - window.begin.date).days)
        for p in window.points[1:]
        if p.net_cash_flow != 0
    ]

    series.growth_rate = growth_rate(window.begin.total_value, window.end.total_value)
    series.return_rate = modified_dietz_return(
        window.begin.total_value, window.end.total_value, cash_flows, window.total_days,
    )
    series.cumulative_twr = cumulative_twr(s.rate for s in sub_returns)
    series.cagr = cagr(window.begin.total_value, window.end.total_value, window.total_days)
    series.money_weighted_return = money_weighted_return(window)
    series.undefined_sub_periods = sum(1 for s in sub_returns if s.rate is None)
    return series


def period_performance(
    points: Sequence[SnapshotPoint], periods: Sequence[str] | None = None
) -> list[PeriodPerformance]:
    """Metrics for each look-back period, anchored at the latest snapshot.

    Unknown period codes are skipped with a warning. With no snapshots at
    all the result is empty.
    """
    if not points:
        return []

    latest = points[-1].date
    first = points[0].date
    results: list[PeriodPerformance] = []
    for period in periods or DEFAULT_PERIODS:
        try:
            start = period_start(period, latest, first)
        except ValueError:
            logger.warning("Unknown period %s, skipping", period)
            continue

        series = performance_series(points, start, latest)
        window_points = [p for p in series.points if p.cumulative_twr is not None]
        results.append(PeriodPerformance(
            period=period.upper(),
            start_date=start,
            end_date=latest,
            begin_snapshot_date=window_points[0].date if window_points else None,
            end_snapshot_date=window_points[-1].date if window_points else None,
            growth_rate=series.growth_rate,
            return_rate=series.return_rate,
            cumulative_twr=series.cumulative_twr,
            cagr=series.cagr,
            money_weighted_return=series.money_weighted_return,
            has_sufficient_data=series.has_sufficient_data,
        ))
    return results


class PerformanceService:
    """Loads the snapshot history and runs the performance calculations."""

    def __init__(self, feed: SnapshotFeed | None = None):
        self._feed = feed or SnapshotFeed()

    def load_points(self, db: Session, config: EngineConfig) -> list[SnapshotPoint]:
        """Value every stored snapshot in the configured display currency."""
        history = self._feed.load_history(db)
        return build_points(history, config.display_currency)

    def performance_series(
        self,
        db: Session,
        config: EngineConfig,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> PerformanceSeries:
        points = self.load_points(db, config)
        series = performance_series(points, start_date, end_date)
        if series.undefined_sub_periods:
            logger.info(
                "Performance series %s..%s: %d sub-periods without a defined return",
                series.start_date,
                series.end_date,
                series.undefined_sub_periods,
            )
        return series

    def period_performance(
        self,
        db: Session,
        config: EngineConfig,
        periods: Sequence[str] | None = None,
    ) -> list[PeriodPerformance]:
        points = self.load_points(db, config)
        return period_performance(points, periods)


def _newton_raphson_irr(
    times: np.ndarray,
    amounts: np.ndarray,
    guess: float = 0.1,
    max_iter: int = 100,
    tol: float = 1e-8,
) -> float | None:
    """Solve for r such that ``sum(amounts[i] / (1+r)^times[i]) = 0``."""
    rate = guess

    for _ in range(max_iter):
        denom = (1 + rate) ** times
        if np.any(denom == 0):
            return None

        npv = np.sum(amounts / denom)
        d_npv = np.sum(-times * amounts / ((1 + rate) ** (times + 1)))

        if abs(d_npv) < 1e-14:
            return None

        new_rate = rate - npv / d_npv

        # Guard against divergence
        if new_rate <= -1:
            new_rate = -0.99

        if abs(new_rate - rate) < tol:
            return float(new_rate)

        rate = new_rate

    logger.debug("IRR Newton-Raphson did not converge after %d iterations", max_iter)
    return None
