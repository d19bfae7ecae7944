"""Pydantic schemas for performance and dashboard endpoints."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.valuation import CategoryAllocationResponse


class PerformancePointResponse(BaseModel):
    """A snapshot in a performance series."""

    model_config = ConfigDict(from_attributes=True)

    date: date
    total_value: Decimal
    net_cash_flow: Decimal
    sub_period_return: Optional[Decimal] = None
    cumulative_twr: Optional[Decimal] = None


class PerformanceSeriesResponse(BaseModel):
    """Window metrics; rates are fractions (0.1 = 10%), None = not available."""

    model_config = ConfigDict(from_attributes=True)

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    growth_rate: Optional[Decimal] = None
    return_rate: Optional[Decimal] = None
    cumulative_twr: Optional[Decimal] = None
    cagr: Optional[Decimal] = None
    money_weighted_return: Optional[Decimal] = None
    undefined_sub_periods: int = 0
    has_sufficient_data: bool
    points: list[PerformancePointResponse]


class PeriodPerformanceResponse(BaseModel):
    """Metrics for a look-back period ending at the latest snapshot."""

    model_config = ConfigDict(from_attributes=True)

    period: str  # "1M", "3M", "1Y", ...
    start_date: date
    end_date: date
    begin_snapshot_date: Optional[date] = None
    end_snapshot_date: Optional[date] = None
    growth_rate: Optional[Decimal] = None
    return_rate: Optional[Decimal] = None
    cumulative_twr: Optional[Decimal] = None
    cagr: Optional[Decimal] = None
    money_weighted_return: Optional[Decimal] = None
    has_sufficient_data: bool


class ValuePointResponse(BaseModel):
    """A single date/value data point."""

    model_config = ConfigDict(from_attributes=True)

    date: date
    value: Decimal


class RecentSnapshotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    snapshot_id: str
    date: date
    total_value: Decimal
    asset_count: int


class GoalProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    goal: Optional[Decimal] = None
    achievement_rate: Decimal
    distance_to_goal: Decimal
    is_reached: bool


class DashboardResponse(BaseModel):
    """Dashboard summary for the whole history."""

    model_config = ConfigDict(from_attributes=True)

    display_currency: str
    is_empty: bool
    total_value: Decimal
    latest_snapshot_date: Optional[date] = None
    asset_count: int
    cumulative_twr: Optional[Decimal] = None
    cagr: Optional[Decimal] = None
    periods: list[PeriodPerformanceResponse]
    category_allocations: list[CategoryAllocationResponse]
    value_history: list[ValuePointResponse]
    twr_history: list[ValuePointResponse]
    category_value_history: dict[str, list[ValuePointResponse]]
    recent_snapshots: list[RecentSnapshotResponse]
    unconverted_asset_ids: list[str]
    goal: Optional[GoalProgressResponse] = None
