"""Dashboard API endpoints."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.helpers import get_engine_config
from config import EngineConfig
from database import get_db
from schemas.performance import (
    DashboardResponse,
    PerformanceSeriesResponse,
    PeriodPerformanceResponse,
)
from services.dashboard_service import DashboardService
from services.performance_service import PerformanceService, performance_series
from services.preference_service import PreferenceService
from utils.periods import period_start
from utils.query_params import parse_periods, validate_date_range

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    periods: Optional[str] = Query(None, description="Comma-separated period codes"),
    config: EngineConfig = Depends(get_engine_config),
    db: Session = Depends(get_db),
):
    """Summary metrics, allocations and history for the whole portfolio."""
    metrics = DashboardService().get_metrics(
        db,
        config,
        financial_goal=PreferenceService.get_financial_goal(db),
        periods=parse_periods(periods),
    )
    return DashboardResponse.model_validate(metrics)


@router.get("/performance", response_model=PerformanceSeriesResponse)
def get_performance(
    start_date: Optional[date] = Query(None, description="Window start (inclusive)"),
    end_date: Optional[date] = Query(None, description="Window end (inclusive)"),
    range_code: Optional[str] = Query(
        None,
        alias="range",
        description="Period code (e.g. '1Y') anchored at the latest snapshot",
    ),
    config: EngineConfig = Depends(get_engine_config),
    db: Session = Depends(get_db),
):
    """Growth, Modified Dietz return, cumulative TWR and CAGR for a window.

    ``range`` takes precedence over ``start_date``/``end_date``. Metrics are
    null when fewer than two snapshots fall in the window.
    """
    codes = parse_periods(range_code)
    validate_date_range(start_date, end_date)

    points = PerformanceService().load_points(db, config)
    if codes and points:
        end_date = points[-1].date
        start_date = period_start(codes[0], end_date, points[0].date)

    series = performance_series(points, start_date, end_date)
    logger.info(
        "Performance requested: %s..%s in %s",
        series.start_date,
        series.end_date,
        config.display_currency,
    )
    return PerformanceSeriesResponse.model_validate(series)


@router.get("/periods", response_model=list[PeriodPerformanceResponse])
def get_period_performance(
    periods: Optional[str] = Query(
        "1M,3M,1Y", description="Comma-separated period codes",
    ),
    config: EngineConfig = Depends(get_engine_config),
    db: Session = Depends(get_db),
):
    """Performance for each look-back period ending at the latest snapshot."""
    results = PerformanceService().period_performance(db, config, parse_periods(periods))
    return [PeriodPerformanceResponse.model_validate(r) for r in results]
