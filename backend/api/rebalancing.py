"""Rebalancing API endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.helpers import get_engine_config
from config import EngineConfig
from database import get_db
from schemas.rebalancing import (
    NoTargetRowResponse,
    RebalancingResponse,
    RebalancingSuggestionResponse,
    TargetSumWarningResponse,
    TransferResponse,
    UncategorizedRowResponse,
)
from services.rebalancing_service import RebalancingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rebalancing", tags=["rebalancing"])


@router.get("", response_model=RebalancingResponse)
def get_rebalancing(
    config: EngineConfig = Depends(get_engine_config),
    db: Session = Depends(get_db),
):
    """Buy/sell suggestions moving the latest snapshot toward category targets.

    A target-sum warning does not block the suggestions.
    """
    result = RebalancingService().rebalancing_suggestions(db, config)

    return RebalancingResponse(
        display_currency=config.display_currency,
        total_value=result.total_value,
        suggestions=[RebalancingSuggestionResponse.model_validate(s) for s in result.suggestions],
        no_target_rows=[NoTargetRowResponse.model_validate(r) for r in result.no_target_rows],
        uncategorized_row=(
            UncategorizedRowResponse.model_validate(result.uncategorized_row)
            if result.uncategorized_row else None
        ),
        sum_warning=(
            TargetSumWarningResponse.model_validate(result.sum_warning)
            if result.sum_warning else None
        ),
        transfers=[TransferResponse.model_validate(t) for t in result.transfers],
    )
