"""Snapshot API endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.helpers import get_engine_config, get_or_404
from config import EngineConfig
from database import get_db
from models import Snapshot
from schemas.valuation import SnapshotSummaryResponse, ValuationResponse
from services.snapshot_feed import SnapshotFeed
from services.snapshot_valuation_service import SnapshotValuationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/snapshots", tags=["snapshots"])


@router.get("", response_model=list[SnapshotSummaryResponse])
def list_snapshots(db: Session = Depends(get_db)):
    """List all snapshots, oldest first."""
    return SnapshotFeed.list_snapshots(db)


@router.get("/{snapshot_id}/valuation", response_model=ValuationResponse)
def get_snapshot_valuation(
    snapshot_id: str,
    config: EngineConfig = Depends(get_engine_config),
    db: Session = Depends(get_db),
):
    """Total value and category/platform allocation of one snapshot.

    Assets whose currency could not be converted are included at their
    raw value and listed in ``unconverted_asset_ids``.
    """
    get_or_404(db, Snapshot, snapshot_id, "Snapshot not found")
    result = SnapshotValuationService().valuate_snapshot(db, snapshot_id, config)
    return ValuationResponse.model_validate(result)
