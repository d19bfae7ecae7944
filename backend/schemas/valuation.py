"""Pydantic schemas for snapshot and valuation endpoints."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SnapshotSummaryResponse(BaseModel):
    """A snapshot's identity and date."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    date: date


class ConvertedAssetValueResponse(BaseModel):
    """An asset value in the display currency."""

    model_config = ConfigDict(from_attributes=True)

    asset_id: str
    asset_name: str
    platform: str
    category_id: Optional[str] = None
    category_name: str
    currency: str
    raw_value: Decimal
    converted_value: Decimal
    is_converted: bool


class CategoryAllocationResponse(BaseModel):
    """Category value and share of the snapshot total."""

    model_config = ConfigDict(from_attributes=True)

    category_id: Optional[str] = None  # None = Uncategorized
    name: str
    value: Decimal
    percentage: Decimal


class PlatformAllocationResponse(BaseModel):
    """Platform value and share of the snapshot total."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    value: Decimal
    percentage: Decimal


class ValuationResponse(BaseModel):
    """Composite valuation of one snapshot."""

    model_config = ConfigDict(from_attributes=True)

    snapshot_id: str
    snapshot_date: date
    display_currency: str
    total_value: Decimal
    assets: list[ConvertedAssetValueResponse]
    categories: list[CategoryAllocationResponse]
    platforms: list[PlatformAllocationResponse]
    unconverted_asset_ids: list[str]
