"""Pydantic schemas for the rebalancing endpoint."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from services.rebalancing_service import RebalancingAction


class RebalancingSuggestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: str
    category_name: str
    current_value: Decimal
    current_percentage: Decimal
    target_percentage: Decimal
    target_value: Decimal
    difference: Decimal
    amount: Decimal
    action: RebalancingAction


class NoTargetRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: str
    category_name: str
    current_value: Decimal
    current_percentage: Decimal


class UncategorizedRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_value: Decimal
    current_percentage: Decimal


class TargetSumWarningResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    target_sum: Decimal
    expected: Decimal
    message: str


class TransferResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    from_category: str
    to_category: str
    amount: Decimal


class RebalancingResponse(BaseModel):
    """Rebalancing suggestions for the latest snapshot."""

    model_config = ConfigDict(from_attributes=True)

    display_currency: str
    total_value: Decimal
    suggestions: list[RebalancingSuggestionResponse]
    no_target_rows: list[NoTargetRowResponse]
    uncategorized_row: Optional[UncategorizedRowResponse] = None
    sum_warning: Optional[TargetSumWarningResponse] = None
    transfers: list[TransferResponse]
