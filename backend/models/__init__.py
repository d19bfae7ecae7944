"""SQLAlchemy ORM models."""

from .asset import Asset
from .cash_flow_operation import CashFlowOperation
from .category import Category
from .exchange_rate import ExchangeRate
from .snapshot import Snapshot
from .snapshot_asset_value import SnapshotAssetValue
from .user_preference import UserPreference
from .utils import generate_uuid

__all__ = ["Asset", "CashFlowOperation", "Category", "ExchangeRate", "Snapshot", "SnapshotAssetValue", "UserPreference", "generate_uuid"]
