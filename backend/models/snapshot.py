"""Snapshot model - a dated record of portfolio state."""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid


class Snapshot(Base):
    """A point-in-time portfolio snapshot, one per calendar day."""

    __tablename__ = "snapshots"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    date = Column(Date, nullable=False, unique=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    asset_values = relationship(
        "SnapshotAssetValue", back_populates="snapshot", cascade="all, delete-orphan"
    )
    cash_flow_operations = relationship(
        "CashFlowOperation", back_populates="snapshot", cascade="all, delete-orphan"
    )
    exchange_rate = relationship(
        "ExchangeRate", back_populates="snapshot", uselist=False, cascade="all, delete-orphan"
    )
