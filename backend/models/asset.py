"""Asset model - a holding tracked across snapshots."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid


class Asset(Base):
    """A tracked asset (e.g. "Index Fund" on "Brokerage A").

    An empty ``currency`` means the asset is denominated in whatever the
    display currency is at valuation time.
    """

    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    platform = Column(String, nullable=False, default="")
    currency = Column(String(3), nullable=False, default="")
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    category = relationship("Category", back_populates="assets")
    snapshot_values = relationship("SnapshotAssetValue", back_populates="asset")
