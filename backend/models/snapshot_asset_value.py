"""SnapshotAssetValue model - an asset's market value at one snapshot."""

from sqlalchemy import Column, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid


class SnapshotAssetValue(Base):
    """Market value of one asset, in the asset's own currency, at one snapshot.

    Valid only at the owning snapshot's date; nothing is carried forward.
    """

    __tablename__ = "snapshot_asset_values"
    __table_args__ = (
        UniqueConstraint("snapshot_id", "asset_id", name="uix_snapshot_asset"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    snapshot_id = Column(String(36), ForeignKey("snapshots.id"), nullable=False, index=True)
    asset_id = Column(String(36), ForeignKey("assets.id"), nullable=False)
    market_value = Column(Numeric(18, 4), nullable=False)

    # Relationships
    snapshot = relationship("Snapshot", back_populates="asset_values")
    asset = relationship("Asset", back_populates="snapshot_values")
