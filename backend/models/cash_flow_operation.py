"""CashFlowOperation model - external deposits and withdrawals."""

from sqlalchemy import Column, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid


class CashFlowOperation(Base):
    """An external cash movement recorded at a snapshot.

    Positive amounts are deposits, negative amounts withdrawals. The flow
    is treated as happening on the owning snapshot's date.
    """

    __tablename__ = "cash_flow_operations"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    snapshot_id = Column(String(36), ForeignKey("snapshots.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(18, 4), nullable=False)
    currency = Column(String(3), nullable=False, default="")  # "" = display currency

    # Relationships
    snapshot = relationship("Snapshot", back_populates="cash_flow_operations")
