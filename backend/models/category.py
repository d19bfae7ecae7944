"""Category model - user-defined allocation buckets for assets."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid


class Category(Base):
    """A named allocation bucket with an optional target percentage."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False, unique=True)  # unique case-insensitively, enforced by the management layer
    target_percent = Column(Numeric(5, 2), nullable=True)  # 0-100, NULL = no target
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    assets = relationship("Asset", back_populates="category")
