"""Shared API helpers for route handlers."""

from typing import Optional, TypeVar

from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from config import EngineConfig, settings
from database import Base, get_db
from services.preference_service import PreferenceService
from utils.query_params import parse_currency

T = TypeVar("T", bound=Base)


def get_or_404(db: Session, model: type[T], entity_id: str, detail: str = "Not found") -> T:
    """Fetch a single entity by primary key or raise 404.

    Args:
        db: Database session.
        model: SQLAlchemy model class.
        entity_id: Primary key value.
        detail: Error message for the 404 response.

    Returns:
        The entity instance.

    Raises:
        HTTPException: 404 if the entity doesn't exist.
    """
    entity = db.query(model).filter(model.id == entity_id).first()
    if not entity:
        raise HTTPException(status_code=404, detail=detail)
    return entity


def resolve_display_currency(db: Session, currency: str | None = None) -> str:
    """Pick the display currency for a request.

    Order: explicit query parameter, stored preference, then
    ``settings.DISPLAY_CURRENCY``.
    """
    explicit = parse_currency(currency)
    if explicit:
        return explicit
    return PreferenceService.get_display_currency(db, settings.DISPLAY_CURRENCY)


def get_engine_config(
    currency: Optional[str] = Query(
        None, description="Display currency (ISO code); defaults to the stored preference"
    ),
    db: Session = Depends(get_db),
) -> EngineConfig:
    """Dependency that builds the explicit configuration for one analytics call."""
    return EngineConfig.from_settings(settings, resolve_display_currency(db, currency))
