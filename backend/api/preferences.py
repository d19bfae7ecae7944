"""Preferences API endpoints."""

import json
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.user_preference import UserPreference
from schemas.preference import PreferenceResponse, PreferenceSet
from services.preference_service import (
    DISPLAY_CURRENCY_KEY,
    FINANCIAL_GOAL_KEY,
    PreferenceService,
)
from utils.query_params import parse_currency

router = APIRouter(prefix="/api/preferences", tags=["preferences"])

# Namespaced key: dot-separated segments starting with a lowercase letter,
# e.g. "display.currency", "goals.financialGoal"
_KEY_PATTERN = re.compile(r"^[a-z][a-z0-9]*(\.[a-zA-Z][a-zA-Z0-9_]*)+$")
_KEY_MAX_LENGTH = 128


def _validate_key(key: str) -> None:
    """Validate preference key format. Raises HTTPException on invalid keys."""
    if len(key) > _KEY_MAX_LENGTH:
        raise HTTPException(
            status_code=422,
            detail=f"Preference key must be at most {_KEY_MAX_LENGTH} characters",
        )
    if not _KEY_PATTERN.match(key):
        raise HTTPException(
            status_code=422,
            detail="Preference key must be a dot-namespaced identifier "
            "(e.g. 'display.currency')",
        )


def _normalize_value(key: str, value: Any) -> Any:
    """Check and normalize values of the keys the analytics read."""
    if key == DISPLAY_CURRENCY_KEY:
        if not isinstance(value, str):
            raise HTTPException(status_code=422, detail="display.currency must be a string")
        try:
            return parse_currency(value)
        except HTTPException as exc:
            raise HTTPException(status_code=422, detail=exc.detail) from exc
    if key == FINANCIAL_GOAL_KEY and value is not None:
        if isinstance(value, bool):
            raise HTTPException(status_code=422, detail="goals.financialGoal must be a number")
        try:
            goal = Decimal(str(value))
        except InvalidOperation as exc:
            raise HTTPException(
                status_code=422, detail="goals.financialGoal must be a number"
            ) from exc
        if not goal.is_finite():
            raise HTTPException(
                status_code=422, detail="goals.financialGoal must be a finite number"
            )
        if goal < 0:
            raise HTTPException(status_code=422, detail="goals.financialGoal must not be negative")
    return value


def _to_response(pref: UserPreference) -> PreferenceResponse:
    """Convert a UserPreference record to a PreferenceResponse."""
    return PreferenceResponse(
        key=pref.key,
        value=json.loads(pref.value),
        updated_at=pref.updated_at,
    )


@router.get("", response_model=dict[str, Any])
def list_preferences(db: Session = Depends(get_db)):
    """Get all preferences as a flat {key: value} dict."""
    return PreferenceService.get_all(db)


@router.get("/{key:path}", response_model=PreferenceResponse)
def get_preference(key: str, db: Session = Depends(get_db)):
    """Get a single preference with metadata."""
    _validate_key(key)
    pref = PreferenceService.get_record(db, key)
    if pref is None:
        raise HTTPException(status_code=404, detail=f"Preference '{key}' not found")
    return _to_response(pref)


@router.put("/{key:path}", response_model=PreferenceResponse)
def set_preference(key: str, body: PreferenceSet, db: Session = Depends(get_db)):
    """Create or update a preference (idempotent upsert).

    ``display.currency`` must be a three-letter code and is stored upper
    case; ``goals.financialGoal`` must be a non-negative number.
    """
    _validate_key(key)
    value = _normalize_value(key, body.value)
    pref = PreferenceService.set(db, key, value)
    return _to_response(pref)


@router.delete("/{key:path}", status_code=204)
def delete_preference(key: str, db: Session = Depends(get_db)):
    """Delete a preference by key."""
    _validate_key(key)
    deleted = PreferenceService.delete(db, key)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Preference '{key}' not found")
