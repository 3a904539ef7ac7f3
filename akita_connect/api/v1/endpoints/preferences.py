"""Notification preference endpoints for the settings screen."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from akita_connect.api import deps
from akita_connect.db.models.user import User
from akita_connect.schemas import NotificationPreferenceRead, NotificationPreferenceUpdate
from akita_connect.services.preferences import PreferenceService

router = APIRouter(prefix="/notification-preferences", tags=["preferences"])


@router.get("", response_model=NotificationPreferenceRead)
def read_preferences(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> NotificationPreferenceRead:
    """Return the user's email opt-ins; everything is on until changed."""

    return PreferenceService(db).read(current_user.id)


@router.put("", response_model=NotificationPreferenceRead)
def update_preferences(
    payload: NotificationPreferenceUpdate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> NotificationPreferenceRead:
    preference = PreferenceService(db).update(current_user.id, payload)
    return NotificationPreferenceRead.model_validate(preference)
