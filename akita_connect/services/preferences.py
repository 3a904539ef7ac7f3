"""Service layer for notification preferences."""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.orm import Session

from akita_connect.db.models.notification_preference import NotificationPreference
from akita_connect.schemas.preferences import (
    NotificationPreferenceRead,
    NotificationPreferenceUpdate,
)


class PreferenceService:
    """Reads and writes the single preference row each user may have."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: uuid.UUID) -> Optional[NotificationPreference]:
        return self.db.get(NotificationPreference, user_id)

    def read(self, user_id: uuid.UUID) -> NotificationPreferenceRead:
        """Return stored preferences, or the all-enabled defaults when none exist."""

        preference = self.get(user_id)
        if preference is None:
            return NotificationPreferenceRead()
        return NotificationPreferenceRead.model_validate(preference)

    def update(
        self, user_id: uuid.UUID, payload: NotificationPreferenceUpdate
    ) -> NotificationPreference:
        """Apply a partial update, creating the row on first save."""

        preference = self.get(user_id)
        if preference is None:
            defaults = NotificationPreferenceRead().model_dump()
            preference = NotificationPreference(user_id=user_id, **defaults)
            self.db.add(preference)

        update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(preference, field, value)

        self.db.commit()
        self.db.refresh(preference)
        return preference
