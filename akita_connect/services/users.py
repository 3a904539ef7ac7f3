"""Service layer for user operations."""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.orm import Session

from akita_connect.db.models.user import User


class UserService:
    """Admin-level lookups against the member directory."""

    def __init__(self, db: Session):
        self.db = db

    def get_email(self, user_id: uuid.UUID) -> Optional[str]:
        """Return the address notifications should go to, if the user has one."""

        user = self.db.get(User, user_id)
        if user is None:
            return None
        return user.email or None
