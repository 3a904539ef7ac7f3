"""Per-user email notification preferences."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from akita_connect.core.events import PREFERENCE_FLAGS, EventCategory
from akita_connect.db.base import Base


class NotificationPreference(Base):
    """Email opt-in flags, one row per user, created lazily."""

    __tablename__ = "notification_preferences"

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    email_announcements = Column(Boolean, nullable=False, default=True)
    email_replies = Column(Boolean, nullable=False, default=True)
    email_mentions = Column(Boolean, nullable=False, default=True)
    email_messages = Column(Boolean, nullable=False, default=True)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def allows(self, category: EventCategory) -> bool:
        """Return whether an email for ``category`` is permitted by this row."""

        flag = PREFERENCE_FLAGS[category]
        if flag is None:
            return True
        value = getattr(self, flag)
        # Unflushed rows have not received their column defaults yet
        return True if value is None else bool(value)
