"""Pydantic models for notification preference settings."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class NotificationPreferenceRead(BaseModel):
    """Email opt-ins shown on the settings screen."""

    email_announcements: bool = True
    email_replies: bool = True
    email_mentions: bool = True
    email_messages: bool = True

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferenceUpdate(BaseModel):
    """Schema for partial updates to the current user's preferences."""

    email_announcements: Optional[bool] = None
    email_replies: Optional[bool] = None
    email_mentions: Optional[bool] = None
    email_messages: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def ensure_payload_not_empty(self) -> "NotificationPreferenceUpdate":
        if not any(value is not None for value in self.model_dump().values()):
            raise ValueError("At least one field must be provided")
        return self
