"""Notification event categories and their email preference flags."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

DEFAULT_TITLE = "Akita Connect"
DEFAULT_BODY = "You have a new notification"
DEFAULT_URL = "/"


class EventCategory(str, Enum):
    """Kinds of community events a member can be notified about."""

    ANNOUNCEMENT = "announcement"
    REPLY = "reply"
    MENTION = "mention"
    MESSAGE = "message"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: Optional[str]) -> "EventCategory":
        """Map a raw webhook ``type`` onto a category; unknown values become ``GENERAL``."""

        if not value:
            return cls.GENERAL
        normalized = value.strip().lower().replace("-", "_")
        return _ALIASES.get(normalized, cls.GENERAL)


_ALIASES: Dict[str, EventCategory] = {
    "announcement": EventCategory.ANNOUNCEMENT,
    "announcements": EventCategory.ANNOUNCEMENT,
    "reply": EventCategory.REPLY,
    "replies": EventCategory.REPLY,
    "mention": EventCategory.MENTION,
    "mentions": EventCategory.MENTION,
    "message": EventCategory.MESSAGE,
    "messages": EventCategory.MESSAGE,
    "direct_message": EventCategory.MESSAGE,
    "general": EventCategory.GENERAL,
}

# Column on NotificationPreference that gates email for each category.
# None means the category has no opt-out and email is always allowed.
PREFERENCE_FLAGS: Dict[EventCategory, Optional[str]] = {
    EventCategory.ANNOUNCEMENT: "email_announcements",
    EventCategory.REPLY: "email_replies",
    EventCategory.MENTION: "email_mentions",
    EventCategory.MESSAGE: "email_messages",
    EventCategory.GENERAL: None,
}

_unmapped = set(EventCategory) - set(PREFERENCE_FLAGS)
if _unmapped:
    raise RuntimeError(f"Event categories without a preference mapping: {sorted(_unmapped)}")


@dataclass(frozen=True)
class NotificationEvent:
    """A single thing a member should hear about, detached from its source row."""

    user_id: uuid.UUID
    category: EventCategory = EventCategory.GENERAL
    title: str = DEFAULT_TITLE
    body: str = DEFAULT_BODY
    url: str = DEFAULT_URL

    def push_payload(self) -> Dict[str, str]:
        """Return the JSON body delivered to the service worker."""

        return {"title": self.title, "body": self.body, "url": self.url}
