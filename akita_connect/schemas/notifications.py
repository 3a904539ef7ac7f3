"""Schemas for notification webhooks and dispatch results."""
from __future__ import annotations

import uuid
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from akita_connect.core.events import (
    DEFAULT_BODY,
    DEFAULT_TITLE,
    DEFAULT_URL,
    EventCategory,
    NotificationEvent,
)


def _as_text(value: Any) -> Optional[str]:
    """Stringify scalar record values; anything structured counts as absent."""

    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float, uuid.UUID)):
        return str(value)
    return None


class WebhookRecord(BaseModel):
    """Row that triggered a database webhook (message, reply, announcement...)."""

    model_config = ConfigDict(extra="ignore")

    user_id: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    content: Optional[str] = None
    link: Optional[str] = None
    url: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)

    def to_event(self) -> Optional[NotificationEvent]:
        """Build the event for this record, or ``None`` when no recipient can be read."""

        if not self.user_id:
            return None
        try:
            user_id = uuid.UUID(str(self.user_id))
        except ValueError:
            return None

        return NotificationEvent(
            user_id=user_id,
            category=EventCategory.parse(self.type),
            title=self.title or DEFAULT_TITLE,
            body=self.message or self.content or DEFAULT_BODY,
            url=self.link or self.url or DEFAULT_URL,
        )


class WebhookPayload(BaseModel):
    """Envelope posted by the backend's change-capture webhooks."""

    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    table: Optional[str] = None
    record: Optional[WebhookRecord] = None

    @field_validator("type", "table", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)


class PushResult(BaseModel):
    """Outcome of one delivery attempt."""

    success: bool
    id: Optional[str] = None
    error: Optional[str] = None


class DispatchResponse(BaseModel):
    """Response returned once a webhook event has been fanned out."""

    # forbid keeps the webhook union response unambiguous
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    success: bool = True
    push_results: List[PushResult] = Field(default_factory=list, alias="pushResults")


class NoopResponse(BaseModel):
    """Response for accepted webhooks that had nothing to deliver."""

    model_config = ConfigDict(extra="forbid")

    message: str


class PushTestRequest(BaseModel):
    """Body of the test-dispatch endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    # left untyped so a malformed id reaches the handler and gets a 400
    user_id: Any = Field(default=None, alias="userId")


class PushTestResponse(BaseModel):
    results: List[PushResult]
