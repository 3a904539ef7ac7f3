"""Schemas for browser push subscription registration."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PushKeys(BaseModel):
    """Key material as returned by ``PushSubscription.toJSON()`` in the browser."""

    p256dh: str = Field(min_length=1)
    auth: str = Field(min_length=1)


class PushSubscriptionCreate(BaseModel):
    endpoint: str = Field(min_length=1, max_length=2048)
    keys: PushKeys


class PushUnsubscribeRequest(BaseModel):
    endpoint: str = Field(min_length=1, max_length=2048)


class PushSubscriptionRead(BaseModel):
    """Registered endpoint; key material is never echoed back."""

    id: uuid.UUID
    endpoint: str
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VapidPublicKey(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    public_key: Optional[str] = Field(default=None, alias="publicKey")
