"""Pydantic schemas package."""

from akita_connect.schemas.auth import TokenPayload
from akita_connect.schemas.notifications import (
    DispatchResponse,
    NoopResponse,
    PushResult,
    PushTestRequest,
    PushTestResponse,
    WebhookPayload,
    WebhookRecord,
)
from akita_connect.schemas.preferences import (
    NotificationPreferenceRead,
    NotificationPreferenceUpdate,
)
from akita_connect.schemas.push import (
    PushKeys,
    PushSubscriptionCreate,
    PushSubscriptionRead,
    PushUnsubscribeRequest,
    VapidPublicKey,
)

__all__ = [
    "TokenPayload",
    "DispatchResponse",
    "NoopResponse",
    "PushResult",
    "PushTestRequest",
    "PushTestResponse",
    "WebhookPayload",
    "WebhookRecord",
    "NotificationPreferenceRead",
    "NotificationPreferenceUpdate",
    "PushKeys",
    "PushSubscriptionCreate",
    "PushSubscriptionRead",
    "PushUnsubscribeRequest",
    "VapidPublicKey",
]
