"""Web Push delivery through pywebpush."""
from __future__ import annotations

import asyncio
import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from pywebpush import WebPushException, webpush

from akita_connect.core.keys import decode_auth, decode_p256dh, to_urlsafe
from akita_connect.db.models.push_subscription import PushSubscription
from akita_connect.utils.exceptions import PushDeliveryError


@dataclass(frozen=True)
class PushTarget:
    """Snapshot of a subscription row taken before fan-out starts."""

    id: uuid.UUID
    endpoint: str
    p256dh: str
    auth: str

    @classmethod
    def from_subscription(cls, subscription: PushSubscription) -> "PushTarget":
        return cls(
            id=subscription.id,
            endpoint=subscription.endpoint,
            p256dh=subscription.p256dh,
            auth=subscription.auth,
        )


class PushSender(Protocol):
    """Anything able to deliver one payload to one push endpoint."""

    async def send(self, target: PushTarget, payload: Dict[str, str]) -> None:  # pragma: no cover - interface definition
        """Deliver ``payload`` or raise ``PushDeliveryError``/``InvalidKeyError``."""


@dataclass
class WebPushSender:
    """Send encrypted Web Push messages signed with the site's VAPID key."""

    vapid_private_key: Optional[str]
    vapid_subject: str
    ttl: int = 2419200
    request_timeout: float = 12.0

    def subscription_info(self, target: PushTarget) -> Dict[str, Any]:
        """Decode stored keys to raw bytes and re-encode them for pywebpush."""

        return {
            "endpoint": target.endpoint,
            "keys": {
                "p256dh": to_urlsafe(decode_p256dh(target.p256dh)),
                "auth": to_urlsafe(decode_auth(target.auth)),
            },
        }

    async def send(self, target: PushTarget, payload: Dict[str, str]) -> None:
        if not self.vapid_private_key:
            raise PushDeliveryError("VAPID keys not configured")

        subscription_info = self.subscription_info(target)
        try:
            # pywebpush is blocking; keep the event loop free for sibling deliveries
            await asyncio.to_thread(
                webpush,
                subscription_info=subscription_info,
                data=json.dumps(payload),
                vapid_private_key=self.vapid_private_key,
                # webpush fills in aud/exp on this dict, so never share it
                vapid_claims={"sub": self.vapid_subject},
                ttl=self.ttl,
                timeout=self.request_timeout,
            )
        except WebPushException as exc:
            response = getattr(exc, "response", None)
            # requests.Response is falsy for error statuses, compare against None
            status_code = response.status_code if response is not None else None
            raise PushDeliveryError(str(exc), status_code=status_code) from exc
