"""Persistence of browser push subscriptions."""
from __future__ import annotations

import uuid
from typing import List, Optional

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from akita_connect.core.keys import decode_auth, decode_p256dh, encode_key
from akita_connect.db.models.push_subscription import PushSubscription
from akita_connect.schemas.push import PushSubscriptionCreate


class SubscriptionService:
    def __init__(self, db: Session):
        self.db = db

    def subscribe(
        self,
        user_id: uuid.UUID,
        payload: PushSubscriptionCreate,
        user_agent: Optional[str] = None,
    ) -> PushSubscription:
        """Register (or refresh) the calling browser as a push endpoint.

        Keys arrive base64url-encoded from the browser and are validated before
        being stored as standard base64. Raises ``InvalidKeyError`` on bad keys.
        """

        p256dh = encode_key(decode_p256dh(payload.keys.p256dh))
        auth = encode_key(decode_auth(payload.keys.auth))
        if user_agent:
            user_agent = user_agent[:255]

        stmt = select(PushSubscription).where(
            PushSubscription.user_id == user_id,
            PushSubscription.endpoint == payload.endpoint,
        )
        subscription = self.db.scalars(stmt).first()
        if subscription:
            subscription.p256dh = p256dh
            subscription.auth = auth
            subscription.user_agent = user_agent
        else:
            subscription = PushSubscription(
                user_id=user_id,
                endpoint=payload.endpoint,
                p256dh=p256dh,
                auth=auth,
                user_agent=user_agent,
            )
            self.db.add(subscription)

        self.db.commit()
        self.db.refresh(subscription)
        logger.info("Push subscription registered", user_id=str(user_id), subscription_id=str(subscription.id))
        return subscription

    def unsubscribe(self, user_id: uuid.UUID, endpoint: str) -> bool:
        """Forget an endpoint for a user; returns whether a row was removed."""

        result = self.db.execute(
            delete(PushSubscription).where(
                PushSubscription.user_id == user_id,
                PushSubscription.endpoint == endpoint,
            )
        )
        self.db.commit()
        return result.rowcount > 0

    def list_for_user(self, user_id: uuid.UUID) -> List[PushSubscription]:
        stmt = (
            select(PushSubscription)
            .where(PushSubscription.user_id == user_id)
            .order_by(PushSubscription.created_at)
        )
        return list(self.db.scalars(stmt))

    def delete(self, subscription_id: uuid.UUID) -> None:
        """Remove a subscription by id. Deleting a missing row is a no-op."""

        self.db.execute(delete(PushSubscription).where(PushSubscription.id == subscription_id))
        self.db.commit()
