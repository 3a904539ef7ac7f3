"""Fan a notification event out to push endpoints and email."""
from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from loguru import logger

from akita_connect.core.events import NotificationEvent
from akita_connect.schemas.notifications import PushResult
from akita_connect.services.email_delivery import EmailSender, render_notification_email
from akita_connect.services.preferences import PreferenceService
from akita_connect.services.push_delivery import PushSender, PushTarget
from akita_connect.services.subscriptions import SubscriptionService
from akita_connect.services.users import UserService
from akita_connect.utils.exceptions import NoSubscriptionsError, PushDeliveryError

TEST_PAYLOAD: Dict[str, str] = {
    "title": "Test Notification",
    "body": "If you see this, Push Notifications are working!",
    "url": "/settings",
}


@dataclass
class DeliveryReport:
    """What happened for one event. Only ``push_results`` is shown to callers."""

    push_results: List[PushResult]
    email_sent: bool = False


class NotificationService:
    """Deliver events over every channel a member has available and consented to.

    Push fan-out runs first and email follows it. Push results are returned to
    the caller; the email outcome is only logged.
    """

    def __init__(
        self,
        subscriptions: SubscriptionService,
        preferences: PreferenceService,
        users: UserService,
        push_sender: PushSender,
        email_sender: Optional[EmailSender] = None,
        *,
        app_base_url: str = "/",
        app_name: str = "Akita Connect",
    ):
        self.subscriptions = subscriptions
        self.preferences = preferences
        self.users = users
        self.push_sender = push_sender
        self.email_sender = email_sender
        self.app_base_url = app_base_url
        self.app_name = app_name

    async def dispatch(self, event: NotificationEvent) -> DeliveryReport:
        """Send ``event`` by push and, when permitted, by email.

        Raises ``NoSubscriptionsError`` without attempting email when the user
        has no push endpoints.
        """

        targets = self._targets_for(event.user_id)

        push_results = await self.fan_out(targets, event.push_payload())
        # email goes out only once every push attempt has settled
        email_sent = await self.send_email(event)

        logger.info(
            "Notification dispatched",
            user_id=str(event.user_id),
            category=event.category.value,
            attempted=len(push_results),
            delivered=sum(1 for result in push_results if result.success),
            email_sent=email_sent,
        )
        return DeliveryReport(push_results=push_results, email_sent=email_sent)

    async def send_test(self, user_id: uuid.UUID) -> List[PushResult]:
        """Push a fixed test message to every endpoint of ``user_id``."""

        targets = self._targets_for(user_id)
        return await self.fan_out(targets, TEST_PAYLOAD)

    async def fan_out(
        self, targets: Sequence[PushTarget], payload: Dict[str, str]
    ) -> List[PushResult]:
        """Deliver to all targets concurrently; every attempt gets its own result."""

        outcomes = await asyncio.gather(
            *(self._deliver(target, payload) for target in targets),
            return_exceptions=True,
        )

        results: List[PushResult] = []
        for target, outcome in zip(targets, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(
                    "Push delivery failed",
                    subscription_id=str(target.id),
                    error=str(outcome),
                )
                results.append(PushResult(success=False, error=str(outcome) or type(outcome).__name__))
            else:
                results.append(PushResult(success=True, id=str(target.id)))
        return results

    async def _deliver(self, target: PushTarget, payload: Dict[str, str]) -> None:
        try:
            await self.push_sender.send(target, payload)
        except PushDeliveryError as exc:
            if exc.is_gone:
                logger.info(
                    "Removing gone push subscription",
                    subscription_id=str(target.id),
                    status=exc.status_code,
                )
                self.subscriptions.delete(target.id)
            raise

    async def send_email(self, event: NotificationEvent) -> bool:
        """Email the event if the user allows it. Never raises."""

        user_id = str(event.user_id)
        if self.email_sender is None:
            logger.info("Email provider not configured, skipping email", user_id=user_id)
            return False

        try:
            address = self.users.get_email(event.user_id)
            if not address:
                logger.warning("No email address for user, skipping email", user_id=user_id)
                return False

            preference = self.preferences.get(event.user_id)
            if preference is not None and not preference.allows(event.category):
                logger.info(
                    "Email suppressed by preferences",
                    user_id=user_id,
                    category=event.category.value,
                )
                return False

            subject, content = render_notification_email(event, self.app_base_url, self.app_name)
            message_id = await self.email_sender.send(to=address, subject=subject, html=content)
        except Exception as exc:
            logger.exception(f"Failed to send notification email: {exc}")
            return False

        logger.info("Notification email sent", user_id=user_id, message_id=message_id)
        return True

    def _targets_for(self, user_id: uuid.UUID) -> List[PushTarget]:
        subscriptions = self.subscriptions.list_for_user(user_id)
        if not subscriptions:
            logger.info("No push subscriptions for user", user_id=str(user_id))
            raise NoSubscriptionsError("No subscriptions found", details={"user_id": str(user_id)})
        return [PushTarget.from_subscription(subscription) for subscription in subscriptions]
