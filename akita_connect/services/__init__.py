"""Service layer package."""

from akita_connect.services.email_delivery import ResendEmailSender
from akita_connect.services.notification_service import NotificationService
from akita_connect.services.preferences import PreferenceService
from akita_connect.services.push_delivery import WebPushSender
from akita_connect.services.subscriptions import SubscriptionService
from akita_connect.services.users import UserService

__all__ = [
    "NotificationService",
    "PreferenceService",
    "ResendEmailSender",
    "SubscriptionService",
    "UserService",
    "WebPushSender",
]
