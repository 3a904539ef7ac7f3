"""Database models package."""
from akita_connect.db.models.user import User
from akita_connect.db.models.push_subscription import PushSubscription
from akita_connect.db.models.notification_preference import NotificationPreference

__all__ = [
    "User",
    "PushSubscription",
    "NotificationPreference",
]
