"""CLI script to send the test push notification to a user's devices."""
from __future__ import annotations

import argparse
import asyncio
import uuid

from akita_connect.api.deps import get_push_sender
from akita_connect.config import settings
from akita_connect.db.session import SessionLocal
from akita_connect.services import (
    NotificationService,
    PreferenceService,
    SubscriptionService,
    UserService,
)
from akita_connect.utils.exceptions import NoSubscriptionsError


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Send a test push notification to every device of a user",
    )
    parser.add_argument("user_id", type=uuid.UUID, help="Target user id")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        service = NotificationService(
            subscriptions=SubscriptionService(db),
            preferences=PreferenceService(db),
            users=UserService(db),
            push_sender=get_push_sender(settings),
            app_base_url=settings.APP_BASE_URL,
            app_name=settings.PROJECT_NAME,
        )
        try:
            results = asyncio.run(service.send_test(args.user_id))
        except NoSubscriptionsError:
            print(f"No subscriptions found for user {args.user_id}")
            return
        for result in results:
            print(result.model_dump(exclude_none=True))
    finally:
        db.close()


if __name__ == "__main__":
    main()
