"""Push subscription registration and test dispatch endpoints."""
from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Header, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from akita_connect.api import deps
from akita_connect.config import Settings
from akita_connect.db.models.user import User
from akita_connect.schemas import (
    PushSubscriptionCreate,
    PushSubscriptionRead,
    PushTestRequest,
    PushTestResponse,
    PushUnsubscribeRequest,
    VapidPublicKey,
)
from akita_connect.services.notification_service import NotificationService
from akita_connect.services.subscriptions import SubscriptionService
from akita_connect.utils.exceptions import (
    InvalidKeyError,
    NoSubscriptionsError,
    handle_invalid_key_error,
)

router = APIRouter(tags=["push"])


@router.get("/push/vapid-public-key", response_model=VapidPublicKey)
def get_vapid_public_key(app_settings: Settings = Depends(deps.get_app_settings)) -> VapidPublicKey:
    return VapidPublicKey(public_key=app_settings.VAPID_PUBLIC_KEY)


@router.post(
    "/push/subscriptions",
    response_model=PushSubscriptionRead,
    status_code=status.HTTP_201_CREATED,
)
def subscribe(
    payload: PushSubscriptionCreate,
    user_agent: Optional[str] = Header(default=None),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> PushSubscriptionRead:
    """Register the calling browser for push notifications."""

    service = SubscriptionService(db)
    try:
        subscription = service.subscribe(current_user.id, payload, user_agent)
    except InvalidKeyError as exc:
        raise handle_invalid_key_error(exc) from exc
    return subscription


@router.get("/push/subscriptions", response_model=List[PushSubscriptionRead])
def list_subscriptions(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> List[PushSubscriptionRead]:
    return SubscriptionService(db).list_for_user(current_user.id)


@router.post("/push/unsubscribe")
def unsubscribe(
    payload: PushUnsubscribeRequest,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """Forget the calling browser's endpoint. Safe to call repeatedly."""

    removed = SubscriptionService(db).unsubscribe(current_user.id, payload.endpoint)
    return {"status": "success", "removed": removed}


@router.post(
    "/test-push",
    response_model=PushTestResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(deps.verify_webhook_secret)],
)
async def test_push(
    payload: Optional[PushTestRequest] = Body(default=None),
    service: NotificationService = Depends(deps.get_notification_service),
):
    """Send a canned notification to every device of a user."""

    if payload is None or payload.user_id in (None, ""):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Missing userId"})
    try:
        if not isinstance(payload.user_id, str):
            raise ValueError("userId must be a string")
        user_id = uuid.UUID(payload.user_id)
    except ValueError:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid userId"})

    try:
        results = await service.send_test(user_id)
    except NoSubscriptionsError:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "No subscriptions found for user"},
        )
    return PushTestResponse(results=results)
