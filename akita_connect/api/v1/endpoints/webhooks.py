"""Inbound webhooks from the backend's change-capture mechanism."""
from __future__ import annotations

from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, Request
from loguru import logger
from pydantic import ValidationError

from akita_connect.api import deps
from akita_connect.core.events import NotificationEvent
from akita_connect.schemas import DispatchResponse, NoopResponse, WebhookPayload
from akita_connect.services.notification_service import NotificationService
from akita_connect.utils.exceptions import NoSubscriptionsError

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def _event_from_body(body: Any) -> Optional[NotificationEvent]:
    if not isinstance(body, dict):
        return None
    try:
        payload = WebhookPayload.model_validate(body)
    except ValidationError:
        return None
    if payload.record is None:
        return None
    return payload.record.to_event()


@router.post(
    "/notify",
    response_model=Union[DispatchResponse, NoopResponse],
    response_model_exclude_none=True,
    dependencies=[Depends(deps.verify_webhook_secret)],
)
async def notify(
    request: Request,
    service: NotificationService = Depends(deps.get_notification_service),
) -> Union[DispatchResponse, NoopResponse]:
    """Notify the user referenced by a freshly inserted row.

    Malformed triggers and users without push endpoints are accepted as no-ops.
    """

    try:
        body = await request.json()
    except ValueError:
        body = None

    event = _event_from_body(body)
    if event is None:
        logger.info("Webhook ignored, no user_id in record")
        return NoopResponse(message="No user_id in record")

    try:
        report = await service.dispatch(event)
    except NoSubscriptionsError:
        return NoopResponse(message="No subscriptions found")

    return DispatchResponse(push_results=report.push_results)
