"""Shared API dependencies."""
from __future__ import annotations

import secrets
import uuid
from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from akita_connect.config import Settings, get_settings
from akita_connect.core.security import InvalidTokenError, decode_token
from akita_connect.db.models.user import User
from akita_connect.db.session import SessionLocal
from akita_connect.schemas import TokenPayload
from akita_connect.services.email_delivery import EmailSender, ResendEmailSender
from akita_connect.services.notification_service import NotificationService
from akita_connect.services.preferences import PreferenceService
from akita_connect.services.push_delivery import PushSender, WebPushSender
from akita_connect.services.subscriptions import SubscriptionService
from akita_connect.services.users import UserService
from akita_connect.utils.exceptions import AuthenticationError, handle_authentication_error

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for request lifetime."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_app_settings() -> Settings:
    """Expose settings as a dependency so tests can swap them."""

    return get_settings()


def verify_webhook_secret(
    x_webhook_secret: Optional[str] = Header(default=None),
    app_settings: Settings = Depends(get_app_settings),
) -> None:
    """Reject callers that do not present the shared webhook secret.

    When no secret is configured the endpoint stays open.
    """

    expected = app_settings.WEBHOOK_SECRET
    if not expected:
        return
    if not x_webhook_secret or not secrets.compare_digest(x_webhook_secret, expected):
        raise handle_authentication_error(AuthenticationError("Unauthorized"))


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated user from the Authorization header."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        raise credentials_exception

    try:
        payload = decode_token(credentials.credentials)
        token_data = TokenPayload.model_validate(payload)
    except (InvalidTokenError, ValidationError, ValueError, KeyError) as exc:
        raise credentials_exception from exc

    user = db.get(User, uuid.UUID(str(token_data.sub)))
    if not user:
        raise credentials_exception
    return user


def get_push_sender(app_settings: Settings = Depends(get_app_settings)) -> PushSender:
    return WebPushSender(
        vapid_private_key=app_settings.VAPID_PRIVATE_KEY,
        vapid_subject=app_settings.VAPID_SUBJECT,
        ttl=app_settings.PUSH_TTL_SECONDS,
        request_timeout=app_settings.PUSH_REQUEST_TIMEOUT_SECONDS,
    )


def get_email_sender(app_settings: Settings = Depends(get_app_settings)) -> Optional[EmailSender]:
    """Return the email sender, or ``None`` when no provider key is configured."""

    if not app_settings.RESEND_API_KEY:
        return None
    return ResendEmailSender(
        api_key=app_settings.RESEND_API_KEY,
        sender=app_settings.EMAIL_FROM,
        base_url=str(app_settings.RESEND_API_BASE),
        request_timeout=app_settings.EMAIL_REQUEST_TIMEOUT_SECONDS,
    )


def get_notification_service(
    db: Session = Depends(get_db),
    push_sender: PushSender = Depends(get_push_sender),
    email_sender: Optional[EmailSender] = Depends(get_email_sender),
    app_settings: Settings = Depends(get_app_settings),
) -> NotificationService:
    """Assemble the notification service with request-scoped dependencies."""

    return NotificationService(
        subscriptions=SubscriptionService(db),
        preferences=PreferenceService(db),
        users=UserService(db),
        push_sender=push_sender,
        email_sender=email_sender,
        app_base_url=app_settings.APP_BASE_URL,
        app_name=app_settings.PROJECT_NAME,
    )
