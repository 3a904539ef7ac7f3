"""Pytest fixtures for API and service tests."""

import os
import uuid
from collections.abc import Generator
from typing import Dict, List, Optional

os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from akita_connect.api import deps
from akita_connect.config import get_settings
from akita_connect.core.security import create_access_token
from akita_connect.db.base import Base
from akita_connect.db.models import NotificationPreference, PushSubscription, User
from akita_connect.main import create_app
from akita_connect.services.push_delivery import PushTarget
from akita_connect.utils.exceptions import PushDeliveryError

WEBHOOK_SECRET = "test-webhook-secret"

# RFC 8291 example user agent keys, as a browser would hand them out
P256DH_URLSAFE = "BCVxsr7N_eNgVRqvHtD0zTZsEc6-VV-JvLexhqUzORcxaOzi6-AYWXvTBHm4bjyPjs7Vd8pZGH6SRpkNtoIAiw4"
AUTH_URLSAFE = "BTBZMqHH6r4Tts7J_aSIgg"
# ... and as they are persisted
P256DH_STORED = "BCVxsr7N/eNgVRqvHtD0zTZsEc6+VV+JvLexhqUzORcxaOzi6+AYWXvTBHm4bjyPjs7Vd8pZGH6SRpkNtoIAiw4="
AUTH_STORED = "BTBZMqHH6r4Tts7J/aSIgg=="


class FakePushSender:
    """Record deliveries and fail the endpoints it is told to fail."""

    def __init__(self) -> None:
        self.sent: List[tuple[PushTarget, Dict[str, str]]] = []
        self.failures: Dict[str, Exception] = {}

    def fail(self, endpoint: str, status_code: Optional[int] = None, message: str = "Push failed") -> None:
        self.failures[endpoint] = PushDeliveryError(message, status_code=status_code)

    async def send(self, target: PushTarget, payload: Dict[str, str]) -> None:
        self.sent.append((target, payload))
        error = self.failures.get(target.endpoint)
        if error is not None:
            raise error


class FakeEmailSender:
    def __init__(self) -> None:
        self.messages: List[Dict[str, str]] = []
        self.error: Optional[Exception] = None

    async def send(self, *, to: str, subject: str, html: str) -> Optional[str]:
        if self.error is not None:
            raise self.error
        self.messages.append({"to": to, "subject": subject, "html": html})
        return f"email-{len(self.messages)}"


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(
        bind=engine,
        tables=[
            User.__table__,
            PushSubscription.__table__,
            NotificationPreference.__table__,
        ],
    )
    try:
        yield engine
    finally:
        Base.metadata.drop_all(
            bind=engine,
            tables=[
                NotificationPreference.__table__,
                PushSubscription.__table__,
                User.__table__,
            ],
        )


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.query(NotificationPreference).delete()
        db.query(PushSubscription).delete()
        db.query(User).delete()
        db.commit()
        db.close()


@pytest.fixture()
def push_sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture()
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture()
def app_settings():
    return get_settings().model_copy(
        update={"WEBHOOK_SECRET": WEBHOOK_SECRET, "VAPID_PUBLIC_KEY": P256DH_URLSAFE}
    )


@pytest.fixture()
def client(
    db_session: Session,
    push_sender: FakePushSender,
    email_sender: FakeEmailSender,
    app_settings,
) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_app_settings] = lambda: app_settings
    app.dependency_overrides[deps.get_push_sender] = lambda: push_sender
    app.dependency_overrides[deps.get_email_sender] = lambda: email_sender
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def member(db_session: Session) -> User:
    user = User(id=uuid.uuid4(), email="hachiko@example.com", full_name="Hachiko Kennels")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def auth_headers(member: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(member.id)}"}


@pytest.fixture()
def add_subscription(db_session: Session):
    def _add(user: User, endpoint: str, p256dh: str = P256DH_STORED, auth: str = AUTH_STORED) -> PushSubscription:
        subscription = PushSubscription(user_id=user.id, endpoint=endpoint, p256dh=p256dh, auth=auth)
        db_session.add(subscription)
        db_session.commit()
        return subscription

    return _add
