"""Tests for the pywebpush-backed sender."""
from __future__ import annotations

import json
import uuid
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from pywebpush import WebPushException

from akita_connect.services.push_delivery import PushTarget, WebPushSender
from akita_connect.utils.exceptions import InvalidKeyError, PushDeliveryError

from tests.conftest import AUTH_STORED, AUTH_URLSAFE, P256DH_STORED, P256DH_URLSAFE

PAYLOAD = {"title": "Litter update", "body": "Puppies are 8 weeks old", "url": "/litters/3"}


def _target(p256dh: str = P256DH_STORED, auth: str = AUTH_STORED) -> PushTarget:
    return PushTarget(id=uuid.uuid4(), endpoint="https://push.example/abc", p256dh=p256dh, auth=auth)


def _sender(private_key="vapid-private-key") -> WebPushSender:
    return WebPushSender(vapid_private_key=private_key, vapid_subject="mailto:support@akitaconnect.com", ttl=60)


@pytest.mark.asyncio
async def test_send_passes_urlsafe_keys_and_json_payload():
    with patch("akita_connect.services.push_delivery.webpush") as mock_webpush:
        await _sender().send(_target(), PAYLOAD)

    kwargs = mock_webpush.call_args.kwargs
    assert kwargs["subscription_info"] == {
        "endpoint": "https://push.example/abc",
        "keys": {"p256dh": P256DH_URLSAFE, "auth": AUTH_URLSAFE},
    }
    assert json.loads(kwargs["data"]) == PAYLOAD
    assert kwargs["vapid_private_key"] == "vapid-private-key"
    assert kwargs["vapid_claims"] == {"sub": "mailto:support@akitaconnect.com"}
    assert kwargs["ttl"] == 60


@pytest.mark.asyncio
async def test_each_send_gets_its_own_claims():
    with patch("akita_connect.services.push_delivery.webpush") as mock_webpush:
        sender = _sender()
        await sender.send(_target(), PAYLOAD)
        await sender.send(_target(), PAYLOAD)

    first, second = (call.kwargs["vapid_claims"] for call in mock_webpush.call_args_list)
    assert first is not second


@pytest.mark.asyncio
async def test_gone_response_is_flagged():
    error = WebPushException("Push failed: 410 Gone", response=SimpleNamespace(status_code=410))

    with patch("akita_connect.services.push_delivery.webpush", side_effect=error):
        with pytest.raises(PushDeliveryError) as exc_info:
            await _sender().send(_target(), PAYLOAD)

    assert exc_info.value.status_code == 410
    assert exc_info.value.is_gone is True


@pytest.mark.asyncio
async def test_error_without_response_is_not_gone():
    with patch(
        "akita_connect.services.push_delivery.webpush",
        side_effect=WebPushException("connection reset"),
    ):
        with pytest.raises(PushDeliveryError) as exc_info:
            await _sender().send(_target(), PAYLOAD)

    assert exc_info.value.status_code is None
    assert exc_info.value.is_gone is False


@pytest.mark.asyncio
async def test_missing_vapid_key_fails_without_sending():
    with patch("akita_connect.services.push_delivery.webpush") as mock_webpush:
        with pytest.raises(PushDeliveryError, match="VAPID keys not configured"):
            await _sender(private_key=None).send(_target(), PAYLOAD)

    mock_webpush.assert_not_called()


@pytest.mark.asyncio
async def test_malformed_keys_never_reach_the_network():
    with patch("akita_connect.services.push_delivery.webpush") as mock_webpush:
        with pytest.raises(InvalidKeyError):
            await _sender().send(_target(auth="AAAA"), PAYLOAD)

    mock_webpush.assert_not_called()
