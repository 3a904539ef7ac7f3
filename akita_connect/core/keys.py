"""Encoding helpers for Web Push subscription key material.

Browsers hand out ``p256dh`` and ``auth`` as unpadded base64url. We persist
the raw bytes as standard base64 and turn them back into bytes right before
delivery, validating their length on the way.
"""
from __future__ import annotations

import base64
import binascii

from akita_connect.utils.exceptions import InvalidKeyError

P256DH_LENGTH = 65  # uncompressed P-256 point: 0x04 || X || Y
AUTH_SECRET_LENGTH = 16


def encode_key(raw: bytes) -> str:
    """Encode raw key bytes into the storage representation."""

    return base64.b64encode(raw).decode("ascii")


def decode_key(value: str) -> bytes:
    """Decode standard or url-safe base64, with or without padding."""

    if not value or not value.strip():
        raise InvalidKeyError("Key material is empty")

    text = value.strip().replace("-", "+").replace("_", "/")
    text += "=" * (-len(text) % 4)
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidKeyError(f"Key material is not valid base64: {exc}") from exc


def to_urlsafe(raw: bytes) -> str:
    """Encode raw key bytes the way push libraries and browsers expect them."""

    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_p256dh(value: str) -> bytes:
    raw = decode_key(value)
    if len(raw) != P256DH_LENGTH or raw[0] != 0x04:
        raise InvalidKeyError(
            f"p256dh must be a {P256DH_LENGTH}-byte uncompressed P-256 point",
            details={"length": len(raw)},
        )
    return raw


def decode_auth(value: str) -> bytes:
    raw = decode_key(value)
    if len(raw) != AUTH_SECRET_LENGTH:
        raise InvalidKeyError(
            f"auth secret must be {AUTH_SECRET_LENGTH} bytes",
            details={"length": len(raw)},
        )
    return raw
