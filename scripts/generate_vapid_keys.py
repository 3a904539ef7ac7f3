#!/usr/bin/env python3
"""Generate a VAPID key pair for Web Push.

Outputs:
- VAPID_PUBLIC_KEY (base64url, no padding) -> served to browsers
- VAPID_PRIVATE_KEY (PEM) -> backend environment only
"""
from __future__ import annotations

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from akita_connect.core.keys import P256DH_LENGTH, to_urlsafe


def main() -> None:
    private_key = ec.generate_private_key(ec.SECP256R1())

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8").strip()

    public_raw = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    assert len(public_raw) == P256DH_LENGTH

    print("VAPID_PUBLIC_KEY=" + to_urlsafe(public_raw))
    print("\n# Set this whole PEM as VAPID_PRIVATE_KEY (preserve newlines):\n")
    print(private_pem)


if __name__ == "__main__":
    main()
