#!/usr/bin/env python3
"""Check that a VAPID public key decodes to an uncompressed P-256 point."""
from __future__ import annotations

import argparse
import sys

from akita_connect.config import settings
from akita_connect.core.keys import decode_key, decode_p256dh
from akita_connect.utils.exceptions import InvalidKeyError


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate a base64url VAPID public key")
    parser.add_argument(
        "key",
        nargs="?",
        help="Key to check (default: VAPID_PUBLIC_KEY from the environment)",
    )
    args = parser.parse_args()

    key = args.key or settings.VAPID_PUBLIC_KEY
    if not key:
        print("No key given and VAPID_PUBLIC_KEY is not set")
        return 2

    try:
        raw = decode_key(key)
        print(f"Key length: {len(raw)} bytes, first byte: {raw[0] if raw else None}")
        decode_p256dh(key)
    except InvalidKeyError as exc:
        print(f"Invalid key: {exc.message}")
        return 1

    print("Key is a valid 65-byte uncompressed P-256 point")
    return 0


if __name__ == "__main__":
    sys.exit(main())
