"""API endpoint modules for v1."""

from akita_connect.api.v1.endpoints import preferences, push, webhooks

__all__ = [
    "preferences",
    "push",
    "webhooks",
]
