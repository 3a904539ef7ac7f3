"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from loguru import logger

# Push services answer with these when a subscription will never work again.
GONE_STATUS_CODES = frozenset({404, 410})


class AkitaConnectError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(AkitaConnectError):
    """Authentication and authorization errors."""
    pass


class InvalidKeyError(AkitaConnectError, ValueError):
    """Stored or submitted push key material cannot be used."""
    pass


class PushDeliveryError(AkitaConnectError):
    """A push service rejected or failed a delivery."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, details={"status_code": status_code})
        self.status_code = status_code

    @property
    def is_gone(self) -> bool:
        return self.status_code in GONE_STATUS_CODES


class EmailDeliveryError(AkitaConnectError):
    """The email provider failed to accept a message."""
    pass


class NoSubscriptionsError(AkitaConnectError):
    """The target user has no registered push endpoints."""
    pass


def handle_authentication_error(error: AuthenticationError) -> HTTPException:
    """Handle authentication errors."""
    logger.warning(f"Authentication error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error.message,
    )


def handle_invalid_key_error(error: InvalidKeyError) -> HTTPException:
    """Handle malformed subscription keys submitted by a browser."""
    logger.warning(f"Invalid push key: {error.message}")
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "message": error.message,
            "details": error.details,
        },
    )
