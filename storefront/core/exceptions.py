"""Custom exceptions for the storefront core."""
from __future__ import annotations


class StorefrontException(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(StorefrontException):
    """User input or state rejected before any side effect."""

    pass


class EmptyCartError(ValidationException):
    """Checkout attempted with no cart lines."""

    def __init__(self, message: str = "Your cart is empty.") -> None:
        super().__init__(message)


class HttpError(StorefrontException):
    """Backend answered with a non-success status or could not be reached."""

    def __init__(self, status: int | None, message: str | None = None) -> None:
        if message is None:
            message = f"Request failed: {status}" if status is not None else "Request failed"
        super().__init__(message)
        self.status = status


class MalformedResponseError(StorefrontException):
    """Success response missing a field the caller relies on."""

    pass


class StorageError(StorefrontException):
    """Local persistence read/write failure."""

    pass


class ConfigurationException(StorefrontException):
    """Configuration errors."""

    pass
