"""Custom exceptions for the Blytz client."""

from __future__ import annotations

from typing import Any, Iterable


class StorefrontError(Exception):
    """Base exception for all Blytz client errors."""

    pass


class TransportError(StorefrontError):
    """Raised when the backend cannot be reached."""

    def __init__(self, method: str, url: str, reason: str):
        self.method = method
        self.url = url
        self.reason = reason
        super().__init__(f"{method} {url} failed: {reason}")


class ApiError(StorefrontError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, status: int, message: str, payload: Any = None):
        self.status = status
        self.message = message
        self.payload = payload
        super().__init__(f"HTTP {status}: {message}")


class AuthenticationError(ApiError):
    """Raised for a missing or rejected bearer token."""

    def __init__(self, message: str = "Please login to continue", status: int = 401, payload: Any = None):
        super().__init__(status, message, payload)


class NotFoundError(ApiError):
    """Raised when the requested resource does not exist."""

    def __init__(self, message: str = "Not found", payload: Any = None):
        super().__init__(404, message, payload)


class ValidationError(StorefrontError, ValueError):
    """Raised when required input fields are missing or malformed."""

    def __init__(self, message: str, missing_fields: Iterable[str] = ()):
        self.missing_fields = list(missing_fields)
        super().__init__(message)


class EmptyCartError(StorefrontError):
    """Raised when checkout is attempted with nothing in the cart."""

    def __init__(self) -> None:
        super().__init__("Your cart is empty")


class InvalidTransitionError(StorefrontError):
    """Raised when a state change is not allowed from the current state."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move from {current} to {target}")


class PaymentFailedError(StorefrontError):
    """Raised when a payment intent could not be confirmed."""

    def __init__(self, intent_id: str, status: str):
        self.intent_id = intent_id
        self.status = status
        super().__init__(f"Payment {intent_id} was not confirmed (status: {status})")
