"""Custom exceptions for the Klaviyo client."""

from typing import Optional, Any

import httpx


UNKNOWN_STATUS = "unknown status"


class KlaviyoError(Exception):
    """Base exception for all Klaviyo client errors."""

    def __init__(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.message = message
        super().__init__(message, *args, **kwargs)


class PreconditionError(KlaviyoError, ValueError):
    """Raised when a call is rejected before any request is sent."""

    pass


class MissingPublicKeyError(PreconditionError):
    """Raised when the client is built without a public key."""

    def __init__(
        self,
        message: str = "You must pass your Klaviyo public key.",
    ) -> None:
        super().__init__(message)


class MissingPrivateKeyError(PreconditionError):
    """Raised when a privileged operation runs without a private key."""

    def __init__(
        self,
        message: str = "A Klaviyo private key is required for this operation.",
        operation: Optional[str] = None,
    ) -> None:
        self.operation = operation
        if operation:
            message = f"{message} (operation: {operation})"
        super().__init__(message)


class MissingIdentifierError(PreconditionError):
    """Raised when customer properties carry neither $email nor $id."""

    def __init__(
        self,
        message: str = "No identifier ($email or $id) found in customer_properties",
    ) -> None:
        super().__init__(message)


class MissingArgumentError(PreconditionError):
    """Raised when a required operation argument is empty."""

    def __init__(self, argument: str, message: Optional[str] = None) -> None:
        self.argument = argument
        super().__init__(message or f"You must pass a value for '{argument}'.")


def describe_status(error: BaseException) -> Any:
    """Return the HTTP status carried by an error, if a response was received.

    Args:
        error: The terminal exception.

    Returns:
        The status code, or ``"unknown status"`` when no response exists.
    """
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return UNKNOWN_STATUS
