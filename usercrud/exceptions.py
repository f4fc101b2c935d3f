"""Domain exceptions.

Every exception carries a client-safe ``message``; the HTTP status each one
maps to is decided by the handlers registered in ``usercrud.main``.
"""
from typing import Optional


class UserServiceError(Exception):
    """Base class for all errors surfaced to API clients."""

    default_message = "Incorrect Details"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(UserServiceError):
    """Client input failed a validation rule."""


class InvalidBodyError(ValidationError):
    """The request body is not a JSON object of the expected shape."""

    default_message = "Invalid Request Body"


class ConflictError(UserServiceError):
    """A unique column already holds the submitted value."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field.capitalize()} Already Taken")


class NotFoundError(UserServiceError):
    """No user matched the lookup."""

    default_message = "User Not Found"


class AuthError(UserServiceError):
    """Missing, invalid or mismatched credentials."""

    default_message = "Unauthorized"


class BadRequestError(UserServiceError):
    """A path parameter could not be parsed."""

    default_message = "Invalid User ID"


class StorageError(UserServiceError):
    """Any persistence failure other than a uniqueness conflict."""


class HashError(UserServiceError):
    """The password hashing primitive failed."""
