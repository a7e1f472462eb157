"""Exceptions raised by the karen account service.

Each exception carries the HTTP status it is rendered with by the API layer.
"""


class KarenError(Exception):
    """Base class for account service errors."""

    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
        self.message = message


class ValidationError(KarenError):
    """Malformed request body, missing field, or unsupported field selection."""

    status_code = 400


class AuthenticationError(KarenError):
    """Credentials did not match."""

    status_code = 401


class NotFoundError(KarenError):
    """Referenced user (by session, id, or email) does not exist."""

    status_code = 404


class ConflictError(KarenError):
    """A create or update would violate email uniqueness."""

    status_code = 409
