"""
Error helpers.

`bad`, `unauthorized`, `not_found` and `error` build the HTTPException for
each outcome; callers raise what they return:

    raise bad("Missing email")
"""

from fastapi import HTTPException, status


def bad(message: str = "Bad request") -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def unauthorized(message: str = "Unauthorized") -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)


def not_found(message: str = "Not found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)


def error(message: str = "Internal server error") -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


class PersistenceError(RuntimeError):
    """Base class for failures raised by the database helpers."""
    pass


class CastError(PersistenceError):
    """Raised when an identifier cannot be converted to an ObjectId."""

    def __init__(self, value):
        super().__init__(f"Cannot cast {value!r} to ObjectId")
        self.value = value


class DocumentValidationError(PersistenceError):
    """Raised when a document fails its collection schema before a write."""
    pass


class EmailDeliveryError(RuntimeError):
    """Raised when the email provider rejects a message."""
    pass
