"""
Service-level error types and database error translation.

Services raise these; app.main renders them into the `{"error": message}`
envelope with the matching HTTP status.
"""

import logging
from typing import Optional

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger("hrcore.errors")

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

DUPLICATE_RECORD_MESSAGE = "A record with this value already exists"
INVALID_REFERENCE_MESSAGE = "Invalid reference to a related record"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class ServiceError(Exception):
    """
    Base error carrying an HTTP status and a client-safe message.

    `message` is for logs only; clients see `public_message`, which falls back
    to the class default when not given.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None, *, public_message: Optional[str] = None):
        self.public_message = public_message or self.public_message
        super().__init__(message or self.public_message)


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    public_message = "Not found"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    public_message = DUPLICATE_RECORD_MESSAGE


class InvalidReferenceError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = INVALID_REFERENCE_MESSAGE


class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    public_message = "invalid credentials"


class OnboardingError(ServiceError):
    """A failed onboarding step; takes its HTTP mapping from the underlying cause."""

    def __init__(self, step: str, cause: BaseException):
        mapped = cause if isinstance(cause, ServiceError) else translate_db_error(cause)
        self.step = step
        self.cause = cause
        self.status_code = mapped.status_code
        super().__init__(f"{step}: {cause}", public_message=mapped.public_message)


def _integrity_kind(exc: IntegrityError) -> Optional[str]:
    # asyncpg exposes the SQLSTATE; SQLite only reports it in the message text
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code in (UNIQUE_VIOLATION, FOREIGN_KEY_VIOLATION):
        return code

    text = str(orig).lower()
    if "unique" in text or "duplicate key" in text:
        return UNIQUE_VIOLATION
    if "foreign key" in text:
        return FOREIGN_KEY_VIOLATION
    return None


def translate_db_error(exc: BaseException) -> ServiceError:
    """
    Map a persistence exception to the error the client should see.

    Unique violations become 409, foreign key violations 400; anything else is
    logged with full detail and surfaced as a generic 500.
    """
    if isinstance(exc, ServiceError):
        return exc

    if isinstance(exc, IntegrityError):
        kind = _integrity_kind(exc)
        if kind == UNIQUE_VIOLATION:
            return ConflictError(str(exc.orig), public_message=DUPLICATE_RECORD_MESSAGE)
        if kind == FOREIGN_KEY_VIOLATION:
            return InvalidReferenceError(str(exc.orig), public_message=INVALID_REFERENCE_MESSAGE)

    if isinstance(exc, SQLAlchemyError):
        logger.error(f"Database error: {exc}")
    else:
        logger.error(f"Unexpected error: {exc!r}")
    return ServiceError(str(exc), public_message=INTERNAL_ERROR_MESSAGE)
