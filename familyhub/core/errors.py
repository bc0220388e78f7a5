"""
Error taxonomy shared by every module.

Each error is an HTTPException so routes and services can raise it directly;
main.py renders all of them as {"error": <detail>}.
"""

from fastapi import HTTPException, status
from postgrest.exceptions import APIError
import logging

logger = logging.getLogger(__name__)

# Postgres / PostgREST codes the services branch on
UNDEFINED_TABLE = "42P01"
UNDEFINED_COLUMN = "42703"
UNIQUE_VIOLATION = "23505"
NO_ROWS = "PGRST116"


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationFailed(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Expired(HTTPException):
    def __init__(self, detail: str = "Invitation has expired"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AlreadyAccepted(HTTPException):
    def __init__(self, detail: str = "Invitation has already been accepted"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StorageFailure(HTTPException):
    def __init__(self, detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(status_code=status_code, detail=detail)


class ExternalServiceFailure(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class ServiceNotConfigured(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


def error_code(exc: Exception) -> str:
    return getattr(exc, "code", None) or ""


def is_missing_relation(exc: Exception) -> bool:
    """True when the table (or an embedded relationship) does not exist yet."""
    message = str(getattr(exc, "message", None) or exc)
    return (
        error_code(exc) == UNDEFINED_TABLE
        or "does not exist" in message
        or "Could not find a relationship" in message
    )


def storage_failure(exc: Exception, context: str = "") -> StorageFailure:
    """Convert a persistence-layer error into StorageFailure, keeping the original message."""
    message = getattr(exc, "message", None) or str(exc)
    if context:
        logger.error(f"{context}: {message}")
    if isinstance(exc, APIError) and is_missing_relation(exc):
        return StorageFailure(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return StorageFailure(message)
