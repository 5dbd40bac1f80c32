"""
Service-level exceptions for the TreePlant API.

Services raise these; routes turn them into HTTP responses with the
status code each one carries.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class ServiceError(Exception):
    """Base exception for service errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Missing or malformed field, invalid identifier or non-future date."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    """Raised when a requested event does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(ServiceError):
    """Raised when the caller's email does not own the event."""

    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(ServiceError):
    """Raised when a user joins an event twice."""

    # Clients already expect 400 for a duplicate join
    status_code = status.HTTP_400_BAD_REQUEST


class StoreError(ServiceError):
    """Raised when a MongoDB operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(error: ServiceError) -> HTTPException:
    """Convert a service error into the HTTPException FastAPI renders."""
    return HTTPException(status_code=error.status_code, detail=error.message)
