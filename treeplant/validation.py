"""
Input checks shared by the services.
"""
from typing import Any, Dict, Iterable, Optional

from bson import ObjectId

from treeplant.errors import AuthorizationError, ValidationError
from treeplant.utils.dates import is_future
from treeplant.utils.logger import get_logger

logger = get_logger(__name__)

EVENT_FIELDS = ('title', 'description', 'eventType', 'thumbnail', 'location', 'date', 'userEmail')


def normalize_email(email: str) -> str:
    return email.strip().lower()


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    """Raise ValidationError for the first field that is missing or falsy."""
    for field in fields:
        if not data.get(field):
            raise ValidationError(f"{field} is required")


def require_email(user_email: Optional[Any]) -> str:
    """Check a caller-supplied email and return it normalized."""
    if not user_email or not isinstance(user_email, str) or not user_email.strip():
        raise ValidationError(f"userEmail is required and must be a string, received: {user_email}")
    return normalize_email(user_email)


def parse_object_id(value: Any, action: str = "lookup") -> ObjectId:
    """Validate an identifier before it reaches a query."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        logger.warning(f"Invalid event ID received for {action}: {value}")
        raise ValidationError(f"Invalid event ID format, received: {value}")
    return ObjectId(value)


def require_future_date(date) -> None:
    if not is_future(date):
        raise ValidationError("Event date must be in the future")


def check_owner(event: Dict[str, Any], user_email: str, action: str) -> None:
    """Compare a normalized caller email with the event's stored owner."""
    if event.get("userEmail") != user_email:
        logger.warning(f"{user_email} tried to {action} event {event.get('_id')} owned by {event.get('userEmail')}")
        raise AuthorizationError(f"You are not authorized to {action} this event")
