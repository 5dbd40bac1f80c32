"""
Timestamp helpers.

MongoDB stores datetimes in UTC and pymongo hands them back naive, so every
timestamp the API compares or stores is a naive UTC datetime.
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, truncated to BSON precision."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_future(value: datetime) -> bool:
    return to_utc(value) > utcnow()
