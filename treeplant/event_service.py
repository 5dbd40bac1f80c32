"""
Event CRUD backed by the `events` collection.

Deleting an event also deletes its rows in `eventJoins`. The two deletes are
separate operations: if the process dies between them the joins are orphaned.
"""
from typing import Any, Dict, List, Optional

import pymongo
from bson import ObjectId
from pymongo.database import Database
from pymongo.errors import PyMongoError

from treeplant.errors import NotFoundError, StoreError
from treeplant.models import EventFields
from treeplant.utils.config import Config
from treeplant.utils.dates import to_utc, utcnow
from treeplant.utils.logger import get_logger
from treeplant.validation import (
    EVENT_FIELDS,
    check_owner,
    normalize_email,
    parse_object_id,
    require_email,
    require_fields,
    require_future_date,
)

logger = get_logger(__name__)


class EventService:
    def __init__(self, db: Database):
        self.db = db
        self.events = db[Config.EVENTS_COLLECTION]
        self.event_joins = db[Config.EVENT_JOINS_COLLECTION]

    def _build_event_fields(self, fields: EventFields, user_email: Optional[str] = None) -> Dict[str, Any]:
        """Validate the editable fields and return them ready for storage."""
        data = fields.model_dump()
        if user_email is not None:
            data["userEmail"] = user_email

        require_fields(data, EVENT_FIELDS)
        require_future_date(data["date"])

        data["userEmail"] = normalize_email(data["userEmail"])
        data["date"] = to_utc(data["date"])
        return data

    def _find_event(self, event_id: ObjectId) -> Dict[str, Any]:
        event = self.events.find_one({"_id": event_id})
        if not event:
            raise NotFoundError("Event not found")
        return event

    def create_event(self, fields: EventFields) -> str:
        """
        Store a new event owned by ``fields.userEmail``.

        Returns:
            str: The new event's id.

        Raises:
            ValidationError: A field is missing or the date is not in the future.
            StoreError: MongoDB failed.
        """
        event_doc = self._build_event_fields(fields)
        event_doc["createdAt"] = utcnow()

        try:
            result = self.events.insert_one(event_doc)
        except PyMongoError as e:
            logger.error(f"Error creating event: {e}", exc_info=True)
            raise StoreError(f"Failed to create event: {e}")

        logger.info(f"Event created with ID: {result.inserted_id}")
        return str(result.inserted_id)

    def list_upcoming(self) -> List[Dict[str, Any]]:
        """Events dated after now, soonest first."""
        try:
            return list(
                self.events.find({"date": {"$gt": utcnow()}}).sort("date", pymongo.ASCENDING)
            )
        except PyMongoError as e:
            logger.error(f"Error fetching upcoming events: {e}", exc_info=True)
            raise StoreError(f"Failed to fetch upcoming events: {e}")

    def list_my_events(self, user_email: Optional[str]) -> List[Dict[str, Any]]:
        """Events owned by ``user_email``, soonest first."""
        logger.info(f"Received userEmail: {user_email}")
        normalized_email = require_email(user_email)

        try:
            events = list(
                self.events.find({"userEmail": normalized_email}).sort("date", pymongo.ASCENDING)
            )
        except PyMongoError as e:
            logger.error(f"Error fetching my events: {e}", exc_info=True)
            raise StoreError(f"Failed to fetch my events: {e}")

        logger.info(f"Found {len(events)} events for {normalized_email}")
        return events

    def get_event(self, event_id: str) -> Dict[str, Any]:
        oid = parse_object_id(event_id)
        try:
            return self._find_event(oid)
        except PyMongoError as e:
            logger.error(f"Error fetching event {event_id}: {e}", exc_info=True)
            raise StoreError(f"Failed to fetch event: {e}")

    def update_event(self, event_id: str, fields: EventFields) -> None:
        """
        Replace the editable fields of an event the caller owns.

        Every editable field must be supplied again; ``createdAt`` is kept and
        ``updatedAt`` is set to now.

        Raises:
            ValidationError: Bad id, missing field or non-future date.
            NotFoundError: No such event, or it vanished before the write.
            AuthorizationError: ``fields.userEmail`` does not own the event.
            StoreError: MongoDB failed.
        """
        oid = parse_object_id(event_id, "update")
        user_email = require_email(fields.userEmail)

        try:
            event = self._find_event(oid)
            check_owner(event, user_email, "update")

            updated_event = self._build_event_fields(fields, user_email)
            updated_event["updatedAt"] = utcnow()

            result = self.events.update_one({"_id": oid}, {"$set": updated_event})
        except PyMongoError as e:
            logger.error(f"Error updating event {event_id}: {e}", exc_info=True)
            raise StoreError(f"Failed to update event: {e}")

        if result.matched_count == 0:
            raise NotFoundError("Event not found")

        logger.info(f"Event {event_id} updated by {user_email}")

    def delete_event(self, event_id: str, user_email: Optional[str]) -> int:
        """
        Delete an event the caller owns, then the joins that reference it.

        Returns:
            int: Number of join records removed with the event.

        Raises:
            ValidationError: Bad id or missing email.
            NotFoundError: No such event.
            AuthorizationError: ``user_email`` does not own the event.
            StoreError: MongoDB failed, including during the join cascade.
        """
        oid = parse_object_id(event_id, "delete")
        normalized_email = require_email(user_email)

        try:
            event = self._find_event(oid)
            check_owner(event, normalized_email, "delete")

            result = self.events.delete_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Error deleting event {event_id}: {e}", exc_info=True)
            raise StoreError(f"Failed to delete event: {e}")

        if result.deleted_count == 0:
            raise NotFoundError("Event not found")

        try:
            cascade = self.event_joins.delete_many({"eventId": oid})
        except PyMongoError as e:
            logger.error(f"Event {event_id} deleted but its joins were not: {e}", exc_info=True)
            raise StoreError(f"Failed to delete event: {e}")

        logger.info(f"Event {event_id} deleted with {cascade.deleted_count} joins")
        return cascade.deleted_count


def get_event_service(db: Database) -> EventService:
    return EventService(db)
