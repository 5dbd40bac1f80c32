"""
Event joins backed by the `eventJoins` collection.
"""
from typing import Any, Dict, List, Optional

import pymongo
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from treeplant.errors import ConflictError, NotFoundError, StoreError
from treeplant.models import EventJoinCreate
from treeplant.utils.config import Config
from treeplant.utils.dates import to_utc
from treeplant.utils.logger import get_logger
from treeplant.validation import normalize_email, parse_object_id, require_email, require_fields

logger = get_logger(__name__)

JOIN_FIELDS = ('eventId', 'userEmail', 'joinedAt')
ALREADY_JOINED = "You have already joined this event"


class JoinService:
    def __init__(self, db: Database):
        self.db = db
        self.events = db[Config.EVENTS_COLLECTION]
        self.event_joins = db[Config.EVENT_JOINS_COLLECTION]

    def join_event(self, join: EventJoinCreate) -> str:
        """
        Record that a user joined an event.

        Returns:
            str: The new join record's id.

        Raises:
            ValidationError: Missing field or malformed event id.
            ConflictError: The user already joined this event.
            NotFoundError: The event does not exist.
            StoreError: MongoDB failed.
        """
        require_fields(join.model_dump(), JOIN_FIELDS)
        event_id = parse_object_id(join.eventId, "join")

        join_doc = {
            "eventId": event_id,
            "userEmail": normalize_email(join.userEmail),
            "joinedAt": to_utc(join.joinedAt),
        }

        try:
            existing_join = self.event_joins.find_one({
                "eventId": join_doc["eventId"],
                "userEmail": join_doc["userEmail"],
            })
            if existing_join:
                raise ConflictError(ALREADY_JOINED)

            if not self.events.find_one({"_id": event_id}, {"_id": 1}):
                raise NotFoundError("Event not found")

            result = self.event_joins.insert_one(join_doc)
        except DuplicateKeyError:
            raise ConflictError(ALREADY_JOINED)
        except PyMongoError as e:
            logger.error(f"Error joining event: {e}", exc_info=True)
            raise StoreError(f"Failed to join event: {e}")

        logger.info(f"{join_doc['userEmail']} joined event {event_id} (join {result.inserted_id})")
        return str(result.inserted_id)

    def list_joined_events(self, user_email: Optional[str]) -> List[Dict[str, Any]]:
        """Events the user has joined, soonest first. Empty when they joined none."""
        logger.info(f"Received userEmail for joined events: {user_email}")
        normalized_email = require_email(user_email)

        try:
            join_records = self.event_joins.find({"userEmail": normalized_email}, {"eventId": 1})
            event_ids = [join["eventId"] for join in join_records]

            if not event_ids:
                return []

            return list(
                self.events.find({"_id": {"$in": event_ids}}).sort("date", pymongo.ASCENDING)
            )
        except PyMongoError as e:
            logger.error(f"Error fetching joined events: {e}", exc_info=True)
            raise StoreError(f"Failed to fetch joined events: {e}")


def get_join_service(db: Database) -> JoinService:
    return JoinService(db)
