"""Tests for the event endpoints and EventService.

Run with: pytest tests/test_events.py -v
"""

from datetime import timedelta
from unittest.mock import MagicMock, Mock

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from treeplant.errors import AuthorizationError, NotFoundError, StoreError, ValidationError
from treeplant.event_service import EventService
from treeplant.models import EventFields
from treeplant.utils.dates import utcnow


def insert_event(db, **overrides):
    doc = {
        "title": "Plant Maples",
        "description": "Spring planting",
        "eventType": "planting",
        "thumbnail": "https://example.com/maple.png",
        "location": "Riverside",
        "date": utcnow() + timedelta(days=3),
        "userEmail": "a@x.com",
        "createdAt": utcnow(),
    }
    doc.update(overrides)
    return db.events.insert_one(doc).inserted_id


class TestCreateEvent:
    """Tests for POST /events"""

    def test_create_event_returns_201(self, api_client, db, event_payload):
        response = api_client.post("/events", json=event_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Event created successfully"

        stored = db.events.find_one({"_id": ObjectId(body["eventId"])})
        assert stored["userEmail"] == "a@x.com"
        assert stored["title"] == "Plant Oaks"
        assert "createdAt" in stored
        assert "updatedAt" not in stored

    @pytest.mark.parametrize("field", ["title", "description", "eventType", "thumbnail", "location", "date", "userEmail"])
    def test_missing_field_returns_400(self, api_client, event_payload, field):
        del event_payload[field]
        response = api_client.post("/events", json=event_payload)

        assert response.status_code == 400
        assert response.json()["detail"] == f"{field} is required"

    def test_empty_string_field_is_rejected(self, api_client, event_payload):
        event_payload["location"] = ""
        response = api_client.post("/events", json=event_payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "location is required"

    def test_past_date_is_rejected(self, api_client, db, event_payload):
        event_payload["date"] = (utcnow() - timedelta(minutes=1)).isoformat()
        response = api_client.post("/events", json=event_payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Event date must be in the future"
        assert db.events.count_documents({}) == 0

    def test_unparseable_date_is_rejected(self, api_client, event_payload):
        event_payload["date"] = "next tuesday"
        response = api_client.post("/events", json=event_payload)

        assert response.status_code == 400
        assert response.json()["detail"].startswith("date:")

    def test_offset_date_is_stored_in_utc(self, db):
        """A date with a UTC offset is converted before it is stored."""
        when = (utcnow() + timedelta(days=2)).replace(microsecond=0)
        fields = EventFields(
            title="t", description="d", eventType="e", thumbnail="th", location="l",
            date=when.isoformat() + "+02:00", userEmail="a@x.com",
        )
        event_id = EventService(db).create_event(fields)

        stored = db.events.find_one({"_id": ObjectId(event_id)})
        assert stored["date"] == when - timedelta(hours=2)


class TestListEvents:
    """Tests for GET /events/upcoming and GET /events/my-events"""

    def test_upcoming_excludes_past_and_sorts_by_date(self, api_client, db):
        later = insert_event(db, title="later", date=utcnow() + timedelta(days=10))
        sooner = insert_event(db, title="sooner", date=utcnow() + timedelta(days=1))
        insert_event(db, title="past", date=utcnow() - timedelta(days=1))

        response = api_client.get("/events/upcoming")

        assert response.status_code == 200
        assert [e["_id"] for e in response.json()] == [str(sooner), str(later)]

    def test_created_event_is_upcoming(self, api_client, created_event):
        ids = [e["_id"] for e in api_client.get("/events/upcoming").json()]
        assert created_event in ids

    def test_my_events_matches_case_insensitively(self, api_client, created_event):
        response = api_client.get("/events/my-events", params={"userEmail": "a@x.com"})

        assert response.status_code == 200
        events = response.json()
        assert [e["_id"] for e in events] == [created_event]
        assert events[0]["title"] == "Plant Oaks"

    def test_my_events_only_returns_own_events(self, api_client, db):
        insert_event(db, userEmail="someone@else.com")
        response = api_client.get("/events/my-events", params={"userEmail": "A@X.com"})

        assert response.status_code == 200
        assert response.json() == []

    def test_my_events_requires_email(self, api_client):
        response = api_client.get("/events/my-events")

        assert response.status_code == 400
        assert "userEmail is required" in response.json()["detail"]

    def test_upcoming_store_failure_raises_store_error(self):
        service = EventService(MagicMock())
        service.events.find.side_effect = PyMongoError("connection reset")

        with pytest.raises(StoreError, match="connection reset"):
            service.list_upcoming()


class TestGetEvent:
    """Tests for GET /events/{id}"""

    def test_get_event_returns_details(self, api_client, created_event):
        response = api_client.get(f"/events/{created_event}")

        assert response.status_code == 200
        body = response.json()
        assert body["_id"] == created_event
        assert body["eventType"] == "planting"

    def test_get_event_invalid_id_format(self, api_client):
        response = api_client.get("/events/not-an-id")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid event ID format, received: not-an-id"

    def test_get_event_not_found(self, api_client):
        response = api_client.get(f"/events/{ObjectId()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Event not found"


class TestUpdateEvent:
    """Tests for PUT /events/{id}"""

    def test_owner_can_update(self, api_client, db, created_event, event_payload):
        event_payload.update(title="Plant Elms", userEmail=" a@X.com ")
        response = api_client.put(f"/events/{created_event}", json=event_payload)

        assert response.status_code == 200
        assert response.json() == {"message": "Event updated successfully"}
        stored = db.events.find_one({"_id": ObjectId(created_event)})
        assert stored["title"] == "Plant Elms"
        assert "updatedAt" in stored
        assert "createdAt" in stored

    def test_non_owner_is_forbidden(self, api_client, created_event, event_payload):
        event_payload["userEmail"] = "wrong@x.com"
        response = api_client.put(f"/events/{created_event}", json=event_payload)

        assert response.status_code == 403
        assert response.json()["detail"] == "You are not authorized to update this event"

    def test_non_owner_is_forbidden_even_with_invalid_payload(self, api_client, created_event):
        response = api_client.put(f"/events/{created_event}", json={"userEmail": "wrong@x.com"})
        assert response.status_code == 403

    def test_update_requires_all_fields(self, api_client, created_event, event_payload):
        del event_payload["thumbnail"]
        response = api_client.put(f"/events/{created_event}", json=event_payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "thumbnail is required"

    def test_update_rejects_past_date(self, api_client, created_event, event_payload):
        event_payload["date"] = (utcnow() - timedelta(days=1)).isoformat()
        response = api_client.put(f"/events/{created_event}", json=event_payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Event date must be in the future"

    def test_update_requires_user_email(self, api_client, created_event, event_payload):
        del event_payload["userEmail"]
        response = api_client.put(f"/events/{created_event}", json=event_payload)

        assert response.status_code == 400
        assert "userEmail is required" in response.json()["detail"]

    def test_update_unknown_event(self, api_client, event_payload):
        response = api_client.put(f"/events/{ObjectId()}", json=event_payload)
        assert response.status_code == 404

    def test_update_invalid_id(self, api_client, event_payload):
        response = api_client.put("/events/123", json=event_payload)
        assert response.status_code == 400

    def test_update_racing_delete_is_not_found(self, db, tomorrow):
        """update_one matching nothing after the ownership check reports 404."""
        event_id = insert_event(db)
        service = EventService(db)
        real_events = service.events
        service.events = Mock(wraps=real_events)
        service.events.update_one.return_value = Mock(matched_count=0)

        fields = EventFields(
            title="t", description="d", eventType="e", thumbnail="th", location="l",
            date=tomorrow, userEmail="a@x.com",
        )
        with pytest.raises(NotFoundError):
            service.update_event(str(event_id), fields)


class TestDeleteEvent:
    """Tests for DELETE /events/{id}"""

    def test_owner_deletes_event_and_its_joins(self, api_client, db, created_event):
        api_client.post("/event-joins", json={
            "eventId": created_event, "userEmail": "b@x.com", "joinedAt": utcnow().isoformat(),
        })
        assert db.eventJoins.count_documents({}) == 1

        response = api_client.delete(f"/events/{created_event}", params={"userEmail": "A@x.com"})

        assert response.status_code == 200
        assert response.json() == {"message": "Event deleted successfully"}
        assert api_client.get(f"/events/{created_event}").status_code == 404
        assert db.eventJoins.count_documents({}) == 0
        assert api_client.get("/event-joins/my-events", params={"userEmail": "b@x.com"}).json() == []

    def test_non_owner_is_forbidden(self, api_client, db, created_event):
        response = api_client.delete(f"/events/{created_event}", params={"userEmail": "wrong@x.com"})

        assert response.status_code == 403
        assert response.json()["detail"] == "You are not authorized to delete this event"
        assert db.events.count_documents({}) == 1

    def test_delete_requires_user_email(self, api_client, created_event):
        response = api_client.delete(f"/events/{created_event}")
        assert response.status_code == 400

    def test_delete_unknown_event(self, api_client):
        response = api_client.delete(f"/events/{ObjectId()}", params={"userEmail": "a@x.com"})
        assert response.status_code == 404

    def test_delete_invalid_id(self, api_client):
        response = api_client.delete("/events/xyz", params={"userEmail": "a@x.com"})
        assert response.status_code == 400

    def test_cascade_failure_leaves_event_deleted(self, db):
        """The event delete is not rolled back when the join cascade fails."""
        event_id = insert_event(db)
        service = EventService(db)
        service.event_joins = Mock()
        service.event_joins.delete_many.side_effect = PyMongoError("joins unavailable")

        with pytest.raises(StoreError):
            service.delete_event(str(event_id), "a@x.com")

        assert db.events.find_one({"_id": event_id}) is None


class TestEventServiceErrors:
    """Service-level error mapping."""

    def test_get_event_invalid_id_raises_validation_error(self, db):
        with pytest.raises(ValidationError):
            EventService(db).get_event("zzz")

    def test_get_event_not_found_raises_error(self, db):
        with pytest.raises(NotFoundError):
            EventService(db).get_event(str(ObjectId()))

    def test_delete_by_non_owner_raises_authorization_error(self, db):
        event_id = insert_event(db)
        with pytest.raises(AuthorizationError):
            EventService(db).delete_event(str(event_id), "b@x.com")
