from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pymongo.database import Database

from treeplant.errors import ServiceError, to_http_exception
from treeplant.event_service import get_event_service
from treeplant.models import EventCreateResponse, EventFields, MessageResponse
from treeplant.mongo import get_db
from treeplant.serializers import serialize_document, serialize_documents

# Create router for event endpoints
event_router = APIRouter(prefix="/events", tags=["events"])


@event_router.post("", response_model=EventCreateResponse, status_code=status.HTTP_201_CREATED)
def create_event(fields: EventFields, db: Database = Depends(get_db)):
    """Create a new event"""
    try:
        event_id = get_event_service(db).create_event(fields)
    except ServiceError as e:
        raise to_http_exception(e)
    return EventCreateResponse(message="Event created successfully", eventId=event_id)


@event_router.get("/upcoming")
def get_upcoming_events(db: Database = Depends(get_db)):
    """Get all events that have not happened yet"""
    try:
        return serialize_documents(get_event_service(db).list_upcoming())
    except ServiceError as e:
        raise to_http_exception(e)


# Declared before /{event_id} so "my-events" is not taken for an id
@event_router.get("/my-events")
def get_my_events(userEmail: Optional[str] = Query(None), db: Database = Depends(get_db)):
    """Get the events created by a user"""
    try:
        return serialize_documents(get_event_service(db).list_my_events(userEmail))
    except ServiceError as e:
        raise to_http_exception(e)


@event_router.get("/{event_id}")
def get_event(event_id: str, db: Database = Depends(get_db)):
    """Get a specific event by ID"""
    try:
        return serialize_document(get_event_service(db).get_event(event_id))
    except ServiceError as e:
        raise to_http_exception(e)


@event_router.put("/{event_id}", response_model=MessageResponse)
def update_event(event_id: str, fields: EventFields, db: Database = Depends(get_db)):
    """Update an event owned by the caller"""
    try:
        get_event_service(db).update_event(event_id, fields)
    except ServiceError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Event updated successfully")


@event_router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(event_id: str, userEmail: Optional[str] = Query(None), db: Database = Depends(get_db)):
    """Delete an event owned by the caller, along with its joins"""
    try:
        get_event_service(db).delete_event(event_id, userEmail)
    except ServiceError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Event deleted successfully")
