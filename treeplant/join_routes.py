from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pymongo.database import Database

from treeplant.errors import ServiceError, to_http_exception
from treeplant.join_service import get_join_service
from treeplant.models import EventJoinCreate, EventJoinResponse
from treeplant.mongo import get_db
from treeplant.serializers import serialize_documents

join_router = APIRouter(prefix="/event-joins", tags=["event-joins"])


@join_router.post("", response_model=EventJoinResponse, status_code=status.HTTP_201_CREATED)
def join_event(join: EventJoinCreate, db: Database = Depends(get_db)):
    """Join an event"""
    try:
        join_id = get_join_service(db).join_event(join)
    except ServiceError as e:
        raise to_http_exception(e)
    return EventJoinResponse(message="Successfully joined the event", joinId=join_id)


@join_router.get("/my-events")
def get_joined_events(userEmail: Optional[str] = Query(None), db: Database = Depends(get_db)):
    """Get the events a user has joined"""
    try:
        return serialize_documents(get_join_service(db).list_joined_events(userEmail))
    except ServiceError as e:
        raise to_http_exception(e)
