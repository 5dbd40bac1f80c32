from pydantic import BaseModel
from typing import Optional
from datetime import datetime

# Every field is optional here; the services decide what is required so that
# a missing field yields "<field> is required" rather than a schema error.


class UserCreate(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None


class EventFields(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    eventType: Optional[str] = None
    thumbnail: Optional[str] = None
    location: Optional[str] = None
    date: Optional[datetime] = None
    userEmail: Optional[str] = None


class EventJoinCreate(BaseModel):
    eventId: Optional[str] = None
    userEmail: Optional[str] = None
    joinedAt: Optional[datetime] = None


# Responses
class UserCreateResponse(BaseModel):
    message: str
    insertedId: Optional[str] = None
    inserted: Optional[bool] = None


class EventCreateResponse(BaseModel):
    message: str
    eventId: str


class EventJoinResponse(BaseModel):
    message: str
    joinId: str


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
