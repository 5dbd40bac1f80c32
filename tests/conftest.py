"""Pytest configuration and shared fixtures."""

from datetime import timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from treeplant.mongo import ensure_indexes, get_db
from treeplant.server import create_app
from treeplant.utils.config import Config
from treeplant.utils.dates import utcnow


@pytest.fixture
def db():
    database = mongomock.MongoClient()[Config.MONGODB_DB]
    ensure_indexes(database)
    return database


@pytest.fixture
def api_client(db) -> TestClient:
    app = create_app(use_lifespan=False)
    app.dependency_overrides[get_db] = lambda: db
    return TestClient(app)


@pytest.fixture
def tomorrow():
    return utcnow() + timedelta(days=1)


@pytest.fixture
def event_payload(tomorrow):
    return {
        "title": "Plant Oaks",
        "description": "Bring gloves and water",
        "eventType": "planting",
        "thumbnail": "https://example.com/oaks.png",
        "location": "Park",
        "date": tomorrow.isoformat(),
        "userEmail": "A@X.com",
    }


@pytest.fixture
def created_event(api_client, event_payload):
    """Create an event over HTTP and return its id."""
    response = api_client.post("/events", json=event_payload)
    assert response.status_code == 201
    return response.json()["eventId"]
