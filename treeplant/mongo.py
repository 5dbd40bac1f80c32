from typing import Generator
from contextlib import asynccontextmanager

import pymongo
from pymongo.database import Database
from fastapi import FastAPI, Request

from treeplant.utils.config import Config
from treeplant.utils.logger import get_logger

logger = get_logger(__name__)


def create_client() -> pymongo.MongoClient:
    """Build a MongoClient from the environment configuration."""
    return pymongo.MongoClient(
        Config.mongodb_uri(),
        serverSelectionTimeoutMS=Config.MONGODB_TIMEOUT_MS,
    )


def ensure_indexes(db: Database) -> None:
    """Create the indexes the API relies on. Safe to call on every startup."""
    db[Config.USERS_COLLECTION].create_index("email", unique=True)
    db[Config.EVENTS_COLLECTION].create_index([("date", pymongo.ASCENDING)])
    db[Config.EVENTS_COLLECTION].create_index([("userEmail", pymongo.ASCENDING), ("date", pymongo.ASCENDING)])
    db[Config.EVENT_JOINS_COLLECTION].create_index(
        [("eventId", pymongo.ASCENDING), ("userEmail", pymongo.ASCENDING)],
        unique=True,
    )
    db[Config.EVENT_JOINS_COLLECTION].create_index("userEmail")
    logger.info("MongoDB indexes ensured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle MongoDB connection lifecycle for FastAPI app.

    A failed ping is fatal: the exception propagates and the server exits.
    """
    logger.info("Connecting to MongoDB")
    client = create_client()
    try:
        client.admin.command("ping")
        logger.info("Pinged your deployment. You successfully connected to MongoDB!")
        db = client[Config.MONGODB_DB]
        ensure_indexes(db)
    except Exception as e:
        logger.error("Error connecting to MongoDB: %s", e)
        client.close()
        raise

    app.state.mongo_client = client
    app.state.db = db

    yield  # Hand control back to FastAPI

    logger.info("Closing MongoDB connection")
    client.close()


def get_db(request: Request) -> Generator[Database, None, None]:
    """Dependency to provide MongoDB Database instance."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("MongoDB is not initialized; the application lifespan has not run")
    yield db
