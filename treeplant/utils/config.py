"""
Configuration utilities for the TreePlant API.
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Configuration class for application-wide settings."""

    # Server settings
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', 5000))
    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # MongoDB settings
    MONGODB_URI = os.getenv('MONGODB_URI')
    DB_USER = os.getenv('DB_USER')
    DB_PASSWORD = os.getenv('DB_PASSWORD')
    DB_CLUSTER = os.getenv('DB_CLUSTER')
    MONGODB_DB = os.getenv('MONGODB_DB', 'TreePlant')
    MONGODB_TIMEOUT_MS = int(os.getenv('MONGODB_TIMEOUT_MS', 10000))

    # Collection names
    USERS_COLLECTION = 'users'
    EVENTS_COLLECTION = 'events'
    EVENT_JOINS_COLLECTION = 'eventJoins'

    @classmethod
    def mongodb_uri(cls) -> str:
        """
        Resolve the MongoDB connection string.

        MONGODB_URI wins when set; otherwise an Atlas SRV string is built
        from DB_USER, DB_PASSWORD and DB_CLUSTER.

        Raises:
            RuntimeError: If neither form of credentials is configured.
        """
        if cls.MONGODB_URI:
            return cls.MONGODB_URI

        if not (cls.DB_USER and cls.DB_PASSWORD and cls.DB_CLUSTER):
            raise RuntimeError(
                "MONGODB_URI or DB_USER, DB_PASSWORD and DB_CLUSTER must be set in environment variables"
            )

        return (
            f"mongodb+srv://{quote_plus(cls.DB_USER)}:{quote_plus(cls.DB_PASSWORD)}"
            f"@{cls.DB_CLUSTER}/?retryWrites=true&w=majority"
        )
