"""
User registration backed by the `users` collection.
"""
from typing import Any, Dict, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from treeplant.errors import StoreError, ValidationError
from treeplant.utils.config import Config
from treeplant.utils.dates import utcnow
from treeplant.utils.logger import get_logger
from treeplant.validation import normalize_email

logger = get_logger(__name__)

DEFAULT_USERNAME = "Anonymous"
DEFAULT_ROLE = "user"


class UserService:
    def __init__(self, db: Database):
        self.db = db
        self.users = db[Config.USERS_COLLECTION]

    def register(self, email: Optional[str], name: Optional[str] = None) -> Dict[str, Any]:
        """
        Register a user the first time an email is seen.

        Registering an email that already exists is not an error; the result
        carries ``inserted: False`` instead of a new id.

        Raises:
            ValidationError: If the email is missing.
            StoreError: If MongoDB fails.
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")

        normalized_email = normalize_email(email)

        try:
            if self.users.find_one({"email": normalized_email}):
                logger.info(f"User {normalized_email} already exists")
                return {"inserted": False}

            now = utcnow()
            user_doc = {
                "username": name or DEFAULT_USERNAME,
                "email": normalized_email,
                "role": DEFAULT_ROLE,
                "created_at": now,
                "last_log_in": now,
            }
            result = self.users.insert_one(user_doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration of the same email
            logger.info(f"User {normalized_email} was registered concurrently")
            return {"inserted": False}
        except PyMongoError as e:
            logger.error(f"Error inserting user: {e}", exc_info=True)
            raise StoreError(f"Failed to add user: {e}")

        logger.info(f"User created with ID: {result.inserted_id}")
        return {"inserted": True, "insertedId": str(result.inserted_id)}


def get_user_service(db: Database) -> UserService:
    return UserService(db)
