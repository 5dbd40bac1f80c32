"""
Helpers that turn MongoDB documents into JSON-serializable dicts.
"""
from datetime import datetime
from typing import Any, Dict, List

from bson import ObjectId


def serialize_document(obj: Any) -> Any:
    """Convert ObjectId and datetime values to strings, recursing into dicts and lists."""
    if isinstance(obj, ObjectId):
        return str(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    elif isinstance(obj, dict):
        return {k: serialize_document(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [serialize_document(item) for item in obj]
    return obj


def serialize_documents(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [serialize_document(doc) for doc in docs]
