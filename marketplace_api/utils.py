"""
Utility functions for the Marketplace API
Shared helper functions for error payloads, identifiers and serialization
"""
import base64
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId, Decimal128
from bson.errors import InvalidId

from marketplace_api.services.errors import InvalidIdError


def error_payload(code: str, message: str, details: Optional[dict] = None) -> dict:
    """Create a standardized error response payload"""
    return {
        "code": code,
        "message": message,
        "details": details
    }


def parse_object_id(value: str) -> ObjectId:
    """
    Parse a path segment into an ObjectId.

    Raises InvalidIdError (a MarketplaceError) when the value is not a
    24-character hex string.
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdError(value)


def serialize_mongo_doc(doc: Any) -> Any:
    """
    Recursively convert a MongoDB document to a JSON-serializable dict.

    Handles: ObjectId -> str, datetime -> ISO str, bytes -> base64 str,
    Decimal128 -> str, and nested dicts/lists.
    """
    if isinstance(doc, dict):
        return {k: serialize_mongo_doc(v) for k, v in doc.items()}
    if isinstance(doc, list):
        return [serialize_mongo_doc(item) for item in doc]
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, datetime):
        return doc.isoformat()
    if isinstance(doc, bytes):
        return base64.b64encode(doc).decode("ascii")
    if isinstance(doc, Decimal128):
        return str(doc)
    return doc
