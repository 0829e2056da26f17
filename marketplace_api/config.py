"""
Configuration module for the Marketplace API
Centralizes environment variables and the service-identity credential blob
"""
import base64
import json
import logging
import os
from urllib.parse import quote_plus

logger = logging.getLogger(__name__)

# Server settings
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Database settings
DB_SCHEME = os.getenv("DB_SCHEME", "mongodb")
DB_HOST = os.getenv("DB_HOST", "localhost:27017")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME", "marketplace_db")
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))


def build_mongo_uri(scheme: str, host: str, user: str = None, password: str = None) -> str:
    """Build a MongoDB connection string, quoting credentials when given"""
    if user and password:
        return f"{scheme}://{quote_plus(user)}:{quote_plus(password)}@{host}/?retryWrites=true&w=majority"
    return f"{scheme}://{host}"


MONGO_URI = os.getenv("MONGO_URI") or build_mongo_uri(DB_SCHEME, DB_HOST, DB_USER, DB_PASS)


def decode_credentials(blob: str) -> dict:
    """
    Decode the base64-encoded service-identity credential blob.

    The blob is a JSON object holding the token verification settings
    (secret_key or public_key, algorithm, issuer, audience). Returns an
    empty dict when the blob is missing or unreadable.
    """
    if not blob:
        return {}
    try:
        decoded = json.loads(base64.b64decode(blob).decode("utf-8"))
    except Exception as e:
        logger.error(f"Could not decode SERVICE_IDENTITY_CREDENTIALS: {e}")
        return {}
    if not isinstance(decoded, dict):
        logger.error("SERVICE_IDENTITY_CREDENTIALS must decode to a JSON object")
        return {}
    return decoded


# Identity settings, decoded once at startup
SERVICE_IDENTITY_CREDENTIALS = decode_credentials(os.getenv("SERVICE_IDENTITY_CREDENTIALS", ""))
