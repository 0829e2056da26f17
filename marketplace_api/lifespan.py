"""
Lifespan module for the Marketplace API
Handles application startup and shutdown lifecycle
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging
import traceback

from marketplace_api.config import SERVICE_IDENTITY_CREDENTIALS
from marketplace_api.auth import JWTIdentityVerifier
from marketplace_api.database import create_client, get_database, setup_indexes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_logger = logging.getLogger("uvicorn")
    owns_client = False

    # Startup: identity verifier, unless one was injected
    if getattr(app.state, "verifier", None) is None:
        app.state.verifier = JWTIdentityVerifier(SERVICE_IDENTITY_CREDENTIALS)
        if not SERVICE_IDENTITY_CREDENTIALS:
            startup_logger.warning("No service identity credentials; every token will be rejected")

    # Startup: database client, unless one was injected
    if getattr(app.state, "db", None) is None:
        app.state.mongo_client = create_client()
        app.state.db = get_database(app.state.mongo_client)
        owns_client = True

    # Startup: connectivity check
    try:
        if owns_client:
            await app.state.mongo_client.admin.command("ping")
            startup_logger.info("Connected to MongoDB")
    except Exception as e:
        startup_logger.error(f"Warning: MongoDB ping failed: {e}")
        startup_logger.error(traceback.format_exc())

    # Startup: indexes
    try:
        startup_logger.info("Setting up indexes...")
        await setup_indexes(app.state.db)
        startup_logger.info("Index setup completed")
    except Exception as e:
        startup_logger.error(f"Warning: Index setup failed: {e}")
        startup_logger.error(traceback.format_exc())

    yield

    # Shutdown: close the client we opened
    shutdown_logger = logging.getLogger("uvicorn")
    if owns_client:
        app.state.mongo_client.close()
        app.state.db = None
        shutdown_logger.info("MongoDB client closed")
