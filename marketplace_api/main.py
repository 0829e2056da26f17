"""
Application entry point for the Marketplace API
Wires middleware, error handlers and routers onto the FastAPI app
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import PyMongoError
import asyncio
import logging

from marketplace_api.config import CORS_ORIGINS, HOST, PORT, REQUEST_TIMEOUT_SECONDS
from marketplace_api.lifespan import lifespan
from marketplace_api.routers import services, bookings, posts
from marketplace_api.services.errors import MarketplaceError
from marketplace_api.utils import error_payload

logger = logging.getLogger(__name__)


def create_app(db=None, verifier=None, request_timeout: float = None) -> FastAPI:
    """
    Build the application.

    ``db`` and ``verifier`` replace the MongoDB database and the JWT identity
    verifier the lifespan would otherwise create.
    """
    app = FastAPI(title="Service Marketplace API", lifespan=lifespan)
    app.state.db = db
    app.state.verifier = verifier
    timeout = request_timeout or REQUEST_TIMEOUT_SECONDS

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_timeout_middleware(request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"{request.method} {request.url.path} timed out after {timeout}s")
            return JSONResponse(
                status_code=504,
                content={"detail": error_payload("REQUEST_TIMEOUT", "Request timed out")}
            )

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": error_payload(exc.code, exc.message, exc.details or None)}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in e["loc"][1:]), "message": e["msg"]}
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"detail": error_payload("INVALID_INPUT", "Invalid request body", {"errors": errors})}
        )

    @app.exception_handler(PyMongoError)
    async def database_error_handler(request: Request, exc: PyMongoError):
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=503,
            content={"detail": error_payload("DATABASE_UNAVAILABLE", "Database unavailable")}
        )

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "My Server Is Running"

    @app.get("/health")
    async def health(request: Request):
        try:
            await request.app.state.db.command("ping")
            return {"status": "healthy", "database": "connected"}
        except Exception as e:
            raise HTTPException(
                status_code=503,
                detail=error_payload("DATABASE_UNAVAILABLE", f"Database unhealthy: {str(e)}")
            )

    app.include_router(services.router)
    app.include_router(bookings.router)
    app.include_router(posts.router)

    return app


app = create_app()


def run():
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    logger.info(f"my server is running on: {PORT}")
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
