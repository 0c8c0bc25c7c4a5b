"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cinema.api.v1.router import router as v1_router
from cinema.config import get_settings
from cinema.errors import CinemaError, InternalError, SeatConflict
from cinema.redis_client import close_redis
from cinema.schemas.common import ErrorResponse
from cinema.seat_locks import SeatLocker, build_seat_locker
from cinema.storage import Storage, build_storage

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Cinema Booking API...")

    if getattr(app.state, "storage", None) is None:
        app.state.storage = build_storage(settings)
    await app.state.storage.initialize()
    logger.info("Storage backend ready: %s", app.state.storage.name)

    if getattr(app.state, "seat_locker", None) is None:
        app.state.seat_locker = await build_seat_locker(settings)
    logger.info("Seat locker ready: %s", type(app.state.seat_locker).__name__)

    yield

    # Shutdown
    logger.info("Shutting down Cinema Booking API...")
    await app.state.storage.close()
    await close_redis()


def create_app(
    storage: Storage | None = None,
    seat_locker: SeatLocker | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        storage: Storage backend; built from settings at startup when omitted
        seat_locker: Seat locker; built from settings at startup when omitted
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
## Cinema Booking API

Movie listings, seat selection and ticket booking for a multi-hall cinema.

- **Conflict-free booking**: a seat of a showing can be held by only one
  non-cancelled booking, even under concurrent requests
- **Per-showtime pricing**: each movie showtime carries its own seat price
- **Admin console**: movies, halls, reservations, check-in and statistics

### Authentication
User endpoints require the `X-User-ID` header. Admin endpoints require
`X-Admin-Key` and accept an optional `X-Admin-Name`.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.seat_locker = seat_locker

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(v1_router, prefix="/api")

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "storage": getattr(app.state.storage, "name", None),
        }

    @app.exception_handler(CinemaError)
    async def cinema_exception_handler(request: Request, exc: CinemaError):
        """Translate booking domain errors into HTTP responses."""
        if isinstance(exc, InternalError):
            logger.error("Internal error on %s: %s", request.url.path, exc.message)
        body = ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            seats=exc.seats if isinstance(exc, SeatConflict) else None,
            timestamp=datetime.now(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(mode="json", exclude_none=True),
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc) if settings.DEBUG else None,
            },
        )

    return app


# Create application instance
app = create_app()


def run():
    """Run the application with uvicorn."""
    uvicorn.run(
        "cinema.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
