"""
Application entry point.
Run with:  uvicorn timetracker.main:app --reload

⚠️  DEVELOPMENT NOTE:
    A default director user is seeded automatically on startup (see timetracker/db/seeder.py).
    Remove the seed_director() call below before deploying to production.
"""
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timetracker.core.logging_config import configure_logging
from timetracker.core.config import settings
from timetracker.core.exceptions import TimeTrackerError
from timetracker.api.v1.router import api_router
from timetracker.db.database import init_db
from timetracker.db.seeder import seed_director

configure_logging()

logger = logging.getLogger(__name__)


def _error_body(error: str, message: str) -> dict:
    return {"error": error, "message": message, "trace_id": str(uuid.uuid4())}


def register_exception_handlers(app: FastAPI) -> None:
    """Render domain errors as JSON; anything else becomes an opaque 500."""

    @app.exception_handler(TimeTrackerError)
    async def handle_domain_error(request: Request, exc: TimeTrackerError) -> JSONResponse:
        body = _error_body(exc.error, exc.message)
        logger.warning(
            "%s on %s %s: %s (trace_id=%s)",
            exc.error,
            request.method,
            request.url.path,
            exc.message,
            body["trace_id"],
        )
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        body = _error_body("internal_error", "An unexpected error occurred")
        logger.error(
            "Unhandled error on %s %s (trace_id=%s)",
            request.method,
            request.url.path,
            body["trace_id"],
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content=body)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    logger.info("Starting FastAPI application setup")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Time tracking API: time entry submission and review, "
            "and monthly cost reports per contract type and currency."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # ── Middleware ──────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers / errors ────────────────────────────────────────────────────
    app.include_router(api_router)
    register_exception_handlers(app)

    # ── Startup / shutdown events ───────────────────────────────────────────
    @app.on_event("startup")
    def on_startup() -> None:
        """Initialize the database and development seed data."""
        logger.info("Initializing database and seed data")
        init_db()
        # ⚠️ DEV ONLY – remove this seeder before going to production
        seed_director()

    return app


app = create_app()
