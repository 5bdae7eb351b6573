"""
FitGroup Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       bound to one Database handle.
Who:   Called by uvicorn to start the server (uvicorn fitgroup.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware Chain:                                      │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐            │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │            │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘            │
    │                                                         │
    │  Routes:                                                │
    │  /groups  /groups/{id}/participants  /groups/{id}/records│
    │  /tags    /images                    /health            │
    │                                                         │
    │  Exception Handlers:                                    │
    │  Validation→400 │ Auth→401 │ Forbidden→403 │ 404 │ 500  │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, create the upload directory
    Shutdown: dispose the database engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, IntegrityError

from fitgroup import __version__
from fitgroup.config import settings
from fitgroup.database import Database
from fitgroup.exceptions import (
    AuthorizationError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from fitgroup.middleware.logging import RequestLoggingMiddleware
from fitgroup.middleware.request_id import RequestIDMiddleware, request_id_var
from fitgroup.routes import groups, health, images, participants, records, tags

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("FitGroup Backend %s starting up...", __version__)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", upload_dir.resolve())
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("FitGroup Backend shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build the shared error body: {error, message, details?, requestId}."""
    content: Dict[str, Any] = {"error": error, "message": message}
    if details:
        content["details"] = details
    content["requestId"] = request_id_var.get("")
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError          → 400 (or its own 422) validation_error
        RequestValidationError   → 400 validation_error
        AuthorizationError       → 401 unauthorized
        ForbiddenError           → 403 forbidden
        NotFoundError            → 404 not_found
        ConflictError            → 400 conflict
        IntegrityError           → 400 conflict
        DataError                → 422 validation_error
        InternalError            → 500 server_error (FileStorageError included)
        Exception (fallback)     → 500 internal_server_error

    Security: handlers never expose stack traces or SQL in the response;
    details are logged server-side with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(exc.status_code, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed body, path or query parameters, reported as 400."""
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        first = errors[0] if errors else {"field": "", "message": "Invalid request"}
        message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return error_response(400, "validation_error", message, {"errors": errors})

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        return error_response(401, "unauthorized", exc.message)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return error_response(403, "forbidden", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return error_response(400, "conflict", exc.message)

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        """A uniqueness or foreign-key constraint fired at flush or commit."""
        logger.warning("[%s] Integrity error: %s", request_id_var.get(""), exc.orig)
        return error_response(400, "conflict", "The request conflicts with existing data")

    @app.exception_handler(DataError)
    async def handle_data_error(request: Request, exc: DataError):
        logger.warning("[%s] Data error: %s", request_id_var.get(""), exc.orig)
        return error_response(422, "validation_error", "A value is out of range for its field")

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        logger.error(
            "[%s] Internal error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: the stack trace is logged server-side only."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Persistence handle to bind. Defaults to one built from
                  settings; tests pass an in-memory database instead.
    """
    app = FastAPI(
        title="FitGroup API",
        description=(
            "Group fitness tracking: create and join groups, log workout "
            "records and compete on weekly and monthly leaderboards."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Set here rather than in the lifespan, so the app is usable even when
    # the ASGI server (or a test transport) does not run lifespan events
    app.state.database = database or Database.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(groups.router)
    app.include_router(participants.router)
    app.include_router(records.router)
    app.include_router(tags.router)
    app.include_router(images.router)
    app.include_router(health.router)

    return app


# uvicorn expects `fitgroup.main:app` to be importable
app = create_app()
