"""
CivicMap Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn civicmap.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────┐ ┌───────┐ ┌────────────┐  │
    │  │  Req ID  │→│ Logging │→│ GZip  │→│    CORS    │  │
    │  └──────────┘ └─────────┘ └───────┘ └────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────────┐ ┌──────────────┐  │
    │  │ GET /welcome[/bulletins|     │ │ GET /health  │  │
    │  │   /locations|/parkingspaces] │ │              │  │
    │  └──────────────────────────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NotFound→404 │ Mapping/Store/File→500        │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate store configuration
    3. Connect the shared document store client (fatal if unreachable)

    Shutdown:
    1. Close the document store client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from civicmap import __version__
from civicmap.config import settings
from civicmap.database import connect_store
from civicmap.exceptions import (
    CivicMapError,
    FileStorageError,
    GeometryError,
    MissingFieldError,
    NotFoundError,
    RecordMappingError,
    StoreConnectionError,
    TypeMismatchError,
)
from civicmap.middleware.logging import RequestLoggingMiddleware
from civicmap.middleware.request_id import RequestIDMiddleware, request_id_var
from civicmap.routes import health, welcome

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that are noisy at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging → config check → one shared store client on app.state.
    Shutdown: close that client.

    A StoreConnectionError raised by connect_store() is not caught: uvicorn
    aborts startup and the process exits.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("CivicMap Backend %s starting up...", __version__)

    try:
        settings.validate_store_settings()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    app.state.store = await connect_store()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("CivicMap Backend shutting down...")
    await app.state.store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, exc: CivicMapError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": exc.message,
            "details": exc.context,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        NotFoundError           → 404 not_found
        MissingFieldError       → 500 missing_field
        TypeMismatchError       → 500 type_mismatch
        GeometryError           → 500 geometry_error
        StoreConnectionError    → 500 store_unavailable
        FileStorageError        → 500 file_read_error
        CivicMapError (base)    → 500 server_error
        Exception (fallback)    → 500 internal_server_error

    Error bodies carry the human-readable message and the fault detail
    (collection, field, expected/actual type, driver message).
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.warning("[%s] Not found: %s", request_id_var.get(""), exc.message)
        return _error_response(404, "not_found", exc)

    @app.exception_handler(RecordMappingError)
    async def handle_mapping_error(request: Request, exc: RecordMappingError):
        """Stored data breaks the response contract: a server-side data fault."""
        if isinstance(exc, MissingFieldError):
            code = "missing_field"
        elif isinstance(exc, TypeMismatchError):
            code = "type_mismatch"
        elif isinstance(exc, GeometryError):
            code = "geometry_error"
        else:
            code = "mapping_error"
        logger.error(
            "[%s] Record mapping fault: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, code, exc)

    @app.exception_handler(StoreConnectionError)
    async def handle_store_error(request: Request, exc: StoreConnectionError):
        logger.error(
            "[%s] Document store error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, "store_unavailable", exc)

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error(
            "[%s] File read error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, "file_read_error", exc)

    @app.exception_handler(CivicMapError)
    async def handle_app_error(request: Request, exc: CivicMapError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "server_error", exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace goes to the log, a generic body to the client."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "details": {"error_type": type(exc).__name__},
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="CivicMap API",
        description=(
            "Read-only API serving bulletins, named locations and parking-space "
            "polygons for the map frontend, plus a static welcome message."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware, skip_paths=settings.access_log_skip_paths_list)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(welcome.router, prefix=settings.api_prefix)
    app.include_router(health.router)

    return app


# uvicorn expects `civicmap.main:app` to be importable
app = create_app()
