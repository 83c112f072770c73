"""
Periferia Social Backend — FastAPI Application Factory
=======================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn periferia_social.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes (/api):                                     │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌────────┐  │
    │  │ auth     │ │ users/me │ │ posts    │ │ health │  │
    │  └──────────┘ └──────────┘ └──────────┘ └────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  PeriferiaError → its status, {"message": ...}      │
    │  anything else  → 500, generic message              │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Check for development-default secrets (fatal in production)
    3. Open the Database handle unless one was injected
    4. Optionally create the schema (DB_CREATE_SCHEMA)

    Shutdown:
    1. Dispose the Database handle if this app opened it
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from periferia_social import __version__
from periferia_social.config import settings
from periferia_social.database import Database
from periferia_social.exceptions import PeriferiaError
from periferia_social.middleware.logging import RequestLoggingMiddleware
from periferia_social.middleware.request_id import RequestIDMiddleware, request_id_var
from periferia_social.routes import auth, health, posts, users

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before any other initialization.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    # passlib logs a traceback when probing the bcrypt backend version
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the persistence handle on startup and close it on shutdown.

    A Database injected through create_app() belongs to the caller (tests)
    and is left open at shutdown.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Periferia Social backend starting up (environment=%s)", settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        if settings.is_production:
            logger.critical("Refusing to start: %s", str(e))
            raise
        logger.warning("%s", str(e))
        logger.warning("Development defaults are acceptable locally, never in production.")

    owns_database = app.state.database is None
    if owns_database:
        app.state.database = Database.from_settings(settings)

    if settings.db_create_schema:
        await app.state.database.create_schema()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.port)
    logger.info("API docs: http://%s:%d/api/docs", settings.backend_host, settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Periferia Social backend shutting down...")
    if owns_database:
        await app.state.database.dispose()
        app.state.database = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers, the only code that turns a failure
    into an HTTP response.

    Handler hierarchy:
        PeriferiaError          → exc.status_code, {"message": exc.message}
        RequestValidationError  → 400 (malformed JSON, non-integer path id)
        HTTPException           → its status (unknown route, wrong method)
        Exception (fallback)    → 500, generic message; traceback logged only
    """

    @app.exception_handler(PeriferiaError)
    async def handle_app_error(request: Request, exc: PeriferiaError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            # Context may hold constraint names or ids; log it, never return it
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation failed: %s", rid, exc.errors())
        return JSONResponse(status_code=400, content={"message": "Invalid request"})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: the client gets a generic 500, the log gets the traceback."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: An already-open Database handle. Tests pass one bound to a
            throwaway SQLite file; production leaves it None and the
            lifespan opens one from settings.
    """
    app = FastAPI(
        title="Periferia Social API",
        description="Minimal social network: log in, post short messages, like posts.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(posts.router)
    app.include_router(health.router)

    return app


# uvicorn expects `periferia_social.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run(
        "periferia_social.main:app",
        host=settings.backend_host,
        port=settings.port,
    )
