"""
LessonBook Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn lessonbook.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌────────────┐  │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS       │  │
    │  └──────────┘ └──────────┘ └──────┘ └────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  /collections/{name}[...]  /lessons  /orders /order │
    │  /images/{path}            /health                  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ NotFound→404 │ Database→500  │
    │  RequestValidationError→400 │ Exception→500         │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, create the document store (unless one was
              injected into create_app), log the redacted connection target.
    Shutdown: close the MongoDB client if this app created it.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from lessonbook import __version__
from lessonbook.config import settings
from lessonbook.database import DocumentStore, create_document_store
from lessonbook.exceptions import (
    INTERNAL_ERROR_MESSAGE,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from lessonbook.middleware.logging import RequestLoggingMiddleware
from lessonbook.middleware.request_id import RequestIDMiddleware, request_id_var
from lessonbook.routes import collections, health, images, lessons, orders

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("LessonBook Backend %s starting up...", __version__)

    owns_store = getattr(app.state, "document_store", None) is None
    if owns_store:
        app.state.document_store = create_document_store()
    logger.info("Database: %s / %s", settings.redacted_database_uri, settings.db_name)
    logger.info("Server is running on port %d", settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("LessonBook Backend shutting down...")
    if owns_store:
        await app.state.document_store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception taxonomy to status codes and `{"error": ...}` bodies.

        ValidationError         → 400 (malformed id, empty/invalid body)
        RequestValidationError  → 400 (body not a JSON object)
        NotFoundError           → 404 (collection, document, file)
        DatabaseError           → 500 (generic message, detail logged)
        Exception (fallback)    → 500 (generic message, traceback logged)

    Clients never see stack traces or driver messages.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        logger.warning(
            "[%s] Malformed request to %s %s: %s",
            request_id_var.get(""), request.method, request.url.path, exc.errors(),
        )
        return JSONResponse(status_code=400, content={"error": "Invalid request body."})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Global error handler: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(document_store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        document_store: store to serve requests from. When omitted, the
            lifespan creates one from settings and closes it on shutdown.
            Tests pass their own so no MongoDB server is needed.
    """
    app = FastAPI(
        title="LessonBook API",
        description=(
            "Lessons and orders for the lesson-booking frontend, plus generic "
            "CRUD over any existing MongoDB collection."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    if document_store is not None:
        app.state.document_store = document_store

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
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
    app.include_router(collections.router)
    app.include_router(lessons.router)
    app.include_router(orders.router)
    app.include_router(images.router)
    app.include_router(health.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.backend_host, port=settings.backend_port)
