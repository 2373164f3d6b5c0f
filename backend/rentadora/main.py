"""
Rentadora API - FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the document store (or takes an injected one),
       one ResourceService + router per catalog entry, middleware and
       exception handlers, and returns the configured app.
Who:   uvicorn (`uvicorn rentadora.main:app`) and the test suite
       (`create_app(store=InMemoryDocumentStore())`).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: RequestID → Logging → RateLimit → ...  │
    │                                                     │
    │  Routes:   GET /        GET /health                 │
    │            POST   /{recurso}                        │
    │            GET    /{recurso}/{id}                   │
    │            PUT    /{recurso}/{id}                   │
    │            DELETE /{recurso}/{id}                   │
    │            × 10 recursos (schemas/catalog.py)       │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400 │ NotFound→404 │ Store→500   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, validate settings, log the route summary
    Shutdown: close the document store (disposes the SQL engine)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from rentadora import __version__
from rentadora.config import Settings, settings
from rentadora.exceptions import NotFoundError, StoreError, ValidationError
from rentadora.middleware.logging import RequestLoggingMiddleware
from rentadora.middleware.rate_limit import RateLimitMiddleware
from rentadora.middleware.request_id import RequestIDLogFilter, RequestIDMiddleware, request_id_var
from rentadora.routes import health
from rentadora.routes.resources import build_resource_router
from rentadora.schemas.catalog import RESOURCES
from rentadora.schemas.resource import ResourceDefinition
from rentadora.services.memory_store import InMemoryDocumentStore
from rentadora.services.resource_service import ResourceService
from rentadora.services.store_base import DocumentStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once at startup.

    Format: 2024-01-15T12:00:00 [INFO] rentadora.access [1f3a9c2e]: POST /usuarios 201 ...
    The request id comes from RequestIDLogFilter ("-" outside a request).
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # Third-party libraries that log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Document Store Construction
# ══════════════════════════════════════════════════════════════════════════

def build_document_store(config: Settings) -> DocumentStore:
    """
    Build the store selected by DOCUMENT_STORE.

    The SQL store is imported lazily so the in-memory setup does not need a
    database driver installed.
    """
    if config.document_store == "memory":
        return InMemoryDocumentStore()

    from rentadora.database import create_engine_from_settings
    from rentadora.services.sql_store import SQLDocumentStore

    return SQLDocumentStore(create_engine_from_settings(config))


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: logging and settings checks. Shutdown: close the store."""
    setup_logging()
    logger.info("=" * 60)
    logger.info("Rentadora API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    store: DocumentStore = app.state.document_store
    logger.info("Document store: %s", type(store).__name__)
    if isinstance(store, InMemoryDocumentStore):
        logger.warning("In-memory store: documents are lost when the process exits.")

    for definition in app.state.resources:
        logger.info("Resource %-16s -> collection '%s'", definition.path, definition.collection)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Rentadora API shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler table:
        ValidationError         → 400 (resource message + missing fields)
        RequestValidationError  → 400 (malformed path/query input)
        NotFoundError           → 404 (fixed per-resource message)
        StoreError              → 500 (generic message, context logged)
        Exception               → 500 (generic message, stack trace logged)

    Responses never include driver errors or stack traces.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        logger.warning("Malformed request on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=400,
            content=error_body(
                "validation_error",
                "Solicitud inválida.",
                {"errors": [error.get("msg") for error in exc.errors()]},
            ),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=error_body("not_found", exc.message))

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error("Store error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", "Error interno del servidor."),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body("internal_server_error", "Error interno del servidor."),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    store: Optional[DocumentStore] = None,
    resources: Iterable[ResourceDefinition] = RESOURCES,
    rate_limit: Optional[bool] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store:      Document store shared by every resource; built from
                    settings when omitted
        resources:  Resource definitions to expose (the full catalog by default)
        rate_limit: Override settings.rate_limit_enabled

    Returns:
        Configured FastAPI instance. The store is on `app.state.document_store`
        and the services on `app.state.services` keyed by collection.
    """
    app = FastAPI(
        title="Rentadora de Máquinas API",
        description=(
            "CRUD de usuarios, máquinas, alquileres, pagos, distribuidores, reseñas, "
            "categorías, ubicaciones, solicitudes de soporte y trabajadores."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    document_store = store if store is not None else build_document_store(settings)
    resources = tuple(resources)
    app.state.document_store = document_store
    app.state.resources = resources
    app.state.services = {}

    # ── Middleware (last added executes first) ────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    if settings.rate_limit_enabled if rate_limit is None else rate_limit:
        app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(health.router)
    for definition in resources:
        service = ResourceService(definition, document_store)
        app.state.services[definition.collection] = service
        app.include_router(build_resource_router(service))

    return app


app = create_app()
