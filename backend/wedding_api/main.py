"""
Wedding Gallery Backend — FastAPI Application Factory
=======================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds settings, the blessing store,
       the media gateway and the app, wiring them together on `app.state`.
Who:   uvicorn (`uvicorn wedding_api.main:app`, or the `wedding-api` script)
       and the test suite (which passes its own store and gateway).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌──────────┐ │
    │  │  Req ID  │→│  Logging    │→│ GZip │→│   CORS   │ │
    │  └──────────┘ └─────────────┘ └──────┘ └──────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌─────────────────┐ ┌──────────┐  │
    │  │ POST /upload │ │ /api/blessings  │ │ /health  │  │
    │  │ GET /images  │ │ (POST, GET)     │ │          │  │
    │  └──────────────┘ └─────────────────┘ └──────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ValidationError→400 │ UpstreamError→500      │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config validation (logged, not fatal) → store startup
    Shutdown: store close (disposes the database engine when there is one)
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

from wedding_api import __version__
from wedding_api.config import Settings, get_settings
from wedding_api.exceptions import UpstreamError, ValidationError, WeddingAPIError
from wedding_api.middleware.logging import RequestLoggingMiddleware
from wedding_api.middleware.request_id import RequestIDMiddleware, request_id_var
from wedding_api.routes import blessings, health, media
from wedding_api.services.blessing_service import BlessingService
from wedding_api.services.blessing_store import BlessingStore, build_blessing_store
from wedding_api.services.cloudinary_service import CloudinaryMediaGateway
from wedding_api.services.media_base import MediaGateway

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Quiet per-operation chatter from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("cloudinary").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    store: BlessingStore = app.state.blessing_store

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("Wedding Gallery Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: blessings work without Cloudinary credentials
        logger.error("Configuration error: %s", str(e))

    await store.startup()
    logger.info("Blessing store: %s", store.backend)
    logger.info("CORS origins: %s", ", ".join(settings.cors_origins_list) or "<none>")
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Wedding Gallery Backend shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and JSON error bodies.

    Handler hierarchy:
        ValidationError         → 400 (includes NoFileProvidedError)
        RequestValidationError  → 400 (malformed JSON / wrong field types)
        UpstreamError           → 500 (media host or durable store failed)
        WeddingAPIError (base)  → 500
        Exception (fallback)    → 500

    Bodies never include stack traces or upstream error text; those are
    logged server-side with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed request: %s", rid, exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request body",
                "details": [
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                    for err in exc.errors()
                ],
                "request_id": rid,
            },
        )

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        rid = request_id_var.get("")
        logger.error("[%s] Upstream error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(WeddingAPIError)
    async def handle_app_error(request: Request, exc: WeddingAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred", "request_id": rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    blessing_store: Optional[BlessingStore] = None,
    media_gateway: Optional[MediaGateway] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Defaults to `get_settings()` (environment / .env).
        blessing_store: Defaults to the store named by BLESSING_STORE.
        media_gateway: Defaults to a CloudinaryMediaGateway from settings.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    settings = settings or get_settings()
    store = blessing_store if blessing_store is not None else build_blessing_store(settings)
    gateway = (
        media_gateway
        if media_gateway is not None
        else CloudinaryMediaGateway.from_settings(settings)
    )

    app = FastAPI(
        title="Wedding Gallery API",
        description=(
            "Per-event photo uploads on Cloudinary and a guestbook of blessings."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.blessing_store = store
    app.state.blessing_service = BlessingService(store)
    app.state.media_gateway = gateway

    # ── Register Middleware ───────────────────────────────────────────────
    # Execution order is the reverse of addition: RequestID → Logging → GZip → CORS
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
    app.include_router(media.router)
    app.include_router(blessings.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the app on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "wedding_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# uvicorn expects `wedding_api.main:app` to be importable
app = create_app()
