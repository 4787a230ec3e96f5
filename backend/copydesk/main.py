"""
Copydesk Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn copydesk.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  CORS        │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes (/api/figma):                               │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ POST /auth   │ │GET verify│ │ POST /analyze   │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ Auth→401 │ Method→405 │ 500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Dependency injection:
    create_app(llm_service) stores the generation client on app.state and
    builds the AnalysisService around it. Production passes nothing and gets
    a GeminiService from settings; tests pass a fake.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from copydesk import __version__
from copydesk.config import settings
from copydesk.database import dispose_engine
from copydesk.exceptions import (
    AuthError,
    ConfigError,
    CopydeskError,
    InternalError,
    MethodError,
    ValidationError,
)
from copydesk.middleware.cors import CORSHeadersMiddleware
from copydesk.middleware.logging import RequestLoggingMiddleware
from copydesk.middleware.request_id import RequestIDMiddleware, request_id_var
from copydesk.routes import analyze, auth, health, verify
from copydesk.services.analysis_service import AnalysisService
from copydesk.services.gemini_service import GeminiService
from copydesk.services.llm_base import LLMService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] copydesk.access: POST /api/figma/analyze 200 ...
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  logging, configuration check.
    Shutdown: dispose the database engine (close all pooled connections).
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Copydesk Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: login and verify work without the generation API
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Copydesk Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to `{"message": ...}` responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        AuthError                                → 401
        MethodError / 405 from routing           → 405
        ConfigError                              → 500
        InternalError (incl. LLMServiceError)    → 500
        Exception (fallback)                     → 500 "Internal server error"

    Stack traces and `context` dicts are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body was not JSON or had the wrong types."""
        logger.warning("[%s] Invalid request body: %s", request_id_var.get(""), exc.errors())
        return _error_response(400, "Invalid request body")

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError):
        logger.info("[%s] Auth rejected: %s", request_id_var.get(""), exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(MethodError)
    async def handle_method_error(request: Request, exc: MethodError):
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Routing-level errors (unknown path, unsupported verb)."""
        if exc.status_code == 405:
            method_error = MethodError(method=request.method)
            return _error_response(method_error.status_code, method_error.message, exc.headers)
        return _error_response(exc.status_code, str(exc.detail), exc.headers)

    @app.exception_handler(ConfigError)
    async def handle_config_error(request: Request, exc: ConfigError):
        logger.error("[%s] Configuration error: %s", request_id_var.get(""), exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        logger.error(
            "[%s] Internal error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(CopydeskError)
    async def handle_copydesk_error(request: Request, exc: CopydeskError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        This handler runs outside the middleware stack, so CORS headers are
        attached here explicitly.
        """
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(500, "Internal server error", settings.cors_headers)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(llm_service: Optional[LLMService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        llm_service: Generation client for analyses. Defaults to a
                     GeminiService configured from settings.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Copydesk API",
        description=(
            "Content standards review for design-tool text. Log in with a local "
            "account, then submit frame text to be scored against the active "
            "content standards."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Generation client & services ──────────────────────────────────────
    llm = llm_service or GeminiService.from_settings(settings)
    app.state.llm_service = llm
    app.state.analysis_service = AnalysisService(llm)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: CORS → RequestID → Logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(CORSHeadersMiddleware, headers=settings.cors_headers)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(verify.router)
    app.include_router(analyze.router)
    app.include_router(health.router)

    return app


# uvicorn expects `copydesk.main:app` to be importable
app = create_app()
