"""
TokenPilot API

Cross-jurisdiction tokenization feasibility scoring service.

Run:
    uvicorn tokenpilot.api.main:app
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import tokenpilot
from tokenpilot.api.routes import analyze, health, jurisdictions
from tokenpilot.config import Settings, get_settings
from tokenpilot.engine import KnowledgeBaseRegistry
from tokenpilot.exceptions import (
    KnowledgeBaseNotReadyError,
    TokenPilotError,
    UnknownJurisdictionError,
    ValidationError,
)
from tokenpilot.logging_config import configure_logging

logger = logging.getLogger("tokenpilot.api")


# =============================================================================
# Error Mapping
# =============================================================================

STATUS_CODES = {
    ValidationError: 422,
    UnknownJurisdictionError: 404,
    KnowledgeBaseNotReadyError: 503,
}


def status_code_for(exc: TokenPilotError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


async def tokenpilot_error_handler(request: Request, exc: TokenPilotError):
    status_code = status_code_for(exc)
    log = logger.error if status_code >= 500 else logger.info
    log(
        "Request failed: %s", exc,
        extra={"request_id": _request_id(request), "jurisdiction_id": exc.jurisdiction_id},
    )
    return JSONResponse(
        status_code=status_code,
        content={**exc.to_dict(), "request_id": _request_id(request)},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "code": ValidationError.code,
            "message": "Request body failed validation",
            "details": {"errors": jsonable_errors(exc)},
            "request_id": _request_id(request),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[KnowledgeBaseRegistry] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings (environment if None)
        registry: Pre-built registry; a registry that is already ready
            skips loading packs at startup
    """
    settings = settings or get_settings()
    registry = registry or KnowledgeBaseRegistry()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load jurisdiction packs on startup."""
        configure_logging(settings.log_level)
        if not registry.ready:
            logger.info("Loading jurisdiction packs from %s", settings.packs_dir)
            try:
                registry.reload(settings.packs_dir, strict_version=settings.strict_schema_version)
            except TokenPilotError as e:
                # Serve /health and report not ready until a reload succeeds
                logger.error("Failed to load knowledge base: %s", e, extra={"jurisdiction_id": e.jurisdiction_id})
        yield
        logger.info("Shutting down")

    app = FastAPI(
        title="TokenPilot API",
        description="""
**Cross-jurisdiction tokenization feasibility engine.**

TokenPilot scores whether a proposed tokenization yields a legally
cognizable tokenized asset or only a contractual claim.

## Quick Start

1. `GET /jurisdictions` - See available jurisdictions
2. `POST /analyze` - Score a scenario
        """,
        version=tokenpilot.__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add request ID to all requests."""
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.debug(
            "%s %s -> %d", request.method, request.url.path, response.status_code,
            extra={
                "request_id": request_id,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response

    app.add_exception_handler(TokenPilotError, tokenpilot_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Per-app state read by the route dependencies
    app.state.registry = registry
    app.state.settings = settings

    app.include_router(health.router)
    app.include_router(jurisdictions.router)
    app.include_router(analyze.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
