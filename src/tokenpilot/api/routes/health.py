"""Health, readiness and knowledge base reload endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

import tokenpilot
from tokenpilot.api.dependencies import AppSettings, Registry
from tokenpilot.api.schemas.responses import HealthResponse, ReadyResponse, ReloadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness check - confirms if process is alive.
    Always returns quickly. Use /ready for full readiness check.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        engine_version=tokenpilot.__version__,
    )


@router.get("/ready", response_model=ReadyResponse)
async def readiness_check(registry: Registry):
    """Readiness check - 503 until a knowledge base snapshot is loaded."""
    ready = registry.ready
    response = ReadyResponse(
        status="ready" if ready else "not_ready",
        timestamp=_now(),
        checks={"knowledge_base_loaded": ready},
        engine_version=tokenpilot.__version__,
    )
    if not ready:
        return JSONResponse(status_code=503, content=response.model_dump())

    kb = registry.current()
    response.knowledge_base_hash = kb.snapshot_hash
    response.jurisdictions = kb.jurisdiction_ids()
    return response


@router.post("/knowledge-base/reload", response_model=ReloadResponse, tags=["Knowledge Base"])
def reload_knowledge_base(registry: Registry, settings: AppSettings):
    """
    Rebuild the knowledge base from the packs directory and swap it in.

    In-flight analyses finish against the snapshot they started with.
    A failed build leaves the current snapshot in place.
    """
    previous = registry.current().snapshot_hash if registry.ready else None
    kb = registry.reload(settings.packs_dir, strict_version=settings.strict_schema_version)
    logger.info(
        "Knowledge base reloaded from %s", settings.packs_dir,
        extra={"kb_hash_short": kb.snapshot_hash_short},
    )
    return ReloadResponse(
        status="reloaded",
        jurisdictions=kb.jurisdiction_ids(),
        knowledge_base_hash=kb.snapshot_hash,
        previous_hash=previous,
    )
