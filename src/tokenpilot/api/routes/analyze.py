"""Feasibility analysis endpoint."""

import logging

from fastapi import APIRouter, Request

from tokenpilot.api.dependencies import AppSettings, Registry
from tokenpilot.api.schemas.requests import AnalyzeRequest
from tokenpilot.engine import analyze

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["Analysis"])


@router.post("")
async def analyze_tokenization(
    body: AnalyzeRequest,
    request: Request,
    registry: Registry,
    settings: AppSettings,
):
    """
    Analyze a proposed tokenization.

    Returns the score, outcome, six-step decision trace (A to F),
    ranked risks and compiled citations. Identical requests against
    the same knowledge base snapshot return identical bodies.
    """
    # One snapshot for the whole request
    kb = registry.current()
    result = analyze(body.to_params(), kb, policy=settings.binding_policy)
    logger.debug(
        "Served analysis",
        extra={"request_id": getattr(request.state, "request_id", None)},
    )
    return result.to_dict()
