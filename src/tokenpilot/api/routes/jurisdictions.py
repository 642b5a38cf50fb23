"""Jurisdiction endpoints."""

from fastapi import APIRouter

from tokenpilot.api.dependencies import Registry
from tokenpilot.api.schemas.responses import (
    CitationSummary,
    JurisdictionDetail,
    JurisdictionSummary,
)

router = APIRouter(prefix="/jurisdictions", tags=["Jurisdictions"])


@router.get("", response_model=list[JurisdictionSummary])
async def list_jurisdictions(registry: Registry):
    """List all jurisdictions in the current knowledge base snapshot."""
    kb = registry.current()
    return [
        JurisdictionSummary(**kb.jurisdictions[jid].summary_dict())
        for jid in kb.jurisdiction_ids()
    ]


@router.get("/{jurisdiction_id}", response_model=JurisdictionDetail)
async def get_jurisdiction(jurisdiction_id: str, registry: Registry):
    """
    Get full details of a jurisdiction.

    Accepts the id or any alias (e.g., 'DE', 'United States (New York)').
    """
    jurisdiction = registry.current().get(jurisdiction_id)
    overview = jurisdiction.overview
    return JurisdictionDetail(
        **jurisdiction.summary_dict(),
        summary=overview.summary,
        regulators=list(overview.regulators),
        strengths=list(overview.strengths),
        gaps=list(overview.gaps),
        preferred_cash_leg=jurisdiction.preferred_cash_leg,
        settlement_rails=[sr.name for sr in jurisdiction.settlement_rules],
        citations=[CitationSummary(**c.to_dict()) for c in jurisdiction.citations],
    )
