"""Response schemas for the API."""

from pydantic import BaseModel
from typing import Any, Optional


class HealthResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str
    engine_version: str


class ReadyResponse(BaseModel):
    """Readiness check response."""
    status: str
    timestamp: str
    checks: dict[str, bool]
    engine_version: str
    knowledge_base_hash: Optional[str] = None
    jurisdictions: list[str] = []


class JurisdictionSummary(BaseModel):
    """Jurisdiction listing entry."""
    id: str
    name: str
    legal_system: str
    version: str
    aliases: list[str]
    readiness: str
    asset_types: list[str]
    binding_paths: list[str]
    citation_count: int
    risk_count: int


class CitationSummary(BaseModel):
    """Citation as exposed in jurisdiction detail."""
    id: str
    type: str
    title: str
    reference: str
    authority_level: str
    section: Optional[str] = None
    url: Optional[str] = None
    summary: str = ""


class JurisdictionDetail(JurisdictionSummary):
    """Full jurisdiction detail including citations and settlement rails."""
    summary: str
    regulators: list[str]
    strengths: list[str]
    gaps: list[str]
    preferred_cash_leg: str
    settlement_rails: list[str]
    citations: list[CitationSummary]


class ReloadResponse(BaseModel):
    """Result of a knowledge base reload."""
    status: str
    jurisdictions: list[str]
    knowledge_base_hash: str
    previous_hash: Optional[str] = None


class ErrorResponse(BaseModel):
    """Structured error response."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
    jurisdiction_id: Optional[str] = None
    request_id: str
