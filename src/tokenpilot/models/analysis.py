"""
TokenPilot Analysis Models

Per-request input and output of a feasibility analysis. Nothing here
holds state across requests: an AnalysisResult is a pure function of
its AnalysisParams and the knowledge base snapshot it ran against.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..canon import content_hash
from .enums import (
    BindingStrength,
    Outcome,
    ScoreCategory,
    StepSeverity,
    StepStatus,
)
from .jurisdiction import Citation, RiskFactor


MANDATORY_FIELDS = ("asset_type", "jurisdiction_id", "binding_path_id")


# =============================================================================
# Input
# =============================================================================

@dataclass(frozen=True)
class AnalysisParams:
    """
    Caller-selected facts about a proposed tokenization.

    Attributes:
        asset_type: Asset classification (e.g., "Investment Security")
        jurisdiction_id: Jurisdiction id or display name
        binding_path_id: Control mechanism (e.g., "Registry of Record")
        settlement_asset: Cash leg (e.g., "Tokenized Deposit")
        token_rail: Ledger the token lives on (e.g., "Permissioned chain")
        legal_basis: Free-text legal basis; only presence is assessed
        is_necessary: Token control is a necessary credential at the ACP
        is_sufficient: Token instruction is sufficient for the ACP to record
    """
    asset_type: Optional[str] = None
    jurisdiction_id: Optional[str] = None
    binding_path_id: Optional[str] = None
    settlement_asset: Optional[str] = None
    token_rail: Optional[str] = None
    legal_basis: Optional[str] = None
    is_necessary: bool = False
    is_sufficient: bool = False

    def missing_fields(self) -> list[str]:
        """Mandatory fields that are absent or blank."""
        return [
            name for name in MANDATORY_FIELDS
            if not (getattr(self, name) or "").strip()
        ]

    @property
    def has_legal_basis(self) -> bool:
        return bool((self.legal_basis or "").strip())

    def to_dict(self) -> dict[str, Any]:
        return {
            "asset_type": self.asset_type,
            "jurisdiction_id": self.jurisdiction_id,
            "binding_path_id": self.binding_path_id,
            "settlement_asset": self.settlement_asset,
            "token_rail": self.token_rail,
            "legal_basis": self.legal_basis,
            "is_necessary": self.is_necessary,
            "is_sufficient": self.is_sufficient,
        }


# =============================================================================
# Scoring
# =============================================================================

@dataclass(frozen=True)
class ScoreResult:
    """Subscores, total, label and outcome of one analysis."""
    breakdown: dict[ScoreCategory, int]
    total: int
    label: str
    outcome: Outcome

    def points(self, category: ScoreCategory) -> int:
        return self.breakdown[category]

    def breakdown_dict(self) -> dict[str, int]:
        return {category.value: self.breakdown[category] for category in ScoreCategory}


# =============================================================================
# Reasoning Trace
# =============================================================================

@dataclass(frozen=True)
class StepAnalysis:
    """
    One step (A to F) of the decision trace.

    points mirrors the subscore of the matching ScoreCategory; citations
    is a subset of the compiled citation list.
    """
    step: str
    title: str
    category: ScoreCategory
    status: StepStatus
    points: int
    explanation: str
    findings: tuple[str, ...] = ()
    citations: tuple[Citation, ...] = ()
    severity: StepSeverity = StepSeverity.INFO

    @property
    def max_points(self) -> int:
        return self.category.max_points

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "title": self.title,
            "category": self.category.value,
            "status": self.status.value,
            "points": self.points,
            "max_points": self.max_points,
            "explanation": self.explanation,
            "findings": list(self.findings),
            "citations": [c.id for c in self.citations],
            "severity": self.severity.value,
        }


# =============================================================================
# Risks
# =============================================================================

@dataclass(frozen=True)
class IdentifiedRisk:
    """A risk factor that applies to the analysed scenario."""
    risk: RiskFactor
    applicability: str
    matched_tags: tuple[str, ...] = ()

    @property
    def recommendations(self) -> tuple[str, ...]:
        return self.risk.mitigation

    def to_dict(self) -> dict[str, Any]:
        return {
            "risk": self.risk.to_dict(),
            "applicability": self.applicability,
            "matched_tags": list(self.matched_tags),
            "recommendations": list(self.recommendations),
        }


# =============================================================================
# Result
# =============================================================================

@dataclass(frozen=True)
class AnalysisResult:
    """
    Complete output of a feasibility analysis.

    Contains no timestamps or random ids, so two runs over the same
    params and snapshot serialize byte-identically.
    """
    params: AnalysisParams
    jurisdiction_id: str
    asset_type: str
    score: int
    score_label: str
    outcome: Outcome
    binding_strength: BindingStrength
    breakdown: dict[str, int]
    decision_trace: tuple[StepAnalysis, ...]
    risks: tuple[IdentifiedRisk, ...]
    citations: tuple[Citation, ...]
    unclassified: bool = False
    warnings: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    gaps: tuple[str, ...] = ()
    knowledge_base_hash: str = ""

    @property
    def has_deal_breaker(self) -> bool:
        return any(r.risk.deal_breaker for r in self.risks)

    def step(self, letter: str) -> StepAnalysis:
        for s in self.decision_trace:
            if s.step == letter:
                return s
        raise KeyError(letter)

    def to_dict(self) -> dict[str, Any]:
        """Serialize result for API responses and fingerprinting."""
        return {
            "params": self.params.to_dict(),
            "jurisdiction_id": self.jurisdiction_id,
            "asset_type": self.asset_type,
            "score": self.score,
            "score_label": self.score_label,
            "outcome": {
                "type": self.outcome.value,
                "label": self.outcome.label,
                "reason": self.outcome.reason,
            },
            "binding_strength": self.binding_strength.value,
            "breakdown": dict(self.breakdown),
            "decision_trace": [s.to_dict() for s in self.decision_trace],
            "risks": [r.to_dict() for r in self.risks],
            "citations": [c.to_dict() for c in self.citations],
            "unclassified": self.unclassified,
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
            "gaps": list(self.gaps),
            "knowledge_base_hash": self.knowledge_base_hash,
        }

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form of this result."""
        return content_hash(self.to_dict())
