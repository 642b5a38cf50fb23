"""
Next-step recommendations and gap summaries derived from a finished
score, risk list and decision trace.
"""
from __future__ import annotations

from typing import Sequence

from ..models import (
    AnalysisParams,
    IdentifiedRisk,
    RiskSeverity,
    ScoreResult,
    StepAnalysis,
    StepStatus,
)


STRENGTHEN_BINDING = 'Consider strengthening ACP binding to achieve "Strong" classification.'
REARCHITECT = (
    "Significant gaps identified. Re-architect structure or consider "
    "alternative jurisdiction."
)
ENSURE_NECESSARY = (
    "Ensure token control is necessary for asset transfer (not merely advisory)."
)
ENSURE_SUFFICIENT = (
    "Ensure token transfer is sufficient to trigger legal transfer "
    "(no additional approvals required)."
)


def generate_recommendations(
    score_result: ScoreResult,
    params: AnalysisParams,
    risks: Sequence[IdentifiedRisk],
) -> list[str]:
    recommendations: list[str] = []

    if score_result.total < 80:
        recommendations.append(STRENGTHEN_BINDING)
    if score_result.total < 60:
        recommendations.append(REARCHITECT)

    if not params.is_necessary:
        recommendations.append(ENSURE_NECESSARY)
    if not params.is_sufficient:
        recommendations.append(ENSURE_SUFFICIENT)

    high = sum(1 for r in risks if r.risk.severity == RiskSeverity.HIGH)
    if high:
        recommendations.append(f"Address {high} high-severity risk(s) before proceeding.")

    deal_breakers = sum(1 for r in risks if r.risk.deal_breaker)
    if deal_breakers:
        recommendations.append(
            f"CRITICAL: {deal_breakers} deal-breaker risk(s) identified. "
            "Structure may not be viable."
        )

    return recommendations


def identify_gaps(trace: Sequence[StepAnalysis]) -> list[str]:
    """One line per failed or warning step, in trace order."""
    gaps: list[str] = []
    for step in trace:
        if step.status == StepStatus.FAIL:
            gaps.append(f"Step {step.step} failed: {step.explanation}")
        elif step.status == StepStatus.WARNING:
            gaps.append(f"Step {step.step} warning: {step.explanation}")
    return gaps
