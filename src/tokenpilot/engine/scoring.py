"""
TokenPilot Scoring Engine

Six independent subscores summing to a 0-100 total:

    Thing Recognition       15   asset type set
    Asset Control           20   jurisdiction set
    Legal Classification    15   binding path set
    ACP Binding Strength    25   25 both flags / 12 one flag / 0 neither
    Settlement Mechanism    15   15 preferred cash leg / 10 other / 0 none
    Legal Enforceability    10   10 legal basis given / 5 otherwise

The outcome is gated by the necessary/sufficient flags before the
total is consulted, so a high score can still be a tokenized claim.
"""
from __future__ import annotations

from ..canon import normalize_key
from ..models import AnalysisParams, Outcome, ScoreCategory, ScoreResult
from .rule_resolver import ResolvedRuleSet


LABEL_THRESHOLDS = (
    (80, "Strong (proceed to structuring)"),
    (60, "Probable (close gaps)"),
    (40, "Weak (re-architect)"),
)
FLOOR_LABEL = "Claim-wrapper (label honestly)"

TOKENIZED_ASSET_THRESHOLD = 60

ACP_PARTIAL_POINTS = 12
SETTLEMENT_OTHER_POINTS = 10
ENFORCEABILITY_FLOOR = 5


# =============================================================================
# Subscores
# =============================================================================

def _present(value) -> bool:
    return bool((value or "").strip())


def thing_recognition_points(params: AnalysisParams) -> int:
    return ScoreCategory.THING_RECOGNITION.max_points if _present(params.asset_type) else 0


def asset_control_points(params: AnalysisParams) -> int:
    return ScoreCategory.ASSET_CONTROL.max_points if _present(params.jurisdiction_id) else 0


def legal_classification_points(params: AnalysisParams) -> int:
    return ScoreCategory.LEGAL_CLASSIFICATION.max_points if _present(params.binding_path_id) else 0


def acp_binding_points(params: AnalysisParams) -> int:
    if params.is_necessary and params.is_sufficient:
        return ScoreCategory.ACP_BINDING.max_points
    if params.is_necessary or params.is_sufficient:
        return ACP_PARTIAL_POINTS
    return 0


def _cash_leg_key(value) -> str:
    # Symbol-only names have no normalized key; compare them as written
    return normalize_key(value) or (value or "").strip().lower()


def settlement_points(params: AnalysisParams, preferred_cash_leg: str) -> int:
    if not _present(params.settlement_asset):
        return 0
    if _cash_leg_key(params.settlement_asset) == _cash_leg_key(preferred_cash_leg):
        return ScoreCategory.SETTLEMENT.max_points
    return SETTLEMENT_OTHER_POINTS


def enforceability_points(params: AnalysisParams) -> int:
    if params.has_legal_basis:
        return ScoreCategory.ENFORCEABILITY.max_points
    return ENFORCEABILITY_FLOOR


# =============================================================================
# Label / Outcome
# =============================================================================

def score_label(total: int) -> str:
    for threshold, label in LABEL_THRESHOLDS:
        if total >= threshold:
            return label
    return FLOOR_LABEL


def classify_outcome(params: AnalysisParams, total: int) -> Outcome:
    """Necessary/sufficient gate first, then the score threshold."""
    if not (params.is_necessary and params.is_sufficient):
        return Outcome.TOKENIZED_CLAIM
    if total >= TOKENIZED_ASSET_THRESHOLD:
        return Outcome.TOKENIZED_ASSET
    return Outcome.OUT_OF_SCOPE


# =============================================================================
# Entry Point
# =============================================================================

def score(params: AnalysisParams, resolved: ResolvedRuleSet) -> ScoreResult:
    """
    Score a scenario.

    The settlement subscore compares against the resolved jurisdiction's
    preferred cash leg; every other subscore depends on params only.
    """
    breakdown = {
        ScoreCategory.THING_RECOGNITION: thing_recognition_points(params),
        ScoreCategory.ASSET_CONTROL: asset_control_points(params),
        ScoreCategory.LEGAL_CLASSIFICATION: legal_classification_points(params),
        ScoreCategory.ACP_BINDING: acp_binding_points(params),
        ScoreCategory.SETTLEMENT: settlement_points(params, resolved.jurisdiction.preferred_cash_leg),
        ScoreCategory.ENFORCEABILITY: enforceability_points(params),
    }
    for category, points in breakdown.items():
        assert 0 <= points <= category.max_points, f"{category.value} out of range: {points}"

    total = sum(breakdown.values())
    assert 0 <= total <= 100, f"total out of range: {total}"

    return ScoreResult(
        breakdown=breakdown,
        total=total,
        label=score_label(total),
        outcome=classify_outcome(params, total),
    )
