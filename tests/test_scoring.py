"""
Tests for the scoring engine.

Tests cover:
- Per-category subscores and their bounds
- Score labels at the threshold boundaries
- Outcome gate (flags before total)
"""
import pytest

from tokenpilot.engine import classify_outcome, resolve, score, score_label
from tokenpilot.engine.scoring import settlement_points
from tokenpilot.models import AnalysisParams, Outcome, ScoreCategory

from tests.conftest import make_params


def _score(kb, **overrides):
    params = make_params(**overrides)
    resolved = resolve(kb, params.jurisdiction_id, params.asset_type,
                       params.binding_path_id, params.settlement_asset)
    return score(params, resolved)


# =============================================================================
# Subscores
# =============================================================================

class TestSubscores:
    """Tests for the six category subscores."""

    def test_full_marks(self, kb):
        result = _score(kb)
        assert result.total == 100
        assert result.breakdown_dict() == {
            "thing_recognition": 15,
            "asset_control": 20,
            "legal_classification": 15,
            "acp_binding": 25,
            "settlement": 15,
            "enforceability": 10,
        }

    @pytest.mark.parametrize("necessary,sufficient,points", [
        (True, True, 25),
        (True, False, 12),
        (False, True, 12),
        (False, False, 0),
    ])
    def test_acp_binding_points(self, kb, necessary, sufficient, points):
        result = _score(kb, is_necessary=necessary, is_sufficient=sufficient)
        assert result.points(ScoreCategory.ACP_BINDING) == points

    def test_settlement_other_cash_leg(self, kb):
        result = _score(kb, settlement_asset="Commercial Bank Money")
        assert result.points(ScoreCategory.SETTLEMENT) == 10

    def test_settlement_missing(self, kb):
        result = _score(kb, settlement_asset=None)
        assert result.points(ScoreCategory.SETTLEMENT) == 0
        assert result.total == 85

    @pytest.mark.parametrize("value,preferred,points", [
        ("Tokenized Deposit", "Tokenized Deposit", 15),
        ("tokenized deposit", "Tokenized Deposit", 15),
        ("CBDC", "CBDC", 15),
        ("CBDC", "Tokenized Deposit", 10),
        ("  ", "Tokenized Deposit", 0),
        ("€", "Tokenized Deposit", 10),
        ("¥", "¥", 15),
    ])
    def test_settlement_points(self, value, preferred, points):
        assert settlement_points(AnalysisParams(settlement_asset=value), preferred) == points

    @pytest.mark.parametrize("basis,points", [
        ("Test Securities Act", 10),
        ("", 5),
        (None, 5),
    ])
    def test_enforceability_points(self, kb, basis, points):
        result = _score(kb, legal_basis=basis)
        assert result.points(ScoreCategory.ENFORCEABILITY) == points

    def test_scoring_ignores_unclassified_asset(self, kb):
        """Subscores depend on params, not on whether a rule matched."""
        assert _score(kb, asset_type="Other").total == 100

    def test_subscores_within_bounds(self, kb):
        for necessary in (True, False):
            for basis in ("x", None):
                for settlement in ("Tokenized Deposit", "Other", None):
                    result = _score(kb, is_necessary=necessary, legal_basis=basis,
                                    settlement_asset=settlement)
                    for category in ScoreCategory:
                        assert 0 <= result.points(category) <= category.max_points
                    assert result.total == sum(result.breakdown.values())


# =============================================================================
# Labels
# =============================================================================

class TestScoreLabel:
    """Tests for score_label thresholds."""

    @pytest.mark.parametrize("total,label", [
        (100, "Strong (proceed to structuring)"),
        (80, "Strong (proceed to structuring)"),
        (79, "Probable (close gaps)"),
        (60, "Probable (close gaps)"),
        (59, "Weak (re-architect)"),
        (40, "Weak (re-architect)"),
        (39, "Claim-wrapper (label honestly)"),
        (0, "Claim-wrapper (label honestly)"),
    ])
    def test_thresholds(self, total, label):
        assert score_label(total) == label


# =============================================================================
# Outcome
# =============================================================================

class TestOutcome:
    """Tests for the necessary/sufficient outcome gate."""

    def test_both_flags_above_threshold(self):
        assert classify_outcome(make_params(), 60) == Outcome.TOKENIZED_ASSET

    def test_both_flags_below_threshold(self):
        assert classify_outcome(make_params(), 59) == Outcome.OUT_OF_SCOPE

    @pytest.mark.parametrize("necessary,sufficient", [(True, False), (False, True), (False, False)])
    def test_missing_flag_is_claim_regardless_of_score(self, necessary, sufficient):
        params = make_params(is_necessary=necessary, is_sufficient=sufficient)
        assert classify_outcome(params, 100) == Outcome.TOKENIZED_CLAIM
        assert classify_outcome(params, 0) == Outcome.TOKENIZED_CLAIM

    def test_one_flag_scores_87_but_is_claim(self, kb):
        result = _score(kb, is_sufficient=False)
        assert result.total == 87
        assert result.label == "Strong (proceed to structuring)"
        assert result.outcome == Outcome.TOKENIZED_CLAIM
