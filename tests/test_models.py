"""
Unit tests for TokenPilot models and canonical helpers.

Tests cover:
- Enum ordering helpers (rank, max_points, outcome labels)
- AnalysisParams validation helpers
- Jurisdiction lookups and control certainty
- Canonical JSON and key normalization
"""
import pytest

from tokenpilot.canon import (
    canonical_json,
    content_hash,
    normalize_key,
    normalize_keys,
)
from tokenpilot.models import (
    AnalysisParams,
    BindingStrength,
    Certainty,
    Likelihood,
    Outcome,
    RiskSeverity,
    ScoreCategory,
    StepStatus,
)

from tests.conftest import (
    make_citation,
    make_condition,
    make_control_framework,
    make_jurisdiction,
    make_risk,
)


# =============================================================================
# Enum Tests
# =============================================================================

class TestEnums:
    """Tests for enum helpers."""

    def test_binding_strength_rank_order(self):
        """Ranks order none < weak < moderate < strong."""
        ranks = [b.rank for b in (
            BindingStrength.NONE,
            BindingStrength.WEAK,
            BindingStrength.MODERATE,
            BindingStrength.STRONG,
        )]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    def test_severity_and_likelihood_ranks(self):
        assert RiskSeverity.HIGH.rank > RiskSeverity.MEDIUM.rank > RiskSeverity.LOW.rank
        assert Likelihood.HIGH.rank > Likelihood.MEDIUM.rank > Likelihood.LOW.rank

    def test_category_maxima_sum_to_100(self):
        """The six categories account for the full 100 points."""
        assert sum(c.max_points for c in ScoreCategory) == 100
        assert ScoreCategory.ACP_BINDING.max_points == 25

    def test_outcome_labels(self):
        assert Outcome.TOKENIZED_ASSET.label == "Tokenized Asset"
        assert Outcome.TOKENIZED_ASSET.reason == "ACP-bound"
        assert Outcome.TOKENIZED_CLAIM.reason == "no ACP binding"
        assert Outcome.OUT_OF_SCOPE.reason == "no cognizable right"

    def test_enums_serialize_as_strings(self):
        assert canonical_json({"s": StepStatus.PASS}) == '{"s":"pass"}'


# =============================================================================
# AnalysisParams Tests
# =============================================================================

class TestAnalysisParams:
    """Tests for AnalysisParams helpers."""

    def test_missing_fields_lists_all_blank_mandatory_fields(self):
        params = AnalysisParams(asset_type="  ", jurisdiction_id="Germany")
        assert params.missing_fields() == ["asset_type", "binding_path_id"]

    def test_no_missing_fields(self):
        params = AnalysisParams(
            asset_type="Investment Security",
            jurisdiction_id="Germany",
            binding_path_id="Registry of Record",
        )
        assert params.missing_fields() == []

    def test_flags_default_false(self):
        params = AnalysisParams()
        assert params.is_necessary is False
        assert params.is_sufficient is False

    @pytest.mark.parametrize("basis,expected", [
        (None, False),
        ("", False),
        ("   ", False),
        ("eWpG", True),
    ])
    def test_has_legal_basis(self, basis, expected):
        assert AnalysisParams(legal_basis=basis).has_legal_basis is expected

    def test_params_are_immutable(self):
        params = AnalysisParams(asset_type="Investment Security")
        with pytest.raises(AttributeError):
            params.asset_type = "Tangible Goods"


# =============================================================================
# Jurisdiction Model Tests
# =============================================================================

class TestJurisdictionModels:
    """Tests for jurisdiction rule tables."""

    def test_asset_rule_lookup(self):
        jurisdiction = make_jurisdiction()
        assert jurisdiction.asset_rule("investment-security").name == "Investment Security"
        assert jurisdiction.asset_rule("tangible-goods") is None

    def test_citation_lookup(self):
        jurisdiction = make_jurisdiction(citations=(make_citation("a"), make_citation("b")))
        assert jurisdiction.citation("b").id == "b"
        assert jurisdiction.citation("missing") is None

    def test_iter_citation_refs_covers_every_table(self):
        jurisdiction = make_jurisdiction(
            risk_factors=(make_risk(citations=("cit-asset",)),),
        )
        kinds = {kind for kind, _, _ in jurisdiction.iter_citation_refs()}
        assert kinds == {
            "asset_type",
            "control_framework",
            "tokenization_rule",
            "settlement_rule",
            "risk_factor",
        }

    @pytest.mark.parametrize("certainties,expected", [
        ((Certainty.HIGH, Certainty.HIGH), Certainty.HIGH),
        ((Certainty.HIGH, Certainty.LOW), Certainty.MEDIUM),
        ((Certainty.HIGH, Certainty.LOW, Certainty.LOW), Certainty.LOW),
        ((), Certainty.LOW),
    ])
    def test_control_certainty(self, certainties, expected):
        framework = make_control_framework(
            necessary=tuple(make_condition(certainty=c) for c in certainties),
        )
        assert framework.control_certainty == expected

    def test_summary_dict_dedupes_binding_paths(self):
        jurisdiction = make_jurisdiction(
            control_frameworks=(
                make_control_framework(id="ror-securities", binding_path="registry-of-record"),
                make_control_framework(id="ror-land", binding_path="registry-of-record",
                                       asset_types=("land-fixtures",)),
            ),
        )
        assert jurisdiction.summary_dict()["binding_paths"] == ["Registry of Record"]


# =============================================================================
# Canonical Helpers Tests
# =============================================================================

class TestCanon:
    """Tests for canonical JSON and key normalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("Custodian / Bailee", "custodian-bailee"),
        ("United States (New York)", "united-states-new-york"),
        ("Land & Fixtures", "land-fixtures"),
        ("Digital/Data Object", "digital-data-object"),
        ("  Germany ", "germany"),
        ("", ""),
        (None, ""),
    ])
    def test_normalize_key(self, raw, expected):
        assert normalize_key(raw) == expected

    def test_normalize_keys_drops_blanks(self):
        assert normalize_keys(["Registry of Record", " ", "CBDC"]) == ("registry-of-record", "cbdc")

    def test_canonical_json_sorted_and_compact(self):
        assert canonical_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_content_hash_is_order_independent_for_keys(self):
        assert content_hash({"a": 1, "b": 2}) == content_hash({"b": 2, "a": 1})
