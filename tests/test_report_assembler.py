"""
Tests for decision trace steps and recommendations.
"""
import inspect
import typing

import pytest

from tokenpilot.engine import (
    aggregate,
    analyze,
    build_decision_trace,
    classify,
    compile_citations,
    identify_gaps,
    resolve,
    score,
)
from tokenpilot.engine import report_assembler
from tokenpilot.models import (
    AnalysisParams,
    Certainty,
    PropertyStatus,
    RegulatoryStatus,
    RiskSeverity,
    ScoreCategory,
    ShariahConsiderations,
    StepAnalysis,
    StepStatus,
)

from tests.conftest import (
    make_asset_rule,
    make_condition,
    make_control_framework,
    make_jurisdiction,
    make_knowledge_base,
    make_params,
    make_risk,
    make_settlement_rule,
    make_tokenization_rule,
)


def _trace(kb, **overrides):
    params = make_params(**overrides)
    resolved = resolve(kb, params.jurisdiction_id, params.asset_type,
                       params.binding_path_id, params.settlement_asset)
    score_result = score(params, resolved)
    risks = aggregate(resolved, params)
    return {
        step.step: step
        for step in build_decision_trace(
            params,
            resolved,
            classify(resolved.control_frameworks, params.is_necessary, params.is_sufficient),
            score_result,
            risks,
            compile_citations(resolved),
        )
    }


class TestSteps:
    """Tests for individual step status rules."""

    def test_titles_and_categories(self, kb):
        trace = _trace(kb)
        assert [(s.step, s.title) for s in trace.values()] == [
            ("A", "Thing test"),
            ("B", "Accounting-control test"),
            ("C", "Classification crosswalk"),
            ("D", "Tokenization necessary+sufficient test"),
            ("E", "Settlement atomicity test"),
            ("F", "Failure-and-enforceability test"),
        ]
        assert trace["D"].category == ScoreCategory.ACP_BINDING
        assert trace["D"].max_points == 25

    def test_property_not_recognized_fails_step_a(self):
        kb = make_knowledge_base(make_jurisdiction(
            asset_types=(make_asset_rule(property_status=PropertyStatus.NOT_RECOGNIZED),),
        ))
        assert _trace(kb)["A"].status == StepStatus.FAIL

    def test_unclear_property_warns_step_a(self):
        kb = make_knowledge_base(make_jurisdiction(
            asset_types=(make_asset_rule(property_status=PropertyStatus.UNCLEAR),),
        ))
        assert _trace(kb)["A"].status == StepStatus.WARNING

    def test_shariah_findings_in_step_a(self):
        shariah = ShariahConsiderations(
            permissible=False,
            prohibited_features=("Interest-bearing coupon",),
            rulings=("cit-cf",),
        )
        kb = make_knowledge_base(make_jurisdiction(
            asset_types=(make_asset_rule(shariah=shariah),),
        ))
        step_a = _trace(kb)["A"]
        assert step_a.status == StepStatus.PASS
        assert step_a.findings[3:] == (
            "Shariah permissible: No",
            "Shariah prohibited features: Interest-bearing coupon",
        )
        assert [c.id for c in step_a.citations] == ["cit-asset", "cit-cf"]

    def test_no_shariah_findings_without_block(self, kb):
        assert not any(f.startswith("Shariah") for f in _trace(kb)["A"].findings)

    def test_unmatched_binding_path_fails_step_b(self, kb):
        step_b = _trace(kb, binding_path_id="Settlement Rail")["B"]
        assert step_b.status == StepStatus.FAIL
        assert step_b.explanation.startswith("Settlement Rail is not applicable to Investment Security.")
        assert step_b.findings[-1] == "Applicable binding paths: Registry of Record"
        assert step_b.points == 20

    def test_low_control_certainty_fails_step_b(self):
        kb = make_knowledge_base(make_jurisdiction(
            control_frameworks=(make_control_framework(
                necessary=(make_condition(certainty=Certainty.LOW),),
            ),),
        ))
        assert _trace(kb)["B"].status == StepStatus.FAIL

    def test_no_framework_fails_step_b(self):
        kb = make_knowledge_base(make_jurisdiction(control_frameworks=()))
        step_b = _trace(kb)["B"]
        assert step_b.status == StepStatus.FAIL
        assert [c.id for c in step_b.citations] == ["ifrs-cf-asset-definition"]

    def test_missing_governing_law_warns_step_c(self):
        kb = make_knowledge_base(make_jurisdiction(asset_types=(make_asset_rule(governing_law=()),)))
        assert _trace(kb)["C"].status == StepStatus.WARNING

    def test_no_settlement_asset_fails_step_e(self, kb):
        step_e = _trace(kb, settlement_asset=None)["E"]
        assert step_e.status == StepStatus.FAIL
        assert step_e.points == 0
        assert step_e.citations == ()

    def test_non_atomic_settlement_warns_step_e(self):
        kb = make_knowledge_base(make_jurisdiction(
            settlement_rules=(make_settlement_rule(atomic_settlement_possible=False),),
        ))
        assert _trace(kb)["E"].status == StepStatus.WARNING

    def test_unrecognized_cash_leg_noted(self):
        kb = make_knowledge_base(make_jurisdiction(
            settlement_rules=(make_settlement_rule(legal_certainty=Certainty.LOW),),
        ))
        step_e = _trace(kb, settlement_asset="Gold coins")["E"]
        assert step_e.status == StepStatus.FAIL
        assert step_e.points == 10
        assert "'Gold coins' is not a recognized cash leg" in step_e.findings[-1]

    def test_prohibited_fails_step_f(self):
        kb = make_knowledge_base(make_jurisdiction(
            tokenization_rules=(make_tokenization_rule(regulatory_status=RegulatoryStatus.PROHIBITED),),
        ))
        assert _trace(kb)["F"].status == StepStatus.FAIL

    def test_no_legal_basis_warns_step_f(self, kb):
        step_f = _trace(kb, legal_basis=None)["F"]
        assert step_f.status == StepStatus.WARNING
        assert step_f.points == 5
        assert "No legal basis cited." in step_f.explanation

    def test_deal_breaker_listed_in_step_f(self):
        kb = make_knowledge_base(make_jurisdiction(
            risk_factors=(make_risk("blocker", severity=RiskSeverity.HIGH, deal_breaker=True,
                                    description="Register is not title-conferring"),),
        ))
        step_f = _trace(kb)["F"]
        assert "Deal-breaker: Register is not title-conferring" in step_f.findings
        assert step_f.severity.value == "warn"


class TestGaps:
    """Tests for identify_gaps()."""

    def test_pass_steps_produce_no_gaps(self, kb):
        assert identify_gaps(list(_trace(kb).values())) == []

    def test_gap_wording(self):
        steps = [
            StepAnalysis("A", "Thing test", ScoreCategory.THING_RECOGNITION, StepStatus.FAIL, 15, "Not property."),
            StepAnalysis("B", "Accounting-control test", ScoreCategory.ASSET_CONTROL, StepStatus.PASS, 20, "Fine."),
            StepAnalysis("C", "Classification crosswalk", ScoreCategory.LEGAL_CLASSIFICATION,
                         StepStatus.WARNING, 15, "No statute."),
        ]
        assert identify_gaps(steps) == [
            "Step A failed: Not property.",
            "Step C warning: No statute.",
        ]

    def test_result_carries_gaps(self, kb):
        result = analyze(make_params(legal_basis=None), kb)
        assert result.gaps == (f"Step F warning: {result.step('F').explanation}",)


class TestStepBuilderSignatures:
    """Every step builder is fully annotated and returns a StepAnalysis."""

    @pytest.mark.parametrize("name", [
        "_thing_test",
        "_accounting_control_test",
        "_classification_crosswalk",
        "_necessary_sufficient_test",
        "_settlement_test",
        "_enforceability_test",
    ])
    def test_builder_annotations(self, name):
        builder = getattr(report_assembler, name)
        hints = typing.get_type_hints(builder)
        params = inspect.signature(builder).parameters

        assert hints["return"] is StepAnalysis
        assert set(params) <= set(hints)
        assert hints["params"] is AnalysisParams
