"""
TokenPilot Report Assembler

Builds the six-step decision trace and the final AnalysisResult.

Trace steps mirror the scored categories:

    A  Thing test                                   thing_recognition
    B  Accounting-control test                      asset_control
    C  Classification crosswalk                     legal_classification
    D  Tokenization necessary+sufficient test       acp_binding
    E  Settlement atomicity test                    settlement
    F  Failure-and-enforceability test              enforceability

Each step's points are copied from the score breakdown; its status is a
qualitative reading of the matched rules. Step citations are always
drawn from the compiled citation list.
"""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..models import (
    AnalysisParams,
    AnalysisResult,
    BindingStrength,
    Certainty,
    Citation,
    IdentifiedRisk,
    PropertyStatus,
    RegulatoryStatus,
    ScoreCategory,
    ScoreResult,
    ShariahConsiderations,
    StepAnalysis,
    StepSeverity,
    StepStatus,
)
from .rule_resolver import ResolvedRuleSet


ACCOUNTING_CONTROL_CITATION = "ifrs-cf-asset-definition"
CLASSIFICATION_CITATION = "ias32-ifrs9-financial-instruments"


# =============================================================================
# Helpers
# =============================================================================

def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _select(citations: Sequence[Citation], ids: Iterable[str]) -> tuple[Citation, ...]:
    """Compiled citations whose ids are in ids, keeping compiled order."""
    wanted = set(ids)
    return tuple(c for c in citations if c.id in wanted)


def _shariah_findings(shariah: Optional[ShariahConsiderations]) -> list[str]:
    if shariah is None:
        return []
    findings = [f"Shariah permissible: {_yes_no(shariah.permissible)}"]
    if shariah.conditions:
        findings.append(f"Shariah conditions: {'; '.join(shariah.conditions)}")
    if shariah.prohibited_features:
        findings.append(f"Shariah prohibited features: {'; '.join(shariah.prohibited_features)}")
    if shariah.structures:
        findings.append(f"Shariah-compliant structures: {', '.join(shariah.structures)}")
    return findings


def _status_from_certainty(certainty: Certainty) -> StepStatus:
    if certainty == Certainty.HIGH:
        return StepStatus.PASS
    if certainty == Certainty.MEDIUM:
        return StepStatus.WARNING
    return StepStatus.FAIL


# =============================================================================
# Steps
# =============================================================================

def _thing_test(
    params: AnalysisParams,
    resolved: ResolvedRuleSet,
    score_result: ScoreResult,
    citations: Sequence[Citation],
) -> StepAnalysis:
    rule = resolved.asset_rule
    jurisdiction = resolved.jurisdiction.name

    if resolved.unclassified:
        status = StepStatus.WARNING
        explanation = (
            f"{params.asset_type} has no asset-type rule under {jurisdiction} law. "
            "Assessed against generic principles only; seek a local-law opinion."
        )
    elif rule.property_status == PropertyStatus.RECOGNIZED:
        status = StepStatus.PASS
        explanation = (
            f"{rule.name} is recognized as property under {jurisdiction} law. "
            f"Classified as: {rule.legal_classification}."
        )
    elif rule.property_status == PropertyStatus.UNCLEAR:
        status = StepStatus.WARNING
        explanation = (
            f"Property status of {rule.name} is unclear under {jurisdiction} law. "
            "Proceed with caution and seek legal opinion."
        )
    else:
        status = StepStatus.FAIL
        explanation = (
            f"{rule.name} is not recognized as property under {jurisdiction} law. "
            "Tokenization may not confer legal ownership rights."
        )

    findings = [
        f"Property status: {rule.property_status.value}",
        f"Legal classification: {rule.legal_classification}",
        f"Governing law: {', '.join(rule.governing_law) or 'none identified'}",
    ]
    findings.extend(_shariah_findings(rule.shariah))

    return StepAnalysis(
        step="A",
        title="Thing test",
        category=ScoreCategory.THING_RECOGNITION,
        status=status,
        points=score_result.points(ScoreCategory.THING_RECOGNITION),
        explanation=explanation,
        findings=tuple(findings),
        citations=_select(citations, rule.citation_ids),
    )


def _accounting_control_test(
    params: AnalysisParams,
    resolved: ResolvedRuleSet,
    score_result: ScoreResult,
    citations: Sequence[Citation],
) -> StepAnalysis:
    framework = resolved.primary_framework
    cited = [ACCOUNTING_CONTROL_CITATION]

    if framework is None:
        status = StepStatus.FAIL
        explanation = (
            f"No control framework covers {params.asset_type} in "
            f"{resolved.jurisdiction.name}. Control cannot be evidenced."
        )
        findings: tuple[str, ...] = ()
    else:
        cited.extend(framework.citations)
        status = _status_from_certainty(framework.control_certainty)
        explanation = (
            f"Using {framework.name} control mechanism. "
            f"ACP binding strength: {framework.acp_binding.value}. "
            f"{'Intermediary required' if framework.intermediary_required else 'No intermediary required'}. "
            f"Transfer mechanism: {' or '.join(resolved.asset_rule.transfer_mechanism) or 'not specified'}."
        )
        findings = (
            f"Control framework: {framework.name}",
            f"Control certainty: {framework.control_certainty.value}",
            f"Intermediary required: {_yes_no(framework.intermediary_required)}",
            f"Good faith protection: {_yes_no(framework.good_faith_protection.available)}",
        )
        if params.binding_path_id and not resolved.binding_path_matched:
            status = StepStatus.FAIL
            explanation = (
                f"{params.binding_path_id} is not applicable to {params.asset_type}. "
                f"Assessed against {framework.name} instead."
            )
            findings += (
                "Applicable binding paths: "
                + ", ".join(dict.fromkeys(cf.name for cf in resolved.control_frameworks)),
            )

    return StepAnalysis(
        step="B",
        title="Accounting-control test",
        category=ScoreCategory.ASSET_CONTROL,
        status=status,
        points=score_result.points(ScoreCategory.ASSET_CONTROL),
        explanation=explanation,
        findings=findings,
        citations=_select(citations, cited),
    )


def _classification_crosswalk(
    params: AnalysisParams,
    resolved: ResolvedRuleSet,
    score_result: ScoreResult,
    citations: Sequence[Citation],
) -> StepAnalysis:
    rule = resolved.asset_rule
    jurisdiction = resolved.jurisdiction.name
    status = StepStatus.PASS if rule.governing_law and not resolved.unclassified else StepStatus.WARNING
    registration = (
        "Registration required for legal effect."
        if rule.registration_required else "No registration required."
    )
    findings = [
        f"Legal classification: {rule.legal_classification}",
        f"Governing law: {', '.join(rule.governing_law) or 'none identified'}",
        f"Registration required: {_yes_no(rule.registration_required)}",
    ]
    if rule.registry is not None:
        findings.append(
            f"Registry: {rule.registry.name} "
            f"(title-conferring: {_yes_no(rule.registry.title_conferring)}, "
            f"DLT-compatible: {_yes_no(rule.registry.dlt_compatible)})"
        )

    return StepAnalysis(
        step="C",
        title="Classification crosswalk",
        category=ScoreCategory.LEGAL_CLASSIFICATION,
        status=status,
        points=score_result.points(ScoreCategory.LEGAL_CLASSIFICATION),
        explanation=(
            f"{rule.name} classified as {rule.legal_classification} under {jurisdiction} law. "
            f"Governed by: {', '.join(rule.governing_law) or 'no specific statute'}. {registration}"
        ),
        findings=tuple(findings),
        citations=_select(citations, [CLASSIFICATION_CITATION, *rule.citations]),
    )


def _necessary_sufficient_test(
    params: AnalysisParams,
    resolved: ResolvedRuleSet,
    binding_strength: BindingStrength,
    score_result: ScoreResult,
    citations: Sequence[Citation],
) -> StepAnalysis:
    jurisdiction = resolved.jurisdiction.name
    necessary, sufficient = params.is_necessary, params.is_sufficient

    if necessary and sufficient:
        status = StepStatus.PASS
        explanation = (
            "Strong ACP binding achieved. Token control is both necessary and "
            f"sufficient for asset transfer under {jurisdiction} law."
        )
    elif necessary:
        status = StepStatus.WARNING
        explanation = (
            "Token control is necessary but not sufficient. Additional approvals "
            "or intermediary action required for transfer."
        )
    elif sufficient:
        status = StepStatus.WARNING
        explanation = (
            "Token control is sufficient but not necessary. Alternative transfer "
            "mechanisms exist outside token system."
        )
    else:
        status = StepStatus.FAIL
        explanation = (
            "Weak or no ACP binding. Token represents contractual claim rather "
            "than direct asset control."
        )

    findings = [
        f"Token control necessary: {_yes_no(necessary)}",
        f"Token control sufficient: {_yes_no(sufficient)}",
        f"ACP binding strength: {binding_strength.value}",
    ]
    cited: list[str] = []
    for cf in resolved.control_frameworks:
        findings.append(
            f"{cf.name}: declared binding {cf.acp_binding.value}, "
            f"{len(cf.necessary)} necessary / {len(cf.sufficient)} sufficient condition(s)"
        )
        cited.extend(cf.citations)

    return StepAnalysis(
        step="D",
        title="Tokenization necessary+sufficient test",
        category=ScoreCategory.ACP_BINDING,
        status=status,
        points=score_result.points(ScoreCategory.ACP_BINDING),
        explanation=explanation,
        findings=tuple(findings),
        citations=_select(citations, cited),
    )


def _settlement_test(
    params: AnalysisParams,
    resolved: ResolvedRuleSet,
    score_result: ScoreResult,
    citations: Sequence[Citation],
) -> StepAnalysis:
    rule = resolved.primary_settlement
    points = score_result.points(ScoreCategory.SETTLEMENT)

    if rule is None:
        return StepAnalysis(
            step="E",
            title="Settlement atomicity test",
            category=ScoreCategory.SETTLEMENT,
            status=StepStatus.FAIL,
            points=points,
            explanation="No settlement asset selected. Settlement finality cannot be assessed.",
        )

    if points == ScoreCategory.SETTLEMENT.max_points and rule.atomic_settlement_possible:
        status = StepStatus.PASS
    elif rule.finality.legal_certainty == Certainty.LOW:
        status = StepStatus.FAIL
    else:
        status = StepStatus.WARNING

    explanation = (
        f"Settlement operates on {rule.finality.timing} cycle. "
        f"{'Atomic DvP/PvP is legally possible' if rule.atomic_settlement_possible else 'Atomic settlement not currently available'}. "
        f"Legal certainty of finality: {rule.finality.legal_certainty.value}. "
        f"{'CBDC available for cash leg' if rule.cbdc_available else 'CBDC not yet available'}."
    )
    findings = [
        f"Settlement rule: {rule.name}",
        f"Atomic settlement possible: {_yes_no(rule.atomic_settlement_possible)}",
        f"Finality timing: {rule.finality.timing}",
        f"Insolvency protection: {_yes_no(rule.finality.insolvency_protection)}",
    ]
    if not resolved.settlement_matched:
        findings.append(
            f"'{params.settlement_asset}' is not a recognized cash leg; "
            f"assessed against {rule.name}"
        )

    cited = [cid for sr in resolved.settlement_rules for cid in sr.citations]
    return StepAnalysis(
        step="E",
        title="Settlement atomicity test",
        category=ScoreCategory.SETTLEMENT,
        status=status,
        points=points,
        explanation=explanation,
        findings=tuple(findings),
        citations=_select(citations, cited),
    )


def _enforceability_test(
    params: AnalysisParams,
    resolved: ResolvedRuleSet,
    score_result: ScoreResult,
    risks: Sequence[IdentifiedRisk],
    citations: Sequence[Citation],
) -> StepAnalysis:
    rule = resolved.primary_tokenization
    regulatory_status = rule.regulatory_status if rule else RegulatoryStatus.UNCLEAR
    permitted = regulatory_status == RegulatoryStatus.PERMITTED
    has_basis = params.has_legal_basis

    if regulatory_status == RegulatoryStatus.PROHIBITED:
        status = StepStatus.FAIL
    elif has_basis and permitted:
        status = StepStatus.PASS
    else:
        status = StepStatus.WARNING

    precedents = sum(len(tr.precedents) for tr in resolved.tokenization_rules)
    explanation = (
        (f"Regulatory status: {regulatory_status.value}. " if rule
         else "No specific tokenization regulations identified. ")
        + ("Legal basis provided for structure. " if has_basis
           else "No legal basis cited. Recommend obtaining legal opinion. ")
        + (f"{precedents} precedent(s) available in {resolved.jurisdiction.name}." if precedents
           else "No precedents identified; novel structure.")
    )

    deal_breakers = [r for r in risks if r.risk.deal_breaker]
    findings = [
        f"Legal basis provided: {_yes_no(has_basis)}",
        f"Regulatory status: {regulatory_status.value}",
        f"Required licences: {', '.join(lic.name for tr in resolved.tokenization_rules for lic in tr.required_licenses) or 'none identified'}",
        f"Precedents available: {precedents}",
    ]
    findings.extend(f"Deal-breaker: {r.risk.description}" for r in deal_breakers)

    cited = [cid for tr in resolved.tokenization_rules for cid in tr.citations]
    return StepAnalysis(
        step="F",
        title="Failure-and-enforceability test",
        category=ScoreCategory.ENFORCEABILITY,
        status=status,
        points=score_result.points(ScoreCategory.ENFORCEABILITY),
        explanation=explanation,
        findings=tuple(findings),
        citations=_select(citations, cited),
        severity=StepSeverity.WARN if deal_breakers else StepSeverity.INFO,
    )


# =============================================================================
# Entry Points
# =============================================================================

def build_decision_trace(
    params: AnalysisParams,
    resolved: ResolvedRuleSet,
    binding_strength: BindingStrength,
    score_result: ScoreResult,
    risks: Sequence[IdentifiedRisk],
    citations: Sequence[Citation],
) -> list[StepAnalysis]:
    """Build steps A to F in order."""
    trace = [
        _thing_test(params, resolved, score_result, citations),
        _accounting_control_test(params, resolved, score_result, citations),
        _classification_crosswalk(params, resolved, score_result, citations),
        _necessary_sufficient_test(params, resolved, binding_strength, score_result, citations),
        _settlement_test(params, resolved, score_result, citations),
        _enforceability_test(params, resolved, score_result, risks, citations),
    ]
    compiled = {c.id for c in citations}
    for step in trace:
        assert step.points == score_result.points(step.category)
        assert all(c.id in compiled for c in step.citations)
    return trace


def assemble(
    params: AnalysisParams,
    resolved: ResolvedRuleSet,
    binding_strength: BindingStrength,
    score_result: ScoreResult,
    decision_trace: Sequence[StepAnalysis],
    risks: Sequence[IdentifiedRisk],
    citations: Sequence[Citation],
    recommendations: Sequence[str] = (),
    gaps: Sequence[str] = (),
    knowledge_base_hash: str = "",
) -> AnalysisResult:
    """Package every component output into one immutable result."""
    return AnalysisResult(
        params=params,
        jurisdiction_id=resolved.jurisdiction.id,
        asset_type=resolved.asset_key,
        score=score_result.total,
        score_label=score_result.label,
        outcome=score_result.outcome,
        binding_strength=binding_strength,
        breakdown=score_result.breakdown_dict(),
        decision_trace=tuple(decision_trace),
        risks=tuple(risks),
        citations=tuple(citations),
        unclassified=resolved.unclassified,
        warnings=tuple(str(w) for w in resolved.warnings),
        recommendations=tuple(recommendations),
        gaps=tuple(gaps),
        knowledge_base_hash=knowledge_base_hash,
    )
