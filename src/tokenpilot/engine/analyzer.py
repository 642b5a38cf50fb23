"""
TokenPilot Analyzer

Runs one feasibility analysis end to end:

    validate -> resolve -> classify binding -> score -> risks
             -> citations -> trace -> recommendations -> result

analyze() is a pure function of its params and the knowledge base
snapshot it is given. When no snapshot is passed, the current snapshot
of the default registry is taken once and used for the whole run.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

from ..exceptions import ValidationError
from ..models import AnalysisParams, AnalysisResult, BindingPolicy
from .binding_classifier import classify
from .citation_compiler import compile_citations
from .knowledge_base import KnowledgeBase, get_default_knowledge_base
from .recommendations import generate_recommendations, identify_gaps
from .report_assembler import assemble, build_decision_trace
from .risk_aggregator import aggregate
from .rule_resolver import resolve
from .scoring import score


logger = logging.getLogger(__name__)


def validate_params(params: AnalysisParams) -> None:
    """
    Reject params missing a mandatory field.

    Raises:
        ValidationError: Listing every missing field
    """
    missing = params.missing_fields()
    if missing:
        raise ValidationError(
            message=f"Missing required field(s): {', '.join(missing)}",
            details={"missing_fields": missing},
        )


def analyze(
    params: AnalysisParams,
    knowledge_base: Optional[KnowledgeBase] = None,
    policy: BindingPolicy = BindingPolicy.CALLER_FLAGS,
) -> AnalysisResult:
    """
    Analyze a proposed tokenization.

    Args:
        params: Caller-selected scenario
        knowledge_base: Snapshot to analyze against (default registry if None)
        policy: Binding reconciliation policy for the reported binding strength

    Returns:
        A complete AnalysisResult; never a partial one

    Raises:
        ValidationError: A mandatory field is missing
        UnknownJurisdictionError: The jurisdiction is not in the snapshot
        KnowledgeBaseNotReadyError: No snapshot was given and none is loaded
    """
    validate_params(params)
    kb = knowledge_base if knowledge_base is not None else get_default_knowledge_base()
    started = time.perf_counter()

    resolved = resolve(
        kb,
        params.jurisdiction_id,
        params.asset_type,
        params.binding_path_id,
        params.settlement_asset,
    )
    binding_strength = classify(
        resolved.control_frameworks, params.is_necessary, params.is_sufficient, policy
    )
    score_result = score(params, resolved)
    risks = aggregate(resolved, params)
    citations = compile_citations(resolved)
    trace = build_decision_trace(
        params, resolved, binding_strength, score_result, risks, citations
    )

    result = assemble(
        params,
        resolved,
        binding_strength,
        score_result,
        trace,
        risks,
        citations,
        recommendations=generate_recommendations(score_result, params, risks),
        gaps=identify_gaps(trace),
        knowledge_base_hash=kb.snapshot_hash,
    )

    logger.info(
        "Analysis complete: %s / %s scored %d (%s)",
        result.jurisdiction_id, result.asset_type, result.score, result.outcome.value,
        extra={
            "jurisdiction_id": result.jurisdiction_id,
            "asset_type": result.asset_type,
            "binding_path": resolved.binding_path_key,
            "score": result.score,
            "outcome": result.outcome.value,
            "binding_strength": binding_strength.value,
            "unclassified": result.unclassified,
            "kb_hash_short": kb.snapshot_hash_short,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return result
