"""
TokenPilot Engine

Pipeline components for tokenization feasibility analysis.

Components:
- KnowledgeBase / KnowledgeBaseRegistry: Validated rule snapshot and atomic swap
- resolve: Match the rules that apply to a scenario
- classify: Grade ACP binding strength
- score: Six-category feasibility score and outcome
- aggregate: Applicable risks, most serious first
- compile_citations: Deduplicated authorities
- build_decision_trace / assemble: Steps A-F and the final result
- analyze: All of the above in one call

Usage:
    from tokenpilot.engine import analyze, load_knowledge_base

    kb = load_knowledge_base()
    result = analyze(params, kb)
"""
from __future__ import annotations

from .analyzer import analyze, validate_params
from .binding_classifier import binding_from_flags, classify
from .citation_compiler import compile_citations, iter_citation_ids, lookup_citations
from .knowledge_base import (
    KnowledgeBase,
    KnowledgeBaseRegistry,
    build_knowledge_base,
    get_default_knowledge_base,
    get_default_registry,
    load_knowledge_base,
)
from .recommendations import generate_recommendations, identify_gaps
from .report_assembler import assemble, build_decision_trace
from .risk_aggregator import aggregate, scenario_tags
from .rule_resolver import ResolvedRuleSet, resolve
from .scoring import classify_outcome, score, score_label


__all__ = [
    # Knowledge base
    "KnowledgeBase",
    "KnowledgeBaseRegistry",
    "build_knowledge_base",
    "get_default_knowledge_base",
    "get_default_registry",
    "load_knowledge_base",
    # Resolution
    "ResolvedRuleSet",
    "resolve",
    # Classification / scoring
    "binding_from_flags",
    "classify",
    "classify_outcome",
    "score",
    "score_label",
    # Risks / citations
    "aggregate",
    "scenario_tags",
    "compile_citations",
    "iter_citation_ids",
    "lookup_citations",
    # Report
    "assemble",
    "build_decision_trace",
    "generate_recommendations",
    "identify_gaps",
    # Entry point
    "analyze",
    "validate_params",
]
