"""
TokenPilot - Cross-Jurisdiction Tokenization Feasibility Engine

TokenPilot scores whether a proposed tokenization produces a legally
cognizable tokenized asset or only a contractual claim, for a given
asset type, jurisdiction, control mechanism and settlement rail.

It produces ASSESSMENTS, not legal advice. Every score is traceable to
the rules and citations of a versioned knowledge base snapshot.

Quick Start:
    from tokenpilot import AnalysisParams, analyze

    result = analyze(AnalysisParams(
        asset_type="Investment Security",
        jurisdiction_id="Germany",
        binding_path_id="Registry of Record",
        settlement_asset="Tokenized Deposit",
        legal_basis="eWpG",
        is_necessary=True,
        is_sufficient=True,
    ))
    result.score     # 100
    result.outcome   # Outcome.TOKENIZED_ASSET

Version: 1.0.0
"""
from __future__ import annotations

__version__ = "1.0.0"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    AnalysisParams,
    AnalysisResult,
    BindingPolicy,
    BindingStrength,
    Citation,
    IdentifiedRisk,
    Outcome,
    ScoreCategory,
    StepAnalysis,
)

# =============================================================================
# Engine
# =============================================================================
from .engine import (
    KnowledgeBase,
    KnowledgeBaseRegistry,
    analyze,
    build_knowledge_base,
    load_knowledge_base,
)

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    TokenPilotError,
    UnknownJurisdictionError,
    ValidationError,
)


__all__ = [
    "__version__",
    # Models
    "AnalysisParams",
    "AnalysisResult",
    "BindingPolicy",
    "BindingStrength",
    "Citation",
    "IdentifiedRisk",
    "Outcome",
    "ScoreCategory",
    "StepAnalysis",
    # Engine
    "KnowledgeBase",
    "KnowledgeBaseRegistry",
    "analyze",
    "build_knowledge_base",
    "load_knowledge_base",
    # Exceptions
    "TokenPilotError",
    "UnknownJurisdictionError",
    "ValidationError",
]
