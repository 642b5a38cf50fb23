"""
TokenPilot Models

Domain models for tokenization feasibility analysis.

    from tokenpilot.models import (
        # Enums
        BindingStrength, Outcome, ScoreCategory, RiskSeverity,
        # Knowledge base records
        Jurisdiction, AssetTypeRule, ControlFramework, Citation, RiskFactor,
        # Per-request
        AnalysisParams, AnalysisResult, StepAnalysis, IdentifiedRisk,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    AuthorityLevel,
    BindingPolicy,
    BindingStrength,
    Certainty,
    CitationType,
    LegalSystem,
    Likelihood,
    Outcome,
    PropertyStatus,
    ReadinessLevel,
    RegulatoryStatus,
    RiskCategory,
    RiskSeverity,
    ScoreCategory,
    StepSeverity,
    StepStatus,
)

# =============================================================================
# Knowledge Base Records
# =============================================================================
from .jurisdiction import (
    DEFAULT_PREFERRED_CASH_LEG,
    AssetTypeRule,
    BaselineRules,
    Citation,
    ControlCondition,
    ControlFramework,
    Finality,
    GoodFaithProtection,
    Jurisdiction,
    License,
    Overview,
    Precedent,
    Registry,
    RiskFactor,
    SettlementRule,
    ShariahConsiderations,
    TokenizationRule,
)

# =============================================================================
# Analysis
# =============================================================================
from .analysis import (
    MANDATORY_FIELDS,
    AnalysisParams,
    AnalysisResult,
    IdentifiedRisk,
    ScoreResult,
    StepAnalysis,
)


__all__ = [
    # Enums
    "AuthorityLevel",
    "BindingPolicy",
    "BindingStrength",
    "Certainty",
    "CitationType",
    "LegalSystem",
    "Likelihood",
    "Outcome",
    "PropertyStatus",
    "ReadinessLevel",
    "RegulatoryStatus",
    "RiskCategory",
    "RiskSeverity",
    "ScoreCategory",
    "StepSeverity",
    "StepStatus",
    # Records
    "DEFAULT_PREFERRED_CASH_LEG",
    "AssetTypeRule",
    "BaselineRules",
    "Citation",
    "ControlCondition",
    "ControlFramework",
    "Finality",
    "GoodFaithProtection",
    "Jurisdiction",
    "License",
    "Overview",
    "Precedent",
    "Registry",
    "RiskFactor",
    "SettlementRule",
    "ShariahConsiderations",
    "TokenizationRule",
    # Analysis
    "MANDATORY_FIELDS",
    "AnalysisParams",
    "AnalysisResult",
    "IdentifiedRisk",
    "ScoreResult",
    "StepAnalysis",
]
