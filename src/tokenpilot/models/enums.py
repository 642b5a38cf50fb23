"""
TokenPilot Enumerations

All enumeration types used throughout the TokenPilot system.
Organized by domain area for clarity.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Jurisdiction
# =============================================================================

class LegalSystem(str, Enum):
    """Legal tradition a jurisdiction belongs to."""
    COMMON_LAW = "common-law"
    CIVIL_LAW = "civil-law"
    MIXED = "mixed"
    ISLAMIC = "islamic"


class ReadinessLevel(str, Enum):
    """How prepared a jurisdiction's law is for tokenized assets."""
    ADVANCED = "advanced"
    DEVELOPING = "developing"
    NASCENT = "nascent"


# =============================================================================
# Rule Attributes
# =============================================================================

class PropertyStatus(str, Enum):
    """Whether the law recognizes the asset type as property."""
    RECOGNIZED = "recognized"
    UNCLEAR = "unclear"
    NOT_RECOGNIZED = "not-recognized"


class BindingStrength(str, Enum):
    """
    Strength of the link between token control and the authoritative
    control point (ACP).

    NONE is only produced by classification when no control framework
    resolved; frameworks themselves declare STRONG, MODERATE or WEAK.
    """
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    NONE = "none"

    @property
    def rank(self) -> int:
        return _BINDING_RANK[self]


_BINDING_RANK = {
    BindingStrength.NONE: 0,
    BindingStrength.WEAK: 1,
    BindingStrength.MODERATE: 2,
    BindingStrength.STRONG: 3,
}


class RegulatoryStatus(str, Enum):
    """Regulatory stance on tokenizing an asset type."""
    PERMITTED = "permitted"
    RESTRICTED = "restricted"
    PROHIBITED = "prohibited"
    UNCLEAR = "unclear"


class Certainty(str, Enum):
    """Legal certainty grade (conditions, settlement finality)."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# =============================================================================
# Citations
# =============================================================================

class CitationType(str, Enum):
    """Kind of legal authority being cited."""
    STATUTE = "statute"
    REGULATION = "regulation"
    CASE = "case"
    GUIDANCE = "guidance"
    FATWA = "fatwa"
    STANDARD = "standard"


class AuthorityLevel(str, Enum):
    """Binding weight of a cited authority."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    GUIDANCE = "guidance"


# =============================================================================
# Risks
# =============================================================================

class RiskCategory(str, Enum):
    """Area a risk factor belongs to."""
    LEGAL = "legal"
    REGULATORY = "regulatory"
    OPERATIONAL = "operational"
    MARKET = "market"
    SETTLEMENT = "settlement"
    INSOLVENCY = "insolvency"
    SHARIAH = "shariah"
    ENFORCEMENT = "enforcement"
    CROSS_BORDER = "cross-border"


class RiskSeverity(str, Enum):
    """Impact if the risk materializes."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self.value]


class Likelihood(str, Enum):
    """Probability the risk materializes."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self.value]


_LEVEL_RANK = {"low": 0, "medium": 1, "high": 2}


# =============================================================================
# Analysis Output
# =============================================================================

class Outcome(str, Enum):
    """
    Classification outcome of an analysis.

    The necessary/sufficient gate decides TOKENIZED_CLAIM before the
    score is consulted.
    """
    TOKENIZED_ASSET = "tokenized_asset"
    TOKENIZED_CLAIM = "tokenized_claim"
    OUT_OF_SCOPE = "out_of_scope"

    @property
    def label(self) -> str:
        return _OUTCOME_LABELS[self][0]

    @property
    def reason(self) -> str:
        return _OUTCOME_LABELS[self][1]


_OUTCOME_LABELS = {
    Outcome.TOKENIZED_ASSET: ("Tokenized Asset", "ACP-bound"),
    Outcome.TOKENIZED_CLAIM: ("Tokenized Claim", "no ACP binding"),
    Outcome.OUT_OF_SCOPE: ("Out of Scope", "no cognizable right"),
}


class ScoreCategory(str, Enum):
    """The six scored categories, in trace order (steps A to F)."""
    THING_RECOGNITION = "thing_recognition"
    ASSET_CONTROL = "asset_control"
    LEGAL_CLASSIFICATION = "legal_classification"
    ACP_BINDING = "acp_binding"
    SETTLEMENT = "settlement"
    ENFORCEABILITY = "enforceability"

    @property
    def max_points(self) -> int:
        return _CATEGORY_MAX[self]


_CATEGORY_MAX = {
    ScoreCategory.THING_RECOGNITION: 15,
    ScoreCategory.ASSET_CONTROL: 20,
    ScoreCategory.LEGAL_CLASSIFICATION: 15,
    ScoreCategory.ACP_BINDING: 25,
    ScoreCategory.SETTLEMENT: 15,
    ScoreCategory.ENFORCEABILITY: 10,
}


class StepStatus(str, Enum):
    """Result of one reasoning step."""
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


class StepSeverity(str, Enum):
    """Display severity of a reasoning step."""
    INFO = "info"
    WARN = "warn"


class BindingPolicy(str, Enum):
    """How caller flags and a framework's declared binding are reconciled."""
    CALLER_FLAGS = "caller_flags"  # flags only, framework value ignored
    MINIMUM = "minimum"            # weaker of flags and declared binding
