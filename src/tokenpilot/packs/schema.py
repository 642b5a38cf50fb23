"""
TokenPilot Jurisdiction Pack Schemas

Pydantic models for validating jurisdiction pack YAML/JSON files.

These schemas define the structure of packs loaded at startup. They map
to the frozen domain models in tokenpilot.models.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check the major version for compatibility
"""
from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..canon import normalize_key


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

LegalSystemValue = Literal["common-law", "civil-law", "mixed", "islamic"]

ReadinessValue = Literal["advanced", "developing", "nascent"]

PropertyStatusValue = Literal["recognized", "unclear", "not-recognized"]

DeclaredBindingValue = Literal["strong", "moderate", "weak"]

RegulatoryStatusValue = Literal["permitted", "restricted", "prohibited", "unclear"]

CertaintyValue = Literal["high", "medium", "low"]

CitationTypeValue = Literal["statute", "regulation", "case", "guidance", "fatwa", "standard"]

AuthorityLevelValue = Literal["primary", "secondary", "guidance"]

RiskCategoryValue = Literal[
    "legal", "regulatory", "operational", "market", "settlement", "insolvency",
    "shariah", "enforcement", "cross-border",
]

LevelValue = Literal["low", "medium", "high"]


class _PackModel(BaseModel):
    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }


# =============================================================================
# Citation
# =============================================================================

class CitationSchema(_PackModel):
    """Schema for a legal authority."""
    id: str = Field(..., min_length=1, description="Citation id, unique within the pack")
    type: CitationTypeValue
    title: str
    reference: str = Field(..., description="Formal reference (e.g., 'eWpG §4')")
    authority_level: AuthorityLevelValue = "primary"
    section: Optional[str] = None
    url: Optional[str] = None
    summary: str = ""


# =============================================================================
# Asset Types
# =============================================================================

class RegistrySchema(_PackModel):
    """Schema for a register that evidences or confers title."""
    name: str
    statutory: bool = False
    title_conferring: bool = False
    dlt_compatible: bool = False


class ShariahSchema(_PackModel):
    """Schema for the Shariah considerations attached to an asset type."""
    permissible: bool = True
    conditions: list[str] = Field(default_factory=list)
    prohibited_features: list[str] = Field(default_factory=list)
    structures: list[str] = Field(default_factory=list)
    rulings: list[str] = Field(default_factory=list, description="Citation ids of the governing rulings")


class AssetTypeRuleSchema(_PackModel):
    """
    Schema for an asset-type rule.

    asset_type is the display name; its normalized form is the lookup key.
    """
    asset_type: str = Field(..., min_length=1, description="Asset type (e.g., 'Investment Security')")
    legal_classification: str
    property_status: PropertyStatusValue
    governing_law: list[str] = Field(default_factory=list)
    transfer_mechanism: list[str] = Field(default_factory=list)
    registration_required: bool = False
    registry: Optional[RegistrySchema] = None
    shariah: Optional[ShariahSchema] = None
    citations: list[str] = Field(default_factory=list)


# =============================================================================
# Control Frameworks
# =============================================================================

class ControlConditionSchema(_PackModel):
    """Schema for a necessary or sufficient control test."""
    condition: str
    legal_requirement: str = ""
    certainty: CertaintyValue = "medium"


class GoodFaithSchema(_PackModel):
    available: bool = False
    conditions: list[str] = Field(default_factory=list)


class ControlFrameworkSchema(_PackModel):
    """Schema for a control framework (binding path)."""
    id: Optional[str] = Field(None, description="Defaults to the normalized binding path")
    binding_path: str = Field(..., min_length=1, description="Binding path (e.g., 'Registry of Record')")
    asset_types: list[str] = Field(..., min_length=1)
    acp_binding: DeclaredBindingValue
    legal_basis: str = ""
    necessary: list[ControlConditionSchema] = Field(default_factory=list)
    sufficient: list[ControlConditionSchema] = Field(default_factory=list)
    intermediary_required: bool = False
    good_faith_protection: GoodFaithSchema = Field(default_factory=GoodFaithSchema)
    citations: list[str] = Field(default_factory=list)


# =============================================================================
# Tokenization
# =============================================================================

class LicenseSchema(_PackModel):
    name: str
    issuing_authority: str
    requirements: list[str] = Field(default_factory=list)


class PrecedentSchema(_PackModel):
    name: str
    year: int
    description: str = ""


class TokenizationRuleSchema(_PackModel):
    """Schema for a tokenization regulatory rule."""
    id: str = Field(..., min_length=1)
    applicable_assets: list[str] = Field(..., min_length=1)
    regulatory_status: RegulatoryStatusValue
    required_licenses: list[LicenseSchema] = Field(default_factory=list)
    limitations: list[str] = Field(default_factory=list)
    precedents: list[PrecedentSchema] = Field(default_factory=list)
    citations: list[str] = Field(default_factory=list)


# =============================================================================
# Settlement
# =============================================================================

class FinalitySchema(_PackModel):
    timing: str
    legal_certainty: CertaintyValue
    insolvency_protection: bool = False


class SettlementRuleSchema(_PackModel):
    """Schema for a settlement-finality rule."""
    id: str = Field(..., min_length=1, description="Settlement type id")
    name: str
    finality: FinalitySchema
    cash_legs: list[str] = Field(default_factory=list, description="Settlement assets covered")
    atomic_settlement_possible: bool = False
    cbdc_available: bool = False
    citations: list[str] = Field(default_factory=list)


# =============================================================================
# Risks
# =============================================================================

class RiskFactorSchema(_PackModel):
    """Schema for a risk factor."""
    id: str = Field(..., min_length=1)
    category: RiskCategoryValue
    description: str
    severity: LevelValue
    likelihood: LevelValue = "medium"
    applicable_scenarios: list[str] = Field(..., min_length=1)
    mitigation: list[str] = Field(default_factory=list)
    deal_breaker: bool = False
    citations: list[str] = Field(default_factory=list)


# =============================================================================
# Pack
# =============================================================================

class OverviewSchema(_PackModel):
    summary: str = ""
    regulators: list[str] = Field(default_factory=list)
    readiness: ReadinessValue = "developing"
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)


class JurisdictionPackSchema(_PackModel):
    """
    Top-level schema for a jurisdiction pack file.

    A pack defines every rule table for one jurisdiction.
    """
    # Metadata
    schema_version: str = Field(SCHEMA_VERSION, description="Schema version for compatibility")
    id: str = Field(..., min_length=1, description="Jurisdiction id (e.g., 'germany', 'us-ny')")
    name: str
    legal_system: LegalSystemValue
    version: str = "1.0.0"
    last_updated: Optional[date] = None
    aliases: list[str] = Field(default_factory=list)
    preferred_cash_leg: str = "Tokenized Deposit"
    overview: OverviewSchema = Field(default_factory=OverviewSchema)

    # Tables
    citations: list[CitationSchema] = Field(default_factory=list)
    asset_types: list[AssetTypeRuleSchema] = Field(default_factory=list)
    control_frameworks: list[ControlFrameworkSchema] = Field(default_factory=list)
    tokenization_rules: list[TokenizationRuleSchema] = Field(default_factory=list)
    settlement_rules: list[SettlementRuleSchema] = Field(default_factory=list)
    risk_factors: list[RiskFactorSchema] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Ids are stored in normalized form."""
        key = normalize_key(v)
        if not key:
            raise ValueError("jurisdiction id must contain alphanumerics")
        return key


class BaselinePackSchema(_PackModel):
    """
    Schema for the jurisdiction-independent baseline file.

    Every universal citation and every generic rule citation must be
    declared in citations.
    """
    schema_version: str = Field(SCHEMA_VERSION)
    citations: list[CitationSchema] = Field(..., min_length=1)
    universal_citations: list[str] = Field(..., min_length=1)
    generic_asset_type: AssetTypeRuleSchema
    generic_control_framework: ControlFrameworkSchema
    generic_tokenization_rule: TokenizationRuleSchema
    generic_settlement_rule: SettlementRuleSchema
    gap_risk: RiskFactorSchema

    @model_validator(mode="after")
    def validate_universal_citations(self) -> "BaselinePackSchema":
        known = {c.id for c in self.citations}
        missing = [cid for cid in self.universal_citations if cid not in known]
        if missing:
            raise ValueError(f"universal citations not declared: {missing}")
        return self


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_jurisdiction_pack(data: dict[str, Any]) -> JurisdictionPackSchema:
    """
    Validate a jurisdiction pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return JurisdictionPackSchema.model_validate(data)


def validate_baseline_pack(data: dict[str, Any]) -> BaselinePackSchema:
    """Validate the baseline pack dictionary against the schema."""
    return BaselinePackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """
    Check if a pack's schema version is compatible.

    Only the major version has to match.
    """
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    return pack_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
