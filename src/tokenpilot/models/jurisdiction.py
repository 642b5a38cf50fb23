"""
TokenPilot Jurisdiction Models

Read-only rule tables that make up the knowledge base. One Jurisdiction
bundles the asset, control framework, tokenization, settlement, citation
and risk tables for a single legal system.

Records are frozen and hold tuples so a built knowledge base can be
shared by any number of concurrent analyses.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from functools import cached_property
from typing import Any, Iterator, Optional

from .enums import (
    AuthorityLevel,
    BindingStrength,
    Certainty,
    CitationType,
    LegalSystem,
    Likelihood,
    PropertyStatus,
    ReadinessLevel,
    RegulatoryStatus,
    RiskCategory,
    RiskSeverity,
)


DEFAULT_PREFERRED_CASH_LEG = "Tokenized Deposit"


# =============================================================================
# Citation
# =============================================================================

@dataclass(frozen=True)
class Citation:
    """
    A legal authority referenced by one or more rules.

    Attributes:
        id: Unique within the owning jurisdiction (or the baseline)
        type: Statute, regulation, case, guidance, fatwa or standard
        title: Short title of the authority
        reference: Formal reference (e.g., "eWpG §4")
        authority_level: Binding weight of the authority
        section: Specific section relied upon
        url: Link to an official source
        summary: One-line statement of what the authority establishes
    """
    id: str
    type: CitationType
    title: str
    reference: str
    authority_level: AuthorityLevel = AuthorityLevel.PRIMARY
    section: Optional[str] = None
    url: Optional[str] = None
    summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "reference": self.reference,
            "authority_level": self.authority_level.value,
            "section": self.section,
            "url": self.url,
            "summary": self.summary,
        }


# =============================================================================
# Asset Type Rule
# =============================================================================

@dataclass(frozen=True)
class Registry:
    """A register whose entries evidence or confer title."""
    name: str
    statutory: bool = False
    title_conferring: bool = False
    dlt_compatible: bool = False


@dataclass(frozen=True)
class ShariahConsiderations:
    """
    Shariah screening for an asset type.

    rulings holds citation ids, normally fatwa-type citations from the
    jurisdiction's Shariah authority.
    """
    permissible: bool = True
    conditions: tuple[str, ...] = ()
    prohibited_features: tuple[str, ...] = ()
    structures: tuple[str, ...] = ()
    rulings: tuple[str, ...] = ()


@dataclass(frozen=True)
class AssetTypeRule:
    """How a jurisdiction classifies and transfers one asset type."""
    asset_type: str
    name: str
    legal_classification: str
    property_status: PropertyStatus
    governing_law: tuple[str, ...] = ()
    transfer_mechanism: tuple[str, ...] = ()
    registration_required: bool = False
    registry: Optional[Registry] = None
    shariah: Optional[ShariahConsiderations] = None
    citations: tuple[str, ...] = ()

    @property
    def citation_ids(self) -> tuple[str, ...]:
        """Own citations followed by any Shariah rulings."""
        if self.shariah is None:
            return self.citations
        return self.citations + self.shariah.rulings


# =============================================================================
# Control Framework
# =============================================================================

@dataclass(frozen=True)
class ControlCondition:
    """One necessary or sufficient test a framework defines."""
    condition: str
    legal_requirement: str = ""
    certainty: Certainty = Certainty.MEDIUM


@dataclass(frozen=True)
class GoodFaithProtection:
    """Whether a good-faith transferee takes free of prior claims."""
    available: bool = False
    conditions: tuple[str, ...] = ()


@dataclass(frozen=True)
class ControlFramework:
    """
    A mechanism by which control over an asset is legally recorded.

    binding_path is the normalized key a caller selects
    (e.g., "registry-of-record", "custodian-bailee"); several frameworks
    may share one binding path for different asset types.
    """
    id: str
    binding_path: str
    name: str
    asset_types: tuple[str, ...]
    acp_binding: BindingStrength
    legal_basis: str = ""
    necessary: tuple[ControlCondition, ...] = ()
    sufficient: tuple[ControlCondition, ...] = ()
    intermediary_required: bool = False
    good_faith_protection: GoodFaithProtection = field(default_factory=GoodFaithProtection)
    citations: tuple[str, ...] = ()

    def applies_to(self, asset_type: str) -> bool:
        return asset_type in self.asset_types

    @property
    def control_certainty(self) -> Certainty:
        """Share of necessary conditions graded high certainty."""
        if not self.necessary:
            return Certainty.LOW
        high = sum(1 for c in self.necessary if c.certainty == Certainty.HIGH)
        ratio = high / len(self.necessary)
        if ratio >= 0.8:
            return Certainty.HIGH
        if ratio >= 0.5:
            return Certainty.MEDIUM
        return Certainty.LOW


# =============================================================================
# Tokenization Rule
# =============================================================================

@dataclass(frozen=True)
class License:
    """A licence required to operate a tokenization structure."""
    name: str
    issuing_authority: str
    requirements: tuple[str, ...] = ()


@dataclass(frozen=True)
class Precedent:
    """A known market or court precedent."""
    name: str
    year: int
    description: str = ""


@dataclass(frozen=True)
class TokenizationRule:
    """Regulatory treatment of tokenizing a set of asset types."""
    id: str
    applicable_assets: tuple[str, ...]
    regulatory_status: RegulatoryStatus
    required_licenses: tuple[License, ...] = ()
    limitations: tuple[str, ...] = ()
    precedents: tuple[Precedent, ...] = ()
    citations: tuple[str, ...] = ()


# =============================================================================
# Settlement Rule
# =============================================================================

@dataclass(frozen=True)
class Finality:
    """When and how firmly a settlement becomes irrevocable."""
    timing: str
    legal_certainty: Certainty
    insolvency_protection: bool = False


@dataclass(frozen=True)
class SettlementRule:
    """Settlement-finality treatment for a cash-leg type."""
    id: str
    name: str
    finality: Finality
    cash_legs: tuple[str, ...] = ()
    atomic_settlement_possible: bool = False
    cbdc_available: bool = False
    citations: tuple[str, ...] = ()

    def covers(self, settlement_key: str) -> bool:
        return settlement_key == self.id or settlement_key in self.cash_legs


# =============================================================================
# Risk Factor
# =============================================================================

@dataclass(frozen=True)
class RiskFactor:
    """
    A known risk, tagged with the scenarios it applies to.

    applicable_scenarios holds normalized tags compared against asset
    type, jurisdiction, binding path, settlement and token rail keys.
    """
    id: str
    category: RiskCategory
    description: str
    severity: RiskSeverity
    likelihood: Likelihood
    applicable_scenarios: tuple[str, ...] = ()
    mitigation: tuple[str, ...] = ()
    deal_breaker: bool = False
    citations: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "description": self.description,
            "severity": self.severity.value,
            "likelihood": self.likelihood.value,
            "applicable_scenarios": list(self.applicable_scenarios),
            "mitigation": list(self.mitigation),
            "deal_breaker": self.deal_breaker,
            "citations": list(self.citations),
        }


# =============================================================================
# Jurisdiction
# =============================================================================

@dataclass(frozen=True)
class Overview:
    """Short description of the jurisdiction's readiness."""
    summary: str = ""
    regulators: tuple[str, ...] = ()
    readiness: ReadinessLevel = ReadinessLevel.DEVELOPING
    strengths: tuple[str, ...] = ()
    gaps: tuple[str, ...] = ()


@dataclass(frozen=True)
class Jurisdiction:
    """
    All rule tables for one jurisdiction.

    Lookup indexes are derived lazily and cached on the instance; the
    underlying tables never change after construction.
    """
    id: str
    name: str
    legal_system: LegalSystem
    version: str = "1.0.0"
    last_updated: Optional[date] = None
    aliases: tuple[str, ...] = ()
    preferred_cash_leg: str = DEFAULT_PREFERRED_CASH_LEG
    overview: Overview = field(default_factory=Overview)
    citations: tuple[Citation, ...] = ()
    asset_types: tuple[AssetTypeRule, ...] = ()
    control_frameworks: tuple[ControlFramework, ...] = ()
    tokenization_rules: tuple[TokenizationRule, ...] = ()
    settlement_rules: tuple[SettlementRule, ...] = ()
    risk_factors: tuple[RiskFactor, ...] = ()

    @cached_property
    def _asset_index(self) -> dict[str, AssetTypeRule]:
        return {rule.asset_type: rule for rule in self.asset_types}

    @cached_property
    def _citation_index(self) -> dict[str, Citation]:
        return {c.id: c for c in self.citations}

    def asset_rule(self, asset_type: str) -> Optional[AssetTypeRule]:
        return self._asset_index.get(asset_type)

    def citation(self, citation_id: str) -> Optional[Citation]:
        return self._citation_index.get(citation_id)

    def iter_citation_refs(self) -> Iterator[tuple[str, str, str]]:
        """Yield (rule kind, rule id, citation id) for every rule reference."""
        for rule in self.asset_types:
            for cid in rule.citation_ids:
                yield "asset_type", rule.asset_type, cid
        for cf in self.control_frameworks:
            for cid in cf.citations:
                yield "control_framework", cf.id, cid
        for tr in self.tokenization_rules:
            for cid in tr.citations:
                yield "tokenization_rule", tr.id, cid
        for sr in self.settlement_rules:
            for cid in sr.citations:
                yield "settlement_rule", sr.id, cid
        for rf in self.risk_factors:
            for cid in rf.citations:
                yield "risk_factor", rf.id, cid

    def summary_dict(self) -> dict[str, Any]:
        """Compact listing used by the API and CLI."""
        return {
            "id": self.id,
            "name": self.name,
            "legal_system": self.legal_system.value,
            "version": self.version,
            "aliases": list(self.aliases),
            "readiness": self.overview.readiness.value,
            "asset_types": [r.name for r in self.asset_types],
            "binding_paths": list(dict.fromkeys(cf.name for cf in self.control_frameworks)),
            "citation_count": len(self.citations),
            "risk_count": len(self.risk_factors),
        }


# =============================================================================
# Baseline Rules
# =============================================================================

@dataclass(frozen=True)
class BaselineRules:
    """
    Jurisdiction-independent rules.

    universal_citations are cited by every analysis. The generic_* rules
    stand in when an asset type has no jurisdiction-specific rule, and
    gap_risk is the standing risk added in that case.
    """
    citations: tuple[Citation, ...]
    universal_citations: tuple[str, ...]
    generic_asset_rule: AssetTypeRule
    generic_control_framework: ControlFramework
    generic_tokenization_rule: TokenizationRule
    generic_settlement_rule: SettlementRule
    gap_risk: RiskFactor

    @cached_property
    def _citation_index(self) -> dict[str, Citation]:
        return {c.id: c for c in self.citations}

    def citation(self, citation_id: str) -> Optional[Citation]:
        return self._citation_index.get(citation_id)

    def iter_citation_refs(self) -> Iterator[tuple[str, str, str]]:
        for cid in self.universal_citations:
            yield "universal", "baseline", cid
        rules = (
            ("asset_type", self.generic_asset_rule.asset_type, self.generic_asset_rule.citations),
            ("control_framework", self.generic_control_framework.id, self.generic_control_framework.citations),
            ("tokenization_rule", self.generic_tokenization_rule.id, self.generic_tokenization_rule.citations),
            ("settlement_rule", self.generic_settlement_rule.id, self.generic_settlement_rule.citations),
            ("risk_factor", self.gap_risk.id, self.gap_risk.citations),
        )
        for kind, rule_id, cids in rules:
            for cid in cids:
                yield kind, rule_id, cid
