"""
TokenPilot Rule Resolver

Looks up the rules that apply to one scenario within one jurisdiction:

- The asset-type rule (exact normalized id)
- Control frameworks applicable to the asset type, narrowed to the
  selected binding path when one matches
- Tokenization rules applicable to the asset type
- Settlement rules covering the selected settlement asset

An asset type with no jurisdiction-specific rule is not an error: the
resolved set is flagged unclassified and carries the baseline stand-ins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..canon import normalize_key
from ..exceptions import UnresolvedRuleWarning
from ..models import (
    AssetTypeRule,
    BaselineRules,
    Citation,
    ControlFramework,
    Jurisdiction,
    SettlementRule,
    TokenizationRule,
)
from .knowledge_base import KnowledgeBase


logger = logging.getLogger(__name__)


# =============================================================================
# Resolved Rule Set
# =============================================================================

@dataclass(frozen=True)
class ResolvedRuleSet:
    """
    Rules matched for one scenario.

    Attributes:
        jurisdiction: The resolved jurisdiction
        baseline: Jurisdiction-independent rules of the same snapshot
        asset_key: Normalized asset type requested
        binding_path_key: Normalized binding path requested
        settlement_key: Normalized settlement asset requested
        asset_rule: Matched asset rule (generic stand-in when unclassified)
        control_frameworks: Applicable frameworks
        tokenization_rules: Applicable tokenization rules
        settlement_rules: Settlement rules for the selected cash leg
        unclassified: True when no jurisdiction-specific asset rule exists
        binding_path_matched: A framework matched the requested binding path
        settlement_matched: A settlement rule covered the requested asset
        warnings: Non-fatal resolution warnings
    """
    jurisdiction: Jurisdiction
    baseline: BaselineRules
    asset_key: str
    binding_path_key: str
    settlement_key: str
    asset_rule: AssetTypeRule
    control_frameworks: tuple[ControlFramework, ...]
    tokenization_rules: tuple[TokenizationRule, ...]
    settlement_rules: tuple[SettlementRule, ...]
    unclassified: bool = False
    binding_path_matched: bool = False
    settlement_matched: bool = False
    warnings: tuple[UnresolvedRuleWarning, ...] = ()

    @property
    def primary_framework(self) -> Optional[ControlFramework]:
        return self.control_frameworks[0] if self.control_frameworks else None

    @property
    def primary_settlement(self) -> Optional[SettlementRule]:
        return self.settlement_rules[0] if self.settlement_rules else None

    @property
    def primary_tokenization(self) -> Optional[TokenizationRule]:
        return self.tokenization_rules[0] if self.tokenization_rules else None

    def lookup_citation(self, citation_id: str) -> Optional[Citation]:
        """
        Resolve a citation id against the owning table.

        Baseline ids are reserved, so checking the baseline first never
        shadows a jurisdiction citation.
        """
        return self.baseline.citation(citation_id) or (
            None if self.unclassified else self.jurisdiction.citation(citation_id)
        )


# =============================================================================
# Resolver
# =============================================================================

def _match_frameworks(
    jurisdiction: Jurisdiction, asset_key: str, binding_path_key: str
) -> tuple[tuple[ControlFramework, ...], bool]:
    applicable = tuple(
        cf for cf in jurisdiction.control_frameworks if cf.applies_to(asset_key)
    )
    if binding_path_key:
        selected = tuple(
            cf for cf in applicable
            if binding_path_key in (cf.binding_path, cf.id)
        )
        if selected:
            return selected, True
    return applicable, False


def _match_settlement(
    jurisdiction: Jurisdiction, settlement_asset: Optional[str], settlement_key: str
) -> tuple[tuple[SettlementRule, ...], bool]:
    # Presence is judged on the raw value; a symbol-only name has an empty key
    if not (settlement_asset or "").strip():
        return (), False
    matched = tuple(
        sr for sr in jurisdiction.settlement_rules if settlement_key and sr.covers(settlement_key)
    )
    if matched:
        return matched, True
    # Unrecognized cash leg: fall back to the jurisdiction's default rule.
    return jurisdiction.settlement_rules[:1], False


def _generic_rule_set(
    jurisdiction: Jurisdiction,
    baseline: BaselineRules,
    asset_key: str,
    binding_path_key: str,
    settlement_key: str,
    settlement_requested: bool,
) -> ResolvedRuleSet:
    warning = UnresolvedRuleWarning(jurisdiction.id, asset_key)
    logger.warning(
        str(warning),
        extra={"jurisdiction_id": jurisdiction.id, "asset_type": asset_key},
    )
    framework = baseline.generic_control_framework
    return ResolvedRuleSet(
        jurisdiction=jurisdiction,
        baseline=baseline,
        asset_key=asset_key,
        binding_path_key=binding_path_key,
        settlement_key=settlement_key,
        asset_rule=baseline.generic_asset_rule,
        control_frameworks=(framework,),
        tokenization_rules=(baseline.generic_tokenization_rule,),
        settlement_rules=(baseline.generic_settlement_rule,) if settlement_requested else (),
        unclassified=True,
        binding_path_matched=binding_path_key in (framework.binding_path, framework.id),
        settlement_matched=False,
        warnings=(warning,),
    )


def resolve(
    knowledge_base: KnowledgeBase,
    jurisdiction_id: str,
    asset_type: str,
    binding_path_id: Optional[str] = None,
    settlement_asset: Optional[str] = None,
) -> ResolvedRuleSet:
    """
    Resolve the rules for a scenario.

    Args:
        knowledge_base: Snapshot to resolve against
        jurisdiction_id: Jurisdiction id or alias
        asset_type: Asset type display name or id
        binding_path_id: Optional binding path / control framework
        settlement_asset: Optional settlement asset

    Raises:
        UnknownJurisdictionError: If the jurisdiction is not in the snapshot
    """
    jurisdiction = knowledge_base.get(jurisdiction_id)
    asset_key = normalize_key(asset_type)
    binding_path_key = normalize_key(binding_path_id)
    settlement_key = normalize_key(settlement_asset)

    asset_rule = jurisdiction.asset_rule(asset_key)
    if asset_rule is None:
        return _generic_rule_set(
            jurisdiction, knowledge_base.baseline, asset_key, binding_path_key, settlement_key,
            bool((settlement_asset or "").strip()),
        )

    frameworks, binding_matched = _match_frameworks(jurisdiction, asset_key, binding_path_key)
    settlement_rules, settlement_matched = _match_settlement(
        jurisdiction, settlement_asset, settlement_key
    )
    tokenization_rules = tuple(
        tr for tr in jurisdiction.tokenization_rules if asset_key in tr.applicable_assets
    )

    logger.debug(
        "Resolved %s/%s: %d frameworks, %d tokenization rules, %d settlement rules",
        jurisdiction.id, asset_key, len(frameworks), len(tokenization_rules), len(settlement_rules),
    )
    return ResolvedRuleSet(
        jurisdiction=jurisdiction,
        baseline=knowledge_base.baseline,
        asset_key=asset_key,
        binding_path_key=binding_path_key,
        settlement_key=settlement_key,
        asset_rule=asset_rule,
        control_frameworks=frameworks,
        tokenization_rules=tokenization_rules,
        settlement_rules=settlement_rules,
        unclassified=False,
        binding_path_matched=binding_matched,
        settlement_matched=settlement_matched,
    )
