"""
TokenPilot Risk Aggregator

Selects the jurisdiction's risk factors whose scenario tags intersect
the analysed scenario, then orders them most serious first:

    severity desc -> deal-breakers first -> likelihood desc -> declaration order
"""
from __future__ import annotations

import logging
from typing import Optional

from ..canon import normalize_key
from ..models import AnalysisParams, IdentifiedRisk, RiskFactor
from .rule_resolver import ResolvedRuleSet


logger = logging.getLogger(__name__)

UNCLASSIFIED_TAG = "unclassified"


def scenario_tags(resolved: ResolvedRuleSet, params: AnalysisParams) -> dict[str, str]:
    """
    Normalized tags describing the scenario.

    Returns a tag -> phrase mapping in insertion order; the phrase is
    used to explain why a risk applies.
    """
    tags: dict[str, str] = {}

    def add(tag: str, phrase: str) -> None:
        if tag and tag not in tags:
            tags[tag] = phrase

    add(resolved.asset_key, f"{params.asset_type} tokenization")
    add(resolved.jurisdiction.id, f"structures under {resolved.jurisdiction.name} law")
    add(resolved.binding_path_key, f"using {params.binding_path_id}")
    for cf in resolved.control_frameworks:
        add(cf.id, f"using {cf.name}")
        add(cf.binding_path, f"using {cf.name}")
    add(resolved.settlement_key, f"settling in {params.settlement_asset}")
    for sr in resolved.settlement_rules:
        add(sr.id, f"settling via {sr.name}")
    add(normalize_key(params.token_rail), f"tokens on {params.token_rail}")
    if resolved.unclassified:
        add(UNCLASSIFIED_TAG, "asset types without a jurisdiction-specific rule")
    return tags


def _identify(risk: RiskFactor, tags: dict[str, str]) -> Optional[IdentifiedRisk]:
    matched = tuple(t for t in risk.applicable_scenarios if t in tags)
    if not matched:
        return None
    return IdentifiedRisk(
        risk=risk,
        applicability=f"Risk applies to {tags[matched[0]]}.",
        matched_tags=matched,
    )


def _sort_key(identified: IdentifiedRisk) -> tuple[int, bool, int]:
    risk = identified.risk
    return (-risk.severity.rank, not risk.deal_breaker, -risk.likelihood.rank)


def aggregate(resolved: ResolvedRuleSet, params: AnalysisParams) -> list[IdentifiedRisk]:
    """
    Collect and rank the risks applicable to a resolved scenario.

    An unclassified rule set always carries the baseline gap risk, placed
    ahead of jurisdiction risks before ranking.
    """
    tags = scenario_tags(resolved, params)
    candidates: list[RiskFactor] = []
    if resolved.unclassified:
        candidates.append(resolved.baseline.gap_risk)
    candidates.extend(resolved.jurisdiction.risk_factors)

    identified = [r for r in (_identify(risk, tags) for risk in candidates) if r is not None]
    identified.sort(key=_sort_key)

    logger.debug(
        "%d of %d risk factors apply in %s",
        len(identified), len(candidates), resolved.jurisdiction.id,
    )
    return identified
