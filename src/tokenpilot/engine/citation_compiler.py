"""
TokenPilot Citation Compiler

Collects the authorities behind one analysis: baseline universal
citations first, then those referenced by the asset rule (its Shariah
rulings included), control frameworks, tokenization rules and
settlement rules, in that order.
Duplicates keep their first position.
"""
from __future__ import annotations

from typing import Iterable, Iterator

from ..models import Citation
from .rule_resolver import ResolvedRuleSet


def iter_citation_ids(resolved: ResolvedRuleSet) -> Iterator[str]:
    """Referenced citation ids in compile order, duplicates included."""
    yield from resolved.baseline.universal_citations
    yield from resolved.asset_rule.citation_ids
    for cf in resolved.control_frameworks:
        yield from cf.citations
    for tr in resolved.tokenization_rules:
        yield from tr.citations
    for sr in resolved.settlement_rules:
        yield from sr.citations


def lookup_citations(resolved: ResolvedRuleSet, citation_ids: Iterable[str]) -> list[Citation]:
    """Resolve ids to citations, first occurrence wins."""
    citations: list[Citation] = []
    seen: set[str] = set()
    for cid in citation_ids:
        if cid in seen:
            continue
        seen.add(cid)
        citation = resolved.lookup_citation(cid)
        assert citation is not None, f"unresolved citation id {cid!r} in validated knowledge base"
        citations.append(citation)
    return citations


def compile_citations(resolved: ResolvedRuleSet) -> list[Citation]:
    """Deduplicated citations for a resolved scenario. Never truncated."""
    return lookup_citations(resolved, iter_citation_ids(resolved))
