"""
TokenPilot Knowledge Base

An immutable snapshot of every jurisdiction's rule tables plus the
baseline rules, built and validated once at startup.

Validation at build time:
- Every citation id a rule references exists in its jurisdiction
- Citation ids are unique and do not collide with baseline ids
- Jurisdiction ids and aliases are unique
- Rule ids are unique within each table

A snapshot is never mutated. KnowledgeBaseRegistry replaces the current
snapshot with a single reference swap, so an analysis that already holds
a snapshot finishes against it.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from ..canon import compute_knowledge_base_hash, normalize_key
from ..exceptions import (
    CitationIntegrityError,
    DuplicateJurisdictionError,
    KnowledgeBaseNotReadyError,
    KnowledgeBaseValidationError,
    UnknownJurisdictionError,
)
from ..models import BaselineRules, Jurisdiction
from ..packs import DEFAULT_PACKS_DIR, JurisdictionPackLoader


logger = logging.getLogger(__name__)


# =============================================================================
# Snapshot
# =============================================================================

@dataclass(frozen=True)
class KnowledgeBase:
    """
    Read-only registry of jurisdictions keyed by normalized id.

    Attributes:
        jurisdictions: id -> Jurisdiction
        aliases: normalized alias -> jurisdiction id
        baseline: jurisdiction-independent rules
        snapshot_hash: SHA-256 over the canonical content
    """
    jurisdictions: Mapping[str, Jurisdiction]
    aliases: Mapping[str, str]
    baseline: BaselineRules
    snapshot_hash: str

    def find(self, key: Optional[str]) -> Optional[Jurisdiction]:
        """Look up a jurisdiction by id or alias; None if absent."""
        normalized = normalize_key(key)
        jurisdiction_id = self.aliases.get(normalized, normalized)
        return self.jurisdictions.get(jurisdiction_id)

    def get(self, key: Optional[str]) -> Jurisdiction:
        """
        Look up a jurisdiction by id or alias.

        Raises:
            UnknownJurisdictionError: If nothing matches
        """
        jurisdiction = self.find(key)
        if jurisdiction is None:
            raise UnknownJurisdictionError(
                message=f"Unknown jurisdiction: '{key}'",
                details={
                    "requested": key,
                    "available": self.jurisdiction_ids(),
                },
            )
        return jurisdiction

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.find(key) is not None

    def __len__(self) -> int:
        return len(self.jurisdictions)

    def jurisdiction_ids(self) -> list[str]:
        return sorted(self.jurisdictions)

    @property
    def snapshot_hash_short(self) -> str:
        return self.snapshot_hash[:12]


# =============================================================================
# Build / Validation
# =============================================================================

def _duplicates(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for value in values:
        if value in seen and value not in dupes:
            dupes.append(value)
        seen.add(value)
    return dupes


def _validate_rule_ids(jurisdiction: Jurisdiction) -> None:
    tables = {
        "asset_types": [r.asset_type for r in jurisdiction.asset_types],
        "control_frameworks": [cf.id for cf in jurisdiction.control_frameworks],
        "tokenization_rules": [tr.id for tr in jurisdiction.tokenization_rules],
        "settlement_rules": [sr.id for sr in jurisdiction.settlement_rules],
        "risk_factors": [rf.id for rf in jurisdiction.risk_factors],
    }
    errors = {name: dupes for name, ids in tables.items() if (dupes := _duplicates(ids))}
    if errors:
        raise KnowledgeBaseValidationError(
            message=f"Duplicate rule ids in jurisdiction '{jurisdiction.id}'",
            details={"duplicates": errors},
            jurisdiction_id=jurisdiction.id,
        )


def _validate_citations(jurisdiction: Jurisdiction, reserved: set[str]) -> None:
    citation_ids = [c.id for c in jurisdiction.citations]
    duplicated = _duplicates(citation_ids)
    if duplicated:
        raise CitationIntegrityError(
            message=f"Duplicate citation ids in jurisdiction '{jurisdiction.id}'",
            details={"duplicates": duplicated},
            jurisdiction_id=jurisdiction.id,
        )
    collisions = sorted(set(citation_ids) & reserved)
    if collisions:
        raise CitationIntegrityError(
            message=f"Jurisdiction '{jurisdiction.id}' redefines baseline citation ids",
            details={"collisions": collisions},
            jurisdiction_id=jurisdiction.id,
        )
    known = set(citation_ids)
    unresolved = [
        {"rule_kind": kind, "rule_id": rule_id, "citation_id": cid}
        for kind, rule_id, cid in jurisdiction.iter_citation_refs()
        if cid not in known
    ]
    if unresolved:
        raise CitationIntegrityError(
            message=(
                f"{len(unresolved)} unresolved citation reference(s) "
                f"in jurisdiction '{jurisdiction.id}'"
            ),
            details={"unresolved": unresolved},
            jurisdiction_id=jurisdiction.id,
        )


def _validate_baseline(baseline: BaselineRules) -> None:
    citation_ids = [c.id for c in baseline.citations]
    duplicated = _duplicates(citation_ids)
    known = set(citation_ids)
    unresolved = [
        {"rule_kind": kind, "rule_id": rule_id, "citation_id": cid}
        for kind, rule_id, cid in baseline.iter_citation_refs()
        if cid not in known
    ]
    if duplicated or unresolved:
        raise CitationIntegrityError(
            message="Baseline citation integrity errors",
            details={"duplicates": duplicated, "unresolved": unresolved},
        )


def build_knowledge_base(
    jurisdictions: Iterable[Jurisdiction],
    baseline: BaselineRules,
) -> KnowledgeBase:
    """
    Validate jurisdictions and assemble an immutable snapshot.

    Raises:
        CitationIntegrityError: A rule references an unknown citation id
        DuplicateJurisdictionError: Two sources share an id or alias
        KnowledgeBaseValidationError: Duplicate rule ids within a table
    """
    _validate_baseline(baseline)
    reserved = {c.id for c in baseline.citations}

    by_id: dict[str, Jurisdiction] = {}
    aliases: dict[str, str] = {}

    for jurisdiction in jurisdictions:
        if jurisdiction.id in by_id:
            raise DuplicateJurisdictionError(
                message=f"Duplicate jurisdiction id: '{jurisdiction.id}'",
                details={"id": jurisdiction.id},
                jurisdiction_id=jurisdiction.id,
            )
        _validate_citations(jurisdiction, reserved)
        _validate_rule_ids(jurisdiction)
        by_id[jurisdiction.id] = jurisdiction

    for jurisdiction in by_id.values():
        for alias in jurisdiction.aliases:
            key = normalize_key(alias)
            if not key or key == jurisdiction.id:
                continue
            owner = aliases.get(key) or (key if key in by_id else None)
            if owner is not None and owner != jurisdiction.id:
                raise DuplicateJurisdictionError(
                    message=f"Alias '{alias}' maps to both '{owner}' and '{jurisdiction.id}'",
                    details={"alias": alias, "jurisdictions": [owner, jurisdiction.id]},
                    jurisdiction_id=jurisdiction.id,
                )
            aliases[key] = jurisdiction.id

    snapshot_hash = compute_knowledge_base_hash(by_id.values(), baseline)
    kb = KnowledgeBase(
        jurisdictions=MappingProxyType(by_id),
        aliases=MappingProxyType(aliases),
        baseline=baseline,
        snapshot_hash=snapshot_hash,
    )
    logger.info(
        "Knowledge base built: %d jurisdictions (%s)",
        len(kb), ", ".join(kb.jurisdiction_ids()),
        extra={"kb_hash_short": kb.snapshot_hash_short},
    )
    return kb


def load_knowledge_base(
    packs_dir: Union[str, Path, None] = None,
    strict_version: bool = True,
) -> KnowledgeBase:
    """Load every pack in a directory and build a snapshot."""
    loader = JurisdictionPackLoader(strict_version=strict_version)
    jurisdictions, baseline = loader.load_directory(packs_dir or DEFAULT_PACKS_DIR)
    return build_knowledge_base(jurisdictions, baseline)


# =============================================================================
# Registry (atomic swap)
# =============================================================================

class KnowledgeBaseRegistry:
    """
    Holds the current knowledge base snapshot.

    Readers call current() once per analysis and keep the returned
    snapshot. replace() publishes a new snapshot by reference assignment;
    the lock only serializes writers.
    """

    def __init__(self, knowledge_base: Optional[KnowledgeBase] = None):
        self._current = knowledge_base
        self._write_lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._current is not None

    def current(self) -> KnowledgeBase:
        kb = self._current
        if kb is None:
            raise KnowledgeBaseNotReadyError(message="Knowledge base has not been loaded")
        return kb

    def replace(self, knowledge_base: KnowledgeBase) -> Optional[KnowledgeBase]:
        """Install a new snapshot and return the previous one."""
        with self._write_lock:
            previous = self._current
            self._current = knowledge_base
        logger.info(
            "Knowledge base snapshot replaced",
            extra={"kb_hash_short": knowledge_base.snapshot_hash_short},
        )
        return previous

    def reload(
        self,
        packs_dir: Union[str, Path, None] = None,
        strict_version: bool = True,
    ) -> KnowledgeBase:
        """
        Build a fresh snapshot from packs and swap it in.

        A failed build leaves the current snapshot in place.
        """
        knowledge_base = load_knowledge_base(packs_dir, strict_version=strict_version)
        self.replace(knowledge_base)
        return knowledge_base


# =============================================================================
# Default Instance
# =============================================================================

_default_registry: Optional[KnowledgeBaseRegistry] = None
_default_lock = threading.Lock()


def get_default_registry() -> KnowledgeBaseRegistry:
    """Get the process-wide registry, loading the bundled packs on first use."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = KnowledgeBaseRegistry(load_knowledge_base())
    return _default_registry


def get_default_knowledge_base() -> KnowledgeBase:
    """Current snapshot of the default registry."""
    return get_default_registry().current()
