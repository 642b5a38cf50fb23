"""
Canonical JSON Serialization

Provides deterministic JSON serialization for hashing and comparison.
Based on RFC 8785 (JSON Canonicalization Scheme) principles:
- Sorted keys (lexicographic)
- No whitespace
- UTF-8 encoding

The same object always produces the same JSON string, which lets a
knowledge base snapshot and an analysis result be fingerprinted.
"""
from __future__ import annotations

import hashlib
import json
import re
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Optional


_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def _default_serializer(obj: Any) -> Any:
    """
    Custom JSON serializer for non-standard types.

    Handles:
    - datetime/date: ISO 8601 format
    - Enum: value
    - dataclass: dict
    - set/frozenset: sorted list
    """
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def canonical_json(obj: Any) -> str:
    """
    Serialize object to canonical JSON string.

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        default=_default_serializer,
        ensure_ascii=False,
    )


def canonical_json_bytes(obj: Any) -> bytes:
    """Serialize object to canonical JSON as UTF-8 bytes."""
    return canonical_json(obj).encode("utf-8")


def content_hash(obj: Any) -> str:
    """
    Compute SHA-256 hash of canonical JSON representation.

    Returns:
        Hex-encoded SHA-256 hash string (64 characters)
    """
    return hashlib.sha256(canonical_json_bytes(obj)).hexdigest()


# =============================================================================
# Identifier Normalization
# =============================================================================

def normalize_key(value: Optional[str]) -> str:
    """
    Normalize a display name or id into a lookup key.

    Lowercases, collapses runs of non-alphanumerics into one hyphen and
    trims leading/trailing hyphens. None and blank strings map to "".

    Example:
        >>> normalize_key("Custodian / Bailee")
        'custodian-bailee'
        >>> normalize_key("United States (New York)")
        'united-states-new-york'
    """
    if not value:
        return ""
    return _NON_ALNUM.sub("-", value.strip().lower()).strip("-")


def normalize_keys(values: Iterable[str]) -> tuple[str, ...]:
    """Normalize every value, dropping blanks and keeping order."""
    return tuple(k for k in (normalize_key(v) for v in values) if k)


# =============================================================================
# Snapshot Hashing
# =============================================================================

def compute_knowledge_base_hash(jurisdictions: Iterable[Any], baseline: Any) -> str:
    """
    Compute SHA-256 hash of a knowledge base snapshot.

    Jurisdictions are sorted by id so the hash is independent of the
    order packs were loaded in. Any change to a rule table, a citation
    or the baseline changes the hash.
    """
    payload = {
        "baseline": baseline,
        "jurisdictions": sorted(jurisdictions, key=lambda j: j.id),
    }
    return content_hash(payload)
