"""
TokenPilot Jurisdiction Packs

Schema validation and loading for jurisdiction packs.

Jurisdiction packs are YAML or JSON files that define the asset-type,
control-framework, tokenization, settlement, citation and risk tables
for one jurisdiction. baseline.yaml holds the jurisdiction-independent
citations and generic stand-in rules.

Usage:
    from tokenpilot.packs import JurisdictionPackLoader, DEFAULT_PACKS_DIR

    loader = JurisdictionPackLoader()
    jurisdictions, baseline = loader.load_directory(DEFAULT_PACKS_DIR)
"""
from __future__ import annotations

from pathlib import Path

from .loader import (
    BASELINE_FILENAME,
    JurisdictionPackLoader,
    load_jurisdiction_pack,
    load_jurisdiction_pack_from_string,
)
from .schema import (
    SCHEMA_VERSION,
    BaselinePackSchema,
    JurisdictionPackSchema,
    check_schema_version,
    validate_baseline_pack,
    validate_jurisdiction_pack,
)


DEFAULT_PACKS_DIR = Path(__file__).parent / "data"


__all__ = [
    "BASELINE_FILENAME",
    "DEFAULT_PACKS_DIR",
    "JurisdictionPackLoader",
    "load_jurisdiction_pack",
    "load_jurisdiction_pack_from_string",
    "SCHEMA_VERSION",
    "BaselinePackSchema",
    "JurisdictionPackSchema",
    "check_schema_version",
    "validate_baseline_pack",
    "validate_jurisdiction_pack",
]
