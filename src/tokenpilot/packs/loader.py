"""
TokenPilot Jurisdiction Pack Loader

Loads and validates jurisdiction packs from YAML or JSON files.

Converts Pydantic schema models to TokenPilot domain models. Every id and
cross-reference is normalized here so the engine only ever compares keys.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError

from ..canon import normalize_key, normalize_keys
from ..exceptions import PackLoadError, PackValidationError, SchemaVersionMismatch
from ..models import (
    AssetTypeRule,
    AuthorityLevel,
    BaselineRules,
    BindingStrength,
    Certainty,
    Citation,
    CitationType,
    ControlCondition,
    ControlFramework,
    Finality,
    GoodFaithProtection,
    Jurisdiction,
    LegalSystem,
    License,
    Likelihood,
    Overview,
    Precedent,
    PropertyStatus,
    ReadinessLevel,
    Registry,
    RegulatoryStatus,
    RiskCategory,
    RiskFactor,
    RiskSeverity,
    SettlementRule,
    ShariahConsiderations,
    TokenizationRule,
)
from .schema import (
    SCHEMA_VERSION,
    AssetTypeRuleSchema,
    CitationSchema,
    ControlConditionSchema,
    ControlFrameworkSchema,
    JurisdictionPackSchema,
    RiskFactorSchema,
    SettlementRuleSchema,
    TokenizationRuleSchema,
    check_schema_version,
    validate_baseline_pack,
    validate_jurisdiction_pack,
)


logger = logging.getLogger(__name__)

BASELINE_FILENAME = "baseline.yaml"
PACK_SUFFIXES = {".yaml", ".yml", ".json"}


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _convert_citation(schema: CitationSchema) -> Citation:
    return Citation(
        id=schema.id.strip(),
        type=CitationType(schema.type),
        title=schema.title,
        reference=schema.reference,
        authority_level=AuthorityLevel(schema.authority_level),
        section=schema.section,
        url=schema.url,
        summary=schema.summary,
    )


def _convert_asset_type(schema: AssetTypeRuleSchema) -> AssetTypeRule:
    registry = None
    if schema.registry is not None:
        registry = Registry(
            name=schema.registry.name,
            statutory=schema.registry.statutory,
            title_conferring=schema.registry.title_conferring,
            dlt_compatible=schema.registry.dlt_compatible,
        )
    shariah = None
    if schema.shariah is not None:
        shariah = ShariahConsiderations(
            permissible=schema.shariah.permissible,
            conditions=tuple(schema.shariah.conditions),
            prohibited_features=tuple(schema.shariah.prohibited_features),
            structures=tuple(schema.shariah.structures),
            rulings=tuple(schema.shariah.rulings),
        )
    return AssetTypeRule(
        asset_type=normalize_key(schema.asset_type),
        name=schema.asset_type,
        legal_classification=schema.legal_classification,
        property_status=PropertyStatus(schema.property_status),
        governing_law=tuple(schema.governing_law),
        transfer_mechanism=tuple(schema.transfer_mechanism),
        registration_required=schema.registration_required,
        registry=registry,
        shariah=shariah,
        citations=tuple(schema.citations),
    )


def _convert_condition(schema: ControlConditionSchema) -> ControlCondition:
    return ControlCondition(
        condition=schema.condition,
        legal_requirement=schema.legal_requirement,
        certainty=Certainty(schema.certainty),
    )


def _convert_control_framework(schema: ControlFrameworkSchema) -> ControlFramework:
    return ControlFramework(
        id=normalize_key(schema.id or schema.binding_path),
        binding_path=normalize_key(schema.binding_path),
        name=schema.binding_path,
        asset_types=normalize_keys(schema.asset_types),
        acp_binding=BindingStrength(schema.acp_binding),
        legal_basis=schema.legal_basis,
        necessary=tuple(_convert_condition(c) for c in schema.necessary),
        sufficient=tuple(_convert_condition(c) for c in schema.sufficient),
        intermediary_required=schema.intermediary_required,
        good_faith_protection=GoodFaithProtection(
            available=schema.good_faith_protection.available,
            conditions=tuple(schema.good_faith_protection.conditions),
        ),
        citations=tuple(schema.citations),
    )


def _convert_tokenization_rule(schema: TokenizationRuleSchema) -> TokenizationRule:
    return TokenizationRule(
        id=normalize_key(schema.id),
        applicable_assets=normalize_keys(schema.applicable_assets),
        regulatory_status=RegulatoryStatus(schema.regulatory_status),
        required_licenses=tuple(
            License(
                name=lic.name,
                issuing_authority=lic.issuing_authority,
                requirements=tuple(lic.requirements),
            )
            for lic in schema.required_licenses
        ),
        limitations=tuple(schema.limitations),
        precedents=tuple(
            Precedent(name=p.name, year=p.year, description=p.description)
            for p in schema.precedents
        ),
        citations=tuple(schema.citations),
    )


def _convert_settlement_rule(schema: SettlementRuleSchema) -> SettlementRule:
    return SettlementRule(
        id=normalize_key(schema.id),
        name=schema.name,
        finality=Finality(
            timing=schema.finality.timing,
            legal_certainty=Certainty(schema.finality.legal_certainty),
            insolvency_protection=schema.finality.insolvency_protection,
        ),
        cash_legs=normalize_keys(schema.cash_legs),
        atomic_settlement_possible=schema.atomic_settlement_possible,
        cbdc_available=schema.cbdc_available,
        citations=tuple(schema.citations),
    )


def _convert_risk_factor(schema: RiskFactorSchema) -> RiskFactor:
    return RiskFactor(
        id=normalize_key(schema.id),
        category=RiskCategory(schema.category),
        description=schema.description,
        severity=RiskSeverity(schema.severity),
        likelihood=Likelihood(schema.likelihood),
        applicable_scenarios=normalize_keys(schema.applicable_scenarios),
        mitigation=tuple(schema.mitigation),
        deal_breaker=schema.deal_breaker,
        citations=tuple(schema.citations),
    )


def _convert_jurisdiction_pack(schema: JurisdictionPackSchema) -> Jurisdiction:
    """Convert a validated pack schema into a Jurisdiction."""
    return Jurisdiction(
        id=schema.id,
        name=schema.name,
        legal_system=LegalSystem(schema.legal_system),
        version=schema.version,
        last_updated=schema.last_updated,
        aliases=tuple(schema.aliases),
        preferred_cash_leg=schema.preferred_cash_leg,
        overview=Overview(
            summary=schema.overview.summary,
            regulators=tuple(schema.overview.regulators),
            readiness=ReadinessLevel(schema.overview.readiness),
            strengths=tuple(schema.overview.strengths),
            gaps=tuple(schema.overview.gaps),
        ),
        citations=tuple(_convert_citation(c) for c in schema.citations),
        asset_types=tuple(_convert_asset_type(a) for a in schema.asset_types),
        control_frameworks=tuple(_convert_control_framework(cf) for cf in schema.control_frameworks),
        tokenization_rules=tuple(_convert_tokenization_rule(tr) for tr in schema.tokenization_rules),
        settlement_rules=tuple(_convert_settlement_rule(sr) for sr in schema.settlement_rules),
        risk_factors=tuple(_convert_risk_factor(rf) for rf in schema.risk_factors),
    )


def _schema_errors(e: ValidationError) -> list[dict[str, Any]]:
    """Pydantic errors reduced to JSON-safe fields."""
    return e.errors(include_url=False, include_context=False, include_input=False)


# =============================================================================
# Loader
# =============================================================================

class JurisdictionPackLoader:
    """
    Loads jurisdiction packs and the baseline from YAML or JSON files.

    Usage:
        loader = JurisdictionPackLoader()
        germany = loader.load("packs/data/germany.yaml")
        jurisdictions, baseline = loader.load_directory("packs/data")
    """

    def __init__(self, strict_version: bool = True):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject packs with incompatible schema versions
        """
        self.strict_version = strict_version

    def load(self, path: Union[str, Path]) -> Jurisdiction:
        """
        Load one jurisdiction pack.

        Raises:
            PackLoadError: If the file cannot be read or parsed
            SchemaVersionMismatch: If schema version incompatible
            PackValidationError: If validation fails
        """
        path = Path(path)
        data = self._read(path)
        schema = self._validate(path, data, validate_jurisdiction_pack)
        jurisdiction = _convert_jurisdiction_pack(schema)
        logger.debug(
            "Loaded jurisdiction pack %s (%d asset types, %d citations) from %s",
            jurisdiction.id, len(jurisdiction.asset_types), len(jurisdiction.citations), path,
        )
        return jurisdiction

    def load_baseline(self, path: Union[str, Path]) -> BaselineRules:
        """Load the jurisdiction-independent baseline pack."""
        path = Path(path)
        data = self._read(path)
        schema = self._validate(path, data, validate_baseline_pack)
        return BaselineRules(
            citations=tuple(_convert_citation(c) for c in schema.citations),
            universal_citations=tuple(cid.strip() for cid in schema.universal_citations),
            generic_asset_rule=_convert_asset_type(schema.generic_asset_type),
            generic_control_framework=_convert_control_framework(schema.generic_control_framework),
            generic_tokenization_rule=_convert_tokenization_rule(schema.generic_tokenization_rule),
            generic_settlement_rule=_convert_settlement_rule(schema.generic_settlement_rule),
            gap_risk=_convert_risk_factor(schema.gap_risk),
        )

    def load_directory(
        self, directory: Union[str, Path]
    ) -> tuple[list[Jurisdiction], BaselineRules]:
        """
        Load every pack in a directory.

        The directory must contain baseline.yaml; every other YAML/JSON file
        is a jurisdiction pack. Files load in name order.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise PackLoadError(
                message=f"Pack directory not found: {directory}",
                details={"path": str(directory)},
            )
        baseline_path = directory / BASELINE_FILENAME
        if not baseline_path.exists():
            raise PackLoadError(
                message=f"Baseline pack missing from {directory}",
                details={"path": str(baseline_path)},
            )
        baseline = self.load_baseline(baseline_path)
        jurisdictions = [
            self.load(path)
            for path in sorted(directory.iterdir())
            if path.suffix.lower() in PACK_SUFFIXES and path.name != BASELINE_FILENAME
        ]
        logger.info("Loaded %d jurisdiction packs from %s", len(jurisdictions), directory)
        return jurisdictions, baseline

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            data = self._load_file(path)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise PackLoadError(
                message=f"Failed to load pack: {e}",
                details={"path": str(path), "error": str(e)},
            ) from e
        if not isinstance(data, dict):
            raise PackLoadError(
                message="Pack must be a mapping at the top level",
                details={"path": str(path)},
            )
        return data

    def _validate(self, path: Path, data: dict[str, Any], validator):
        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise SchemaVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "path": str(path),
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )
        try:
            return validator(data)
        except ValidationError as e:
            raise PackValidationError(
                message=f"Pack validation failed: {e.error_count()} errors",
                details={"errors": _schema_errors(e), "path": str(path)},
            ) from e

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)


# =============================================================================
# Convenience Functions
# =============================================================================

def load_jurisdiction_pack(path: Union[str, Path]) -> Jurisdiction:
    """Load a jurisdiction pack with a temporary loader."""
    return JurisdictionPackLoader().load(path)


def load_jurisdiction_pack_from_string(content: str, format: str = "yaml") -> Jurisdiction:
    """
    Load a jurisdiction pack from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
    """
    if format.lower() == "json":
        data = json.loads(content)
    else:
        data = yaml.safe_load(content)
    try:
        schema = validate_jurisdiction_pack(data)
    except ValidationError as e:
        raise PackValidationError(
            message=f"Pack validation failed: {e.error_count()} errors",
            details={"errors": _schema_errors(e)},
        ) from e
    return _convert_jurisdiction_pack(schema)
