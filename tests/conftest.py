"""
Pytest configuration and fixtures for TokenPilot tests.

Provides helper factories and common fixtures matching actual model definitions.
Factory records use already-normalized keys, as the pack loader produces them.
"""
import pytest

from tokenpilot.engine import build_knowledge_base, load_knowledge_base
from tokenpilot.models import (
    AnalysisParams,
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
    Likelihood,
    Overview,
    PropertyStatus,
    ReadinessLevel,
    RegulatoryStatus,
    RiskCategory,
    RiskFactor,
    RiskSeverity,
    SettlementRule,
    TokenizationRule,
)


# =============================================================================
# Factory Helpers
# =============================================================================

def make_citation(
    id: str = "cit-1",
    type: CitationType = CitationType.STATUTE,
    title: str = "Test Act",
    reference: str = None,
    **kwargs,
) -> Citation:
    """Create a Citation with required fields."""
    return Citation(
        id=id,
        type=type,
        title=title,
        reference=reference or f"Test Act ({id})",
        **kwargs,
    )


def make_asset_rule(
    asset_type: str = "investment-security",
    name: str = "Investment Security",
    legal_classification: str = "Security",
    property_status: PropertyStatus = PropertyStatus.RECOGNIZED,
    governing_law: tuple = ("Test Securities Act",),
    transfer_mechanism: tuple = ("Register entry",),
    citations: tuple = ("cit-asset",),
    **kwargs,
) -> AssetTypeRule:
    """Create an AssetTypeRule with required fields."""
    return AssetTypeRule(
        asset_type=asset_type,
        name=name,
        legal_classification=legal_classification,
        property_status=property_status,
        governing_law=governing_law,
        transfer_mechanism=transfer_mechanism,
        citations=citations,
        **kwargs,
    )


def make_condition(
    condition: str = "Transferee entered in the register",
    certainty: Certainty = Certainty.HIGH,
) -> ControlCondition:
    """Create a ControlCondition."""
    return ControlCondition(condition=condition, legal_requirement="Test Act s.1", certainty=certainty)


def make_control_framework(
    id: str = "registry-of-record",
    binding_path: str = None,
    name: str = "Registry of Record",
    asset_types: tuple = ("investment-security",),
    acp_binding: BindingStrength = BindingStrength.STRONG,
    necessary: tuple = None,
    sufficient: tuple = None,
    citations: tuple = ("cit-cf",),
    **kwargs,
) -> ControlFramework:
    """Create a ControlFramework; binding_path defaults to id."""
    return ControlFramework(
        id=id,
        binding_path=binding_path or id,
        name=name,
        asset_types=asset_types,
        acp_binding=acp_binding,
        necessary=necessary if necessary is not None else (make_condition(),),
        sufficient=sufficient if sufficient is not None else (make_condition("Instruction triggers entry"),),
        citations=citations,
        **kwargs,
    )


def make_tokenization_rule(
    id: str = "security-tokens",
    applicable_assets: tuple = ("investment-security",),
    regulatory_status: RegulatoryStatus = RegulatoryStatus.PERMITTED,
    citations: tuple = ("cit-token",),
    **kwargs,
) -> TokenizationRule:
    """Create a TokenizationRule with required fields."""
    return TokenizationRule(
        id=id,
        applicable_assets=applicable_assets,
        regulatory_status=regulatory_status,
        citations=citations,
        **kwargs,
    )


def make_settlement_rule(
    id: str = "tokenized-deposit",
    name: str = "Tokenized deposit",
    cash_legs: tuple = ("tokenized-deposit",),
    atomic_settlement_possible: bool = True,
    legal_certainty: Certainty = Certainty.HIGH,
    citations: tuple = ("cit-settle",),
    **kwargs,
) -> SettlementRule:
    """Create a SettlementRule with required fields."""
    return SettlementRule(
        id=id,
        name=name,
        finality=Finality(timing="Real-time", legal_certainty=legal_certainty, insolvency_protection=True),
        cash_legs=cash_legs,
        atomic_settlement_possible=atomic_settlement_possible,
        citations=citations,
        **kwargs,
    )


def make_risk(
    id: str = "risk-1",
    severity: RiskSeverity = RiskSeverity.MEDIUM,
    likelihood: Likelihood = Likelihood.MEDIUM,
    applicable_scenarios: tuple = ("investment-security",),
    deal_breaker: bool = False,
    category: RiskCategory = RiskCategory.LEGAL,
    description: str = None,
    **kwargs,
) -> RiskFactor:
    """Create a RiskFactor with required fields."""
    return RiskFactor(
        id=id,
        category=category,
        description=description or f"Test risk {id}",
        severity=severity,
        likelihood=likelihood,
        applicable_scenarios=applicable_scenarios,
        mitigation=(f"Mitigate {id}",),
        deal_breaker=deal_breaker,
        **kwargs,
    )


DEFAULT_CITATION_IDS = ("cit-asset", "cit-cf", "cit-token", "cit-settle")


def make_jurisdiction(
    id: str = "testland",
    name: str = "Testland",
    legal_system: LegalSystem = LegalSystem.CIVIL_LAW,
    aliases: tuple = ("TL",),
    citations: tuple = None,
    asset_types: tuple = None,
    control_frameworks: tuple = None,
    tokenization_rules: tuple = None,
    settlement_rules: tuple = None,
    risk_factors: tuple = (),
    **kwargs,
) -> Jurisdiction:
    """
    Create a Jurisdiction with one rule per table.

    Defaults cover an Investment Security on a Registry of Record with a
    tokenized-deposit cash leg, every citation resolvable.
    """
    return Jurisdiction(
        id=id,
        name=name,
        legal_system=legal_system,
        aliases=aliases,
        overview=Overview(summary=f"{name} test jurisdiction", readiness=ReadinessLevel.ADVANCED),
        citations=citations if citations is not None else tuple(make_citation(c) for c in DEFAULT_CITATION_IDS),
        asset_types=asset_types if asset_types is not None else (make_asset_rule(),),
        control_frameworks=control_frameworks if control_frameworks is not None else (make_control_framework(),),
        tokenization_rules=tokenization_rules if tokenization_rules is not None else (make_tokenization_rule(),),
        settlement_rules=settlement_rules if settlement_rules is not None else (make_settlement_rule(),),
        risk_factors=risk_factors,
        **kwargs,
    )


def make_baseline(**overrides) -> BaselineRules:
    """Create BaselineRules mirroring the bundled baseline pack."""
    fields = dict(
        citations=(
            make_citation("ifrs-cf-asset-definition", CitationType.STANDARD, "Conceptual Framework",
                          "IFRS Conceptual Framework", authority_level=AuthorityLevel.SECONDARY),
            make_citation("ias32-ifrs9-financial-instruments", CitationType.STANDARD, "Financial Instruments",
                          "IAS 32 / IFRS 9", authority_level=AuthorityLevel.SECONDARY),
            make_citation("unidroit-digital-assets", CitationType.GUIDANCE, "Digital Assets and Private Law",
                          "UNIDROIT DAPL", authority_level=AuthorityLevel.GUIDANCE),
        ),
        universal_citations=("ifrs-cf-asset-definition", "ias32-ifrs9-financial-instruments"),
        generic_asset_rule=make_asset_rule(
            asset_type="unclassified-asset",
            name="Unclassified Asset",
            legal_classification="Contractual right",
            property_status=PropertyStatus.UNCLEAR,
            governing_law=("General law of contract",),
            citations=("unidroit-digital-assets",),
        ),
        generic_control_framework=make_control_framework(
            id="contractual-control",
            name="Contractual Control",
            asset_types=("unclassified-asset",),
            acp_binding=BindingStrength.WEAK,
            necessary=(make_condition(certainty=Certainty.LOW),),
            sufficient=(make_condition(certainty=Certainty.LOW),),
            intermediary_required=True,
            good_faith_protection=GoodFaithProtection(available=False),
            citations=("unidroit-digital-assets",),
        ),
        generic_tokenization_rule=make_tokenization_rule(
            id="generic-tokenization",
            applicable_assets=("unclassified-asset",),
            regulatory_status=RegulatoryStatus.UNCLEAR,
            citations=("unidroit-digital-assets",),
        ),
        generic_settlement_rule=make_settlement_rule(
            id="generic-settlement",
            name="Contractual settlement",
            cash_legs=(),
            atomic_settlement_possible=False,
            legal_certainty=Certainty.LOW,
            citations=("ias32-ifrs9-financial-instruments",),
        ),
        gap_risk=make_risk(
            id="unclassified-asset-gap",
            severity=RiskSeverity.HIGH,
            likelihood=Likelihood.HIGH,
            applicable_scenarios=("unclassified",),
            citations=("unidroit-digital-assets",),
        ),
    )
    fields.update(overrides)
    return BaselineRules(**fields)


def make_knowledge_base(*jurisdictions: Jurisdiction, baseline: BaselineRules = None):
    """Build a validated KnowledgeBase (one default jurisdiction if none given)."""
    return build_knowledge_base(
        list(jurisdictions) or [make_jurisdiction()],
        baseline or make_baseline(),
    )


def make_params(**overrides) -> AnalysisParams:
    """Create AnalysisParams for the default test jurisdiction, fully bound."""
    fields = dict(
        asset_type="Investment Security",
        jurisdiction_id="testland",
        binding_path_id="Registry of Record",
        settlement_asset="Tokenized Deposit",
        legal_basis="Test Securities Act",
        is_necessary=True,
        is_sufficient=True,
    )
    fields.update(overrides)
    return AnalysisParams(**fields)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def kb():
    """Knowledge base holding only the default test jurisdiction."""
    return make_knowledge_base()


@pytest.fixture(scope="session")
def bundled_kb():
    """Knowledge base built from the packs shipped with the package."""
    return load_knowledge_base()


@pytest.fixture
def germany_params():
    """Investment Security / Germany / Registry of Record, fully bound."""
    return AnalysisParams(
        asset_type="Investment Security",
        jurisdiction_id="Germany",
        binding_path_id="Registry of Record",
        settlement_asset="Tokenized Deposit",
        legal_basis="eWpG crypto securities register",
        is_necessary=True,
        is_sufficient=True,
    )


@pytest.fixture
def new_york_goods_params():
    """Tangible Goods / New York / Custodian / Bailee, no binding."""
    return AnalysisParams(
        asset_type="Tangible Goods",
        jurisdiction_id="United States (New York)",
        binding_path_id="Custodian / Bailee",
        settlement_asset="Commercial bank money",
        legal_basis="UCC Article 7 warehouse receipt",
        is_necessary=False,
        is_sufficient=False,
    )
