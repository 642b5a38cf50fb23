"""
TokenPilot CLI

Command-line interface for analyses and pack maintenance.

Usage:
    tokenpilot analyze --asset-type "Investment Security" --jurisdiction Germany \\
        --binding-path "Registry of Record" --settlement "Tokenized Deposit" \\
        --legal-basis eWpG --necessary --sufficient
    tokenpilot jurisdictions
    tokenpilot validate-packs [--packs-dir DIR]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import get_settings
from .engine import analyze, build_knowledge_base, load_knowledge_base
from .exceptions import PackValidationError, TokenPilotError
from .logging_config import configure_logging
from .models import AnalysisParams, AnalysisResult, BindingPolicy
from .packs import BASELINE_FILENAME, JurisdictionPackLoader
from .packs.loader import PACK_SUFFIXES


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2


# =============================================================================
# Output
# =============================================================================

def print_result(result: AnalysisResult) -> None:
    """Human-readable analysis report."""
    print("=" * 70)
    print(f"TOKENPILOT ANALYSIS: {result.asset_type} / {result.jurisdiction_id}")
    print("=" * 70)
    print()
    print(f"  Score:            {result.score}/100  {result.score_label}")
    print(f"  Outcome:          {result.outcome.label} ({result.outcome.reason})")
    print(f"  Binding strength: {result.binding_strength.value}")
    if result.unclassified:
        print("  Unclassified:     generic rules applied")
    print()

    print("DECISION TRACE")
    print("-" * 70)
    for step in result.decision_trace:
        marker = "!" if step.severity.value == "warn" else " "
        print(
            f" {marker}{step.step}. {step.title:<42} "
            f"{step.status.value:<8} {step.points:>2}/{step.max_points}"
        )
        print(f"     {step.explanation}")
    print()

    if result.risks:
        print("RISKS")
        print("-" * 70)
        for identified in result.risks:
            risk = identified.risk
            flag = " [DEAL-BREAKER]" if risk.deal_breaker else ""
            print(f"  - [{risk.severity.value}/{risk.likelihood.value}] {risk.description}{flag}")
        print()

    if result.recommendations:
        print("RECOMMENDATIONS")
        print("-" * 70)
        for rec in result.recommendations:
            print(f"  - {rec}")
        print()

    print("CITATIONS")
    print("-" * 70)
    for citation in result.citations:
        print(f"  [{citation.id}] {citation.reference}: {citation.title}")
    print()
    print(f"Knowledge base: {result.knowledge_base_hash[:12]}")


# =============================================================================
# Commands
# =============================================================================

def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyze one scenario."""
    settings = get_settings()
    kb = load_knowledge_base(
        args.packs_dir or settings.packs_dir,
        strict_version=settings.strict_schema_version,
    )
    params = AnalysisParams(
        asset_type=args.asset_type,
        jurisdiction_id=args.jurisdiction,
        binding_path_id=args.binding_path,
        settlement_asset=args.settlement,
        token_rail=args.token_rail,
        legal_basis=args.legal_basis,
        is_necessary=args.necessary,
        is_sufficient=args.sufficient,
    )
    policy = BindingPolicy(args.policy) if args.policy else settings.binding_policy
    result = analyze(params, kb, policy=policy)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_result(result)
    return EXIT_OK


def cmd_jurisdictions(args: argparse.Namespace) -> int:
    """List jurisdictions in the knowledge base."""
    kb = load_knowledge_base(args.packs_dir or get_settings().packs_dir)

    if args.json:
        summaries = [kb.jurisdictions[jid].summary_dict() for jid in kb.jurisdiction_ids()]
        print(json.dumps(summaries, indent=2, ensure_ascii=False))
        return EXIT_OK

    print(f"{'ID':<18} {'Name':<28} {'Assets':>7} {'Risks':>6}")
    print("-" * 62)
    for jid in kb.jurisdiction_ids():
        j = kb.jurisdictions[jid]
        print(f"{j.id:<18} {j.name:<28} {len(j.asset_types):>7} {len(j.risk_factors):>6}")
    print()
    print(f"Knowledge base: {kb.snapshot_hash_short}")
    return EXIT_OK


def cmd_validate_packs(args: argparse.Namespace) -> int:
    """Validate every pack file, then the assembled knowledge base."""
    packs_dir = Path(args.packs_dir or get_settings().packs_dir)
    loader = JurisdictionPackLoader(strict_version=not args.lenient)

    files = sorted(
        p for p in packs_dir.iterdir()
        if p.suffix.lower() in PACK_SUFFIXES and p.name != BASELINE_FILENAME
    ) if packs_dir.is_dir() else []

    valid = []
    invalid = []
    baseline = None

    try:
        baseline = loader.load_baseline(packs_dir / BASELINE_FILENAME)
        print(f"  [OK] {BASELINE_FILENAME}")
    except TokenPilotError as e:
        print(f"  [ERROR] {BASELINE_FILENAME}: {e.message}")
        invalid.append(BASELINE_FILENAME)

    for path in files:
        try:
            jurisdiction = loader.load(path)
        except PackValidationError as e:
            print(f"  [ERROR] {path.name}: {e.message}")
            for i, err in enumerate(e.details.get("errors", [])[:20], 1):
                loc = " -> ".join(str(x) for x in err.get("loc", []))
                print(f"      {i}. {loc}: {err.get('msg', 'Unknown')}")
            invalid.append(path.name)
        except TokenPilotError as e:
            print(f"  [ERROR] {path.name}: {e.message}")
            invalid.append(path.name)
        else:
            print(f"  [OK] {path.name} ({jurisdiction.id})")
            valid.append(jurisdiction)

    if baseline is not None and not invalid:
        try:
            kb = build_knowledge_base(valid, baseline)
        except TokenPilotError as e:
            print(f"  [ERROR] knowledge base: {e}")
            invalid.append("knowledge base")
        else:
            print(f"  [OK] knowledge base {kb.snapshot_hash_short} ({len(kb)} jurisdictions)")

    print()
    print(f"Valid packs:   {len(valid)}")
    print(f"Invalid packs: {len(invalid)}")
    return EXIT_OK if not invalid else EXIT_FAILED


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="TokenPilot tokenization feasibility CLI",
        prog="tokenpilot",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default from TP_LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Analyze command
    an = subparsers.add_parser("analyze", help="Score a tokenization scenario")
    an.add_argument("--asset-type", help="Asset type, e.g. 'Investment Security'")
    an.add_argument("--jurisdiction", help="Jurisdiction id or name")
    an.add_argument("--binding-path", help="Control mechanism, e.g. 'Registry of Record'")
    an.add_argument("--settlement", help="Settlement asset (cash leg)")
    an.add_argument("--token-rail", help="Ledger the token lives on")
    an.add_argument("--legal-basis", help="Legal basis relied upon")
    an.add_argument("--necessary", action="store_true", help="Token control is necessary at the ACP")
    an.add_argument("--sufficient", action="store_true", help="Token instruction is sufficient for the ACP")
    an.add_argument("--policy", choices=[p.value for p in BindingPolicy], help="Binding reconciliation policy")
    an.add_argument("--packs-dir", help="Directory of jurisdiction packs")
    an.add_argument("--json", action="store_true", help="Emit the result as JSON")
    an.set_defaults(func=cmd_analyze)

    # Jurisdictions command
    js = subparsers.add_parser("jurisdictions", help="List jurisdictions")
    js.add_argument("--packs-dir", help="Directory of jurisdiction packs")
    js.add_argument("--json", action="store_true", help="Emit the listing as JSON")
    js.set_defaults(func=cmd_jurisdictions)

    # Validate command
    vp = subparsers.add_parser("validate-packs", help="Validate jurisdiction packs")
    vp.add_argument("--packs-dir", help="Directory of jurisdiction packs")
    vp.add_argument("--lenient", action="store_true", help="Accept packs with a different schema major version")
    vp.set_defaults(func=cmd_validate_packs)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILED

    configure_logging(args.log_level or get_settings().log_level)

    try:
        return args.func(args)
    except TokenPilotError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.details:
            print(json.dumps(e.details, indent=2, default=str), file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
