"""
Tests for the command-line interface.
"""
import io
import json
import shutil
import sys

import pytest
import yaml

from tokenpilot.cli import EXIT_ERROR, EXIT_FAILED, EXIT_OK, main
from tokenpilot.packs import DEFAULT_PACKS_DIR


GERMANY_ARGS = [
    "analyze",
    "--asset-type", "Investment Security",
    "--jurisdiction", "Germany",
    "--binding-path", "Registry of Record",
    "--settlement", "Tokenized Deposit",
    "--legal-basis", "eWpG",
    "--necessary",
    "--sufficient",
]


class TestAnalyzeCommand:
    """Tests for `tokenpilot analyze`."""

    def test_text_report(self, capsys):
        assert main(GERMANY_ARGS) == EXIT_OK
        out = capsys.readouterr().out
        assert "TOKENPILOT ANALYSIS: investment-security / germany" in out
        assert "100/100  Strong (proceed to structuring)" in out
        assert "Tokenized Asset (ACP-bound)" in out
        assert "[ewpg-25]" in out

    def test_json_output(self, capsys):
        assert main(GERMANY_ARGS + ["--json"]) == EXIT_OK
        body = json.loads(capsys.readouterr().out)
        assert body["score"] == 100
        assert body["binding_strength"] == "strong"

    def test_policy_flag(self, capsys):
        args = [a if a != "Registry of Record" else "Custodian / Bailee" for a in GERMANY_ARGS]
        assert main(args + ["--policy", "minimum", "--json"]) == EXIT_OK
        assert json.loads(capsys.readouterr().out)["binding_strength"] == "moderate"

    def test_missing_field_is_error(self, capsys):
        assert main(["analyze", "--jurisdiction", "Germany", "--binding-path", "Registry of Record"]) == EXIT_ERROR
        err = capsys.readouterr().err
        assert "TP_VALIDATION_ERROR" in err
        assert "asset_type" in err

    def test_unknown_jurisdiction_is_error(self, capsys):
        args = ["analyze", "--asset-type", "Investment Security", "--jurisdiction", "Atlantis",
                "--binding-path", "Registry of Record"]
        assert main(args) == EXIT_ERROR
        assert "TP_UNKNOWN_JURISDICTION" in capsys.readouterr().err

    def test_deal_breaker_marked(self, capsys):
        args = [
            "analyze",
            "--asset-type", "Tangible Goods",
            "--jurisdiction", "United States (New York)",
            "--binding-path", "Custodian / Bailee",
            "--settlement", "Commercial bank money",
        ]
        assert main(args) == EXIT_OK
        out = capsys.readouterr().out
        assert "[DEAL-BREAKER]" in out
        assert "RECOMMENDATIONS" in out


class TestJurisdictionsCommand:
    """Tests for `tokenpilot jurisdictions`."""

    def test_table(self, capsys):
        assert main(["jurisdictions"]) == EXIT_OK
        out = capsys.readouterr().out
        for jid in ("germany", "malaysia", "singapore", "united-kingdom", "us-ny"):
            assert jid in out

    def test_json(self, capsys):
        assert main(["jurisdictions", "--json"]) == EXIT_OK
        body = json.loads(capsys.readouterr().out)
        assert [j["id"] for j in body] == ["germany", "malaysia", "singapore", "united-kingdom", "us-ny"]


class TestValidatePacksCommand:
    """Tests for `tokenpilot validate-packs`."""

    @pytest.fixture
    def packs_copy(self, tmp_path):
        target = tmp_path / "packs"
        shutil.copytree(DEFAULT_PACKS_DIR, target)
        return target

    def test_bundled_packs_valid(self, capsys):
        assert main(["validate-packs"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "[OK] baseline.yaml" in out
        assert "Invalid packs: 0" in out

    def test_schema_error_reported(self, capsys, packs_copy):
        path = packs_copy / "germany.yaml"
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        data["legal_system"] = "feudal"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")

        assert main(["validate-packs", "--packs-dir", str(packs_copy)]) == EXIT_FAILED
        out = capsys.readouterr().out
        assert "[ERROR] germany.yaml" in out
        assert "legal_system" in out

    def test_broken_citation_reported(self, capsys, packs_copy):
        path = packs_copy / "us_ny.yaml"
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        data["asset_types"][0]["citations"].append("ucc-99-999")
        path.write_text(yaml.safe_dump(data), encoding="utf-8")

        assert main(["validate-packs", "--packs-dir", str(packs_copy)]) == EXIT_FAILED
        assert "[ERROR] knowledge base" in capsys.readouterr().out

    def test_missing_baseline(self, capsys, packs_copy):
        (packs_copy / "baseline.yaml").unlink()
        assert main(["validate-packs", "--packs-dir", str(packs_copy)]) == EXIT_FAILED
        assert "[ERROR] baseline.yaml" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == EXIT_FAILED
    assert "usage:" in capsys.readouterr().out


def test_repeated_runs_survive_closed_stderr(monkeypatch, capsys):
    earlier = io.StringIO()
    monkeypatch.setattr(sys, "stderr", earlier)
    assert main(["jurisdictions"]) == EXIT_OK
    earlier.close()

    monkeypatch.setattr(sys, "stderr", io.StringIO())
    assert main(["jurisdictions"]) == EXIT_OK
    assert "germany" in capsys.readouterr().out
