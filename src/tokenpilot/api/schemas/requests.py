"""Request schemas for the API."""

from pydantic import BaseModel, Field
from typing import Optional

from tokenpilot.models import AnalysisParams


class AnalyzeRequest(BaseModel):
    """
    Request to analyze a proposed tokenization.

    The mandatory fields are optional here so that a missing value is
    reported by the engine with its TP_VALIDATION_ERROR code.
    """
    asset_type: Optional[str] = Field(default=None, description="Asset type, e.g., 'Investment Security'")
    jurisdiction_id: Optional[str] = Field(default=None, description="Jurisdiction id or name, e.g., 'Germany'")
    binding_path_id: Optional[str] = Field(default=None, description="Control mechanism, e.g., 'Registry of Record'")
    settlement_asset: Optional[str] = Field(default=None, description="Cash leg, e.g., 'Tokenized Deposit'")
    token_rail: Optional[str] = Field(default=None, description="Ledger the token lives on")
    legal_basis: Optional[str] = Field(default=None, description="Legal basis relied upon (free text)")
    is_necessary: bool = Field(default=False, description="Token control is necessary at the ACP")
    is_sufficient: bool = Field(default=False, description="Token instruction is sufficient for the ACP")

    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "asset_type": "Investment Security",
                    "jurisdiction_id": "Germany",
                    "binding_path_id": "Registry of Record",
                    "settlement_asset": "Tokenized Deposit",
                    "token_rail": "Permissioned DLT",
                    "legal_basis": "eWpG crypto securities register",
                    "is_necessary": True,
                    "is_sufficient": True,
                },
                {
                    "asset_type": "Tangible Goods",
                    "jurisdiction_id": "United States (New York)",
                    "binding_path_id": "Custodian / Bailee",
                    "settlement_asset": "Commercial bank money",
                    "legal_basis": "UCC Article 7 warehouse receipt",
                    "is_necessary": False,
                    "is_sufficient": False,
                },
            ]
        },
    }

    def to_params(self) -> AnalysisParams:
        return AnalysisParams(**self.model_dump())
