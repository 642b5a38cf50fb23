"""
TokenPilot Exception Hierarchy

Domain-specific exceptions for tokenization feasibility analysis.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: TP_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class TokenPilotError(Exception):
    """
    Base exception for all TokenPilot errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (TP_*)
        details: Additional context about the error
        jurisdiction_id: Associated jurisdiction if applicable
    """
    message: str
    code: str = "TP_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    jurisdiction_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.jurisdiction_id:
            parts.append(f"(jurisdiction: {self.jurisdiction_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.jurisdiction_id:
            result["jurisdiction_id"] = self.jurisdiction_id
        return result


# =============================================================================
# Request Errors
# =============================================================================

@dataclass
class ValidationError(TokenPilotError):
    """One or more mandatory analysis parameters are missing."""
    code: str = "TP_VALIDATION_ERROR"


@dataclass
class UnknownJurisdictionError(TokenPilotError):
    """Jurisdiction id is not present in the knowledge base."""
    code: str = "TP_UNKNOWN_JURISDICTION"


# =============================================================================
# Knowledge Base Errors
# =============================================================================

@dataclass
class KnowledgeBaseValidationError(TokenPilotError):
    """Knowledge base content is internally inconsistent."""
    code: str = "TP_KB_VALIDATION_ERROR"


@dataclass
class CitationIntegrityError(KnowledgeBaseValidationError):
    """A rule references a citation id its jurisdiction does not define."""
    code: str = "TP_CITATION_INTEGRITY"


@dataclass
class DuplicateJurisdictionError(KnowledgeBaseValidationError):
    """Two jurisdiction sources share an id or alias."""
    code: str = "TP_DUPLICATE_JURISDICTION"


@dataclass
class KnowledgeBaseNotReadyError(TokenPilotError):
    """No knowledge base snapshot has been installed yet."""
    code: str = "TP_KB_NOT_READY"


# =============================================================================
# Pack Errors
# =============================================================================

@dataclass
class PackLoadError(TokenPilotError):
    """Failed to load a jurisdiction pack from file."""
    code: str = "TP_PACK_LOAD_ERROR"


@dataclass
class PackValidationError(TokenPilotError):
    """Jurisdiction pack schema validation failed."""
    code: str = "TP_PACK_VALIDATION_ERROR"


@dataclass
class SchemaVersionMismatch(TokenPilotError):
    """Pack schema version is incompatible with this release."""
    code: str = "TP_SCHEMA_VERSION_MISMATCH"


# =============================================================================
# Warnings
# =============================================================================

class UnresolvedRuleWarning(UserWarning):
    """
    The asset type has no jurisdiction-specific rule.

    Never raised. Analysis degrades to the generic baseline rules and the
    warning is recorded on the resolved rule set and the result.
    """

    def __init__(self, jurisdiction_id: str, asset_type: str) -> None:
        self.jurisdiction_id = jurisdiction_id
        self.asset_type = asset_type
        super().__init__(
            f"No asset rule for '{asset_type}' in jurisdiction "
            f"'{jurisdiction_id}'; generic rules applied"
        )
