"""
TokenPilot Configuration

Settings are read from the environment once per process:

    TP_PACKS_DIR              Directory holding baseline.yaml and jurisdiction packs
    TP_LOG_LEVEL              Logging level (default INFO)
    TP_BINDING_POLICY         caller_flags | minimum
    TP_STRICT_SCHEMA_VERSION  Reject packs with a different major schema version
    TP_DOCS_ENABLED           Serve the OpenAPI docs from the HTTP service
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .models import BindingPolicy
from .packs import DEFAULT_PACKS_DIR


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    packs_dir: Path = DEFAULT_PACKS_DIR
    log_level: str = "INFO"
    binding_policy: BindingPolicy = BindingPolicy.CALLER_FLAGS
    strict_schema_version: bool = True
    docs_enabled: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            packs_dir=Path(os.getenv("TP_PACKS_DIR", str(DEFAULT_PACKS_DIR))),
            log_level=os.getenv("TP_LOG_LEVEL", "INFO").upper(),
            binding_policy=BindingPolicy(os.getenv("TP_BINDING_POLICY", "caller_flags").lower()),
            strict_schema_version=_env_flag("TP_STRICT_SCHEMA_VERSION", "true"),
            docs_enabled=_env_flag("TP_DOCS_ENABLED", "true"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings.from_env()
