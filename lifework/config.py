"""Configuration loader for the Life & Work registry.

Loads config/registry.yaml (or $LIFEWORK_CONFIG) and validates it into
RegistryConfig. A missing file yields the defaults below.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

WORKSPACE = Path(__file__).resolve().parent.parent
CONFIG_DIR = WORKSPACE / "config"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "registry.yaml"
DEFAULT_DB_PATH = WORKSPACE / "state" / "lifework.db"


class LimitsConfig(BaseModel):
    """Bounded-growth policy."""

    # An account index holding more than this many entries rejects new claims
    max_account_claims: int = Field(default=490, ge=0)
    # Claimant + 490 third-party endorsers
    max_endorsers: int = Field(default=491, ge=1)
    max_content_bytes: int = Field(default=4096, ge=1)
    max_link_bytes: int = Field(default=1024, ge=1)


class RewardConfig(BaseModel):
    # Registry funds must exceed amount + payout_margin before a payout
    payout_margin: int = Field(default=10, ge=0)
    # Left behind in the registry account on shutdown
    reserve_floor: int = Field(default=10, ge=0)


class RegistryConfig(BaseModel):
    db_path: Path = DEFAULT_DB_PATH
    registry_account: str = "lifework-registry"
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    rewards: RewardConfig = Field(default_factory=RewardConfig)


def load_raw_config(path: Path | None = None) -> dict[str, Any]:
    """Load the YAML config file as a plain dict."""
    path = path or Path(os.environ.get("LIFEWORK_CONFIG", DEFAULT_CONFIG_PATH))
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text()) or {}


def load_registry_config(path: Path | None = None) -> RegistryConfig:
    """Load and validate registry config. $LIFEWORK_DB_PATH overrides db_path."""
    data = load_raw_config(path)
    db_override = os.environ.get("LIFEWORK_DB_PATH")
    if db_override:
        data["db_path"] = db_override
    return RegistryConfig.model_validate(data)
