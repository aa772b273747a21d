"""Tests for registry config loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from lifework.config import (
    DEFAULT_CONFIG_PATH,
    RegistryConfig,
    load_raw_config,
    load_registry_config,
)


def test_shipped_config_matches_defaults(monkeypatch):
    monkeypatch.delenv("LIFEWORK_DB_PATH", raising=False)
    monkeypatch.delenv("LIFEWORK_CONFIG", raising=False)
    config = load_registry_config(DEFAULT_CONFIG_PATH)
    defaults = RegistryConfig()
    assert config.limits == defaults.limits
    assert config.rewards == defaults.rewards
    assert config.registry_account == "lifework-registry"


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("LIFEWORK_DB_PATH", raising=False)
    assert load_raw_config(tmp_path / "absent.yaml") == {}
    config = load_registry_config(tmp_path / "absent.yaml")
    assert config.limits.max_account_claims == 490
    assert config.limits.max_endorsers == 491
    assert config.rewards.payout_margin == 10


def test_yaml_overrides(tmp_path, monkeypatch):
    monkeypatch.delenv("LIFEWORK_DB_PATH", raising=False)
    path = tmp_path / "registry.yaml"
    path.write_text(
        "db_path: /tmp/other.db\n"
        "limits:\n"
        "  max_endorsers: 5\n"
        "rewards:\n"
        "  reserve_floor: 0\n"
    )
    config = load_registry_config(path)
    assert config.db_path == Path("/tmp/other.db")
    assert config.limits.max_endorsers == 5
    assert config.limits.max_account_claims == 490
    assert config.rewards.reserve_floor == 0


def test_env_config_path(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("registry_account: treasury\n")
    monkeypatch.setenv("LIFEWORK_CONFIG", str(path))
    assert load_raw_config() == {"registry_account": "treasury"}


def test_env_db_path_override(tmp_path, monkeypatch):
    monkeypatch.setenv("LIFEWORK_DB_PATH", str(tmp_path / "env.db"))
    config = load_registry_config(tmp_path / "absent.yaml")
    assert config.db_path == tmp_path / "env.db"


def test_invalid_limits_rejected(tmp_path, monkeypatch):
    monkeypatch.delenv("LIFEWORK_DB_PATH", raising=False)
    path = tmp_path / "bad.yaml"
    path.write_text("limits:\n  max_endorsers: 0\n")
    with pytest.raises(ValidationError):
        load_registry_config(path)
