"""Tests for configuration loading and logging setup."""
from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from dispatch_rules.core.config import ConfigManager, RetryConfig, RulesConfig
from dispatch_rules.core.logging import configure_logging


def test_defaults_when_config_file_missing(config_manager):
    assert config_manager.business_config == {}
    assert config_manager.get_rules_config() == RulesConfig()
    assert config_manager.get_retry_config() == RetryConfig(
        max_retries=3, base_delay_ms=1000, max_delay_ms=10000, error_log_size=100
    )


def test_repository_config_loads(monkeypatch):
    monkeypatch.delenv("DISPATCH_RULES_CONFIG_DIR", raising=False)

    manager = ConfigManager()

    assert manager.config_dir == Path(__file__).parent.parent / "config"
    assert manager.get_rules_config().compliance_warning_days == 30
    assert manager.get_retry_config().max_retries == 3


def test_config_dir_from_environment(monkeypatch, tmp_path):
    (tmp_path / "config.yaml").write_text("retry:\n  max_retries: 5\n  base_delay_ms: 250\n")
    monkeypatch.setenv("DISPATCH_RULES_CONFIG_DIR", str(tmp_path))

    retry = ConfigManager().get_retry_config()

    assert retry.max_retries == 5
    assert retry.base_delay_ms == 250
    assert retry.max_delay_ms == 10000


def test_invalid_values_are_rejected(tmp_path):
    (tmp_path / "config.yaml").write_text("rules:\n  compliance_warning_days: -1\n")

    with pytest.raises(ValueError):
        ConfigManager(config_dir=tmp_path).get_rules_config()


def test_configure_logging(config_manager):
    try:
        configure_logging(level="debug", json_output=False, config_manager=config_manager)
        structlog.get_logger(component="test").debug("logging_configured", ok=True)
    finally:
        structlog.reset_defaults()
