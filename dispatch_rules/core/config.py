"""
Configuration management for the dispatch rules engine.

Handles loading and accessing:
- Rule and retry configuration (config.yaml)
- Environment variables
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RulesConfig(BaseModel):
    """Thresholds used by the load validation rules."""

    compliance_warning_days: int = Field(30, ge=0)


class RetryConfig(BaseModel):
    """Retry and diagnostics settings for the error handler."""

    max_retries: int = Field(3, ge=0)
    base_delay_ms: int = Field(1000, ge=0)
    max_delay_ms: int = Field(10000, ge=0)
    error_log_size: int = Field(100, gt=0)


class EnvironmentSettings(BaseSettings):
    """Environment variables configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    config_dir: Optional[str] = Field(None, alias="DISPATCH_RULES_CONFIG_DIR")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(True, alias="LOG_JSON")


class ConfigManager:
    """
    Central configuration manager for the dispatch rules engine.

    Loads and provides access to:
    - Rule and retry configuration from config/config.yaml
    - Environment variables from .env
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional path to config directory. Defaults to
                DISPATCH_RULES_CONFIG_DIR, then project root/config.
        """
        self._env_settings: Optional[EnvironmentSettings] = None

        if config_dir is None:
            if self.env.config_dir:
                config_dir = Path(self.env.config_dir)
            else:
                project_root = Path(__file__).parent.parent.parent
                config_dir = project_root / "config"

        self.config_dir = Path(config_dir)
        self._business_config: Optional[dict[str, Any]] = None

    @property
    def business_config(self) -> dict[str, Any]:
        """Load and return configuration from config.yaml (empty if absent)."""
        if self._business_config is None:
            config_path = self.config_dir / "config.yaml"
            if config_path.exists():
                with open(config_path, "r") as f:
                    self._business_config = yaml.safe_load(f) or {}
            else:
                self._business_config = {}
        return self._business_config

    @property
    def env(self) -> EnvironmentSettings:
        """Load and return environment settings."""
        if self._env_settings is None:
            self._env_settings = EnvironmentSettings()
        return self._env_settings

    def get_rules_config(self) -> RulesConfig:
        """Get validation rule thresholds."""
        return RulesConfig(**self.business_config.get("rules", {}))

    def get_retry_config(self) -> RetryConfig:
        """Get retry policy and error log settings."""
        return RetryConfig(**self.business_config.get("retry", {}))


# Global config instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """
    Get the global configuration manager instance.

    Returns:
        ConfigManager singleton instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
