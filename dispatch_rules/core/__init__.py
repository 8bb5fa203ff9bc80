"""
Core infrastructure for the dispatch rules engine.

This module provides:
- Config: Configuration management
- Logging: structlog setup
- Clock: UTC time helpers
"""

from .clock import as_utc, utc_now
from .config import ConfigManager, RetryConfig, RulesConfig, get_config
from .logging import configure_logging

__all__ = [
    "ConfigManager",
    "RetryConfig",
    "RulesConfig",
    "as_utc",
    "configure_logging",
    "get_config",
    "utc_now",
]
