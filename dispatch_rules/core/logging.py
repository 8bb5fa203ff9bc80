"""
Structured logging setup.

Every module logs through ``structlog.get_logger`` with snake_case event
names and keyword context. Applications call ``configure_logging`` once.
"""

import logging
from typing import Optional

import structlog

from dispatch_rules.core.config import ConfigManager, get_config


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
    config_manager: Optional[ConfigManager] = None,
) -> None:
    """
    Configure structlog for the process.

    Args:
        level: Log level name (defaults to LOG_LEVEL)
        json_output: Render JSON lines instead of console output (defaults to LOG_JSON)
        config_manager: Optional config manager (defaults to global instance)
    """
    env = (config_manager or get_config()).env
    level_name = (level or env.log_level).upper()
    use_json = env.log_json if json_output is None else json_output

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
    )
