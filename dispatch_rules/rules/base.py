"""
Base class for validators that read from the persistent store.

Provides common functionality:
- Store and configuration wiring
- Structured logging of validation outcomes
- Injectable clock for compliance date arithmetic
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Optional

import structlog

from dispatch_rules.core.clock import as_utc, utc_now
from dispatch_rules.core.config import ConfigManager, RulesConfig, get_config
from dispatch_rules.data.models.results import BusinessRuleResult
from dispatch_rules.data.store import LoadStore


class BaseRuleValidator(ABC):
    """
    Base class for store-backed validators.

    Provides:
    - Store access
    - Configuration loading
    - Result logging
    """

    def __init__(
        self,
        validator_name: str,
        store: LoadStore,
        config_manager: Optional[ConfigManager] = None,
        logger: Optional[structlog.BoundLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the validator.

        Args:
            validator_name: Name used in log context (e.g., "availability")
            store: Persistent store collaborator
            config_manager: Optional config manager (defaults to global instance)
            logger: Optional structured logger
            clock: Returns "now"; defaults to the current UTC time
        """
        self.validator_name = validator_name
        self.store = store
        self.config_manager = config_manager or get_config()
        self.logger = logger or structlog.get_logger(validator=validator_name)
        self.clock = clock or utc_now

        self.rules_config: RulesConfig = self.config_manager.get_rules_config()

    def now(self, override: Optional[datetime] = None) -> datetime:
        """Reference time as aware UTC."""
        return as_utc(override if override is not None else self.clock())

    def log_result(self, event: str, result: BusinessRuleResult, **context: Any) -> None:
        """
        Log a validation outcome.

        Args:
            event: Event name (e.g., "driver_availability_checked")
            result: Outcome to summarize
            **context: Identifiers of what was validated
        """
        log = self.logger.info if result.is_valid else self.logger.warning
        log(
            event,
            is_valid=result.is_valid,
            errors=len(result.errors),
            warnings=len(result.warnings),
            **context,
        )

    @abstractmethod
    async def validate(self, *args: Any, **kwargs: Any) -> BusinessRuleResult:
        """Run the validator's primary check."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(validator_name='{self.validator_name}')"
