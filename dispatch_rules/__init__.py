"""
Load lifecycle and assignment rules engine.

Validates load status changes and driver/vehicle assignments before they
are written, and turns failures of the write into typed, recoverable
errors with retry and user-facing recovery actions.
"""

from dispatch_rules.core import ConfigManager, configure_logging, get_config
from dispatch_rules.data.models import (
    BusinessRuleResult,
    Cargo,
    Driver,
    Load,
    LoadStatus,
    Vehicle,
)
from dispatch_rules.errors import (
    DispatchError,
    DispatchErrorHandler,
    ErrorCode,
    RecoveryAction,
    RecoveryOutcome,
    classify_error,
    create_dispatch_error,
    get_error_handler,
    recovery_actions_for,
    with_error_recovery,
)
from dispatch_rules.data.store import InMemoryLoadStore, LoadStore
from dispatch_rules.rules import (
    AvailabilityChecker,
    LoadValidator,
    validate_and_report,
    validate_driver_assignment,
    validate_load_modification,
    validate_status_transition,
    validate_vehicle_assignment,
)

__version__ = "0.1.0"

__all__ = [
    "AvailabilityChecker",
    "BusinessRuleResult",
    "Cargo",
    "ConfigManager",
    "DispatchError",
    "DispatchErrorHandler",
    "Driver",
    "ErrorCode",
    "InMemoryLoadStore",
    "Load",
    "LoadStatus",
    "LoadStore",
    "LoadValidator",
    "RecoveryAction",
    "RecoveryOutcome",
    "Vehicle",
    "classify_error",
    "configure_logging",
    "create_dispatch_error",
    "get_config",
    "get_error_handler",
    "recovery_actions_for",
    "validate_and_report",
    "validate_driver_assignment",
    "validate_load_modification",
    "validate_status_transition",
    "validate_vehicle_assignment",
    "with_error_recovery",
]
