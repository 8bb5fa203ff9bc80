"""
Business rules for the load lifecycle.

This module contains:
- Transitions: The load status state machine
- Assignment: Driver/vehicle requirements, immutability and schedule checks
- Compatibility: Cargo weight and equipment against a vehicle
- Availability: Double-booking and compliance checks against the store
- Validator: The orchestrator run before any load mutation
"""

from .assignment import (
    DRIVER_REQUIRED_STATUSES,
    IMMUTABLE_STATUSES,
    VEHICLE_REQUIRED_STATUSES,
    validate_driver_assignment,
    validate_load_modification,
    validate_schedule,
    validate_vehicle_assignment,
)
from .availability import AvailabilityChecker
from .base import BaseRuleValidator
from .compatibility import check_vehicle_compatibility
from .transitions import STATUS_TRANSITIONS, allowed_transitions, validate_status_transition
from .validator import LoadValidator, validate_and_report

__all__ = [
    "DRIVER_REQUIRED_STATUSES",
    "IMMUTABLE_STATUSES",
    "STATUS_TRANSITIONS",
    "VEHICLE_REQUIRED_STATUSES",
    "AvailabilityChecker",
    "BaseRuleValidator",
    "LoadValidator",
    "allowed_transitions",
    "check_vehicle_compatibility",
    "validate_and_report",
    "validate_driver_assignment",
    "validate_load_modification",
    "validate_schedule",
    "validate_status_transition",
    "validate_vehicle_assignment",
]
