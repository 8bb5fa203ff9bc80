"""
Pydantic data models for dispatch operations.

Core models:
- Load: Freight shipment, its status and assignment
- Driver / Vehicle: Assignable resources and their compliance dates
- BusinessRuleResult: Validation outcome
"""

from .load import ACTIVE_ASSIGNMENT_STATUSES, TERMINAL_STATUSES, Cargo, Load, LoadStatus
from .resources import Driver, DriverStatus, Vehicle, VehicleStatus
from .results import BusinessRuleResult

__all__ = [
    "ACTIVE_ASSIGNMENT_STATUSES",
    "TERMINAL_STATUSES",
    "BusinessRuleResult",
    "Cargo",
    "Driver",
    "DriverStatus",
    "Load",
    "LoadStatus",
    "Vehicle",
    "VehicleStatus",
]
