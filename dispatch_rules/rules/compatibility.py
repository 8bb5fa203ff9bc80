"""
Cargo-to-vehicle compatibility.
"""

from dispatch_rules.data.models.load import Cargo
from dispatch_rules.data.models.resources import Vehicle
from dispatch_rules.data.models.results import BusinessRuleResult


def _format_weight(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def check_vehicle_compatibility(cargo: Cargo, vehicle: Vehicle) -> BusinessRuleResult:
    """
    Compare cargo requirements with a vehicle.

    Overweight cargo is a hard error. An equipment type mismatch is only a
    warning; substitutions are signed off manually.
    """
    result = BusinessRuleResult.passed()

    if vehicle.max_weight and cargo.weight and cargo.weight > vehicle.max_weight:
        result.add_error(
            f"Load weight ({_format_weight(cargo.weight)}) exceeds vehicle capacity "
            f"({_format_weight(vehicle.max_weight)})"
        )

    if cargo.equipment_type and vehicle.vehicle_type != cargo.equipment_type:
        result.add_warning(
            f"Vehicle type ({vehicle.vehicle_type}) may not match required equipment "
            f"({cargo.equipment_type})"
        )

    return result
