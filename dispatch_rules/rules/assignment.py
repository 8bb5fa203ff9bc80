"""
Assignment requirement rules: what a status demands of a load.
"""

from typing import Optional

from dispatch_rules.core.clock import as_utc
from dispatch_rules.data.models.load import Load, LoadStatus
from dispatch_rules.data.models.results import BusinessRuleResult

S = LoadStatus

DRIVER_REQUIRED_STATUSES: frozenset[LoadStatus] = frozenset(
    {
        S.ASSIGNED,
        S.DISPATCHED,
        S.IN_TRANSIT,
        S.AT_PICKUP,
        S.PICKED_UP,
        S.EN_ROUTE,
        S.AT_DELIVERY,
        S.DELIVERED,
    }
)

VEHICLE_REQUIRED_STATUSES: frozenset[LoadStatus] = DRIVER_REQUIRED_STATUSES

IMMUTABLE_STATUSES: frozenset[LoadStatus] = frozenset({S.PAID, S.CANCELLED, S.COMPLETED})


def validate_driver_assignment(
    status: LoadStatus, driver_id: Optional[str] = None
) -> BusinessRuleResult:
    """Fail when ``status`` needs a driver and none is attached."""
    result = BusinessRuleResult.passed()
    if status in DRIVER_REQUIRED_STATUSES and not driver_id:
        result.add_error(f"Driver assignment is required for status: {status.value}")
    return result


def validate_vehicle_assignment(
    status: LoadStatus, vehicle_id: Optional[str] = None
) -> BusinessRuleResult:
    """Fail when ``status`` needs a vehicle and none is attached."""
    result = BusinessRuleResult.passed()
    if status in VEHICLE_REQUIRED_STATUSES and not vehicle_id:
        result.add_error(f"Vehicle assignment is required for status: {status.value}")
    return result


def validate_load_modification(status: LoadStatus) -> BusinessRuleResult:
    """Fail when a load in ``status`` may no longer be edited."""
    result = BusinessRuleResult.passed()
    if status in IMMUTABLE_STATUSES:
        result.add_error(f"Load cannot be modified in {status.value} status")
    return result


def validate_schedule(load: Load) -> BusinessRuleResult:
    """Fail when the load is due for delivery before it is picked up."""
    result = BusinessRuleResult.passed()
    pickup, delivery = load.pickup_time, load.delivery_time
    if pickup is not None and delivery is not None and as_utc(delivery) < as_utc(pickup):
        result.add_error(
            f"Delivery must be after pickup (pickup {pickup.isoformat()}, "
            f"delivery {delivery.isoformat()})"
        )
    return result
