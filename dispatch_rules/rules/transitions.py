"""
Load status state machine.
"""

from dispatch_rules.data.models.load import LoadStatus
from dispatch_rules.data.models.results import BusinessRuleResult

S = LoadStatus

# Legal successors of each status. Paid and cancelled are terminal.
STATUS_TRANSITIONS: dict[LoadStatus, tuple[LoadStatus, ...]] = {
    S.DRAFT: (S.PENDING, S.CANCELLED),
    S.PENDING: (S.POSTED, S.ASSIGNED, S.CANCELLED),
    S.POSTED: (S.BOOKED, S.CANCELLED, S.PENDING),
    S.BOOKED: (S.CONFIRMED, S.CANCELLED),
    S.CONFIRMED: (S.ASSIGNED, S.CANCELLED),
    S.ASSIGNED: (S.DISPATCHED, S.CANCELLED, S.PENDING),
    S.DISPATCHED: (S.IN_TRANSIT, S.ASSIGNED),
    S.IN_TRANSIT: (S.AT_PICKUP, S.ASSIGNED),
    S.AT_PICKUP: (S.PICKED_UP, S.IN_TRANSIT),
    S.PICKED_UP: (S.EN_ROUTE, S.PROBLEM),
    S.EN_ROUTE: (S.AT_DELIVERY, S.PROBLEM),
    S.AT_DELIVERY: (S.DELIVERED, S.PROBLEM),
    S.DELIVERED: (S.POD_REQUIRED, S.COMPLETED),
    S.POD_REQUIRED: (S.COMPLETED, S.INVOICED),
    S.COMPLETED: (S.INVOICED,),
    S.INVOICED: (S.PAID,),
    S.PAID: (),
    S.CANCELLED: (),
    S.PROBLEM: (S.ASSIGNED, S.CANCELLED),
}


def allowed_transitions(status: LoadStatus) -> list[LoadStatus]:
    """Statuses a load may move to from ``status``."""
    return list(STATUS_TRANSITIONS[status])


def validate_status_transition(current: LoadStatus, requested: LoadStatus) -> BusinessRuleResult:
    """
    Check a status change against the lifecycle graph.

    Cancelling, and completing without a delivered status, always warn
    whether or not the transition itself is legal.

    Args:
        current: Status the load is in now
        requested: Status the caller wants to move to

    Returns:
        BusinessRuleResult, invalid when ``requested`` is not a successor
    """
    result = BusinessRuleResult.passed()

    allowed = STATUS_TRANSITIONS[current]
    if requested not in allowed:
        allowed_text = ", ".join(s.value for s in allowed) or "none"
        result.add_error(
            f"Cannot transition from {current.value} to {requested.value}. "
            f"Allowed transitions: {allowed_text}"
        )

    if requested == S.CANCELLED:
        result.add_warning("Cancelling load will make it immutable")

    if requested == S.COMPLETED and current != S.DELIVERED:
        result.add_warning("Completing load without delivery confirmation")

    return result
