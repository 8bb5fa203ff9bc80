"""
Exception hierarchy for the dispatch rules engine.

Each exception carries its ``ErrorCode`` so classification is a direct
mapping rather than message inspection. Store implementations should raise
these instead of bare exceptions.
"""

from typing import Any, Optional, Sequence

from dispatch_rules.data.models.load import LoadStatus
from dispatch_rules.errors.codes import (
    ERROR_DEFINITIONS,
    ConflictDetails,
    ErrorCode,
    TransitionDetails,
)


class DispatchException(Exception):
    """Base class for all dispatch engine errors."""

    code: ErrorCode = ErrorCode.DATABASE_ERROR

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None) -> None:
        self.message = message or ERROR_DEFINITIONS[self.code].message
        self.details = details
        super().__init__(self.message)


# Store errors


class StoreError(DispatchException):
    """The persistent store failed to complete an operation."""

    code = ErrorCode.DATABASE_ERROR


class StoreUnavailableError(StoreError):
    """The persistent store could not be reached."""

    code = ErrorCode.NETWORK_ERROR


class RecordNotFoundError(StoreError):
    """A load expected to exist was not found."""

    code = ErrorCode.LOAD_NOT_FOUND


class DuplicateReferenceError(StoreError):
    """Another load in the organization already uses the reference number."""

    code = ErrorCode.DUPLICATE_REFERENCE


class AssignmentConflictError(StoreError):
    """The resource is already committed to another active load."""

    code = ErrorCode.ASSIGNMENT_CONFLICT

    def __init__(
        self,
        resource: str,
        resource_id: str,
        conflicting_references: Sequence[str],
    ) -> None:
        details = ConflictDetails(
            resource=resource,
            resource_id=resource_id,
            conflicting_references=list(conflicting_references),
        )
        super().__init__(
            f"{resource.capitalize()} {resource_id} is already assigned to active loads: "
            f"{', '.join(conflicting_references)}",
            details=details,
        )


# Domain errors


class LoadImmutableError(DispatchException):
    """The load is in a final state."""

    code = ErrorCode.LOAD_IMMUTABLE


class InvalidTransitionError(DispatchException):
    """A status change outside the lifecycle graph was attempted."""

    code = ErrorCode.INVALID_STATUS_TRANSITION

    def __init__(
        self,
        current: LoadStatus,
        requested: LoadStatus,
        allowed: Sequence[LoadStatus] = (),
    ) -> None:
        details = TransitionDetails(current=current, requested=requested, allowed=list(allowed))
        super().__init__(
            f"Cannot transition from {current.value} to {requested.value}",
            details=details,
        )


class AccessDeniedError(DispatchException):
    """The caller is not authorized for the operation."""

    code = ErrorCode.AUTHORIZATION_ERROR


class RateLimitedError(DispatchException):
    """A collaborator throttled the request."""

    code = ErrorCode.RATE_LIMIT_ERROR
