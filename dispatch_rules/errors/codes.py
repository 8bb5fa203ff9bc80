"""
Dispatch error taxonomy.

Every failure the engine reports to callers is a ``DispatchError`` whose
``code`` is one of ``ErrorCode``. The definition table fixes the default
message, recoverability and suggested user action per code.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from dispatch_rules.data.models.load import LoadStatus


class ErrorCode(str, Enum):
    """Dispatch error codes."""

    # Validation errors
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    DRIVER_UNAVAILABLE = "DRIVER_UNAVAILABLE"
    VEHICLE_UNAVAILABLE = "VEHICLE_UNAVAILABLE"
    LOAD_IMMUTABLE = "LOAD_IMMUTABLE"
    ASSIGNMENT_CONFLICT = "ASSIGNMENT_CONFLICT"

    # Business rule violations
    MISSING_DRIVER_ASSIGNMENT = "MISSING_DRIVER_ASSIGNMENT"
    MISSING_VEHICLE_ASSIGNMENT = "MISSING_VEHICLE_ASSIGNMENT"
    EQUIPMENT_MISMATCH = "EQUIPMENT_MISMATCH"
    WEIGHT_EXCEEDED = "WEIGHT_EXCEEDED"

    # System errors
    DATABASE_ERROR = "DATABASE_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"

    # Load operation errors
    LOAD_NOT_FOUND = "LOAD_NOT_FOUND"
    DUPLICATE_REFERENCE = "DUPLICATE_REFERENCE"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"

    # Real-time update errors
    LOCATION_UPDATE_FAILED = "LOCATION_UPDATE_FAILED"
    STATUS_SYNC_FAILED = "STATUS_SYNC_FAILED"


RETRYABLE_CODES: frozenset[ErrorCode] = frozenset(
    {
        ErrorCode.DATABASE_ERROR,
        ErrorCode.NETWORK_ERROR,
        ErrorCode.RATE_LIMIT_ERROR,
        ErrorCode.LOCATION_UPDATE_FAILED,
        ErrorCode.STATUS_SYNC_FAILED,
    }
)


class ErrorDefinition(BaseModel):
    """Default presentation of an error code."""

    message: str
    recoverable: bool
    user_action: Optional[str] = None


ERROR_DEFINITIONS: dict[ErrorCode, ErrorDefinition] = {
    ErrorCode.INVALID_STATUS_TRANSITION: ErrorDefinition(
        message="Cannot change load status due to business rules",
        recoverable=True,
        user_action="Check current status and allowed transitions",
    ),
    ErrorCode.DRIVER_UNAVAILABLE: ErrorDefinition(
        message="Selected driver is not available for assignment",
        recoverable=True,
        user_action="Choose a different driver or resolve conflicts",
    ),
    ErrorCode.VEHICLE_UNAVAILABLE: ErrorDefinition(
        message="Selected vehicle is not available for assignment",
        recoverable=True,
        user_action="Choose a different vehicle or resolve conflicts",
    ),
    ErrorCode.LOAD_IMMUTABLE: ErrorDefinition(
        message="Load cannot be modified in current status",
        recoverable=False,
        user_action="Load is in a final state and cannot be changed",
    ),
    ErrorCode.ASSIGNMENT_CONFLICT: ErrorDefinition(
        message="Assignment conflicts with existing load assignments",
        recoverable=True,
        user_action="Resolve conflicting assignments first",
    ),
    ErrorCode.MISSING_DRIVER_ASSIGNMENT: ErrorDefinition(
        message="Driver assignment required for this operation",
        recoverable=True,
        user_action="Assign a driver before proceeding",
    ),
    ErrorCode.MISSING_VEHICLE_ASSIGNMENT: ErrorDefinition(
        message="Vehicle assignment required for this operation",
        recoverable=True,
        user_action="Assign a vehicle before proceeding",
    ),
    ErrorCode.EQUIPMENT_MISMATCH: ErrorDefinition(
        message="Vehicle equipment does not match load requirements",
        recoverable=True,
        user_action="Choose compatible vehicle or update requirements",
    ),
    ErrorCode.WEIGHT_EXCEEDED: ErrorDefinition(
        message="Load weight exceeds vehicle capacity",
        recoverable=True,
        user_action="Choose a vehicle with higher capacity",
    ),
    ErrorCode.DATABASE_ERROR: ErrorDefinition(
        message="Database operation failed",
        recoverable=True,
        user_action="Please try again in a moment",
    ),
    ErrorCode.NETWORK_ERROR: ErrorDefinition(
        message="Network connection problem",
        recoverable=True,
        user_action="Check your connection and try again",
    ),
    ErrorCode.AUTHORIZATION_ERROR: ErrorDefinition(
        message="You do not have permission for this action",
        recoverable=False,
        user_action="Contact administrator for access",
    ),
    ErrorCode.RATE_LIMIT_ERROR: ErrorDefinition(
        message="Too many requests, please slow down",
        recoverable=True,
        user_action="Wait a moment before trying again",
    ),
    ErrorCode.LOAD_NOT_FOUND: ErrorDefinition(
        message="Load could not be found",
        recoverable=False,
        user_action="Refresh the page or check load reference",
    ),
    ErrorCode.DUPLICATE_REFERENCE: ErrorDefinition(
        message="Load reference number already exists",
        recoverable=True,
        user_action="Use a different reference number",
    ),
    ErrorCode.INVALID_DATE_RANGE: ErrorDefinition(
        message="Invalid pickup or delivery date range",
        recoverable=True,
        user_action="Check dates and ensure delivery is after pickup",
    ),
    ErrorCode.LOCATION_UPDATE_FAILED: ErrorDefinition(
        message="Failed to update load location",
        recoverable=True,
        user_action="Location will be retried automatically",
    ),
    ErrorCode.STATUS_SYNC_FAILED: ErrorDefinition(
        message="Failed to sync load status",
        recoverable=True,
        user_action="Status will be retried automatically",
    ),
}


# Typed detail payloads, discriminated by ``kind``.


class ExceptionDetails(BaseModel):
    """The raw failure an error was classified from."""

    kind: Literal["exception"] = "exception"
    exception_type: Optional[str] = None
    message: str


class ConflictDetails(BaseModel):
    """A resource already committed to other active loads."""

    kind: Literal["conflict"] = "conflict"
    resource: Literal["driver", "vehicle"]
    resource_id: str
    conflicting_references: list[str] = Field(default_factory=list)


class TransitionDetails(BaseModel):
    """A rejected status change."""

    kind: Literal["transition"] = "transition"
    current: LoadStatus
    requested: LoadStatus
    allowed: list[LoadStatus] = Field(default_factory=list)


class CapacityDetails(BaseModel):
    """Cargo heavier than the vehicle can carry."""

    kind: Literal["capacity"] = "capacity"
    cargo_weight: float
    max_weight: float


class RawDetails(BaseModel):
    """Anything without a dedicated shape."""

    kind: Literal["raw"] = "raw"
    payload: Any = None


ErrorDetails = Annotated[
    Union[ExceptionDetails, ConflictDetails, TransitionDetails, CapacityDetails, RawDetails],
    Field(discriminator="kind"),
]


class DispatchError(BaseModel):
    """A classified, typed dispatch failure."""

    code: ErrorCode
    message: str
    details: Optional[ErrorDetails] = None
    recoverable: bool
    user_action: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)


def create_dispatch_error(
    code: ErrorCode,
    details: Optional[Any] = None,
    custom_message: Optional[str] = None,
) -> DispatchError:
    """
    Create a standardized dispatch error.

    Args:
        code: Taxonomy member
        details: Typed details model; any other value is wrapped in RawDetails
        custom_message: Overrides the code's default message

    Returns:
        DispatchError populated from the definition table
    """
    definition = ERROR_DEFINITIONS[code]

    if details is not None and not isinstance(
        details, (ExceptionDetails, ConflictDetails, TransitionDetails, CapacityDetails, RawDetails)
    ):
        details = RawDetails(payload=details)

    return DispatchError(
        code=code,
        message=custom_message or definition.message,
        details=details,
        recoverable=definition.recoverable,
        user_action=definition.user_action,
    )
