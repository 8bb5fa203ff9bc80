"""
Error classification and recovery for dispatch operations.

This module contains:
- Codes: The error taxonomy and its definition table
- Exceptions: Typed exceptions carrying their code
- Classifier: Raw failure to DispatchError
- Recovery: Recovery actions and user notifications
- Handler: Rolling error log, retry policy and the retrying wrapper
"""

from .classifier import classify_error, classify_message
from .codes import (
    ERROR_DEFINITIONS,
    RETRYABLE_CODES,
    CapacityDetails,
    ConflictDetails,
    DispatchError,
    ErrorCode,
    ExceptionDetails,
    RawDetails,
    TransitionDetails,
    create_dispatch_error,
)
from .exceptions import (
    AccessDeniedError,
    AssignmentConflictError,
    DispatchException,
    DuplicateReferenceError,
    InvalidTransitionError,
    LoadImmutableError,
    RateLimitedError,
    RecordNotFoundError,
    StoreError,
    StoreUnavailableError,
)
from .handler import (
    DispatchErrorHandler,
    HandledError,
    RecoveryOutcome,
    get_error_handler,
    with_error_recovery,
)
from .recovery import ErrorNotification, RecoveryAction, build_notification, recovery_actions_for

__all__ = [
    "ERROR_DEFINITIONS",
    "RETRYABLE_CODES",
    "AccessDeniedError",
    "AssignmentConflictError",
    "CapacityDetails",
    "ConflictDetails",
    "DispatchError",
    "DispatchErrorHandler",
    "DispatchException",
    "DuplicateReferenceError",
    "ErrorCode",
    "ErrorNotification",
    "ExceptionDetails",
    "HandledError",
    "InvalidTransitionError",
    "LoadImmutableError",
    "RateLimitedError",
    "RawDetails",
    "RecordNotFoundError",
    "RecoveryAction",
    "RecoveryOutcome",
    "StoreError",
    "StoreUnavailableError",
    "TransitionDetails",
    "build_notification",
    "classify_error",
    "classify_message",
    "create_dispatch_error",
    "get_error_handler",
    "recovery_actions_for",
    "with_error_recovery",
]
