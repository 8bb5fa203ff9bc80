"""
Error classification.

Turns whatever an operation raised into a DispatchError. Typed exceptions
map directly through their code; message matching is only the fallback for
opaque third-party failures and plain strings, and can misclassify
ambiguous messages.
"""

from typing import Any, Callable

from dispatch_rules.errors.codes import (
    DispatchError,
    ErrorCode,
    ExceptionDetails,
    create_dispatch_error,
)
from dispatch_rules.errors.exceptions import DispatchException

# Built-in exception types with an unambiguous code. Checked in order.
BUILTIN_EXCEPTION_CODES: tuple[tuple[type[BaseException], ErrorCode], ...] = (
    (PermissionError, ErrorCode.AUTHORIZATION_ERROR),
    (ConnectionError, ErrorCode.NETWORK_ERROR),
    (TimeoutError, ErrorCode.NETWORK_ERROR),
)


def _any(*needles: str) -> Callable[[str], bool]:
    return lambda message: any(needle in message for needle in needles)


def _all(*needles: str) -> Callable[[str], bool]:
    return lambda message: all(needle in message for needle in needles)


# Priority-ordered message rules; the first match wins.
MESSAGE_RULES: tuple[tuple[Callable[[str], bool], ErrorCode], ...] = (
    (_any("network", "fetch"), ErrorCode.NETWORK_ERROR),
    (_any("database", "sql"), ErrorCode.DATABASE_ERROR),
    (_any("unauthorized", "permission"), ErrorCode.AUTHORIZATION_ERROR),
    (_any("rate limit", "too many requests"), ErrorCode.RATE_LIMIT_ERROR),
    (_all("driver", "unavailable"), ErrorCode.DRIVER_UNAVAILABLE),
    (_all("vehicle", "unavailable"), ErrorCode.VEHICLE_UNAVAILABLE),
    (_all("status", "transition"), ErrorCode.INVALID_STATUS_TRANSITION),
    (_all("reference", "exists"), ErrorCode.DUPLICATE_REFERENCE),
    (_any("not found"), ErrorCode.LOAD_NOT_FOUND),
)


def classify_message(message: str) -> ErrorCode:
    """Map a failure message to a code; DATABASE_ERROR when nothing matches."""
    lowered = message.lower()
    for matches, code in MESSAGE_RULES:
        if matches(lowered):
            return code
    return ErrorCode.DATABASE_ERROR


def classify_error(raw: Any) -> DispatchError:
    """
    Convert a raw failure into a DispatchError.

    Args:
        raw: A DispatchError, an exception, a message string, or anything else

    Returns:
        Classified DispatchError
    """
    if isinstance(raw, DispatchError):
        return raw

    if isinstance(raw, DispatchException):
        details = raw.details or ExceptionDetails(
            exception_type=type(raw).__name__, message=raw.message
        )
        return create_dispatch_error(raw.code, details)

    if isinstance(raw, BaseException):
        details = ExceptionDetails(exception_type=type(raw).__name__, message=str(raw))
        for exc_type, code in BUILTIN_EXCEPTION_CODES:
            if isinstance(raw, exc_type):
                return create_dispatch_error(code, details)
        return create_dispatch_error(classify_message(str(raw)), details)

    message = raw if isinstance(raw, str) else repr(raw)
    return create_dispatch_error(classify_message(message), ExceptionDetails(message=message))
