"""
Recovery actions and user notifications for classified errors.

The engine does not render anything. It hands the UI layer a list of
labelled actions (with the suggested default marked ``primary``) and a
notification payload.
"""

from typing import Any, Callable, Literal, Mapping, Optional

import structlog
from pydantic import BaseModel

from dispatch_rules.errors.codes import ConflictDetails, DispatchError, ErrorCode

logger = structlog.get_logger(component="recovery")

ActionHandler = Callable[[], Any]


class RecoveryAction(BaseModel):
    """A labelled next step offered to the user after a failure."""

    label: str
    kind: str
    action: ActionHandler
    primary: bool = False

    def __call__(self) -> Any:
        return self.action()


class ErrorNotification(BaseModel):
    """What the UI layer should show for an error."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


def _unhandled(kind: str, code: ErrorCode) -> ActionHandler:
    def request() -> None:
        logger.info("recovery_action_requested", action=kind, code=code.value)

    return request


def _resource_actions(resource: str) -> list[tuple[str, str, bool]]:
    if resource == "driver":
        return [
            ("Select Different Driver", "select_driver", True),
            ("View Driver Conflicts", "view_driver_conflicts", False),
        ]
    return [
        ("Select Different Vehicle", "select_vehicle", True),
        ("View Vehicle Status", "view_vehicle_status", False),
    ]


def recovery_actions_for(
    error: DispatchError,
    handlers: Optional[Mapping[str, ActionHandler]] = None,
) -> list[RecoveryAction]:
    """
    Propose next steps for a classified error.

    Args:
        error: Classified error
        handlers: Callables keyed by action kind; kinds without a handler
            log a ``recovery_action_requested`` event when invoked

    Returns:
        Actions in display order, always ending with "Dismiss"
    """
    handlers = handlers or {}
    entries: list[tuple[str, str, bool]] = []

    if error.code == ErrorCode.DRIVER_UNAVAILABLE:
        entries = _resource_actions("driver")
    elif error.code == ErrorCode.VEHICLE_UNAVAILABLE:
        entries = _resource_actions("vehicle")
    elif error.code == ErrorCode.ASSIGNMENT_CONFLICT and isinstance(error.details, ConflictDetails):
        entries = _resource_actions(error.details.resource)
    elif error.code == ErrorCode.INVALID_STATUS_TRANSITION:
        entries = [("View Valid Transitions", "view_transitions", True)]
    elif error.code == ErrorCode.DUPLICATE_REFERENCE:
        entries = [("Generate New Reference", "generate_reference", True)]
    elif error.code in (ErrorCode.NETWORK_ERROR, ErrorCode.DATABASE_ERROR):
        entries = [
            ("Retry Operation", "retry", True),
            ("Save as Draft", "save_draft", False),
        ]
    elif error.recoverable:
        entries = [("Try Again", "retry", True)]

    entries.append(("Dismiss", "dismiss", False))

    return [
        RecoveryAction(
            label=label,
            kind=kind,
            action=handlers.get(kind) or _unhandled(kind, error.code),
            primary=primary,
        )
        for label, kind, primary in entries
    ]


def build_notification(error: DispatchError, will_retry: bool) -> ErrorNotification:
    """Build the toast shown for an error."""
    title = "Operation Failed - Retrying" if will_retry else "Operation Failed"

    description = error.message
    if error.user_action:
        description += f". {error.user_action}"
    if will_retry:
        description += " The operation will be retried automatically."

    return ErrorNotification(
        title=title,
        description=description,
        variant="default" if error.recoverable else "destructive",
    )
