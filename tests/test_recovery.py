"""Tests for recovery actions and notifications."""
from __future__ import annotations

import pytest

from dispatch_rules.errors.codes import ConflictDetails, ErrorCode, create_dispatch_error
from dispatch_rules.errors.recovery import build_notification, recovery_actions_for


def labels(actions):
    return [(a.label, a.primary) for a in actions]


def test_driver_unavailable_actions():
    actions = recovery_actions_for(create_dispatch_error(ErrorCode.DRIVER_UNAVAILABLE))

    assert labels(actions) == [
        ("Select Different Driver", True),
        ("View Driver Conflicts", False),
        ("Dismiss", False),
    ]


def test_vehicle_unavailable_actions():
    actions = recovery_actions_for(create_dispatch_error(ErrorCode.VEHICLE_UNAVAILABLE))

    assert [a.kind for a in actions] == ["select_vehicle", "view_vehicle_status", "dismiss"]


def test_assignment_conflict_uses_resource_from_details():
    error = create_dispatch_error(
        ErrorCode.ASSIGNMENT_CONFLICT,
        ConflictDetails(resource="vehicle", resource_id="V1", conflicting_references=["REF-L1"]),
    )

    assert [a.kind for a in recovery_actions_for(error)] == [
        "select_vehicle",
        "view_vehicle_status",
        "dismiss",
    ]


def test_assignment_conflict_without_details_is_generic():
    actions = recovery_actions_for(create_dispatch_error(ErrorCode.ASSIGNMENT_CONFLICT))
    assert labels(actions) == [("Try Again", True), ("Dismiss", False)]


@pytest.mark.parametrize(
    "code,expected",
    [
        (ErrorCode.INVALID_STATUS_TRANSITION, [("View Valid Transitions", True)]),
        (ErrorCode.DUPLICATE_REFERENCE, [("Generate New Reference", True)]),
        (ErrorCode.NETWORK_ERROR, [("Retry Operation", True), ("Save as Draft", False)]),
        (ErrorCode.DATABASE_ERROR, [("Retry Operation", True), ("Save as Draft", False)]),
        (ErrorCode.WEIGHT_EXCEEDED, [("Try Again", True)]),
        (ErrorCode.LOAD_IMMUTABLE, []),
        (ErrorCode.AUTHORIZATION_ERROR, []),
    ],
)
def test_actions_by_code(code, expected):
    actions = recovery_actions_for(create_dispatch_error(code))
    assert labels(actions) == expected + [("Dismiss", False)]


def test_non_recoverable_errors_get_no_retry_action():
    for code in (ErrorCode.LOAD_IMMUTABLE, ErrorCode.AUTHORIZATION_ERROR, ErrorCode.LOAD_NOT_FOUND):
        kinds = [a.kind for a in recovery_actions_for(create_dispatch_error(code))]
        assert "retry" not in kinds


def test_supplied_handlers_are_invoked():
    calls = []
    actions = recovery_actions_for(
        create_dispatch_error(ErrorCode.DRIVER_UNAVAILABLE),
        handlers={"select_driver": lambda: calls.append("picker") or "opened"},
    )

    assert actions[0]() == "opened"
    assert calls == ["picker"]
    assert actions[-1]() is None


def test_notification_for_retry():
    error = create_dispatch_error(ErrorCode.NETWORK_ERROR)

    notification = build_notification(error, will_retry=True)

    assert notification.title == "Operation Failed - Retrying"
    assert notification.description == (
        "Network connection problem. Check your connection and try again "
        "The operation will be retried automatically."
    )
    assert notification.variant == "default"


def test_notification_for_non_recoverable_is_destructive():
    notification = build_notification(create_dispatch_error(ErrorCode.AUTHORIZATION_ERROR), will_retry=False)

    assert notification.title == "Operation Failed"
    assert notification.variant == "destructive"
