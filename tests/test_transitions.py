"""Tests for the load status state machine."""
from __future__ import annotations

import pytest

from dispatch_rules.data.models import LoadStatus
from dispatch_rules.rules.transitions import (
    STATUS_TRANSITIONS,
    allowed_transitions,
    validate_status_transition,
)

ALL_PAIRS = [(current, requested) for current in LoadStatus for requested in LoadStatus]


def test_every_status_has_an_entry():
    assert set(STATUS_TRANSITIONS) == set(LoadStatus)


@pytest.mark.parametrize("current,requested", ALL_PAIRS)
def test_valid_iff_requested_is_a_successor(current, requested):
    result = validate_status_transition(current, requested)
    assert result.is_valid == (requested in STATUS_TRANSITIONS[current])
    assert bool(result.errors) != result.is_valid


@pytest.mark.parametrize("terminal", [LoadStatus.PAID, LoadStatus.CANCELLED])
def test_terminal_statuses_have_no_successors(terminal):
    assert allowed_transitions(terminal) == []
    for requested in LoadStatus:
        assert not validate_status_transition(terminal, requested).is_valid


def test_invalid_transition_lists_allowed_successors():
    result = validate_status_transition(LoadStatus.PENDING, LoadStatus.DELIVERED)

    assert not result.is_valid
    assert result.errors == [
        "Cannot transition from pending to delivered. "
        "Allowed transitions: posted, assigned, cancelled"
    ]


def test_invalid_transition_from_terminal_says_none():
    result = validate_status_transition(LoadStatus.PAID, LoadStatus.INVOICED)
    assert result.errors[0].endswith("Allowed transitions: none")


def test_cancelling_warns_even_when_valid():
    result = validate_status_transition(LoadStatus.PENDING, LoadStatus.CANCELLED)

    assert result.is_valid
    assert result.warnings == ["Cancelling load will make it immutable"]


def test_completing_without_delivery_warns():
    result = validate_status_transition(LoadStatus.POD_REQUIRED, LoadStatus.COMPLETED)

    assert result.is_valid
    assert "Completing load without delivery confirmation" in result.warnings


def test_completing_after_delivery_does_not_warn():
    result = validate_status_transition(LoadStatus.DELIVERED, LoadStatus.COMPLETED)

    assert result.is_valid
    assert result.warnings == []


def test_invalid_cancel_from_terminal_still_warns():
    result = validate_status_transition(LoadStatus.PAID, LoadStatus.CANCELLED)

    assert not result.is_valid
    assert result.warnings == ["Cancelling load will make it immutable"]
