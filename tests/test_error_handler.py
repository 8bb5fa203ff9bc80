"""Tests for the retrying error handler."""
from __future__ import annotations

import asyncio

from dispatch_rules.core.config import ConfigManager
from dispatch_rules.errors.codes import ErrorCode, create_dispatch_error
from dispatch_rules.errors.exceptions import AccessDeniedError, DuplicateReferenceError
from dispatch_rules.errors.handler import (
    DispatchErrorHandler,
    get_error_handler,
    with_error_recovery,
)


class FailingOperation:
    """Async operation that fails ``failures`` times, then returns ``result``."""

    def __init__(self, exc: Exception, failures: int = 10**6, result="done") -> None:
        self.exc = exc
        self.failures = failures
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return self.result


def test_transient_failure_is_retried_once(handler, sleep):
    operation = FailingOperation(Exception("Network request failed"))

    outcome = asyncio.run(handler.with_error_recovery(operation, "assign_driver", "op-1"))

    assert not outcome.success
    assert outcome.error.code == ErrorCode.NETWORK_ERROR
    assert operation.calls == 2
    assert sleep.delays == [1.0]
    assert [a.label for a in outcome.recovery_actions] == [
        "Retry Operation",
        "Save as Draft",
        "Dismiss",
    ]
    assert handler.retry_count("op-1") == 1


def test_retry_success_clears_counter(handler, sleep):
    operation = FailingOperation(ConnectionError("reset"), failures=1, result=42)

    outcome = asyncio.run(handler.with_error_recovery(operation, "update_status", "op-2"))

    assert outcome.success
    assert outcome.data == 42
    assert outcome.error is None
    assert handler.retry_count("op-2") == 0
    assert sleep.delays == [1.0]


def test_non_retryable_failure_runs_once(handler, sleep):
    operation = FailingOperation(DuplicateReferenceError())

    outcome = asyncio.run(handler.with_error_recovery(operation, "create_load", "op-3"))

    assert operation.calls == 1
    assert sleep.delays == []
    assert outcome.error.code == ErrorCode.DUPLICATE_REFERENCE
    assert outcome.recovery_actions[0].label == "Generate New Reference"


def test_attempts_accumulate_per_operation_until_exhausted(handler, sleep):
    operation = FailingOperation(Exception("fetch failed"))

    async def run_four_times():
        for _ in range(4):
            await handler.with_error_recovery(operation, "sync_status", "op-4")

    asyncio.run(run_four_times())

    # One attempt per call; the fourth call hits max_retries and runs once.
    assert sleep.delays == [1.0, 2.0, 4.0]
    assert operation.calls == 7
    assert handler.retry_count("op-4") == 0


def test_should_retry_respects_recoverability(handler):
    denied = create_dispatch_error(ErrorCode.AUTHORIZATION_ERROR)
    conflict = create_dispatch_error(ErrorCode.ASSIGNMENT_CONFLICT)
    network = create_dispatch_error(ErrorCode.NETWORK_ERROR)

    assert not handler.should_retry(denied, "op-5")
    assert not handler.should_retry(conflict, "op-5")
    assert not handler.should_retry(network, None)
    assert handler.should_retry(network, "op-5")
    assert handler.retry_count("op-5") == 1


def test_should_retry_stops_at_max_retries(handler):
    error = create_dispatch_error(ErrorCode.DATABASE_ERROR)

    decisions = [handler.should_retry(error, "op-6") for _ in range(5)]

    assert decisions == [True, True, True, False, True]


def test_backoff_is_exponential_and_capped(handler):
    assert [handler.backoff_delay_ms(n) for n in (1, 2, 3, 4, 5)] == [1000, 2000, 4000, 8000, 10000]


def test_generated_operation_id_still_retries_and_is_cleared(handler, sleep):
    operation = FailingOperation(Exception("network down"))

    asyncio.run(handler.with_error_recovery(operation, "assign_vehicle"))

    assert operation.calls == 2
    assert sleep.delays == [1.0]
    assert handler._retry_attempts == {}


def test_sync_operations_are_supported(handler):
    outcome = asyncio.run(handler.with_error_recovery(lambda: "ok", "noop"))

    assert outcome.success
    assert outcome.data == "ok"


def test_retry_action_reruns_the_operation(handler):
    operation = FailingOperation(Exception("network down"), failures=2, result="late")

    async def run():
        first = await handler.with_error_recovery(operation, "assign_driver")
        retry = next(a for a in first.recovery_actions if a.kind == "retry")
        return first, await retry()

    first, second = asyncio.run(run())

    assert not first.success
    assert second.success
    assert second.data == "late"


def test_custom_handlers_override_defaults(handler):
    picked = []
    operation = FailingOperation(Exception("network down"))

    outcome = asyncio.run(
        handler.with_error_recovery(
            operation, "assign_driver", handlers={"save_draft": lambda: picked.append("draft")}
        )
    )
    next(a for a in outcome.recovery_actions if a.kind == "save_draft")()

    assert picked == ["draft"]


def test_notifier_receives_notifications(config_manager, sleep):
    notifications = []
    handler = DispatchErrorHandler(
        config_manager=config_manager, notifier=notifications.append, sleep=sleep
    )

    handler.handle_error(AccessDeniedError(), "approve_invoice", "op-7")

    assert len(notifications) == 1
    assert notifications[0].title == "Operation Failed"
    assert notifications[0].variant == "destructive"


def test_error_log_keeps_recent_errors(tmp_path, sleep):
    (tmp_path / "config.yaml").write_text("retry:\n  error_log_size: 2\n")
    handler = DispatchErrorHandler(config_manager=ConfigManager(config_dir=tmp_path), sleep=sleep)

    for message in ("network one", "database two", "not found three"):
        handler.classify(Exception(message), "ctx")

    codes = [e.code for e in handler.get_recent_errors()]
    assert codes == [ErrorCode.DATABASE_ERROR, ErrorCode.LOAD_NOT_FOUND]
    assert [e.code for e in handler.get_recent_errors(limit=1)] == [ErrorCode.LOAD_NOT_FOUND]

    handler.clear_error_log()
    assert handler.get_recent_errors() == []


def test_module_level_wrapper_uses_given_handler(handler, sleep):
    operation = FailingOperation(Exception("network down"))

    outcome = asyncio.run(with_error_recovery(operation, "sync_location", "op-8", handler=handler))

    assert outcome.error.code == ErrorCode.NETWORK_ERROR
    assert sleep.delays == [1.0]
    assert handler.get_recent_errors()[-1].code == ErrorCode.NETWORK_ERROR


def test_global_handler_is_shared():
    assert get_error_handler() is get_error_handler()


def test_failed_retry_is_not_announced_as_retrying(config_manager, sleep):
    notifications = []
    handler = DispatchErrorHandler(
        config_manager=config_manager, notifier=notifications.append, sleep=sleep
    )
    operation = FailingOperation(Exception("network down"))

    asyncio.run(handler.with_error_recovery(operation, "sync_status", "op-9"))

    assert [n.title for n in notifications] == ["Operation Failed - Retrying", "Operation Failed"]
    assert handler.retry_count("op-9") == 1


def test_retry_action_can_be_called_without_an_event_loop(handler):
    operation = FailingOperation(Exception("network down"), failures=2, result="late")

    first = asyncio.run(handler.with_error_recovery(operation, "assign_driver"))
    retry = next(a for a in first.recovery_actions if a.kind == "retry")
    second = retry()

    assert second.success
    assert second.data == "late"
    assert operation.calls == 3


def test_module_level_wrapper_forwards_handlers(handler):
    drafts = []
    operation = FailingOperation(Exception("network down"))

    outcome = asyncio.run(
        with_error_recovery(
            operation,
            "create_load",
            handler=handler,
            handlers={"save_draft": lambda: drafts.append("saved") or "draft-1"},
        )
    )
    save_draft = next(a for a in outcome.recovery_actions if a.kind == "save_draft")

    assert save_draft() == "draft-1"
    assert drafts == ["saved"]
