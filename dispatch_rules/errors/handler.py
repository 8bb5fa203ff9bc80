"""
Dispatch error handler - classification log, retry policy and the retrying
execution wrapper.

One handler holds the rolling error log and the per-operation retry
counters. Construct one per process (``get_error_handler``) or per request
scope and pass it to whatever needs it; tests use isolated instances.
"""

import asyncio
import inspect
import threading
import uuid
from collections import deque
from typing import Any, Awaitable, Callable, Coroutine, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, Field

from dispatch_rules.core.config import ConfigManager, RetryConfig, get_config
from dispatch_rules.errors.classifier import classify_error
from dispatch_rules.errors.codes import RETRYABLE_CODES, DispatchError
from dispatch_rules.errors.recovery import (
    ActionHandler,
    ErrorNotification,
    RecoveryAction,
    build_notification,
    recovery_actions_for,
)

Operation = Callable[[], Union[Awaitable[Any], Any]]


class HandledError(BaseModel):
    """Everything the caller needs after a failure."""

    error: DispatchError
    recovery_actions: list[RecoveryAction]
    should_retry: bool


class RecoveryOutcome(BaseModel):
    """Result of running an operation through ``with_error_recovery``."""

    success: bool
    data: Any = None
    error: Optional[DispatchError] = None
    recovery_actions: list[RecoveryAction] = Field(default_factory=list)


class DispatchErrorHandler:
    """
    Error handler with bounded retry and recovery suggestions.

    Retry policy:
    - Only recoverable errors whose code is in RETRYABLE_CODES are retried
    - Each call that retries counts one attempt against its operation id,
      across calls, up to max_retries; reaching the limit clears the counter
      and stops retrying. A failed retry does not count again.
    - Counters for caller-supplied ids persist until a retry succeeds, the
      limit is reached, or reset_retries/clear_error_log is called
    - Backoff is min(base * 2^(attempt-1), max) milliseconds
    """

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        logger: Optional[structlog.BoundLogger] = None,
        notifier: Optional[Callable[[ErrorNotification], None]] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        """
        Initialize the handler.

        Args:
            config_manager: Optional config manager (defaults to global instance)
            logger: Optional structured logger
            notifier: Receives an ErrorNotification for every handled error
            sleep: Async sleep used for backoff, in seconds (defaults to asyncio.sleep)
        """
        self.config_manager = config_manager or get_config()
        self.logger = logger or structlog.get_logger(component="dispatch_error_handler")
        self.notifier = notifier
        self._sleep = sleep or asyncio.sleep

        self.retry_config: RetryConfig = self.config_manager.get_retry_config()
        self.max_retries = self.retry_config.max_retries

        self._lock = threading.Lock()
        self._error_log: deque[DispatchError] = deque(maxlen=self.retry_config.error_log_size)
        self._retry_attempts: dict[str, int] = {}

    # Classification

    def classify(self, raw: Any, context: str = "") -> DispatchError:
        """
        Classify a raw failure and record it in the rolling log.

        Args:
            raw: Exception, message string or DispatchError
            context: What was being attempted

        Returns:
            Classified DispatchError
        """
        error = classify_error(raw)

        with self._lock:
            self._error_log.append(error)

        self.logger.error(
            "dispatch_error",
            code=error.code.value,
            message=error.message,
            context=context,
            recoverable=error.recoverable,
            details=error.details.model_dump(mode="json") if error.details else None,
        )
        return error

    # Retry policy

    def should_retry(self, error: DispatchError, operation_id: Optional[str] = None) -> bool:
        """
        Decide whether the operation should be attempted again.

        Increments the attempt counter for ``operation_id`` when it returns True.
        """
        if not error.recoverable or not operation_id:
            return False

        with self._lock:
            retry_count = self._retry_attempts.get(operation_id, 0)

            if retry_count >= self.max_retries:
                del self._retry_attempts[operation_id]
                self.logger.warning(
                    "retries_exhausted", operation_id=operation_id, attempts=retry_count
                )
                return False

            if error.code in RETRYABLE_CODES:
                self._retry_attempts[operation_id] = retry_count + 1
                return True

        return False

    def retry_count(self, operation_id: str) -> int:
        with self._lock:
            return self._retry_attempts.get(operation_id, 0)

    def reset_retries(self, operation_id: str) -> None:
        with self._lock:
            self._retry_attempts.pop(operation_id, None)

    def backoff_delay_ms(self, attempt: int) -> int:
        """Delay before retry number ``attempt`` (1-based)."""
        delay = self.retry_config.base_delay_ms * 2 ** max(attempt - 1, 0)
        return min(delay, self.retry_config.max_delay_ms)

    # Handling

    def handle_error(
        self,
        raw: Any,
        context: str,
        operation_id: Optional[str] = None,
        handlers: Optional[Mapping[str, ActionHandler]] = None,
    ) -> HandledError:
        """
        Classify, log, decide on retry and build recovery actions.

        Args:
            raw: What the operation raised
            context: What was being attempted
            operation_id: Key for cumulative retry counting
            handlers: Recovery action callables keyed by action kind

        Returns:
            HandledError with the classified error, actions and retry decision
        """
        error = self.classify(raw, context)
        should_retry = self.should_retry(error, operation_id)
        actions = recovery_actions_for(error, handlers)

        notification = build_notification(error, should_retry)
        self.logger.info(
            "error_notification",
            title=notification.title,
            description=notification.description,
            variant=notification.variant,
        )
        if self.notifier is not None:
            self.notifier(notification)

        return HandledError(error=error, recovery_actions=actions, should_retry=should_retry)

    async def with_error_recovery(
        self,
        operation: Operation,
        context: str,
        operation_id: Optional[str] = None,
        handlers: Optional[Mapping[str, ActionHandler]] = None,
    ) -> RecoveryOutcome:
        """
        Run an operation, retrying once after a transient failure.

        Args:
            operation: Coroutine function or plain callable taking no arguments
            context: What is being attempted, for logs and notifications
            operation_id: Key shared by repeated calls for the same logical
                operation; a per-call id is used when omitted
            handlers: Recovery action callables keyed by action kind. The
                "retry" kind defaults to re-running this wrapper: inside a
                running event loop it returns a Task, otherwise it runs to
                completion and returns the RecoveryOutcome.

        Returns:
            RecoveryOutcome with data on success, or the final error and actions
        """
        generated_id = operation_id is None
        op_id = operation_id or f"op-{uuid.uuid4().hex}"

        def rerun() -> Any:
            return _run_or_schedule(
                self.with_error_recovery(operation, context, operation_id, handlers)
            )

        action_handlers: dict[str, ActionHandler] = {"retry": rerun}
        action_handlers.update(handlers or {})

        try:
            try:
                data = await _invoke(operation)
                return RecoveryOutcome(success=True, data=data)
            except Exception as e:
                handled = self.handle_error(e, context, op_id, action_handlers)

            if not handled.should_retry:
                return RecoveryOutcome(
                    success=False,
                    error=handled.error,
                    recovery_actions=handled.recovery_actions,
                )

            attempt = self.retry_count(op_id) or 1
            delay_ms = self.backoff_delay_ms(attempt)
            self.logger.info(
                "retrying_operation",
                context=context,
                operation_id=op_id,
                attempt=attempt,
                delay_ms=delay_ms,
            )
            await self._sleep(delay_ms / 1000)

            try:
                data = await _invoke(operation)
            except Exception as retry_error:
                # No operation id: this call makes no further attempt.
                final = self.handle_error(
                    retry_error, f"{context} (retry failed)", None, action_handlers
                )
                return RecoveryOutcome(
                    success=False,
                    error=final.error,
                    recovery_actions=final.recovery_actions,
                )

            self.reset_retries(op_id)
            self.logger.info("retry_succeeded", context=context, operation_id=op_id)
            return RecoveryOutcome(success=True, data=data)

        finally:
            if generated_id:
                self.reset_retries(op_id)

    # Diagnostics

    def get_recent_errors(self, limit: int = 10) -> list[DispatchError]:
        """Most recent classified errors, oldest first."""
        with self._lock:
            errors = list(self._error_log)
        return errors[-limit:] if limit > 0 else []

    def clear_error_log(self) -> None:
        """Clear the error log and all retry counters."""
        with self._lock:
            self._error_log.clear()
            self._retry_attempts.clear()


async def _invoke(operation: Operation) -> Any:
    result = operation()
    if inspect.isawaitable(result):
        result = await result
    return result


def _run_or_schedule(coro: Coroutine[Any, Any, RecoveryOutcome]) -> Any:
    """Schedule ``coro`` on the running loop, or run it to completion if there is none."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    return asyncio.ensure_future(coro)


# Global handler instance
_error_handler: Optional[DispatchErrorHandler] = None


def get_error_handler() -> DispatchErrorHandler:
    """
    Get the process-wide error handler.

    Returns:
        DispatchErrorHandler singleton instance
    """
    global _error_handler
    if _error_handler is None:
        _error_handler = DispatchErrorHandler()
    return _error_handler


async def with_error_recovery(
    operation: Operation,
    context: str,
    operation_id: Optional[str] = None,
    handler: Optional[DispatchErrorHandler] = None,
    handlers: Optional[Mapping[str, ActionHandler]] = None,
) -> RecoveryOutcome:
    """Run ``operation`` through ``handler`` (defaults to the process-wide handler)."""
    return await (handler or get_error_handler()).with_error_recovery(
        operation, context, operation_id, handlers
    )
