"""Bounded-retry polling for conditions that become true asynchronously.

SIP messages arrive on the stack's delivery thread while the test runs on its
own thread. The functions here block the test thread, re-evaluating a
condition every poll interval until it holds or the deadline passes.

Exception policy inside a condition:
    - AssertionError (including SipAssertionError and a nested
      AwaitTimeoutError) and ConditionNotMet mean "not yet": poll again.
    - Any other Exception is a defect or an external failure (for example a
      stack dispose() that raised): polling stops and it propagates unchanged.

Every call runs its own state machine, POLLING -> SATISFIED | TIMED_OUT |
FATAL_ERROR, so nested awaits never share state.
"""

import math
import time
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from sip_test_util.config.manager import get_polling_defaults
from sip_test_util.config.schema import PollingConfig
from sip_test_util.logging_audit import get_operation_logger, log_audit_event
from sip_test_util.utils.exceptions import (
    AwaitTimeoutError,
    ConditionNotMet,
    ConfigurationError,
    create_error_info,
)

logger = get_operation_logger("await")

T = TypeVar("T")


class AwaitState(Enum):
    """States of a single await call."""

    POLLING = "POLLING"
    SATISFIED = "SATISFIED"
    TIMED_OUT = "TIMED_OUT"
    FATAL_ERROR = "FATAL_ERROR"


def _resolve_polling(
    poll_interval: Optional[float], timeout: Optional[float]
) -> PollingConfig:
    defaults = get_polling_defaults()
    interval = defaults.poll_interval if poll_interval is None else poll_interval
    max_wait = defaults.timeout if timeout is None else timeout
    if not math.isfinite(interval) or interval <= 0:
        raise ConfigurationError(f"poll_interval must be a finite number > 0, got {interval}")
    if not math.isfinite(max_wait) or max_wait < 0:
        raise ConfigurationError(f"timeout must be a finite number >= 0, got {max_wait}")
    # constructed directly so a per-call interval longer than the timeout is allowed
    return PollingConfig.model_construct(poll_interval=interval, timeout=max_wait)


def _describe(condition: Callable[..., Any], description: Optional[str]) -> str:
    if description:
        return description
    return getattr(condition, "__name__", None) or repr(condition)


def await_condition(
    condition: Callable[[], Any],
    *,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
    description: Optional[str] = None,
) -> None:
    """Block until a condition holds or the timeout elapses.

    The condition is a zero-argument callable. It is satisfied when it
    returns without raising and its result is not False. Returning None
    counts as satisfied, so plain assertion helpers can be passed directly.

    Args:
        condition: The check to evaluate
        poll_interval: Seconds between evaluations (process default if None)
        timeout: Maximum seconds to wait (process default if None)
        description: Text naming what is awaited, used in failure messages

    Raises:
        AwaitTimeoutError: If the condition never held before the deadline
        Exception: Any non-assertion error raised by the condition, unchanged

    Example:
        >>> await_condition(
        ...     lambda: assert_response_received(StatusCode.OK, call),
        ...     timeout=5,
        ...     description="200 OK on the call",
        ... )
    """
    polling = _resolve_polling(poll_interval, timeout)
    what = _describe(condition, description)

    start = time.monotonic()
    deadline = start + polling.timeout
    attempts = 0
    last_error: Optional[BaseException] = None
    state = AwaitState.POLLING

    logger.debug(
        "Awaiting '%s' (poll_interval=%.3fs, timeout=%.3fs)",
        what,
        polling.poll_interval,
        polling.timeout,
    )

    while state == AwaitState.POLLING:
        attempts += 1
        try:
            result = condition()
        except Exception as e:
            info = create_error_info(e)
            if not info.is_retryable:
                state = AwaitState.FATAL_ERROR
                details = {
                    "status": "failure",
                    "description": what,
                    "duration": time.monotonic() - start,
                    "attempts": attempts,
                    "error_message": f"{info.error_type}: {info.message}",
                    "category": info.category.value,
                }
                if info.technical_details:
                    details["technical_details"] = info.technical_details
                log_audit_event("AWAIT_FATAL_ERROR", details)
                raise
            last_error = e
            logger.debug("'%s' not yet satisfied (attempt %d): %s", what, attempts, e)
        else:
            if result is not False:
                state = AwaitState.SATISFIED
                break
            last_error = None

        now = time.monotonic()
        if now >= deadline:
            state = AwaitState.TIMED_OUT
            break
        time.sleep(min(polling.poll_interval, deadline - now))

    elapsed = time.monotonic() - start

    if state == AwaitState.SATISFIED:
        log_audit_event("AWAIT_SATISFIED", {
            "status": "success",
            "description": what,
            "duration": elapsed,
            "attempts": attempts,
        })
        return

    log_audit_event("AWAIT_TIMEOUT", {
        "status": "failure",
        "description": what,
        "duration": elapsed,
        "attempts": attempts,
    })
    raise AwaitTimeoutError(
        description=what,
        timeout=polling.timeout,
        elapsed=elapsed,
        attempts=attempts,
        last_error=last_error,
    )


_MISSING = object()


def await_value(
    supplier: Callable[[], T],
    expected: Any = _MISSING,
    *,
    matcher: Optional[Callable[[T], bool]] = None,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
    description: Optional[str] = None,
) -> T:
    """Block until a supplied value equals ``expected`` or satisfies ``matcher``.

    Exactly one of ``expected`` and ``matcher`` must be given.

    Args:
        supplier: Zero-argument callable producing the current value
        expected: Value compared with ``==``
        matcher: Predicate applied to the value
        poll_interval: Seconds between evaluations (process default if None)
        timeout: Maximum seconds to wait (process default if None)
        description: Text naming what is awaited

    Returns:
        The first value that matched

    Raises:
        ValueError: If neither or both of expected and matcher are given
        AwaitTimeoutError: If no produced value matched before the deadline

    Example:
        >>> await_value(lambda: len(call.get_all_received_responses()), 3)
        3
    """
    if (expected is _MISSING) == (matcher is None):
        raise ValueError("await_value needs exactly one of 'expected' or 'matcher'")

    if matcher is None:
        accepts: Callable[[T], bool] = lambda value: value == expected
        what = description or f"{_describe(supplier, None)} == {expected!r}"
    else:
        accepts = matcher
        what = description or f"{_describe(supplier, None)} matches {_describe(matcher, None)}"

    matched: list = []

    def check() -> None:
        value = supplier()
        if not accepts(value):
            raise ConditionNotMet(f"last value was {value!r}")
        matched.append(value)

    await_condition(check, poll_interval=poll_interval, timeout=timeout, description=what)
    return matched[-1]
