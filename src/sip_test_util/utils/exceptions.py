"""Custom exception classes for SIP Test Utility.

All non-assertion exceptions inherit from SipTestUtilError to allow catching
all custom exceptions. Assertion failures inherit from AssertionError so that
any test runner reports them as failures rather than errors.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SipTestUtilError(Exception):
    """Base exception for all SIP Test Utility custom exceptions."""

    pass


class ConfigurationError(SipTestUtilError):
    """Raised when configuration loading or validation fails.

    Examples:
        - Invalid configuration file format
        - Polling interval out of range
        - Invalid log level
    """

    pass


class MessageParseError(SipTestUtilError):
    """Raised when raw SIP message text cannot be parsed.

    Examples:
        - Missing start line
        - Malformed status line
        - Content-Length does not match the body
    """

    pass


class TransactionStateError(SipTestUtilError):
    """Raised when a SipTransaction is queried in an invalid state.

    A transaction handle always wraps exactly one client or server
    transaction. Reaching this error means the handle was built wrongly.
    """

    pass


class ConditionNotMet(SipTestUtilError):
    """Raised by a polled condition to signal it is not satisfied yet.

    The await engine retries on this exception until the deadline.
    """

    pass


class SipAssertionError(AssertionError):
    """Raised when an immediate SIP assertion fails.

    Examples:
        - Expected response status code never received
        - Unexpected request method present
        - Header or body content missing
    """

    pass


class AwaitTimeoutError(AssertionError):
    """Raised when an awaited condition is not satisfied before the deadline.

    Kept separate from SipAssertionError so a test can tell "never happened
    within the wait" apart from an immediate check failing.

    Attributes:
        description: What was being awaited
        timeout: Configured maximum wait in seconds
        elapsed: Seconds actually spent polling
        attempts: Number of condition evaluations
        last_error: The last not-yet exception raised by the condition, if any
    """

    def __init__(
        self,
        description: str,
        timeout: float,
        elapsed: float,
        attempts: int,
        last_error: Optional[BaseException] = None,
    ) -> None:
        self.description = description
        self.timeout = timeout
        self.elapsed = elapsed
        self.attempts = attempts
        self.last_error = last_error
        message = (
            f"Condition '{description}' was not fulfilled within {timeout:.3f}s "
            f"(waited {elapsed:.3f}s, {attempts} attempts)"
        )
        if last_error is not None and str(last_error):
            message += f". Last failure: {last_error}"
        super().__init__(message)


class ErrorCategory(Enum):
    """Error categorization for the await engine.

    Determines how an exception raised inside a polled condition is handled.

    Attributes:
        TRANSIENT: The condition is not true yet; poll again
        CRITICAL: A defect or external failure; stop polling and propagate

    Example:
        >>> category = categorize_error(ConditionNotMet("no 200 yet"))
        >>> if category == ErrorCategory.CRITICAL:
        ...     raise  # halt the await
    """

    TRANSIENT = "TRANSIENT"
    CRITICAL = "CRITICAL"


@dataclass
class ErrorInfo:
    """Structured description of an exception seen while polling.

    Attributes:
        category: Error category (TRANSIENT, CRITICAL)
        error_type: Exception class name (e.g., "SipAssertionError")
        message: Exception text
        is_retryable: Whether the await engine keeps polling
        technical_details: Optional chained cause for debugging
    """

    category: ErrorCategory
    error_type: str
    message: str
    is_retryable: bool
    technical_details: Optional[str] = None


def categorize_error(exception: BaseException) -> ErrorCategory:
    """Categorize an exception raised by a polled condition.

    Assertion-style failures (any AssertionError, including a nested await
    that timed out) and ConditionNotMet mean "not yet" and are TRANSIENT.
    Everything else is CRITICAL: runtime errors inside the condition body,
    disposal failures, configuration problems.

    Args:
        exception: The exception to categorize

    Returns:
        ErrorCategory indicating handling strategy

    Example:
        >>> categorize_error(SipAssertionError("no 180"))
        ErrorCategory.TRANSIENT
        >>> categorize_error(RuntimeError("stack disposed twice"))
        ErrorCategory.CRITICAL
    """
    if isinstance(exception, (AssertionError, ConditionNotMet)):
        return ErrorCategory.TRANSIENT

    return ErrorCategory.CRITICAL


def create_error_info(exception: BaseException) -> ErrorInfo:
    """Create structured error information from an exception.

    Args:
        exception: Exception that occurred

    Returns:
        ErrorInfo with categorization
    """
    category = categorize_error(exception)

    technical_details = None
    if exception.__cause__ is not None:
        technical_details = (
            f"Caused by: {type(exception.__cause__).__name__}: {exception.__cause__}"
        )

    return ErrorInfo(
        category=category,
        error_type=type(exception).__name__,
        message=str(exception),
        is_retryable=category == ErrorCategory.TRANSIENT,
        technical_details=technical_details,
    )
