"""Assertion helpers for SIP tests.

The assert_* functions check the current state immediately and raise
SipAssertionError when it does not hold. The await_* functions wrap the same
checks in the await engine and raise AwaitTimeoutError if the state is not
reached within the wait, so a test report shows which kind of failure it was.

All helpers work with any test runner: they only raise AssertionError
subclasses.

Example:
    >>> from sip_test_util.assertions import assert_response_received, await_answered
    >>> await_answered(call, timeout=5)
    >>> assert_response_received(StatusCode.RINGING, call)
    >>> assert_response_received(StatusCode.OK, call, Method.INVITE, 1)
"""

from typing import Any, Optional

from sip_test_util.assertions.predicates import contains_method, contains_status
from sip_test_util.logging_audit import log_audit_event
from sip_test_util.models.messages import SipMessage
from sip_test_util.models.status_codes import reason_phrase_for
from sip_test_util.polling.await_engine import await_condition, await_value
from sip_test_util.store.exchanges import ReferNotifySender, SipCall, Subscription
from sip_test_util.store.listener import MessageListener
from sip_test_util.utils.exceptions import SipAssertionError


def _fail(message: str, msg: Optional[str]) -> None:
    raise SipAssertionError(f"{msg}: {message}" if msg else message)


def _require(obj: Any, what: str, msg: Optional[str]) -> None:
    if obj is None:
        _fail(f"{what} is None", msg)


def _describe_status(status_code: int, method: Optional[str], sequence_number: Optional[int]) -> str:
    phrase = reason_phrase_for(status_code)
    text = f"{status_code} {phrase}".rstrip()
    if method is not None:
        text += f" (CSeq {sequence_number} {method})"
    return text


def _describe_method(method: str, sequence_number: Optional[int]) -> str:
    if sequence_number is None:
        return method
    return f"{method} (CSeq {sequence_number} {method})"


def _received_codes(listener: MessageListener) -> str:
    codes = [str(r.status_code) for r in listener.get_all_received_responses()]
    return ", ".join(codes) if codes else "none"


def _received_methods(listener: MessageListener) -> str:
    methods = [r.method for r in listener.get_all_received_requests()]
    return ", ".join(methods) if methods else "none"


# -- operation result -----------------------------------------------------

def assert_last_operation_success(listener: MessageListener, msg: Optional[str] = None) -> None:
    """Assert the last operation performed by the listener succeeded."""
    _require(listener, "listener", msg)
    if listener.error_message:
        _fail(f"last operation failed: {listener.error_message}", msg)


def assert_last_operation_fail(listener: MessageListener, msg: Optional[str] = None) -> None:
    """Assert the last operation performed by the listener failed."""
    _require(listener, "listener", msg)
    if not listener.error_message:
        _fail("last operation succeeded, expected a failure", msg)


# -- responses and requests -----------------------------------------------

def assert_response_received(
    status_code: int,
    listener: MessageListener,
    method: Optional[str] = None,
    sequence_number: Optional[int] = None,
    msg: Optional[str] = None,
) -> None:
    """Assert the listener received a response with the status code.

    With ``method`` and ``sequence_number`` the response must also carry
    that CSeq.

    Raises:
        SipAssertionError: If no such response was received
    """
    _require(listener, "listener", msg)
    responses = listener.get_all_received_responses()
    if not contains_status(responses, status_code, method, sequence_number):
        _fail(
            f"response {_describe_status(status_code, method, sequence_number)} not received "
            f"by {listener.name} (received: {_received_codes(listener)})",
            msg,
        )


def assert_response_not_received(
    status_code: int,
    listener: MessageListener,
    method: Optional[str] = None,
    sequence_number: Optional[int] = None,
    msg: Optional[str] = None,
) -> None:
    """Assert the listener has not received a response with the status code."""
    _require(listener, "listener", msg)
    responses = listener.get_all_received_responses()
    if contains_status(responses, status_code, method, sequence_number):
        _fail(
            f"unexpected response {_describe_status(status_code, method, sequence_number)} "
            f"received by {listener.name}",
            msg,
        )


def assert_request_received(
    method: str,
    listener: MessageListener,
    sequence_number: Optional[int] = None,
    msg: Optional[str] = None,
) -> None:
    """Assert the listener received a request with the method.

    With ``sequence_number`` the request must carry CSeq ``<number> <method>``.
    """
    _require(listener, "listener", msg)
    if not contains_method(listener.get_all_received_requests(), method, sequence_number):
        _fail(
            f"request {_describe_method(method, sequence_number)} not received "
            f"by {listener.name} (received: {_received_methods(listener)})",
            msg,
        )


def assert_request_not_received(
    method: str,
    listener: MessageListener,
    sequence_number: Optional[int] = None,
    msg: Optional[str] = None,
) -> None:
    """Assert the listener has not received a request with the method."""
    _require(listener, "listener", msg)
    if contains_method(listener.get_all_received_requests(), method, sequence_number):
        _fail(
            f"unexpected request {_describe_method(method, sequence_number)} "
            f"received by {listener.name}",
            msg,
        )


# -- headers and body -----------------------------------------------------

def assert_header_present(sip_message: SipMessage, header: str, msg: Optional[str] = None) -> None:
    _require(sip_message, "SIP message", msg)
    if not sip_message.get_headers(header):
        _fail(f"header {header} not present", msg)


def assert_header_not_present(sip_message: SipMessage, header: str, msg: Optional[str] = None) -> None:
    _require(sip_message, "SIP message", msg)
    if sip_message.get_headers(header):
        _fail(f"header {header} present", msg)


def assert_header_contains(
    sip_message: SipMessage, header: str, value: str, msg: Optional[str] = None
) -> None:
    """Assert some occurrence of the header contains ``value`` as a substring.

    The whole header line (``Name: value``) is searched.
    """
    _require(sip_message, "SIP message", msg)
    if not any(value in str(h) for h in sip_message.get_headers(header)):
        _fail(f"no {header} header contains {value!r}", msg)


def assert_header_not_contains(
    sip_message: SipMessage, header: str, value: str, msg: Optional[str] = None
) -> None:
    """Assert no occurrence of the header contains ``value``.

    Passes when the header is absent.
    """
    _require(sip_message, "SIP message", msg)
    if any(value in str(h) for h in sip_message.get_headers(header)):
        _fail(f"a {header} header contains {value!r}", msg)


def assert_body_present(sip_message: SipMessage, msg: Optional[str] = None) -> None:
    _require(sip_message, "SIP message", msg)
    if sip_message.content_length <= 0:
        _fail("message has no body", msg)


def assert_body_not_present(sip_message: SipMessage, msg: Optional[str] = None) -> None:
    _require(sip_message, "SIP message", msg)
    if sip_message.content_length > 0:
        _fail(f"message has a body of {sip_message.content_length} bytes", msg)


def assert_body_contains(sip_message: SipMessage, value: str, msg: Optional[str] = None) -> None:
    """Assert the message has a body and ``value`` appears in it."""
    assert_body_present(sip_message, msg)
    body = sip_message.raw_content.decode("utf-8", errors="replace")
    if value not in body:
        _fail(f"body does not contain {value!r}", msg)


def assert_body_not_contains(sip_message: SipMessage, value: str, msg: Optional[str] = None) -> None:
    """Assert the body does not contain ``value``. Passes without a body."""
    _require(sip_message, "SIP message", msg)
    if sip_message.content_length > 0:
        body = sip_message.raw_content.decode("utf-8", errors="replace")
        if value in body:
            _fail(f"body contains {value!r}", msg)


# -- exchange state -------------------------------------------------------

def assert_answered(call: SipCall, msg: Optional[str] = None) -> None:
    _require(call, "call", msg)
    if not call.is_call_answered:
        _fail(f"call {call.name} not answered", msg)


def assert_not_answered(call: SipCall, msg: Optional[str] = None) -> None:
    _require(call, "call", msg)
    if call.is_call_answered:
        _fail(f"call {call.name} was answered", msg)


def assert_no_subscription_errors(subscription: Subscription, msg: Optional[str] = None) -> None:
    """Assert the subscription recorded no event errors."""
    _require(subscription, "subscription", msg)
    errors = subscription.event_errors
    if errors:
        _fail(f"subscription errors: {'; '.join(errors)}", msg)


# -- awaits ---------------------------------------------------------------

def await_received_responses(
    listener: MessageListener,
    count: int,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> None:
    """Wait until the listener holds exactly ``count`` received responses."""
    _require(listener, "listener", None)
    await_value(
        lambda: len(listener.get_all_received_responses()),
        count,
        poll_interval=poll_interval,
        timeout=timeout,
        description=f"{listener.name} has {count} received responses",
    )


def await_response_received(
    status_code: int,
    listener: MessageListener,
    method: Optional[str] = None,
    sequence_number: Optional[int] = None,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> None:
    """Wait until assert_response_received() would pass."""
    _require(listener, "listener", None)
    await_condition(
        lambda: assert_response_received(status_code, listener, method, sequence_number),
        poll_interval=poll_interval,
        timeout=timeout,
        description=(
            f"response {_describe_status(status_code, method, sequence_number)} "
            f"received by {listener.name}"
        ),
    )


def await_request_received(
    method: str,
    listener: MessageListener,
    sequence_number: Optional[int] = None,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> None:
    """Wait until assert_request_received() would pass."""
    _require(listener, "listener", None)
    await_condition(
        lambda: assert_request_received(method, listener, sequence_number),
        poll_interval=poll_interval,
        timeout=timeout,
        description=f"request {_describe_method(method, sequence_number)} received by {listener.name}",
    )


def await_answered(
    call: SipCall,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> None:
    _require(call, "call", None)
    await_condition(
        lambda: assert_answered(call),
        poll_interval=poll_interval,
        timeout=timeout,
        description=f"call {call.name} answered",
    )


def await_dialog_ready(
    sender: ReferNotifySender,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> None:
    """Wait until the REFER receiver has a dialog to send NOTIFY on."""
    _require(sender, "REFER sender", None)
    await_condition(
        lambda: sender.dialog is not None,
        poll_interval=poll_interval,
        timeout=timeout,
        description=f"dialog ready on {sender.name}",
    )


def await_stack_dispose(
    sip_stack: Any,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> None:
    """Dispose a SIP stack, waiting until dispose() completes.

    An error raised by dispose() is a fatal failure: it propagates on the
    first attempt without retrying.
    """
    _require(sip_stack, "SIP stack", None)

    def dispose() -> None:
        sip_stack.dispose()
        log_audit_event("STACK_DISPOSED", {"status": "success", "stack": type(sip_stack).__name__})

    await_condition(
        dispose,
        poll_interval=poll_interval,
        timeout=timeout,
        description=f"{type(sip_stack).__name__}.dispose() completes",
    )
