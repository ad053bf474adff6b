"""Assertions module.

This module provides correlation predicates and assertion helpers for SIP tests.
"""

from sip_test_util.assertions.asserts import (
    assert_answered,
    assert_body_contains,
    assert_body_not_contains,
    assert_body_not_present,
    assert_body_present,
    assert_header_contains,
    assert_header_not_contains,
    assert_header_not_present,
    assert_header_present,
    assert_last_operation_fail,
    assert_last_operation_success,
    assert_no_subscription_errors,
    assert_not_answered,
    assert_request_not_received,
    assert_request_received,
    assert_response_not_received,
    assert_response_received,
    await_answered,
    await_dialog_ready,
    await_received_responses,
    await_request_received,
    await_response_received,
    await_stack_dispose,
)
from sip_test_util.assertions.predicates import (
    contains_method,
    contains_status,
    count_status,
    lacks_method,
    lacks_status,
)

__all__ = [
    "assert_answered",
    "assert_body_contains",
    "assert_body_not_contains",
    "assert_body_not_present",
    "assert_body_present",
    "assert_header_contains",
    "assert_header_not_contains",
    "assert_header_not_present",
    "assert_header_present",
    "assert_last_operation_fail",
    "assert_last_operation_success",
    "assert_no_subscription_errors",
    "assert_not_answered",
    "assert_request_not_received",
    "assert_request_received",
    "assert_response_not_received",
    "assert_response_received",
    "await_answered",
    "await_dialog_ready",
    "await_received_responses",
    "await_request_received",
    "await_response_received",
    "await_stack_dispose",
    "contains_method",
    "contains_status",
    "count_status",
    "lacks_method",
    "lacks_status",
]
