"""Polling module.

This module provides the await engine used to wait for asynchronous SIP events.
"""

from sip_test_util.polling.await_engine import AwaitState, await_condition, await_value

__all__ = [
    "AwaitState",
    "await_condition",
    "await_value",
]
