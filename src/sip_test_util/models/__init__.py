"""Models module.

This module provides SIP message, event, transaction and status code models.
"""

from sip_test_util.models.events import EventKind, EventRecord
from sip_test_util.models.messages import (
    CSeq,
    Header,
    Method,
    SipMessage,
    SipRequest,
    SipResponse,
    parse_message,
)
from sip_test_util.models.status_codes import StatusCode, reason_phrase_for
from sip_test_util.models.transactions import (
    LocalTransaction,
    RemoteTransaction,
    SipTransaction,
)

__all__ = [
    "CSeq",
    "EventKind",
    "EventRecord",
    "Header",
    "LocalTransaction",
    "Method",
    "RemoteTransaction",
    "SipMessage",
    "SipRequest",
    "SipResponse",
    "SipTransaction",
    "StatusCode",
    "parse_message",
    "reason_phrase_for",
]
