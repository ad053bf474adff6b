"""Store module.

This module provides the message listeners that record received SIP traffic.
"""

from sip_test_util.store.exchanges import ReferNotifySender, SipCall, Subscription
from sip_test_util.store.listener import MessageListener

__all__ = [
    "MessageListener",
    "SipCall",
    "Subscription",
    "ReferNotifySender",
]
