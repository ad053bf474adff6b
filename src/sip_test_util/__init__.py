"""SIP Test Utility.

Assertion and polling helpers for testing SIP call and subscription flows
driven through an external SIP stack.
"""

__version__ = "0.1.0"
