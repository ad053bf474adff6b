"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests).
"""

from pathlib import Path
from typing import Callable, Generator, Optional

import pytest

from sip_test_util.config import PollingConfig, reset_polling_defaults, set_polling_defaults
from sip_test_util.models.messages import SipRequest, SipResponse, parse_message

INVITE_TEXT = (
    "INVITE sip:bob@biloxi.example.com SIP/2.0\r\n"
    "Via: SIP/2.0/UDP pc33.atlanta.example.com;branch=z9hG4bK776asdhds\r\n"
    "Max-Forwards: 70\r\n"
    "To: Bob <sip:bob@biloxi.example.com>\r\n"
    "From: Alice <sip:alice@atlanta.example.com>;tag=1928301774\r\n"
    "Call-ID: a84b4c76e66710@pc33.atlanta.example.com\r\n"
    "CSeq: 1 INVITE\r\n"
    "Contact: <sip:alice@pc33.atlanta.example.com>\r\n"
    "Content-Type: application/sdp\r\n"
    "Content-Length: 35\r\n"
    "\r\n"
    "v=0\r\n"
    "o=alice 2890844526 IN IP4 pc\r\n"
)


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def restore_polling_defaults() -> Generator[None, None, None]:
    """Reset process-wide polling defaults around every test."""
    reset_polling_defaults()
    yield
    reset_polling_defaults()


@pytest.fixture
def invite_text() -> str:
    """Raw INVITE request with an SDP body."""
    return INVITE_TEXT


@pytest.fixture
def invite_request() -> SipRequest:
    """Parsed INVITE request."""
    request = parse_message(INVITE_TEXT)
    assert isinstance(request, SipRequest)
    return request


@pytest.fixture
def make_response() -> Callable[..., SipResponse]:
    """
    Return a factory building responses with a CSeq header.

    Returns:
        Callable: make_response(status_code, method="INVITE", seq=1, cseq=True)
    """

    def _make(
        status_code: int,
        method: str = "INVITE",
        seq: int = 1,
        cseq: bool = True,
        reason: Optional[str] = None,
    ) -> SipResponse:
        response = SipResponse(status_code=status_code, reason_phrase=reason or "")
        response = response.with_header("Call-ID", "a84b4c76e66710@pc33.atlanta.example.com")
        if cseq:
            response = response.with_header("CSeq", f"{seq} {method}")
        return response

    return _make


@pytest.fixture
def make_request() -> Callable[..., SipRequest]:
    """
    Return a factory building requests with a CSeq header.

    Returns:
        Callable: make_request(method, seq=1, cseq_method=None)
    """

    def _make(method: str, seq: int = 1, cseq_method: Optional[str] = None) -> SipRequest:
        request = SipRequest(method=method, request_uri="sip:alice@atlanta.example.com")
        return request.with_header("CSeq", f"{seq} {cseq_method or method}")

    return _make


@pytest.fixture
def fast_polling() -> PollingConfig:
    """Process-wide polling defaults of 10 ms / 1 s for await tests."""
    return set_polling_defaults(poll_interval=0.01, timeout=1.0)
