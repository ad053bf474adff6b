"""Integration test fixtures.

This module provides a fake SIP stack that delivers parsed messages to
listeners from a background thread, the way a real stack's event loop does.
"""

import logging
import queue
import threading
import time
from typing import Generator, Optional

import pytest

from sip_test_util.models.messages import parse_message
from sip_test_util.models.transactions import SipTransaction
from sip_test_util.store.listener import MessageListener

logger = logging.getLogger(__name__)


class FakeStack:
    """Delivers raw SIP text to a listener on its own thread after a delay."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Optional[tuple]]" = queue.Queue()
        self._thread = threading.Thread(target=self._run, name="fake-sip-stack", daemon=True)
        self.disposed = False
        self._thread.start()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                return
            delay, listener, raw, transaction = item
            time.sleep(delay)
            message = parse_message(raw, source=raw)
            if hasattr(message, "status_code"):
                listener.process_response(message, raw_event=raw, transaction=transaction)
            else:
                listener.process_request(message, raw_event=raw, transaction=transaction)
            logger.debug("Delivered %s", raw.splitlines()[0])

    def deliver(
        self,
        listener: MessageListener,
        raw: str,
        delay: float = 0.0,
        transaction: Optional[SipTransaction] = None,
    ) -> None:
        self._queue.put((delay, listener, raw, transaction))

    def dispose(self) -> None:
        self._queue.put(None)
        self._thread.join(timeout=5)
        self.disposed = True


@pytest.fixture
def fake_stack() -> Generator[FakeStack, None, None]:
    """Running fake stack, disposed after the test."""
    stack = FakeStack()
    yield stack
    if not stack.disposed:
        stack.dispose()
