"""Message listeners: append-only stores of received SIP messages.

A SIP stack adapter calls process_request() / process_response() from its
delivery thread. Test code reads snapshots from its own thread. Every append
happens under the listener's lock as a single EventRecord, and every read
copies the log under the same lock, so a reader always sees a complete prefix
of the arrival order.
"""

import threading
from typing import Any, List, Optional, Tuple

from sip_test_util.logging_audit import get_operation_logger, log_message_event
from sip_test_util.models.events import EventRecord
from sip_test_util.models.messages import SipRequest, SipResponse
from sip_test_util.models.transactions import (
    SipTransaction,
    StackTransaction,
)

logger = get_operation_logger("store")


class MessageListener:
    """Store of all requests and responses received on one exchange.

    Attributes:
        name: Label used in log and failure messages

    Example:
        >>> listener = MessageListener("alice")
        >>> listener.process_response(parse_message(RINGING_TEXT))
        >>> len(listener.get_all_received_responses())
        1
    """

    def __init__(self, name: str = "") -> None:
        self.name = name or type(self).__name__
        self._lock = threading.Lock()
        self._responses: List[EventRecord] = []
        self._requests: List[EventRecord] = []
        self._next_sequence = 1
        self._error_message = ""

    # -- delivery side ----------------------------------------------------

    def _append(
        self,
        target: List[EventRecord],
        message: Any,
        raw_event: Any,
        transaction: Optional[SipTransaction],
    ) -> EventRecord:
        with self._lock:
            record = EventRecord(
                message=message, sequence=self._next_sequence, raw_event=raw_event
            )
            self._next_sequence += 1
            target.append(record)
            if transaction is not None:
                transaction.add_event(record)
        log_message_event("received", f"{self.name} {record.summary()}")
        return record

    def process_response(
        self,
        response: SipResponse,
        raw_event: Any = None,
        transaction: Optional[SipTransaction] = None,
    ) -> EventRecord:
        """Record a response delivered by the stack.

        Args:
            response: The received response
            raw_event: The stack's ResponseEvent, kept for the test program
            transaction: Transaction handle the response belongs to, if known

        Returns:
            The appended EventRecord

        Raises:
            TypeError: If response is not a SipResponse
        """
        if not isinstance(response, SipResponse):
            raise TypeError(
                f"process_response expects a SipResponse, got {type(response).__name__}"
            )
        return self._append(self._responses, response, raw_event, transaction)

    def process_request(
        self,
        request: SipRequest,
        raw_event: Any = None,
        transaction: Optional[SipTransaction] = None,
    ) -> EventRecord:
        """Record a request delivered by the stack.

        Raises:
            TypeError: If request is not a SipRequest
        """
        if not isinstance(request, SipRequest):
            raise TypeError(
                f"process_request expects a SipRequest, got {type(request).__name__}"
            )
        return self._append(self._requests, request, raw_event, transaction)

    def new_client_transaction(self, transaction: StackTransaction) -> SipTransaction:
        """Wrap a stack client transaction opened for a request this side sent."""
        handle = SipTransaction.client(transaction, self)
        logger.debug("%s opened client transaction", self.name)
        return handle

    def new_server_transaction(self, transaction: StackTransaction) -> SipTransaction:
        """Wrap a stack server transaction opened for a received request."""
        handle = SipTransaction.server(transaction, self)
        logger.debug("%s opened server transaction", self.name)
        return handle

    # -- operation result -------------------------------------------------

    @property
    def error_message(self) -> str:
        """Empty if the last operation succeeded, otherwise what went wrong."""
        return self._error_message

    def record_operation_success(self) -> None:
        self._error_message = ""

    def record_operation_error(self, message: str) -> None:
        """Record why the last operation failed."""
        self._error_message = message or "operation failed"
        logger.warning("%s operation failed: %s", self.name, self._error_message)

    # -- test side --------------------------------------------------------

    def get_all_received_responses(self) -> Tuple[SipResponse, ...]:
        """Snapshot of all received responses in arrival order."""
        with self._lock:
            return tuple(r.message for r in self._responses)

    def get_all_received_requests(self) -> Tuple[SipRequest, ...]:
        """Snapshot of all received requests in arrival order."""
        with self._lock:
            return tuple(r.message for r in self._requests)

    def get_received_events(self) -> Tuple[EventRecord, ...]:
        """Snapshot of every received request and response, in arrival order."""
        with self._lock:
            merged = self._responses + self._requests
        return tuple(sorted(merged, key=lambda r: r.sequence))

    def get_last_received_response(self) -> Optional[SipResponse]:
        with self._lock:
            return self._responses[-1].message if self._responses else None

    def get_last_received_request(self) -> Optional[SipRequest]:
        with self._lock:
            return self._requests[-1].message if self._requests else None

    def dispose(self) -> None:
        """Drop everything received so far. Ends the exchange's lifetime."""
        with self._lock:
            self._responses.clear()
            self._requests.clear()
        self._error_message = ""
        logger.debug("%s disposed", self.name)

    def __repr__(self) -> str:
        with self._lock:
            counts = (len(self._requests), len(self._responses))
        return f"<{type(self).__name__} {self.name!r} requests={counts[0]} responses={counts[1]}>"
