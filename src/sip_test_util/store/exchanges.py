"""Exchange objects that play the message store role.

SipCall, Subscription and ReferNotifySender are the listeners a test program
holds on to. Each adds the bit of state its assertions need on top of the
plain MessageListener log.
"""

import threading
from typing import Any, List, Optional, Tuple

from sip_test_util.logging_audit import get_operation_logger
from sip_test_util.models.events import EventRecord
from sip_test_util.models.messages import Method, SipRequest, SipResponse
from sip_test_util.models.transactions import SipTransaction
from sip_test_util.store.listener import MessageListener

logger = get_operation_logger("store")


class SipCall(MessageListener):
    """One call leg, incoming or outgoing.

    The call counts as answered once a 2xx response to INVITE is received
    (outgoing leg) or the test program records that it sent one
    (incoming leg) via mark_answered().
    """

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self._answered = threading.Event()

    def process_response(
        self,
        response: SipResponse,
        raw_event: Any = None,
        transaction: Optional[SipTransaction] = None,
    ) -> EventRecord:
        record = super().process_response(response, raw_event, transaction)
        cseq = response.cseq
        if 200 <= response.status_code < 300 and cseq is not None and cseq.method == Method.INVITE:
            self._answered.set()
        return record

    def mark_answered(self) -> None:
        """Record that this side answered an incoming call with a 2xx."""
        self._answered.set()

    @property
    def is_call_answered(self) -> bool:
        return self._answered.is_set()

    def dispose(self) -> None:
        super().dispose()
        self._answered.clear()


class Subscription(MessageListener):
    """An event subscription (SUBSCRIBE / NOTIFY, or REFER progress).

    Received NOTIFY requests missing an Event or Subscription-State header are
    recorded as event errors instead of failing on the delivery thread.
    """

    REQUIRED_NOTIFY_HEADERS = ("Event", "Subscription-State")

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self._event_errors: List[str] = []
        self._errors_lock = threading.Lock()

    def process_request(
        self,
        request: SipRequest,
        raw_event: Any = None,
        transaction: Optional[SipTransaction] = None,
    ) -> EventRecord:
        record = super().process_request(request, raw_event, transaction)
        if request.method == Method.NOTIFY:
            for header in self.REQUIRED_NOTIFY_HEADERS:
                if request.get_header(header) is None:
                    self.add_event_error(
                        f"NOTIFY #{record.sequence} is missing the {header} header"
                    )
        return record

    def add_event_error(self, message: str) -> None:
        with self._errors_lock:
            self._event_errors.append(message)
        logger.warning("%s event error: %s", self.name, message)

    @property
    def event_errors(self) -> Tuple[str, ...]:
        with self._errors_lock:
            return tuple(self._event_errors)

    def dispose(self) -> None:
        super().dispose()
        with self._errors_lock:
            self._event_errors.clear()


class ReferNotifySender(MessageListener):
    """The receiving side of a REFER, which later sends NOTIFY progress.

    The dialog is set by the stack adapter once the REFER has been received
    and a dialog exists to send NOTIFY requests on.
    """

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self._dialog: Any = None

    @property
    def dialog(self) -> Any:
        return self._dialog

    def set_dialog(self, dialog: Any) -> None:
        self._dialog = dialog
        logger.debug("%s dialog ready", self.name)

    def dispose(self) -> None:
        super().dispose()
        self._dialog = None
