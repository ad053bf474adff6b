"""Event records stored by message listeners and transactions.

An EventRecord tags one received request or response. Records are frozen:
once appended to a store they are never changed or reordered.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from sip_test_util.models.messages import SipRequest, SipResponse


class EventKind(Enum):
    """Kind of protocol event."""

    REQUEST = "REQUEST"
    RESPONSE = "RESPONSE"


@dataclass(frozen=True)
class EventRecord:
    """A received request or response.

    Attributes:
        message: The request or response, owned by this record
        sequence: Arrival position within the owning store
        raw_event: The stack's event object (RequestEvent, ResponseEvent, ...)
    """

    message: Union[SipRequest, SipResponse]
    sequence: int = 0
    raw_event: Any = field(default=None, compare=False, repr=False)

    @property
    def kind(self) -> EventKind:
        if isinstance(self.message, SipResponse):
            return EventKind.RESPONSE
        return EventKind.REQUEST

    @property
    def is_request(self) -> bool:
        return self.kind == EventKind.REQUEST

    @property
    def is_response(self) -> bool:
        return self.kind == EventKind.RESPONSE

    def summary(self) -> str:
        """One-line description used in log and failure messages."""
        cseq = self.message.cseq
        cseq_text = f" (CSeq {cseq})" if cseq is not None else ""
        if isinstance(self.message, SipResponse):
            return (
                f"#{self.sequence} response {self.message.status_code} "
                f"{self.message.reason_phrase}{cseq_text}"
            )
        return f"#{self.sequence} request {self.message.method}{cseq_text}"
