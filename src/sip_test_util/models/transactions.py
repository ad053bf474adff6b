"""Transaction handles for SIP request/response exchanges.

A SipTransaction wraps exactly one stack transaction: a client transaction
when this side sent the request, a server transaction when it received it.
The pair is expressed as a tagged variant (LocalTransaction or
RemoteTransaction), so a handle holding both or neither cannot be built.

Test code does not create these directly. An exchange object such as SipCall
creates one when the stack opens a transaction, and passes it back to the test
program for use in a later, related call.
"""

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Protocol, Tuple, Union

from sip_test_util.logging_audit import get_operation_logger
from sip_test_util.models.events import EventRecord
from sip_test_util.models.messages import SipRequest
from sip_test_util.utils.exceptions import TransactionStateError

if TYPE_CHECKING:
    from sip_test_util.store.listener import MessageListener

logger = get_operation_logger("transaction")


class StackTransaction(Protocol):
    """What the assertion layer needs from a stack transaction object."""

    @property
    def request(self) -> Any: ...


@dataclass(frozen=True)
class LocalTransaction:
    """A transaction this side initiated by sending a request."""

    transaction: StackTransaction


@dataclass(frozen=True)
class RemoteTransaction:
    """A transaction the far end initiated; this side received the request."""

    transaction: StackTransaction


TransactionRef = Union[LocalTransaction, RemoteTransaction]


class SipTransaction:
    """Handle over one SIP transaction and the events observed on it.

    Attributes:
        ref: The tagged client or server transaction
        listener: The message listener that owns delivery for this transaction

    Example:
        >>> trans = SipTransaction(LocalTransaction(stack_client_transaction), call)
        >>> trans.request.method
        'INVITE'
        >>> trans.server_transaction is None
        True
    """

    def __init__(
        self,
        ref: TransactionRef,
        listener: Optional["MessageListener"] = None,
    ) -> None:
        if not isinstance(ref, (LocalTransaction, RemoteTransaction)):
            raise TransactionStateError(
                f"SipTransaction requires a LocalTransaction or RemoteTransaction, "
                f"got {type(ref).__name__}"
            )
        if ref.transaction is None:
            raise TransactionStateError(
                f"{type(ref).__name__} wraps no stack transaction"
            )
        self._ref = ref
        self.listener = listener
        self._events: List[EventRecord] = []
        self._lock = threading.Lock()

    @classmethod
    def client(
        cls, transaction: StackTransaction, listener: Optional["MessageListener"] = None
    ) -> "SipTransaction":
        """Create a handle for a request this side sent."""
        return cls(LocalTransaction(transaction), listener)

    @classmethod
    def server(
        cls, transaction: StackTransaction, listener: Optional["MessageListener"] = None
    ) -> "SipTransaction":
        """Create a handle for a request this side received."""
        return cls(RemoteTransaction(transaction), listener)

    @property
    def ref(self) -> TransactionRef:
        return self._ref

    @property
    def is_client(self) -> bool:
        return isinstance(self._ref, LocalTransaction)

    @property
    def client_transaction(self) -> Optional[StackTransaction]:
        """The stack client transaction, or None for a received request."""
        if isinstance(self._ref, LocalTransaction):
            return self._ref.transaction
        return None

    @property
    def server_transaction(self) -> Optional[StackTransaction]:
        """The stack server transaction, or None for a sent request."""
        if isinstance(self._ref, RemoteTransaction):
            return self._ref.transaction
        return None

    @property
    def request(self) -> SipRequest:
        """The request that created this transaction.

        Stack requests that are not already SipRequest objects are returned
        as the stack provides them.

        Raises:
            TransactionStateError: If the stack transaction carries no request
        """
        request = getattr(self._ref.transaction, "request", None)
        if request is None:
            raise TransactionStateError(
                f"{type(self._ref).__name__} has no originating request"
            )
        return request

    def add_event(self, record: EventRecord) -> None:
        """Append an observed event. Called from the stack delivery thread."""
        with self._lock:
            self._events.append(record)
        logger.debug("Transaction event appended: %s", record.summary())

    def observed_events(self) -> Tuple[EventRecord, ...]:
        """Snapshot of the events observed so far, in arrival order."""
        with self._lock:
            return tuple(self._events)

    def __repr__(self) -> str:
        role = "client" if self.is_client else "server"
        return f"<SipTransaction {role} events={len(self._events)}>"
