"""Correlation predicates over snapshots of received messages.

Every function here is pure: it takes an ordered sequence of responses or
requests (a snapshot from a MessageListener) and answers an existence
question. Only existence matters, so duplicates such as retransmitted
provisional responses are harmless. A message without a usable CSeq header
never matches a sequence-qualified form.
"""

from typing import Iterable, Optional

from sip_test_util.models.messages import SipRequest, SipResponse


def _cseq_matches(message, method: str, sequence_number: int) -> bool:
    cseq = message.cseq
    return (
        cseq is not None
        and cseq.method == method
        and cseq.seq_number == sequence_number
    )


def contains_status(
    responses: Iterable[SipResponse],
    status_code: int,
    method: Optional[str] = None,
    sequence_number: Optional[int] = None,
) -> bool:
    """Check whether any response has the given status code.

    With ``method`` and ``sequence_number`` the same response must also carry
    a CSeq header with exactly that method (case-sensitive) and number.

    Args:
        responses: Snapshot of received responses
        status_code: Status code to look for
        method: CSeq method, required together with sequence_number
        sequence_number: CSeq number, required together with method

    Returns:
        True if a matching response exists

    Raises:
        ValueError: If only one of method and sequence_number is given

    Example:
        >>> contains_status(call.get_all_received_responses(), 200, "INVITE", 1)
        True
    """
    if (method is None) != (sequence_number is None):
        raise ValueError("method and sequence_number must be given together")

    for response in responses:
        if response.status_code != status_code:
            continue
        if method is None or _cseq_matches(response, method, sequence_number):
            return True
    return False


def lacks_status(
    responses: Iterable[SipResponse],
    status_code: int,
    method: Optional[str] = None,
    sequence_number: Optional[int] = None,
) -> bool:
    """Exact complement of contains_status() on the same snapshot."""
    return not contains_status(responses, status_code, method, sequence_number)


def contains_method(
    requests: Iterable[SipRequest],
    method: str,
    sequence_number: Optional[int] = None,
) -> bool:
    """Check whether any request has the given method.

    Without ``sequence_number`` the request-line method is compared. With it,
    the request's CSeq header must carry that method and number.

    Args:
        requests: Snapshot of received requests
        method: Method name, compared case-sensitively
        sequence_number: Optional CSeq number

    Returns:
        True if a matching request exists
    """
    for request in requests:
        if sequence_number is None:
            if request.method == method:
                return True
        elif _cseq_matches(request, method, sequence_number):
            return True
    return False


def lacks_method(
    requests: Iterable[SipRequest],
    method: str,
    sequence_number: Optional[int] = None,
) -> bool:
    """Exact complement of contains_method() on the same snapshot."""
    return not contains_method(requests, method, sequence_number)


def count_status(responses: Iterable[SipResponse], status_code: int) -> int:
    """Number of responses with the given status code, duplicates included."""
    return sum(1 for r in responses if r.status_code == status_code)
