"""Audit trail entries for SIP test runs.

Each entry is a single line, ``AUDIT [TYPE] | key=value | ...``, so a failed
run can be followed through the log file with grep. Await outcomes and stack
disposal are audited; message deliveries are logged at DEBUG.
"""

import time
import uuid
from typing import Any, Dict, List

from .logger import get_logger

logger = get_logger(__name__)

# leading fields, in this order; anything else follows in insertion order
AUDIT_FIELD_ORDER = (
    "status",
    "description",
    "duration",
    "attempts",
    "error_message",
    "correlation_id",
)


def _render_fields(details: Dict[str, Any]) -> List[str]:
    rendered = []
    for name in AUDIT_FIELD_ORDER:
        if name not in details:
            continue
        value = details[name]
        if name == "duration" and isinstance(value, (int, float)):
            rendered.append(f"duration={value:.3f}s")
        else:
            rendered.append(f"{name}={value}")
    rendered.extend(
        f"{name}={value}"
        for name, value in details.items()
        if name not in AUDIT_FIELD_ORDER and name != "timestamp"
    )
    return rendered


def log_audit_event(event_type: str, details: Dict[str, Any]) -> None:
    """Write one audit entry.

    Entries whose ``status`` is ``"failure"`` go to ERROR, everything else to
    INFO. A timestamp and a correlation id are added when missing; the caller's
    dict is not modified.

    Args:
        event_type: e.g. "AWAIT_SATISFIED", "AWAIT_TIMEOUT", "STACK_DISPOSED"
        details: Fields for the entry (status, description, duration in
            seconds, attempts, error_message, correlation_id, extras)

    Example:
        >>> log_audit_event("AWAIT_SATISFIED", {
        ...     "status": "success",
        ...     "description": "response 200 OK received by alice",
        ...     "duration": 0.35,
        ...     "attempts": 4,
        ... })
    """
    entry = dict(details)
    entry.setdefault("timestamp", time.time())
    entry.setdefault("correlation_id", str(uuid.uuid4()))

    line = " | ".join([f"AUDIT [{event_type}]"] + _render_fields(entry))

    if entry.get("status") == "failure":
        logger.error(line)
    else:
        logger.info(line)


def log_message_event(direction: str, summary: str, raw: str = "") -> None:
    """Log a SIP message seen by a listener.

    Args:
        direction: "received" or "sent"
        summary: One-line summary, e.g. "#3 response 180 Ringing (CSeq 1 INVITE)"
        raw: Full message text, optional
    """
    logger.debug("MESSAGE [%s] | %s", direction.upper(), summary)
    if raw:
        logger.debug("MESSAGE BODY [%s]\n%s", direction.upper(), raw)
