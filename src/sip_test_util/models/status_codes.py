"""SIP response status codes and canonical reason phrases.

The reason phrase table is built once at import and exposed read-only, so it
can be shared between threads without locking.
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


class StatusCode(IntEnum):
    """SIP response status codes (RFC 3261, RFC 3265)."""

    # PROVISIONAL (1xx)
    TRYING = 100
    RINGING = 180
    CALL_IS_BEING_FORWARDED = 181
    QUEUED = 182
    SESSION_PROGRESS = 183

    # SUCCESS (2xx)
    OK = 200
    ACCEPTED = 202

    # REDIRECTION (3xx)
    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    MOVED_TEMPORARILY = 302
    USE_PROXY = 305
    ALTERNATIVE_SERVICE = 380

    # CLIENT_ERROR (4xx)
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    PAYMENT_REQUIRED = 402
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    PROXY_AUTHENTICATION_REQUIRED = 407
    REQUEST_TIMEOUT = 408
    GONE = 410
    REQUEST_ENTITY_TOO_LARGE = 413
    REQUEST_URI_TOO_LONG = 414
    UNSUPPORTED_MEDIA_TYPE = 415
    UNSUPPORTED_URI_SCHEME = 416
    BAD_EXTENSION = 420
    EXTENSION_REQUIRED = 421
    INTERVAL_TOO_BRIEF = 423
    TEMPORARILY_UNAVAILABLE = 480
    CALL_OR_TRANSACTION_DOES_NOT_EXIST = 481
    LOOP_DETECTED = 482
    TOO_MANY_HOPS = 483
    ADDRESS_INCOMPLETE = 484
    AMBIGUOUS = 485
    BUSY_HERE = 486
    REQUEST_TERMINATED = 487
    NOT_ACCEPTABLE_HERE = 488
    BAD_EVENT = 489
    REQUEST_PENDING = 491
    UNDECIPHERABLE = 493

    # SERVER_ERROR (5xx)
    SERVER_INTERNAL_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    SERVER_TIMEOUT = 504
    VERSION_NOT_SUPPORTED = 505
    MESSAGE_TOO_LARGE = 513

    # GLOBAL_ERROR (6xx)
    BUSY_EVERYWHERE = 600
    DECLINE = 603
    DOES_NOT_EXIST_ANYWHERE = 604
    SESSION_NOT_ACCEPTABLE = 606


UNKNOWN_REASON_PHRASE = ""

REASON_PHRASES: Mapping[int, str] = MappingProxyType({
    # PROVISIONAL (1xx)
    StatusCode.TRYING: "Trying",
    StatusCode.RINGING: "Ringing",
    StatusCode.CALL_IS_BEING_FORWARDED: "Call is Being Forwarded",
    StatusCode.QUEUED: "Queued",
    StatusCode.SESSION_PROGRESS: "Session Progress",
    # SUCCESS (2xx)
    StatusCode.OK: "OK",
    StatusCode.ACCEPTED: "Accepted",
    # REDIRECTION (3xx)
    StatusCode.MULTIPLE_CHOICES: "Multiple Choices",
    StatusCode.MOVED_PERMANENTLY: "Moved Permanently",
    StatusCode.MOVED_TEMPORARILY: "Moved Temporarily",
    StatusCode.USE_PROXY: "Use Proxy",
    StatusCode.ALTERNATIVE_SERVICE: "Alternative Service",
    # CLIENT_ERROR (4xx)
    StatusCode.BAD_REQUEST: "Bad Request",
    StatusCode.UNAUTHORIZED: "Unauthorized",
    StatusCode.PAYMENT_REQUIRED: "Payment Required",
    StatusCode.FORBIDDEN: "Forbidden",
    StatusCode.NOT_FOUND: "Not Found",
    StatusCode.METHOD_NOT_ALLOWED: "Method Not Allowed",
    StatusCode.NOT_ACCEPTABLE: "Not Acceptable",
    StatusCode.PROXY_AUTHENTICATION_REQUIRED: "Proxy Authentication Required",
    StatusCode.REQUEST_TIMEOUT: "Request Timeout",
    StatusCode.GONE: "Gone",
    StatusCode.REQUEST_ENTITY_TOO_LARGE: "Request Entity Too Large",
    StatusCode.REQUEST_URI_TOO_LONG: "Request URI Too Long",
    StatusCode.UNSUPPORTED_MEDIA_TYPE: "Unsupported Media Type",
    StatusCode.UNSUPPORTED_URI_SCHEME: "Unsupported URI Scheme",
    StatusCode.BAD_EXTENSION: "Bad Extension",
    StatusCode.EXTENSION_REQUIRED: "Extension Required",
    StatusCode.INTERVAL_TOO_BRIEF: "Interval Too Brief",
    StatusCode.TEMPORARILY_UNAVAILABLE: "Temporarily Unavailable",
    StatusCode.CALL_OR_TRANSACTION_DOES_NOT_EXIST: "Call or Transaction Does Not Exist",
    StatusCode.LOOP_DETECTED: "Loop Detected",
    StatusCode.TOO_MANY_HOPS: "Too Many Hops",
    StatusCode.ADDRESS_INCOMPLETE: "Address Incomplete",
    StatusCode.AMBIGUOUS: "Ambiguous",
    StatusCode.BUSY_HERE: "Busy Here",
    StatusCode.REQUEST_TERMINATED: "Request Terminated",
    StatusCode.NOT_ACCEPTABLE_HERE: "Not Acceptable Here",
    StatusCode.BAD_EVENT: "Bad Event",
    StatusCode.REQUEST_PENDING: "Request Pending",
    StatusCode.UNDECIPHERABLE: "Undecipherable",
    # SERVER_ERROR (5xx)
    StatusCode.SERVER_INTERNAL_ERROR: "Server Internal Error",
    StatusCode.NOT_IMPLEMENTED: "Not Implemented",
    StatusCode.BAD_GATEWAY: "Bad Gateway",
    StatusCode.SERVICE_UNAVAILABLE: "Service Unavailable",
    StatusCode.SERVER_TIMEOUT: "Server Timeout",
    StatusCode.VERSION_NOT_SUPPORTED: "Version Not Supported",
    StatusCode.MESSAGE_TOO_LARGE: "Message Too Large",
    # GLOBAL_ERROR (6xx)
    StatusCode.BUSY_EVERYWHERE: "Busy Everywhere",
    StatusCode.DECLINE: "Decline",
    StatusCode.DOES_NOT_EXIST_ANYWHERE: "Does Not Exist Anywhere",
    StatusCode.SESSION_NOT_ACCEPTABLE: "Session Not Acceptable",
})


def reason_phrase_for(code: int) -> str:
    """Return the canonical reason phrase for a status code.

    Args:
        code: Numeric SIP status code

    Returns:
        The registered phrase, or an empty string for unknown codes

    Example:
        >>> reason_phrase_for(486)
        'Busy Here'
        >>> reason_phrase_for(9999)
        ''
    """
    try:
        return REASON_PHRASES.get(code, UNKNOWN_REASON_PHRASE)
    except TypeError:
        # unhashable input
        return UNKNOWN_REASON_PHRASE


def status_class(code: int) -> int:
    """Return the status class digit (1 for 1xx, 2 for 2xx, ...)."""
    return code // 100


def is_provisional(code: int) -> bool:
    """True for 1xx responses."""
    return 100 <= code < 200


def is_final(code: int) -> bool:
    """True for responses that complete a transaction (2xx-6xx)."""
    return 200 <= code < 700
