"""SIP message models.

This module defines the request and response objects the assertion layer reads.
A SIP stack adapter builds them from its own message types, or test fixtures
parse them from raw SIP text with parse_message().

Header names are matched case-insensitively and compact forms (``i`` for
Call-ID, ``l`` for Content-Length, ...) are expanded to their canonical names.
"""

from dataclasses import dataclass, field, replace
from typing import Any, AnyStr, List, Optional, Tuple, Union

from sip_test_util.models.status_codes import reason_phrase_for
from sip_test_util.utils.exceptions import MessageParseError

SIP_VERSION = "SIP/2.0"

CSEQ_HEADER = "CSeq"
CALL_ID_HEADER = "Call-ID"
CONTENT_LENGTH_HEADER = "Content-Length"
CONTENT_TYPE_HEADER = "Content-Type"

# Compact header forms (RFC 3261 section 7.3.3, RFC 3265, RFC 3515)
COMPACT_FORMS = {
    "i": "call-id",
    "m": "contact",
    "e": "content-encoding",
    "l": "content-length",
    "c": "content-type",
    "o": "event",
    "f": "from",
    "s": "subject",
    "k": "supported",
    "t": "to",
    "v": "via",
    "u": "allow-events",
    "r": "refer-to",
    "b": "referred-by",
}

_CANONICAL_EXCEPTIONS = {
    "call-id": "Call-ID",
    "cseq": "CSeq",
    "www-authenticate": "WWW-Authenticate",
}


class Method:
    """SIP request method names."""

    ACK = "ACK"
    BYE = "BYE"
    CANCEL = "CANCEL"
    INFO = "INFO"
    INVITE = "INVITE"
    MESSAGE = "MESSAGE"
    NOTIFY = "NOTIFY"
    OPTIONS = "OPTIONS"
    PRACK = "PRACK"
    PUBLISH = "PUBLISH"
    REFER = "REFER"
    REGISTER = "REGISTER"
    SUBSCRIBE = "SUBSCRIBE"
    UPDATE = "UPDATE"


def canonical_header_name(name: str) -> str:
    """Return the canonical spelling of a header name.

    Example:
        >>> canonical_header_name("call-id"), canonical_header_name("l")
        ('Call-ID', 'Content-Length')
    """
    lowered = name.strip().lower()
    lowered = COMPACT_FORMS.get(lowered, lowered)
    if lowered in _CANONICAL_EXCEPTIONS:
        return _CANONICAL_EXCEPTIONS[lowered]
    return "-".join(part.capitalize() for part in lowered.split("-"))


@dataclass(frozen=True)
class Header:
    """A single SIP header line.

    Attributes:
        name: Canonical header name
        value: Raw header value
    """

    name: str
    value: str

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


@dataclass(frozen=True)
class CSeq:
    """Parsed CSeq header value.

    Attributes:
        seq_number: Sequence number
        method: Method name, case preserved
    """

    seq_number: int
    method: str

    @classmethod
    def parse(cls, value: str) -> "CSeq":
        """Parse a CSeq header value such as ``1 INVITE``.

        Raises:
            MessageParseError: If the value is not ``<number> <method>``
        """
        parts = value.split()
        if len(parts) != 2:
            raise MessageParseError(f"Invalid CSeq value: {value!r}")
        try:
            seq_number = int(parts[0])
        except ValueError as e:
            raise MessageParseError(f"Invalid CSeq sequence number: {value!r}") from e
        return cls(seq_number=seq_number, method=parts[1])

    def __str__(self) -> str:
        return f"{self.seq_number} {self.method}"


@dataclass(frozen=True)
class SipMessage:
    """Common header and body access for SIP requests and responses.

    Messages are immutable once built, so a message handed out by a listener
    snapshot is the same value the listener stored. with_header() and
    with_body() return modified copies.

    Attributes:
        headers: Header lines in message order
        body: Raw message body
        source: The stack's own message or event object, if any
    """

    headers: Tuple[Header, ...] = ()
    body: bytes = b""
    source: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, tuple):
            object.__setattr__(self, "headers", tuple(self.headers))
        if not isinstance(self.body, bytes):
            object.__setattr__(self, "body", bytes(self.body))

    def get_headers(self, name: str) -> List[Header]:
        """Return every header with the given name, in message order."""
        wanted = canonical_header_name(name)
        return [h for h in self.headers if h.name == wanted]

    def get_header(self, name: str) -> Optional[Header]:
        """Return the first header with the given name, or None."""
        found = self.get_headers(name)
        return found[0] if found else None

    def get_header_value(self, name: str) -> Optional[str]:
        header = self.get_header(name)
        return header.value if header is not None else None

    def with_header(self, name: str, value: str) -> "SipMessage":
        """Return a copy with one more header appended.

        Example:
            >>> SipResponse(status_code=200).with_header("cseq", "1 INVITE").cseq
            CSeq(seq_number=1, method='INVITE')
        """
        header = Header(canonical_header_name(name), value.strip())
        return replace(self, headers=self.headers + (header,))

    def with_body(self, body: bytes) -> "SipMessage":
        return replace(self, body=body)

    @property
    def cseq(self) -> Optional[CSeq]:
        """The parsed CSeq header, or None when absent or malformed."""
        value = self.get_header_value(CSEQ_HEADER)
        if value is None:
            return None
        try:
            return CSeq.parse(value)
        except MessageParseError:
            return None

    @property
    def call_id(self) -> Optional[str]:
        return self.get_header_value(CALL_ID_HEADER)

    @property
    def content_length(self) -> int:
        """Body length in bytes, from Content-Length if present."""
        value = self.get_header_value(CONTENT_LENGTH_HEADER)
        if value is not None:
            try:
                return int(value)
            except ValueError:
                pass
        return len(self.body)

    @property
    def raw_content(self) -> bytes:
        return self.body

    def _header_block(self) -> str:
        lines = [str(h) for h in self.headers]
        if not self.get_headers(CONTENT_LENGTH_HEADER):
            lines.append(f"{CONTENT_LENGTH_HEADER}: {len(self.body)}")
        return "\r\n".join(lines)


@dataclass(frozen=True)
class SipRequest(SipMessage):
    """A SIP request received from or sent to the network.

    Attributes:
        method: Request method
        request_uri: Request-URI from the request line
    """

    method: str = ""
    request_uri: str = ""

    def __str__(self) -> str:
        start = f"{self.method} {self.request_uri} {SIP_VERSION}"
        return f"{start}\r\n{self._header_block()}\r\n\r\n" + self.body.decode(
            "utf-8", errors="replace"
        )


@dataclass(frozen=True)
class SipResponse(SipMessage):
    """A SIP response received from or sent to the network.

    Attributes:
        status_code: Numeric status code
        reason_phrase: Reason phrase from the status line
    """

    status_code: int = 0
    reason_phrase: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.reason_phrase and self.status_code:
            object.__setattr__(self, "reason_phrase", reason_phrase_for(self.status_code))

    def __str__(self) -> str:
        start = f"{SIP_VERSION} {self.status_code} {self.reason_phrase}"
        return f"{start}\r\n{self._header_block()}\r\n\r\n" + self.body.decode(
            "utf-8", errors="replace"
        )


def _split_head_and_body(raw: AnyStr) -> Tuple[AnyStr, AnyStr]:
    if isinstance(raw, bytes):
        crlf, lf = raw.find(b"\r\n\r\n"), raw.find(b"\n\n")
    else:
        crlf, lf = raw.find("\r\n\r\n"), raw.find("\n\n")
    if crlf >= 0 and (lf < 0 or crlf <= lf):
        return raw[:crlf], raw[crlf + 4:]
    if lf >= 0:
        return raw[:lf], raw[lf + 2:]
    return raw, raw[:0]


def _unfold_headers(lines: List[str]) -> List[str]:
    unfolded: List[str] = []
    for line in lines:
        if line[:1] in (" ", "\t") and unfolded:
            unfolded[-1] += " " + line.strip()
        elif line:
            unfolded.append(line)
    return unfolded


def parse_message(raw: Union[str, bytes], source: Any = None) -> SipMessage:
    """Parse raw SIP text into a SipRequest or SipResponse.

    Args:
        raw: The message as text, or as bytes whose head is UTF-8
        source: Optional stack object to keep alongside the parsed message

    Returns:
        SipRequest for a request line, SipResponse for a status line

    Raises:
        MessageParseError: If the start line or a header line is malformed,
            or Content-Length disagrees with the body

    Example:
        >>> msg = parse_message("SIP/2.0 180 Ringing\\r\\nCSeq: 1 INVITE\\r\\n\\r\\n")
        >>> msg.status_code, msg.cseq.method
        (180, 'INVITE')
    """
    # the body is kept as the exact bytes received; only the head is decoded
    if isinstance(raw, bytes):
        head_bytes, body = _split_head_and_body(raw.lstrip(b"\r\n"))
        head = head_bytes.decode("utf-8", errors="replace")
    else:
        head, body_text = _split_head_and_body(raw.lstrip("\r\n"))
        body = body_text.encode("utf-8")

    lines = head.replace("\r\n", "\n").split("\n")
    start_line = lines[0].strip() if lines else ""
    if not start_line:
        raise MessageParseError("No start line found")

    parts = start_line.split(" ", 2)
    if len(parts) < 2:
        raise MessageParseError(f"Malformed start line: {start_line!r}")

    is_response = parts[0].upper() == SIP_VERSION
    status_code = 0
    if is_response:
        try:
            status_code = int(parts[1])
        except ValueError as e:
            raise MessageParseError(f"Invalid status code in: {start_line!r}") from e
    elif len(parts) != 3 or parts[2].upper() != SIP_VERSION:
        raise MessageParseError(f"Malformed request line: {start_line!r}")

    headers: List[Header] = []
    for line in _unfold_headers(lines[1:]):
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            raise MessageParseError(f"Malformed header line: {line!r}")
        headers.append(Header(canonical_header_name(name), value.strip()))

    declared = next((h.value for h in headers if h.name == CONTENT_LENGTH_HEADER), None)
    if declared is not None:
        try:
            length = int(declared)
        except ValueError as e:
            raise MessageParseError(f"Invalid Content-Length: {declared!r}") from e
        if length > len(body):
            raise MessageParseError(
                f"Invalid Content-Length {length} != {len(body)}"
            )
        body = body[:length]

    if is_response:
        return SipResponse(
            headers=tuple(headers),
            body=body,
            source=source,
            status_code=status_code,
            reason_phrase=parts[2] if len(parts) > 2 else "",
        )

    return SipRequest(
        headers=tuple(headers),
        body=body,
        source=source,
        method=parts[0],
        request_uri=parts[1],
    )
