"""Custom log formatters for the SIP Test Utility.

This module provides specialized formatters for logging, including masking of
SIP authentication credentials that appear in logged messages.
"""

import logging
import re
from typing import List, Optional, Tuple


class CredentialRedactingFormatter(logging.Formatter):
    """Formatter that masks SIP credentials in log messages.

    Logged SIP messages may carry Authorization or Proxy-Authorization
    headers. With redaction enabled the header value is replaced, and any
    digest ``response=`` or ``nonce=`` parameter elsewhere in the text is
    masked as well.

    Attributes:
        redact_credentials: Whether to enable redaction
        patterns: List of (regex_pattern, replacement_text) tuples

    Example:
        >>> formatter = CredentialRedactingFormatter(redact_credentials=True)
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: Optional[str] = None,
        redact_credentials: bool = True,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_credentials = redact_credentials

        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            # Whole header value: Authorization: Digest username="alice", ...
            (
                re.compile(r"\b((?:Proxy-)?Authorization:)[^\r\n]*", re.IGNORECASE),
                r"\1 [CREDENTIALS-REDACTED]",
            ),
            # Stray digest parameters
            (
                re.compile(r'\b(response|nonce|cnonce)="[^"]*"', re.IGNORECASE),
                r'\1="[REDACTED]"',
            ),
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional credential redaction."""
        formatted = super().format(record)

        if self.redact_credentials:
            for pattern, replacement in self.patterns:
                formatted = pattern.sub(replacement, formatted)

        return formatted
