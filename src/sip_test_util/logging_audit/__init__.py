"""Logging Audit module.

This module provides logging configuration and audit trail functionality.
"""

from .audit import log_audit_event, log_message_event
from .formatters import CredentialRedactingFormatter
from .logger import (
    configure_logging,
    configure_logging_from_config,
    get_logger,
    get_operation_logger,
    set_operation_log_level,
)

__all__ = [
    "configure_logging",
    "configure_logging_from_config",
    "get_logger",
    "get_operation_logger",
    "set_operation_log_level",
    "log_audit_event",
    "log_message_event",
    "CredentialRedactingFormatter",
]
