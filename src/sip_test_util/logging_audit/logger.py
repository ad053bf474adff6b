"""Logging setup for SIP test runs.

A test run logs to two places: the console, at the level the user picked, and
a rotating file that always receives DEBUG so message traffic and await
attempts can be inspected after a failure. Records pass through
CredentialRedactingFormatter on both handlers.

Library modules log through get_logger(__name__) or one of the operation
loggers (store, await, transaction), whose levels can be tuned separately.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from .formatters import CredentialRedactingFormatter

if TYPE_CHECKING:
    from ..config.schema import LoggingConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path("logs") / "sip-test-util.log"
LOG_FILE_ENV_VAR = "SIP_TEST_LOG_FILE"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

OPERATION_LOGGERS = {
    "store": "sip_test_util.store",
    "await": "sip_test_util.await",
    "transaction": "sip_test_util.transaction",
}

# handlers installed by configure_logging(), replaced on the next call
_installed_handlers: List[logging.Handler] = []

logger = logging.getLogger(__name__)


def _level_number(level: str) -> int:
    name = level.upper()
    if name not in VALID_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. Must be one of: {', '.join(VALID_LEVELS)}"
        )
    return logging.getLevelName(name)


def _resolve_log_file(log_file: Optional[Path]) -> Path:
    if log_file is not None:
        return Path(log_file)
    from_env = os.environ.get(LOG_FILE_ENV_VAR)
    return Path(from_env) if from_env else DEFAULT_LOG_FILE


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    redact_credentials: bool = True,
) -> None:
    """Install console and rotating file handlers on the root logger.

    Safe to call more than once: a second call removes everything the root
    logger holds and installs a fresh pair.

    Args:
        level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL). The file
            always records DEBUG.
        log_file: Log file path. Falls back to $SIP_TEST_LOG_FILE, then
            logs/sip-test-util.log.
        redact_credentials: Mask Authorization headers and digest parameters

    Raises:
        ValueError: If level is not a known level name
        RuntimeError: If the log directory cannot be created

    Example:
        >>> configure_logging(level="DEBUG", log_file=Path("logs/run.log"))
    """
    console_level = _level_number(level)
    path = _resolve_log_file(log_file)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(f"Cannot create log directory {path.parent}: {e}") from e

    root = logging.getLogger()
    if _installed_handlers:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        _installed_handlers.clear()
    root.setLevel(logging.DEBUG)

    formatter = CredentialRedactingFormatter(
        fmt=LOG_FORMAT, redact_credentials=redact_credentials
    )

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(formatter)
    root.addHandler(console)
    _installed_handlers.append(console)

    try:
        rotating = RotatingFileHandler(
            filename=str(path),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
    except OSError as e:
        root.warning("Cannot open log file %s (%s); console logging only", path, e)
        return

    rotating.setLevel(logging.DEBUG)
    rotating.setFormatter(formatter)
    root.addHandler(rotating)
    _installed_handlers.append(rotating)


def configure_logging_from_config(config: "LoggingConfig") -> None:
    configure_logging(
        level=config.level,
        log_file=config.log_file,
        redact_credentials=config.redact_credentials,
    )


def get_logger(module_name: str) -> logging.Logger:
    return logging.getLogger(module_name)


def get_operation_logger(operation: str) -> logging.Logger:
    """Return the logger for one area of the library.

    Args:
        operation: "store", "await" or "transaction"

    Raises:
        ValueError: For any other name

    Example:
        >>> get_operation_logger("await").debug("polling")
    """
    try:
        return logging.getLogger(OPERATION_LOGGERS[operation])
    except KeyError:
        raise ValueError(
            f"Unknown operation: {operation}. "
            f"Expected one of: {', '.join(OPERATION_LOGGERS)}"
        ) from None


def set_operation_log_level(operation: str, level: str) -> None:
    """Change one operation logger's level, e.g. DEBUG for just the await engine.

    Raises:
        ValueError: If the operation or level name is unknown
    """
    target = get_operation_logger(operation)
    target.setLevel(_level_number(level))
    logger.debug("%s level set to %s", target.name, level.upper())
