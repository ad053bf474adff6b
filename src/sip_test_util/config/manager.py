"""Loading configuration and holding the process-wide polling defaults.

Values are resolved in this order, later sources winning:

1. Built-in defaults (config/defaults.py)
2. The JSON configuration file
3. SIP_TEST_* environment variables (a .env file is read first)
4. CLI flags, applied by the caller

The polling section is installed as the await engine's defaults through
apply_polling_config(); tests may also change them directly with
set_polling_defaults().
"""

import copy
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import ValidationError

from sip_test_util.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from sip_test_util.config.schema import Config, PollingConfig
from sip_test_util.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "SIP_TEST_"

_polling_defaults = PollingConfig()
_polling_lock = threading.Lock()


def _parse_seconds(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid value for {ENV_PREFIX}{name}: {value!r}. Must be a number of seconds."
        ) from e


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


# variable suffix -> (section, key, parser)
_ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str, str], Any]]] = {
    "POLL_INTERVAL": ("polling", "poll_interval", _parse_seconds),
    "AWAIT_TIMEOUT": ("polling", "timeout", _parse_seconds),
    "LOG_LEVEL": ("logging", "level", lambda _name, value: value),
    "LOG_FILE": ("logging", "log_file", lambda _name, value: value),
    "REDACT_CREDENTIALS": ("logging", "redact_credentials", lambda _name, value: _parse_bool(value)),
}


def load_config(config_path: Optional[Path] = None) -> Config:
    """Build the effective configuration.

    Args:
        config_path: JSON file to read. Defaults to ./config/config.json; a
            missing file means built-in defaults.

    Returns:
        Validated Config

    Raises:
        ConfigurationError: If the file is unreadable or not a JSON object,
            an override cannot be parsed, or validation fails

    Example:
        >>> load_config(Path("config/config.json")).polling.timeout
        10.0
    """
    load_dotenv()

    path = Path(config_path) if config_path is not None else Path(DEFAULT_CONFIG_PATH)
    raw = _read_config_file(path)
    _apply_env_overrides(raw)

    try:
        return Config(**raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: correct the values in {path} or the {ENV_PREFIX}* environment variables."
        ) from e


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.info("No config file at %s, using defaults", path)
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    logger.info("Loaded configuration from %s", path)
    return data


def _apply_env_overrides(raw: Dict[str, Any]) -> None:
    for suffix, (section, key, parse) in _ENV_OVERRIDES.items():
        value = os.getenv(f"{ENV_PREFIX}{suffix}")
        if not value:
            continue
        raw.setdefault(section, {})[key] = parse(suffix, value)
        logger.debug("%s.%s overridden by %s%s", section, key, ENV_PREFIX, suffix)


def get_polling_defaults() -> PollingConfig:
    """Polling settings the await engine uses when a call passes none."""
    with _polling_lock:
        return _polling_defaults


def set_polling_defaults(
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> PollingConfig:
    """Replace the process-wide polling defaults.

    Arguments left as None keep their current value. The new pair is validated
    as a whole; on failure the previous defaults stay in place.

    Returns:
        The installed defaults

    Raises:
        ConfigurationError: If the resulting pair is invalid

    Example:
        >>> set_polling_defaults(timeout=2.0)
        PollingConfig(poll_interval=0.1, timeout=2.0)
    """
    global _polling_defaults
    with _polling_lock:
        merged = _polling_defaults.model_dump()
        if poll_interval is not None:
            merged["poll_interval"] = poll_interval
        if timeout is not None:
            merged["timeout"] = timeout
        try:
            _polling_defaults = PollingConfig(**merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid polling defaults:\n{e}") from e
        logger.debug(
            "Polling defaults: poll_interval=%.3fs timeout=%.3fs",
            _polling_defaults.poll_interval,
            _polling_defaults.timeout,
        )
        return _polling_defaults


def apply_polling_config(config: Config) -> PollingConfig:
    return set_polling_defaults(
        poll_interval=config.polling.poll_interval,
        timeout=config.polling.timeout,
    )


def reset_polling_defaults() -> PollingConfig:
    global _polling_defaults
    with _polling_lock:
        _polling_defaults = PollingConfig()
        return _polling_defaults
