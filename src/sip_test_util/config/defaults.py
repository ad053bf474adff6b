"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Poll every 100 ms, give up after 10 seconds
DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_AWAIT_TIMEOUT = 10.0

# Default configuration dictionary
# This is used as a fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "polling": {
        "poll_interval": DEFAULT_POLL_INTERVAL,
        "timeout": DEFAULT_AWAIT_TIMEOUT,
    },
    "logging": {
        # Default log level: INFO (moderate verbosity)
        "level": "INFO",
        # Default log file path
        "log_file": "logs/sip-test-util.log",
        # Mask Authorization headers unless the user opts out
        "redact_credentials": True,
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"
