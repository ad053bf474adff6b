"""Config module.

This module provides configuration management functionality.
"""

from sip_test_util.config.manager import (
    apply_polling_config,
    get_polling_defaults,
    load_config,
    reset_polling_defaults,
    set_polling_defaults,
)
from sip_test_util.config.schema import (
    Config,
    LoggingConfig,
    PollingConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Process-wide polling defaults
    "get_polling_defaults",
    "set_polling_defaults",
    "apply_polling_config",
    "reset_polling_defaults",
    # Configuration models
    "Config",
    "PollingConfig",
    "LoggingConfig",
]
