"""Pydantic models for the sip-test-util configuration file.

The file has two sections, "polling" and "logging". Unknown keys are ignored;
missing keys take the defaults from config/defaults.py.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sip_test_util.config.defaults import DEFAULT_AWAIT_TIMEOUT, DEFAULT_POLL_INTERVAL

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PollingConfig(BaseModel):
    """Polling settings for the await engine.

    Instances are immutable so the process-wide defaults can be swapped
    atomically and read from any thread.

    Attributes:
        poll_interval: Seconds to sleep between condition evaluations
        timeout: Maximum seconds to wait before failing with a timeout
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        gt=0.0,
        description="Seconds between condition evaluations",
    )
    timeout: float = Field(
        default=DEFAULT_AWAIT_TIMEOUT,
        ge=0.0,
        description="Maximum wait in seconds",
    )

    @model_validator(mode="after")
    def validate_interval_within_timeout(self) -> "PollingConfig":
        """Validate the poll interval does not exceed a non-zero timeout.

        Raises:
            ValueError: If poll_interval > timeout
        """
        if self.timeout and self.poll_interval > self.timeout:
            raise ValueError(
                f"poll_interval ({self.poll_interval}) cannot be greater "
                f"than timeout ({self.timeout}). "
                f"Fix: Set poll_interval <= timeout."
            )
        return self


class LoggingConfig(BaseModel):
    """Logging section.

    Attributes:
        level: Console level name, stored uppercase
        log_file: Rotating log file location
        redact_credentials: Mask Authorization headers and digest parameters
    """

    level: str = Field(
        default="INFO",
        description="Console log level name"
    )
    log_file: Path = Field(
        default=Path("logs/sip-test-util.log"),
        description="Log file path"
    )
    redact_credentials: bool = Field(
        default=True,
        description="Redact Authorization header values from logs"
    )

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Uppercase the level name and reject unknown names."""
        level = v.upper()
        if level not in VALID_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Expected one of: {', '.join(VALID_LEVELS)}"
            )
        return level


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        polling: Await engine polling defaults
        logging: Logging configuration

    Example:
        >>> config = Config(polling=PollingConfig(poll_interval=0.05, timeout=2))
        >>> config.polling.timeout
        2.0
    """

    polling: PollingConfig = PollingConfig()
    logging: LoggingConfig = LoggingConfig()
