"""Unit tests for logging_audit module."""

import logging
from pathlib import Path

import pytest

from sip_test_util.logging_audit import (
    CredentialRedactingFormatter,
    configure_logging,
    configure_logging_from_config,
    get_logger,
    get_operation_logger,
    log_audit_event,
    log_message_event,
    set_operation_log_level,
)
from sip_test_util.config import LoggingConfig


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Detach handlers added by configure_logging after each test."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
    for name in ("store", "await", "transaction"):
        get_operation_logger(name).setLevel(logging.NOTSET)


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)


class TestConfigureLogging:
    """Test logging configuration."""

    def test_configure_logging_creates_file(self, tmp_path):
        """Test logging configuration creates log file."""
        # Arrange
        log_file = tmp_path / "test.log"

        # Act
        configure_logging(level="INFO", log_file=log_file)
        logger = get_logger(__name__)
        logger.info("Test message")

        # Assert
        assert log_file.exists()
        assert "Test message" in log_file.read_text()

    def test_configure_logging_file_level_debug(self, tmp_path):
        """Test file handler always uses DEBUG level."""
        # Arrange
        log_file = tmp_path / "test.log"

        # Act
        configure_logging(level="WARNING", log_file=log_file)
        logger = get_logger(__name__)
        logger.debug("Debug message")

        # Assert
        assert "Debug message" in log_file.read_text()
        root_logger = logging.getLogger()
        console = [
            h for h in root_logger.handlers
            if isinstance(h.formatter, CredentialRedactingFormatter)
            and not hasattr(h, "baseFilename")
        ]
        assert console[0].level == logging.WARNING

    def test_configure_logging_creates_directory(self, tmp_path):
        log_file = tmp_path / "nested" / "dir" / "test.log"

        configure_logging(level="INFO", log_file=log_file)

        assert log_file.parent.is_dir()

    def test_configure_logging_is_idempotent(self, tmp_path):
        """Test repeated calls do not stack handlers."""
        configure_logging(level="INFO", log_file=tmp_path / "a.log")
        configure_logging(level="INFO", log_file=tmp_path / "b.log")

        root_logger = logging.getLogger()
        file_handlers = [h for h in root_logger.handlers if hasattr(h, "baseFilename")]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename.endswith("b.log")

    def test_configure_logging_invalid_level(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="VERBOSE", log_file=tmp_path / "x.log")

    def test_log_file_from_environment(self, tmp_path, monkeypatch):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("SIP_TEST_LOG_FILE", str(log_file))

        configure_logging(level="INFO")
        get_logger(__name__).info("from env")

        assert "from env" in log_file.read_text()

    def test_configure_from_config(self, tmp_path):
        log_file = tmp_path / "cfg.log"

        configure_logging_from_config(LoggingConfig(level="error", log_file=log_file))
        get_logger(__name__).info("info goes to file")

        assert "info goes to file" in Path(log_file).read_text()


class TestOperationLoggers:
    """Test per-operation loggers."""

    @pytest.mark.parametrize("operation", ["store", "await", "transaction"])
    def test_known_operations(self, operation):
        assert get_operation_logger(operation).name == f"sip_test_util.{operation}"

    def test_unknown_operation(self):
        with pytest.raises(ValueError, match="Unknown operation"):
            get_operation_logger("soap")

    def test_set_operation_log_level(self):
        set_operation_log_level("await", "debug")
        assert get_operation_logger("await").level == logging.DEBUG

    def test_set_operation_log_level_invalid(self):
        with pytest.raises(ValueError):
            set_operation_log_level("await", "LOUD")


class TestCredentialRedactingFormatter:
    """Test masking of SIP credentials."""

    def test_authorization_header_masked(self):
        formatter = CredentialRedactingFormatter(fmt="%(message)s")
        text = formatter.format(_record(
            'Authorization: Digest username="alice", realm="atlanta.example.com", '
            'nonce="84a4cc6f", response="7587245234b3434cc3412213e5f113a5"'
        ))

        assert text == "Authorization: [CREDENTIALS-REDACTED]"

    def test_proxy_authorization_mid_message(self):
        formatter = CredentialRedactingFormatter(fmt="%(message)s")
        text = formatter.format(_record(
            "INVITE sip:bob@example.com SIP/2.0\r\n"
            "Proxy-Authorization: Digest username=\"alice\"\r\n"
            "CSeq: 2 INVITE"
        ))

        assert "alice" not in text
        assert "Proxy-Authorization: [CREDENTIALS-REDACTED]" in text
        assert "CSeq: 2 INVITE" in text

    def test_stray_digest_parameters_masked(self):
        formatter = CredentialRedactingFormatter(fmt="%(message)s")
        text = formatter.format(_record('challenge nonce="abc123" cnonce="0a4f113b"'))

        assert "abc123" not in text
        assert 'nonce="[REDACTED]"' in text

    def test_redaction_disabled(self):
        formatter = CredentialRedactingFormatter(fmt="%(message)s", redact_credentials=False)
        message = 'Authorization: Digest response="secret"'

        assert formatter.format(_record(message)) == message

    def test_other_headers_untouched(self):
        formatter = CredentialRedactingFormatter(fmt="%(message)s")
        message = "WWW-Authenticate: Digest realm=\"atlanta.example.com\""

        assert formatter.format(_record(message)) == message


class TestAuditEvents:
    """Test audit trail entries."""

    def test_success_logged_at_info(self, caplog):
        with caplog.at_level(logging.DEBUG):
            log_audit_event("AWAIT_SATISFIED", {
                "status": "success",
                "description": "200 OK",
                "duration": 0.35,
                "attempts": 4,
                "correlation_id": "abc",
            })

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage() == (
            "AUDIT [AWAIT_SATISFIED] | status=success | description=200 OK | "
            "duration=0.350s | attempts=4 | correlation_id=abc"
        )

    def test_failure_logged_at_error(self, caplog):
        with caplog.at_level(logging.DEBUG):
            log_audit_event("AWAIT_TIMEOUT", {"status": "failure", "attempts": 9})

        assert caplog.records[-1].levelno == logging.ERROR

    def test_extra_fields_appended_and_input_not_mutated(self, caplog):
        details = {"status": "success", "stack": "FakeStack"}

        with caplog.at_level(logging.DEBUG):
            log_audit_event("STACK_DISPOSED", details)

        assert "stack=FakeStack" in caplog.text
        assert details == {"status": "success", "stack": "FakeStack"}

    def test_message_event(self, caplog):
        with caplog.at_level(logging.DEBUG):
            log_message_event("received", "alice #1 response 180 Ringing", raw="SIP/2.0 180")

        assert "MESSAGE [RECEIVED] | alice #1 response 180 Ringing" in caplog.text
        assert "MESSAGE BODY [RECEIVED]" in caplog.text
