"""Tests for log sinks and key masking."""

import logging

import httpx

from klaviyo_client import Klaviyo
from klaviyo_client.logging import (
    LOGGER_NAME,
    VERBOSE,
    LogLevel,
    LoggingSink,
    LogSink,
    NullSink,
    mask_value,
    redact_payload,
    setup_logging,
)


class TestLoggingSink:
    """Tests for the stdlib-backed sink."""

    def test_forwards_to_package_logger(self, klaviyo_logs):
        sink = LoggingSink(level=LogLevel.VERBOSE)

        sink.log(LogLevel.VERBOSE, "sent", url="https://api.example.com")

        record = klaviyo_logs.records[-1]
        assert record.name == LOGGER_NAME
        assert record.levelno == VERBOSE
        assert record.levelname == "VERBOSE"
        assert record.context == {"url": "https://api.example.com"}

    def test_filters_below_level(self, klaviyo_logs):
        """Test messages below the configured level are dropped."""
        sink = LoggingSink(level=LogLevel.WARN)

        sink.log(LogLevel.INFO, "endpoint")
        sink.log(LogLevel.VERBOSE, "details")
        sink.log(LogLevel.ERROR, "failed")

        assert [r.getMessage() for r in klaviyo_logs.records] == ["failed"]

    def test_accepts_level_strings(self, klaviyo_logs):
        sink = LoggingSink(level="info")

        sink.log("warn", "rejected")

        assert klaviyo_logs.records[-1].levelno == logging.WARNING

    def test_level_mapping(self):
        assert LogLevel.ERROR.stdlib_level == logging.ERROR
        assert LogLevel.WARN.stdlib_level == logging.WARNING
        assert LogLevel.INFO.stdlib_level == logging.INFO
        assert LogLevel.VERBOSE.stdlib_level < logging.INFO


class TestSinks:
    """Tests for the sink protocol."""

    def test_sinks_satisfy_protocol(self):
        assert isinstance(NullSink(), LogSink)
        assert isinstance(LoggingSink(), LogSink)

    def test_null_sink_is_silent(self, klaviyo_logs):
        NullSink().log(LogLevel.ERROR, "nothing")

        assert klaviyo_logs.records == []

    def test_default_client_sink_honours_log_level(self, klaviyo_logs, scripted_transport):
        """Test the default sink uses the configured log level."""
        transport = scripted_transport(httpx.Response(200, text="1"))

        with Klaviyo("pk_test_public", log_level="info", transport=transport) as client:
            client.identify({"$id": "42"})

        levels = {r.levelno for r in klaviyo_logs.records}
        assert logging.INFO in levels
        assert VERBOSE not in levels


class TestRedaction:
    """Tests for key masking."""

    def test_mask_value_keeps_edges(self):
        assert mask_value("pk_abcdef123456") == "pk_a...3456"

    def test_mask_short_value(self):
        assert mask_value("short") == "****"

    def test_redact_payload_masks_keys(self):
        payload = {"token": "pk_abcdef123456", "api_key": "sk_abcdef123456", "email": "a@b.com"}

        redacted = redact_payload(payload)

        assert redacted["token"] == "pk_a...3456"
        assert redacted["api_key"] == "sk_a...3456"
        assert redacted["email"] == "a@b.com"
        assert payload["token"] == "pk_abcdef123456"

    def test_keys_never_reach_logs(self, klaviyo_logs, scripted_transport):
        """Test key material is masked in every emitted record."""
        transport = scripted_transport(httpx.Response(200, text="1"))

        with Klaviyo(
            "pk_secretpublic",
            private_key="sk_secretprivate",
            log_level="verbose",
            transport=transport,
        ) as client:
            client.suppress("a@b.com")

        for record in klaviyo_logs.records:
            text = f"{record.getMessage()} {getattr(record, 'context', '')}"
            assert "sk_secretprivate" not in text
            assert "pk_secretpublic" not in text


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_installs_console_handler(self):
        logger = logging.getLogger(LOGGER_NAME)
        before = list(logger.handlers)
        try:
            setup_logging(level="verbose")

            added = [h for h in logger.handlers if h not in before]
            assert len(added) == 1
            assert logger.level == VERBOSE
            assert added[0].formatter.datefmt == "%Y-%m-%d %H:%M:%S"
        finally:
            for handler in logger.handlers[:]:
                if handler not in before:
                    logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
