"""Leveled log sinks with key masking for the Klaviyo client."""

import logging
from enum import Enum
from typing import Optional, Dict, Any, Iterable, Mapping, Protocol, runtime_checkable


LOGGER_NAME = "klaviyo_client"

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")


class LogLevel(str, Enum):
    """Log levels understood by a sink, from most to least severe."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    VERBOSE = "verbose"

    @property
    def stdlib_level(self) -> int:
        return _STDLIB_LEVELS[self]


_STDLIB_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.VERBOSE: VERBOSE,
}


@runtime_checkable
class LogSink(Protocol):
    """Anything that accepts a leveled log line."""

    def log(self, level: LogLevel, message: str, **context: Any) -> None:
        ...


class NullSink:
    """Sink that drops every message."""

    def log(self, level: LogLevel, message: str, **context: Any) -> None:
        return None


class LoggingSink:
    """Sink that forwards to a standard library logger.

    Messages below ``level`` are dropped before reaching the logger. The
    package logger carries a ``NullHandler``, so nothing is printed until
    the application configures logging (see :func:`setup_logging`).
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.level = LogLevel(level)
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def log(self, level: LogLevel, message: str, **context: Any) -> None:
        stdlib_level = LogLevel(level).stdlib_level
        if stdlib_level < self.level.stdlib_level:
            return
        self.logger.log(stdlib_level, message, extra={"context": context})


REDACTION_PLACEHOLDER = "****"
DEFAULT_REDACT_KEYS = ("token", "api_key")


def mask_value(value: str, chars: int = 4) -> str:
    """Mask a key, keeping a few characters at each end.

    Args:
        value: The value to mask.
        chars: Characters kept on each side.

    Returns:
        Masked value.
    """
    value = str(value)
    if len(value) <= chars * 2:
        return REDACTION_PLACEHOLDER
    return f"{value[:chars]}...{value[-chars:]}"


def redact_payload(
    payload: Mapping[str, Any],
    keys: Iterable[str] = DEFAULT_REDACT_KEYS,
) -> Dict[str, Any]:
    """Return a copy of a payload with key material masked.

    Args:
        payload: Outbound body.
        keys: Field names to mask.

    Returns:
        A new dictionary safe to log.
    """
    redact_set = {k.lower() for k in keys}
    redacted = {}
    for key, value in payload.items():
        if key.lower() in redact_set and value:
            redacted[key] = mask_value(value)
        else:
            redacted[key] = value
    return redacted


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
) -> None:
    """Set up console logging for the Klaviyo client.

    Args:
        level: Log level name, including ``VERBOSE``.
        format_string: Custom format string.
    """
    if format_string is None:
        format_string = (
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S")
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(handler)
    logger.setLevel(logging.getLevelName(level.upper()))
