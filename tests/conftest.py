"""Pytest configuration and fixtures for Klaviyo client tests."""

import logging
from typing import Any, Callable, List, Tuple, Union
from unittest.mock import Mock, AsyncMock

import httpx
import pytest

from klaviyo_client.logging import LogLevel


API_BASE = "https://api.example.com/api"

Outcome = Union[httpx.Response, Exception]


class RecordingSink:
    """Log sink that keeps every line for assertions."""

    def __init__(self) -> None:
        self.records: List[Tuple[LogLevel, str, dict]] = []

    def log(self, level: LogLevel, message: str, **context: Any) -> None:
        self.records.append((LogLevel(level), message, context))

    def messages(self, level: LogLevel) -> List[str]:
        return [message for lvl, message, _ in self.records if lvl is level]


class ScriptedTransport(httpx.MockTransport):
    """MockTransport replaying a fixed script of responses and errors.

    The last outcome repeats once the script runs out.
    """

    def __init__(self, outcomes: List[Outcome]) -> None:
        self.outcomes = list(outcomes)
        self.requests: List[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        # Fresh copy per request; httpx binds streams to the response it sends
        return httpx.Response(
            outcome.status_code,
            headers=outcome.headers,
            content=outcome.content,
        )


@pytest.fixture
def sink():
    """Recording log sink."""
    return RecordingSink()


@pytest.fixture
def sleep():
    """Stand-in for the backoff sleep."""
    return Mock()


@pytest.fixture
def async_sleep():
    """Stand-in for the async backoff sleep."""
    return AsyncMock()


@pytest.fixture
def scripted_transport() -> Callable[..., ScriptedTransport]:
    """Factory for scripted transports."""
    def factory(*outcomes: Outcome) -> ScriptedTransport:
        return ScriptedTransport(list(outcomes))
    return factory


@pytest.fixture
def client_options(sink):
    """Default client keyword arguments."""
    return {
        "public_key": "pk_test_public",
        "private_key": "sk_test_private",
        "api_base_path": API_BASE,
        "retry_count": 3,
        "log_sink": sink,
    }


@pytest.fixture
def klaviyo_logs(caplog):
    """Capture everything the package logger emits."""
    caplog.set_level(logging.DEBUG, logger="klaviyo_client")
    return caplog
