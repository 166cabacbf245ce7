"""
klaviyo-client - Python client for the Klaviyo track and list APIs.

Features:
- track / identify with base64 event payloads
- suppress and list subscribe with the private key
- Retry of network failures, 5xx and 429 with exponential backoff
- Sync and async clients over httpx
"""

import logging as _logging

from klaviyo_client.client import Klaviyo
from klaviyo_client.async_client import AsyncKlaviyo
from klaviyo_client.dispatcher import Dispatcher
from klaviyo_client.async_dispatcher import AsyncDispatcher
from klaviyo_client.models import (
    BodyEncoding,
    ClientConfig,
    HTTPMethod,
    OperationRequest,
)
from klaviyo_client.retry import (
    ExponentialBackoff,
    RetryDecision,
    decide_retry,
    is_error_retryable,
)
from klaviyo_client.exceptions import (
    KlaviyoError,
    PreconditionError,
    MissingPublicKeyError,
    MissingPrivateKeyError,
    MissingIdentifierError,
    MissingArgumentError,
)
from klaviyo_client.logging import (
    LogLevel,
    LogSink,
    LoggingSink,
    NullSink,
    setup_logging,
)

_logging.getLogger("klaviyo_client").addHandler(_logging.NullHandler())

__version__ = "1.0.0"

__all__ = [
    # Clients
    "Klaviyo",
    "AsyncKlaviyo",
    # Dispatch
    "Dispatcher",
    "AsyncDispatcher",
    "BodyEncoding",
    "ClientConfig",
    "HTTPMethod",
    "OperationRequest",
    # Retry
    "ExponentialBackoff",
    "RetryDecision",
    "decide_retry",
    "is_error_retryable",
    # Exceptions
    "KlaviyoError",
    "PreconditionError",
    "MissingPublicKeyError",
    "MissingPrivateKeyError",
    "MissingIdentifierError",
    "MissingArgumentError",
    # Logging
    "LogLevel",
    "LogSink",
    "LoggingSink",
    "NullSink",
    "setup_logging",
]
