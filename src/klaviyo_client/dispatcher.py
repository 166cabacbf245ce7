"""Synchronous request dispatcher for the Klaviyo client."""

from typing import Optional, Any, Callable

import httpx
from tenacity import Retrying, RetryCallState

from klaviyo_client.encoding import (
    EncodedRequest,
    decode_response,
    encode_request,
    is_soft_rejection,
)
from klaviyo_client.exceptions import describe_status
from klaviyo_client.logging import LogLevel, LogSink
from klaviyo_client.models import ClientConfig, OperationRequest
from klaviyo_client.retry import build_retry_kwargs, decide_retry


class BaseDispatcher:
    """Logging and retry wiring shared by the sync and async dispatchers."""

    def __init__(self, config: ClientConfig) -> None:
        self.config = config
        self.sink: LogSink = config.build_sink()

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.config.timeout, connect=self.config.connect_timeout)

    def _retry_kwargs(
        self,
        encoded: EncodedRequest,
        sleep: Optional[Callable[[float], Any]],
    ) -> dict:
        return build_retry_kwargs(
            retry_count=self.config.retry_count,
            backoff=self.config.backoff,
            sleep=sleep,
            before_sleep=self._retry_logger(encoded),
        )

    def _retry_logger(self, encoded: EncodedRequest) -> Callable[[RetryCallState], None]:
        def log_retry(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            decision = decide_retry(
                error,
                attempt=retry_state.attempt_number,
                retry_count=self.config.retry_count,
                backoff=self.config.backoff,
            )
            delay = retry_state.next_action.sleep if retry_state.next_action else decision.delay
            self.sink.log(
                LogLevel.WARN,
                f"Retry {retry_state.attempt_number}/{self.config.retry_count} "
                f"after {delay:.2f}s: {decision.reason}",
                url=encoded.url,
                attempt=retry_state.attempt_number,
                delay_seconds=delay,
            )

        return log_retry

    def _on_success(self, request: OperationRequest, encoded: EncodedRequest, payload: Any) -> Any:
        if is_soft_rejection(payload):
            self.sink.log(
                LogLevel.WARN,
                f"Klaviyo rejected the {request.resource_path} request",
                payload=encoded.log_payload,
            )
        else:
            self.sink.log(
                LogLevel.VERBOSE,
                f"Successfully sent {request.resource_path} request to Klaviyo",
                payload=encoded.log_payload,
            )
        return payload

    def _on_failure(self, encoded: EncodedRequest, error: BaseException) -> None:
        status = describe_status(error)
        self.sink.log(
            LogLevel.ERROR,
            f"Encountered {status} from {encoded.method} to {encoded.url}",
            payload=encoded.log_payload,
            error_type=type(error).__name__,
        )


class Dispatcher(BaseDispatcher):
    """Sends every Klaviyo operation, retrying transient failures.

    Each call builds its own retry state, so one dispatcher can serve many
    callers. Only the connection pool is shared.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            config: Client configuration.
            transport: Optional httpx transport (tests pass a MockTransport).
            sleep: Optional replacement for the backoff sleep.
        """
        super().__init__(config)
        self._sleep = sleep
        self._client = httpx.Client(
            timeout=self._timeout(),
            transport=transport,
            follow_redirects=True,
        )

    def _send(self, encoded: EncodedRequest) -> Any:
        response = self._client.request(**encoded.as_httpx_kwargs())
        response.raise_for_status()
        return decode_response(response)

    def dispatch(self, request: OperationRequest) -> Any:
        """Send a request and return the decoded response body.

        Args:
            request: The operation to send.

        Returns:
            The decoded body; ``0`` when Klaviyo rejected the request.

        Raises:
            MissingPrivateKeyError: Before any I/O, for privileged requests.
            httpx.HTTPError: The final error once retries stop, unchanged.
        """
        encoded = encode_request(request, self.config)
        self.sink.log(LogLevel.INFO, encoded.url)

        retrying = Retrying(**self._retry_kwargs(encoded, self._sleep))
        try:
            payload = retrying(self._send, encoded)
        except Exception as error:
            self._on_failure(encoded, error)
            raise

        return self._on_success(request, encoded, payload)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "Dispatcher":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
