"""Asynchronous request dispatcher for the Klaviyo client."""

from typing import Optional, Any, Callable, Awaitable

import httpx
from tenacity import AsyncRetrying

from klaviyo_client.dispatcher import BaseDispatcher
from klaviyo_client.encoding import EncodedRequest, decode_response, encode_request
from klaviyo_client.logging import LogLevel
from klaviyo_client.models import ClientConfig, OperationRequest


class AsyncDispatcher(BaseDispatcher):
    """Async twin of :class:`~klaviyo_client.dispatcher.Dispatcher`.

    A call suspends only while awaiting the HTTP exchange or the backoff
    timer between retries.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        super().__init__(config)
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            timeout=self._timeout(),
            transport=transport,
            follow_redirects=True,
        )

    async def _send(self, encoded: EncodedRequest) -> Any:
        response = await self._client.request(**encoded.as_httpx_kwargs())
        response.raise_for_status()
        return decode_response(response)

    async def dispatch(self, request: OperationRequest) -> Any:
        """Send a request and return the decoded response body."""
        encoded = encode_request(request, self.config)
        self.sink.log(LogLevel.INFO, encoded.url)

        retrying = AsyncRetrying(**self._retry_kwargs(encoded, self._sleep))
        try:
            payload = await retrying(self._send, encoded)
        except Exception as error:
            self._on_failure(encoded, error)
            raise

        return self._on_success(request, encoded, payload)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncDispatcher":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
