"""Asynchronous Klaviyo API client."""

from datetime import datetime
from typing import Optional, Any, Awaitable, Callable, Iterable, Mapping, Union

import httpx

from klaviyo_client.async_dispatcher import AsyncDispatcher
from klaviyo_client.client import resolve_config
from klaviyo_client.logging import LogLevel, LogSink
from klaviyo_client.models import ClientConfig
from klaviyo_client.operations import (
    build_identify_request,
    build_subscribe_request,
    build_suppress_request,
    build_track_request,
)


class AsyncKlaviyo:
    """Async client for the Klaviyo track, identify, exclusion and list APIs.

    Concurrent calls share only the configuration and the connection pool.
    """

    def __init__(
        self,
        public_key: Optional[str] = None,
        private_key: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        **options: Any,
    ) -> None:
        """Initialize async Klaviyo client."""
        self.config = resolve_config(public_key, private_key, config, options)
        self._dispatcher = AsyncDispatcher(self.config, transport=transport, sleep=sleep)

    @property
    def sink(self) -> LogSink:
        return self._dispatcher.sink

    async def track(
        self,
        event_name: str,
        customer_properties: Mapping[str, Any],
        event_properties: Optional[Mapping[str, Any]] = None,
        timestamp: Optional[Union[datetime, int, float]] = None,
    ) -> Any:
        """Report that a customer did something."""
        self.sink.log(LogLevel.VERBOSE, f"Sending Klaviyo a track event {event_name}")
        request = build_track_request(event_name, customer_properties, event_properties, timestamp)
        return await self._dispatcher.dispatch(request)

    async def identify(self, customer_properties: Mapping[str, Any]) -> Any:
        """Set properties on a customer profile."""
        self.sink.log(LogLevel.VERBOSE, "Sending Klaviyo an identify event")
        request = build_identify_request(customer_properties)
        return await self._dispatcher.dispatch(request)

    async def suppress(self, email: str) -> Any:
        """Exclude an email from all outbound communication."""
        self.sink.log(LogLevel.VERBOSE, "Sending Klaviyo a suppression")
        request = build_suppress_request(email, self.config)
        return await self._dispatcher.dispatch(request)

    async def subscribe(self, list_id: str, emails: Iterable[str]) -> Any:
        """Subscribe emails to a list; empty entries are skipped."""
        self.sink.log(LogLevel.VERBOSE, f"Subscribing emails to Klaviyo list {list_id}")
        request = build_subscribe_request(list_id, emails, self.config)
        return await self._dispatcher.dispatch(request)

    async def aclose(self) -> None:
        """Close the client and release connections."""
        await self._dispatcher.aclose()

    async def __aenter__(self) -> "AsyncKlaviyo":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
