"""Synchronous Klaviyo API client."""

from datetime import datetime
from typing import Optional, Any, Callable, Iterable, Mapping, Union

import httpx

from klaviyo_client.dispatcher import Dispatcher
from klaviyo_client.exceptions import MissingPublicKeyError
from klaviyo_client.logging import LogLevel, LogSink
from klaviyo_client.models import ClientConfig
from klaviyo_client.operations import (
    build_identify_request,
    build_subscribe_request,
    build_suppress_request,
    build_track_request,
)


def resolve_config(
    public_key: Optional[str],
    private_key: Optional[str],
    config: Optional[ClientConfig],
    options: Mapping[str, Any],
) -> ClientConfig:
    """Build the client configuration from keys and keyword options.

    Raises:
        MissingPublicKeyError: If no public key is given, before anything
            else is built.
    """
    if config is not None:
        if public_key or private_key or options:
            raise TypeError("Pass either a ClientConfig or keys and options, not both")
        return config
    if not public_key:
        raise MissingPublicKeyError()
    return ClientConfig(public_key=public_key, private_key=private_key, **options)


class Klaviyo:
    """Client for the Klaviyo track, identify, exclusion and list APIs.

    Example:
        with Klaviyo("pk_123", private_key="sk_456") as klaviyo:
            klaviyo.track("Filled out profile", {"$email": "a@b.com"})
    """

    def __init__(
        self,
        public_key: Optional[str] = None,
        private_key: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Optional[Callable[[float], None]] = None,
        **options: Any,
    ) -> None:
        """Initialize the client.

        Args:
            public_key: Public key that comes with every Klaviyo account.
            private_key: Private key, needed for suppress and subscribe.
            config: A prebuilt configuration, instead of keys and options.
            transport: Optional httpx transport.
            sleep: Optional replacement for the backoff sleep.
            **options: Other ClientConfig fields (api_base_path,
                retry_count, log_level, log_sink, timeout, ...).
        """
        self.config = resolve_config(public_key, private_key, config, options)
        self._dispatcher = Dispatcher(self.config, transport=transport, sleep=sleep)

    @property
    def sink(self) -> LogSink:
        return self._dispatcher.sink

    def track(
        self,
        event_name: str,
        customer_properties: Mapping[str, Any],
        event_properties: Optional[Mapping[str, Any]] = None,
        timestamp: Optional[Union[datetime, int, float]] = None,
    ) -> Any:
        """Report that a customer did something.

        Args:
            event_name: Name of the event.
            customer_properties: Profile properties with $email or $id.
            event_properties: Custom information about the event.
            timestamp: When the event happened.

        Returns:
            Klaviyo's response body; ``1`` on success, ``0`` if rejected.
        """
        self.sink.log(LogLevel.VERBOSE, f"Sending Klaviyo a track event {event_name}")
        request = build_track_request(event_name, customer_properties, event_properties, timestamp)
        return self._dispatcher.dispatch(request)

    def identify(self, customer_properties: Mapping[str, Any]) -> Any:
        """Set properties on a customer profile."""
        self.sink.log(LogLevel.VERBOSE, "Sending Klaviyo an identify event")
        request = build_identify_request(customer_properties)
        return self._dispatcher.dispatch(request)

    def suppress(self, email: str) -> Any:
        """Exclude an email from all outbound communication."""
        self.sink.log(LogLevel.VERBOSE, "Sending Klaviyo a suppression")
        request = build_suppress_request(email, self.config)
        return self._dispatcher.dispatch(request)

    def subscribe(self, list_id: str, emails: Iterable[str]) -> Any:
        """Subscribe emails to a list; empty entries are skipped."""
        self.sink.log(LogLevel.VERBOSE, f"Subscribing emails to Klaviyo list {list_id}")
        request = build_subscribe_request(list_id, emails, self.config)
        return self._dispatcher.dispatch(request)

    def close(self) -> None:
        """Close the client and release connections."""
        self._dispatcher.close()

    def __enter__(self) -> "Klaviyo":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
