"""Request builders for the public Klaviyo operations.

Every builder validates its arguments and returns a fresh
:class:`OperationRequest`; nothing here performs I/O. Caller-supplied
mappings are copied, never modified.
"""

from datetime import datetime
from typing import Optional, Dict, Any, Iterable, List, Mapping, Union

from klaviyo_client.exceptions import (
    MissingArgumentError,
    MissingIdentifierError,
    MissingPrivateKeyError,
)
from klaviyo_client.models import BodyEncoding, ClientConfig, HTTPMethod, OperationRequest


EMAIL_KEY = "$email"
ID_KEY = "$id"
IDENTIFIER_KEYS = (EMAIL_KEY, ID_KEY)

TRACK_PATH = "track"
IDENTIFY_PATH = "identify"
EXCLUSIONS_PATH = "people/exclusions"
EXCLUSIONS_VERSION = "v1"
SUBSCRIBE_VERSION = "v2"


def has_customer_identity(customer_properties: Optional[Mapping[str, Any]]) -> bool:
    """Check that a property bag can address a Klaviyo profile."""
    if not customer_properties:
        return False
    return any(customer_properties.get(key) for key in IDENTIFIER_KEYS)


def require_customer_identity(customer_properties: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a copy of customer properties carrying $email or $id.

    Raises:
        MissingIdentifierError: If neither key holds a value.
    """
    if not has_customer_identity(customer_properties):
        raise MissingIdentifierError()
    return dict(customer_properties)


def require_private_key(config: ClientConfig, operation: str) -> None:
    if not config.has_private_key:
        raise MissingPrivateKeyError(operation=operation)


def _to_unix_seconds(timestamp: Union[datetime, int, float]) -> int:
    if isinstance(timestamp, datetime):
        return int(timestamp.timestamp())
    return int(timestamp)


def build_track_request(
    event_name: str,
    customer_properties: Mapping[str, Any],
    event_properties: Optional[Mapping[str, Any]] = None,
    timestamp: Optional[Union[datetime, int, float]] = None,
) -> OperationRequest:
    """Build a track request.

    Args:
        event_name: Name of the event, e.g. ``"Filled out profile"``.
        customer_properties: Profile properties, must hold $email or $id.
        event_properties: Properties of the event itself.
        timestamp: When the event happened; Klaviyo uses receipt time if
            omitted.

    Returns:
        A GET request for the ``track`` endpoint.
    """
    if not event_name:
        raise MissingArgumentError("event_name")
    customer = require_customer_identity(customer_properties)

    body: Dict[str, Any] = {
        "event": event_name,
        "properties": dict(event_properties or {}),
        "customer_properties": customer,
    }
    if timestamp is not None:
        body["time"] = _to_unix_seconds(timestamp)

    return OperationRequest(
        resource_path=TRACK_PATH,
        body=body,
        encoding=BodyEncoding.QUERY_DATA,
        http_method=HTTPMethod.GET,
    )


def build_identify_request(customer_properties: Mapping[str, Any]) -> OperationRequest:
    """Build an identify request for a profile's properties."""
    properties = require_customer_identity(customer_properties)
    return OperationRequest(
        resource_path=IDENTIFY_PATH,
        body={"properties": properties},
        encoding=BodyEncoding.QUERY_DATA,
        http_method=HTTPMethod.GET,
    )


def build_suppress_request(email: str, config: ClientConfig) -> OperationRequest:
    """Build a request excluding an email from all outbound communication."""
    if not email:
        raise MissingArgumentError("email")
    require_private_key(config, "suppress")

    return OperationRequest(
        api_version=EXCLUSIONS_VERSION,
        resource_path=EXCLUSIONS_PATH,
        body={"email": email},
        encoding=BodyEncoding.FORM,
        http_method=HTTPMethod.POST,
    )


def build_subscribe_request(
    list_id: str,
    emails: Union[str, Iterable[str]],
    config: ClientConfig,
) -> OperationRequest:
    """Build a request subscribing emails to a list.

    Empty entries in ``emails`` are dropped. A single address passed as a
    plain string is treated as a one-item list.
    """
    if not list_id:
        raise MissingArgumentError("list_id")
    if isinstance(emails, str):
        emails = [emails]
    profiles: List[Dict[str, str]] = [{"email": email} for email in (emails or []) if email]
    if not profiles:
        raise MissingArgumentError("emails", "You must pass at least one email to subscribe.")
    require_private_key(config, "subscribe")

    return OperationRequest(
        api_version=SUBSCRIBE_VERSION,
        resource_path=f"list/{list_id}/subscribe",
        body={"profiles": profiles},
        encoding=BodyEncoding.JSON,
        http_method=HTTPMethod.POST,
    )
