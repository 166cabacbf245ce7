"""URL building and payload encoding for Klaviyo requests."""

import base64
import json
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

import httpx

from klaviyo_client.exceptions import MissingPrivateKeyError
from klaviyo_client.logging import redact_payload
from klaviyo_client.models import BodyEncoding, ClientConfig, OperationRequest


@dataclass
class EncodedRequest:
    """An OperationRequest resolved into httpx request arguments."""

    method: str
    url: str
    params: Dict[str, str] = field(default_factory=dict)
    data: Optional[Dict[str, Any]] = None
    json: Optional[Dict[str, Any]] = None
    log_payload: Dict[str, Any] = field(default_factory=dict)

    def as_httpx_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "method": self.method,
            "url": self.url,
            "params": self.params or None,
        }
        if self.data is not None:
            kwargs["data"] = self.data
        if self.json is not None:
            kwargs["json"] = self.json
        return kwargs


def build_url(base: str, resource_path: str, api_version: Optional[str] = None) -> str:
    """Join the base path, optional version segment and resource path.

    >>> build_url("https://a.klaviyo.com/api", "track")
    'https://a.klaviyo.com/api/track'
    >>> build_url("https://a.klaviyo.com/api", "people/exclusions", "v1")
    'https://a.klaviyo.com/api/v1/people/exclusions'
    """
    if api_version:
        return f"{base}/{api_version}/{resource_path}"
    return f"{base}/{resource_path}"


def encode_data_param(body: Dict[str, Any]) -> str:
    """Serialize a body to JSON and base64-encode it for the ``data`` parameter."""
    raw = json.dumps(body, separators=(",", ":"), default=str)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_data_param(value: str) -> Dict[str, Any]:
    """Inverse of :func:`encode_data_param`."""
    return json.loads(base64.b64decode(value).decode("utf-8"))


def encode_request(request: OperationRequest, config: ClientConfig) -> EncodedRequest:
    """Resolve the endpoint and inject credentials into a copy of the body.

    Args:
        request: The operation to send.
        config: Client configuration holding the keys.

    Returns:
        The encoded request.

    Raises:
        MissingPrivateKeyError: If the encoding needs a private key and none
            is configured.
    """
    url = build_url(config.api_base_path, request.resource_path, request.api_version)
    params = dict(request.query_params)
    body = dict(request.body)

    if request.encoding.uses_private_key:
        if not config.has_private_key:
            raise MissingPrivateKeyError(operation=request.resource_path)
        body["api_key"] = config.private_key
    else:
        body["token"] = config.public_key

    encoded = EncodedRequest(
        method=request.http_method.value,
        url=url,
        params=params,
        log_payload=redact_payload(body),
    )

    if request.encoding is BodyEncoding.QUERY_DATA:
        encoded.params["data"] = encode_data_param(body)
    elif request.encoding is BodyEncoding.FORM:
        encoded.data = body
    else:
        encoded.json = body

    return encoded


def decode_response(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text


def is_soft_rejection(payload: Any) -> bool:
    """Check for the bare ``0`` body Klaviyo returns when it drops a request."""
    return isinstance(payload, int) and not isinstance(payload, bool) and payload == 0
