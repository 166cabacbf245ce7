"""Pydantic models for Klaviyo client configuration and requests."""

from typing import Optional, Dict, Any
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, field_validator

from klaviyo_client.logging import LogLevel, LoggingSink, LogSink
from klaviyo_client.retry import ExponentialBackoff


DEFAULT_API_BASE_PATH = "https://a.klaviyo.com/api"


class HTTPMethod(str, Enum):
    """HTTP methods used by the Klaviyo API."""
    GET = "GET"
    POST = "POST"


class BodyEncoding(str, Enum):
    """How an operation's body travels on the wire."""
    QUERY_DATA = "query_data"
    FORM = "form"
    JSON = "json"

    @property
    def uses_private_key(self) -> bool:
        return self is not BodyEncoding.QUERY_DATA


class ClientConfig(BaseModel):
    """Configuration for the Klaviyo client. Immutable once built."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    public_key: str = Field(..., min_length=1, description="Klaviyo public API key")
    private_key: Optional[str] = Field(default=None, description="Klaviyo private API key")
    api_base_path: str = Field(default=DEFAULT_API_BASE_PATH, description="Base URL for API requests")
    retry_count: int = Field(default=3, ge=0, description="Retries after the first attempt")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Lowest level emitted by the default sink")
    log_sink: Optional[Any] = Field(default=None, description="Custom LogSink; receives every level")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    connect_timeout: float = Field(default=5.0, gt=0, description="Connection timeout")
    backoff: InstanceOf[ExponentialBackoff] = Field(default_factory=ExponentialBackoff)

    @field_validator("api_base_path")
    @classmethod
    def validate_api_base_path(cls, v: str) -> str:
        """Ensure api_base_path doesn't end with slash."""
        return v.rstrip("/")

    @field_validator("private_key")
    @classmethod
    def validate_private_key(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty private key as not configured."""
        return v or None

    @field_validator("log_sink")
    @classmethod
    def validate_log_sink(cls, v: Any) -> Any:
        if v is not None and not isinstance(v, LogSink):
            raise ValueError("log_sink must provide a log(level, message, **context) method")
        return v

    @property
    def has_private_key(self) -> bool:
        return self.private_key is not None

    def build_sink(self) -> LogSink:
        """Return the configured sink, or a stdlib-backed one at log_level."""
        if self.log_sink is not None:
            return self.log_sink
        return LoggingSink(level=self.log_level)


class OperationRequest(BaseModel):
    """One outbound call, built fresh per operation."""

    model_config = ConfigDict(frozen=True)

    resource_path: str = Field(..., min_length=1)
    api_version: Optional[str] = None
    query_params: Dict[str, str] = Field(default_factory=dict)
    body: Dict[str, Any] = Field(default_factory=dict)
    encoding: BodyEncoding = BodyEncoding.QUERY_DATA
    http_method: HTTPMethod = HTTPMethod.GET
