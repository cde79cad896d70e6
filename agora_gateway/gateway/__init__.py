"""Gateway module - marketplace API session, requests and error mapping."""

from .exceptions import (
    MarketplaceError,
    ConfigurationError,
    ApiError,
    ApiTimeoutError,
    ApiUnavailableError,
    ApiInvalidResponseError,
    AgentIdentityError,
)
from .schemas import RequestDescriptor
from .session import SessionConfig, build_query_string, build_url
from .client import MarketplaceClient


__all__ = [
    # Exceptions
    "MarketplaceError",
    "ConfigurationError",
    "ApiError",
    "ApiTimeoutError",
    "ApiUnavailableError",
    "ApiInvalidResponseError",
    "AgentIdentityError",
    # Requests
    "RequestDescriptor",
    "SessionConfig",
    "build_query_string",
    "build_url",
    # Client
    "MarketplaceClient",
]
