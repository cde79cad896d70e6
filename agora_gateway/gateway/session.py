"""Outbound session configuration and request construction for the marketplace API."""

from typing import Mapping
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict, SecretStr

from agora_gateway.config import Settings
from .exceptions import ConfigurationError
from .schemas import QueryValue


API_VERSION_PREFIX = "/v1"
CLIENT_SOURCE = "mcp"
METHODS_WITH_BODY = frozenset({"POST", "PUT", "PATCH"})

# Default timeout for marketplace requests
DEFAULT_TIMEOUT_SECONDS = 30.0


class SessionConfig(BaseModel):
    """Immutable outbound session settings.

    Attributes:
        base_url: API origin without trailing slash.
        api_key: Bearer credential.
        timeout_seconds: Default request timeout.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    api_key: SecretStr
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionConfig":
        """Build session config, failing fast when the credential is missing.

        Args:
            settings: Application settings.

        Returns:
            The session configuration.

        Raises:
            ConfigurationError: If THEAGORA_API_KEY is absent or blank.
        """
        api_key = settings.THEAGORA_API_KEY
        if api_key is None or not api_key.get_secret_value().strip():
            raise ConfigurationError("THEAGORA_API_KEY environment variable is required")

        return cls(
            base_url=settings.THEAGORA_API_URL.rstrip("/"),
            api_key=api_key,
            timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
        )

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key.get_secret_value()}",
            "Content-Type": "application/json",
            "X-Theagora-Source": CLIENT_SOURCE,
        }


def _format_scalar(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_query_string(params: Mapping[str, QueryValue] | None) -> str:
    """Encode query parameters, omitting undefined and empty values.

    Args:
        params: Flat mapping of parameter names to scalars.

    Returns:
        The encoded query string without a leading ``?`` (may be empty).
    """
    if not params:
        return ""

    pairs = [
        (key, _format_scalar(value))
        for key, value in params.items()
        if value is not None and value != ""
    ]
    return urlencode(pairs)


def build_url(base_url: str, path: str, params: Mapping[str, QueryValue] | None = None) -> str:
    """Join base URL, API version prefix, path and query string."""
    url = f"{base_url}{API_VERSION_PREFIX}{path}"
    query = build_query_string(params)
    if query:
        url = f"{url}?{query}"
    return url


def path_segment(value: str) -> str:
    """Percent-encode an identifier for use as a single path segment."""
    return quote(str(value), safe="")
