"""Exceptions raised at the marketplace gateway boundary."""


class MarketplaceError(Exception):
    """Base exception for all gateway errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ConfigurationError(MarketplaceError):
    """Raised when the gateway cannot be configured (e.g. missing API key)."""

    def __init__(self, message: str):
        super().__init__(message=message, code="CONFIGURATION_ERROR")


class ApiError(MarketplaceError):
    """Raised when the marketplace API answers with a non-2xx status.

    Attributes:
        method: HTTP method of the failed request.
        path: API path (without base URL or version prefix).
        status_code: HTTP status code returned by the API.
        body: Raw response body, unmodified.
    """

    def __init__(self, method: str, path: str, status_code: int, body: str = ""):
        super().__init__(
            message=f"API {method} {path} failed ({status_code}): {body}",
            code="API_ERROR",
        )
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body


class ApiTimeoutError(MarketplaceError):
    """Raised when the marketplace API doesn't respond in time.

    Attributes:
        method: HTTP method of the request.
        path: API path of the request.
        timeout_seconds: Timeout duration that was exceeded.
    """

    def __init__(self, method: str, path: str, timeout_seconds: float):
        super().__init__(
            message=f"API {method} {path} timed out after {timeout_seconds}s",
            code="API_TIMEOUT",
        )
        self.method = method
        self.path = path
        self.timeout_seconds = timeout_seconds


class ApiUnavailableError(MarketplaceError):
    """Raised when the marketplace API is unreachable.

    Attributes:
        method: HTTP method of the request.
        path: API path of the request.
        reason: Description of the connection failure.
    """

    def __init__(self, method: str, path: str, reason: str = "Connection failed"):
        super().__init__(
            message=f"API {method} {path} is unavailable: {reason}",
            code="API_UNAVAILABLE",
        )
        self.method = method
        self.path = path
        self.reason = reason


class AgentIdentityError(MarketplaceError):
    """Raised when the profile response carries no agent identifier."""

    def __init__(self, message: str = "Profile response did not include an agent ID"):
        super().__init__(message=message, code="AGENT_IDENTITY_UNAVAILABLE")


class ApiInvalidResponseError(ApiError):
    """Raised when a 2xx response body is not valid JSON.

    Carries the same attributes as ApiError; only the message and code differ.
    """

    def __init__(self, method: str, path: str, status_code: int, body: str = ""):
        super().__init__(method=method, path=path, status_code=status_code, body=body)
        self.message = f"API {method} {path} returned a non-JSON body ({status_code}): {body}"
        self.code = "API_INVALID_RESPONSE"
        self.args = (self.message,)
