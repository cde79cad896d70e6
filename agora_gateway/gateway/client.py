"""HTTP client for the Theagora marketplace API.

One method per API endpoint. The agent ID is cached after the first
``GET /v1/me`` lookup and only cleared by ``invalidate_agent_id``.
"""

import asyncio
import time
from typing import Any

import httpx
import structlog

from agora_gateway.config import Settings, get_settings
from .exceptions import (
    AgentIdentityError,
    ApiError,
    ApiInvalidResponseError,
    ApiTimeoutError,
    ApiUnavailableError,
)
from .schemas import (
    DeliverySubmission,
    DisputeCreate,
    EscrowCreate,
    FunctionRegistration,
    FunctionSearch,
    FunctionUpdate,
    IdentityLink,
    InviteCreate,
    Number,
    OrderBookQuery,
    OrderCreate,
    OrderQuery,
    ProviderAnalyticsQuery,
    ReputationQuery,
    RequestDescriptor,
    TrendingQuery,
    WindowQuery,
)
from .session import METHODS_WITH_BODY, SessionConfig, build_url, path_segment


logger = structlog.get_logger(__name__)

# Inline execution budget the API allows when an escrow waits for its result
EXECUTION_WAIT_SECONDS = 30.0
EXECUTION_WAIT_GRACE_SECONDS = 5.0


def extract_agent_id(profile: Any) -> str:
    """Pull the agent identifier out of a profile response.

    Args:
        profile: Parsed ``GET /me`` response.

    Returns:
        ``agentId`` if present, else ``id``.

    Raises:
        AgentIdentityError: If neither field is present.
    """
    if isinstance(profile, dict):
        agent_id = profile.get("agentId") or profile.get("id")
        if agent_id:
            return str(agent_id)
    raise AgentIdentityError()


class MarketplaceClient:
    """Single point of outbound communication with the marketplace API."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create the client.

        Args:
            settings: Application settings (defaults to ``get_settings()``).
            http_client: Shared HTTP client. When omitted, the client owns
                its own ``httpx.AsyncClient`` and closes it in ``aclose``.

        Raises:
            ConfigurationError: If the API key is not configured.
        """
        self.session = SessionConfig.from_settings(settings or get_settings())
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self.session.timeout_seconds)
        self._cached_agent_id: str | None = None
        self._agent_id_lock = asyncio.Lock()

    async def __aenter__(self) -> "MarketplaceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def execute(self, request: RequestDescriptor) -> Any:
        """Execute one API call and return the parsed JSON body.

        Args:
            request: Path, method, body, query and timeout of the call.

        Returns:
            The decoded JSON response, or ``None`` for an empty body.

        Raises:
            ApiError: If the API returns a non-2xx status.
            ApiInvalidResponseError: If a 2xx response body is not JSON.
            ApiTimeoutError: If the API doesn't respond in time.
            ApiUnavailableError: If the API can't be reached.
        """
        method = request.method
        url = build_url(self.session.base_url, request.path, request.params)
        timeout = request.timeout if request.timeout is not None else self.session.timeout_seconds

        json_body = None
        if request.body is not None and method in METHODS_WITH_BODY:
            json_body = request.body

        started = time.perf_counter()
        try:
            response = await self._http.request(
                method,
                url,
                headers=self.session.headers,
                json=json_body,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            logger.warning("marketplace_request_failed", method=method, path=request.path, error="timeout")
            raise ApiTimeoutError(method=method, path=request.path, timeout_seconds=timeout) from exc
        except httpx.RequestError as exc:
            logger.warning("marketplace_request_failed", method=method, path=request.path, error=str(exc))
            raise ApiUnavailableError(method=method, path=request.path, reason=str(exc)) from exc

        duration_ms = int((time.perf_counter() - started) * 1000)

        if not response.is_success:
            logger.warning(
                "marketplace_request_failed",
                method=method,
                path=request.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            raise ApiError(
                method=method,
                path=request.path,
                status_code=response.status_code,
                body=response.text,
            )

        logger.debug(
            "marketplace_request",
            method=method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiInvalidResponseError(
                method=method,
                path=request.path,
                status_code=response.status_code,
                body=response.text,
            ) from exc

    # === Agent identity cache ===

    @property
    def cached_agent_id(self) -> str | None:
        return self._cached_agent_id

    async def get_agent_id(self) -> str:
        """Return the caller's agent ID, fetching the profile on first use."""
        if self._cached_agent_id is not None:
            return self._cached_agent_id

        async with self._agent_id_lock:
            # Another caller may have filled the cache while we waited.
            if self._cached_agent_id is None:
                profile = await self.get_profile()
                self._cached_agent_id = extract_agent_id(profile)
                logger.info("agent_id_cached", agent_id=self._cached_agent_id)
            return self._cached_agent_id

    def invalidate_agent_id(self) -> None:
        """Forget the cached agent ID so the next lookup refetches the profile."""
        if self._cached_agent_id is not None:
            logger.info("agent_id_invalidated", agent_id=self._cached_agent_id)
        self._cached_agent_id = None

    # === Identity ===

    async def get_profile(self) -> Any:
        return await self.execute(RequestDescriptor("/me"))

    async def link_identity(self, link: IdentityLink) -> Any:
        return await self.execute(
            RequestDescriptor("/agents/link-identity", method="POST", body=link.to_body())
        )

    async def unlink_identity(self) -> Any:
        return await self.execute(RequestDescriptor("/agents/link-identity", method="DELETE"))

    async def get_wallet(self, agent_id: str) -> Any:
        return await self.execute(RequestDescriptor(f"/policy-wallets/agent/{path_segment(agent_id)}"))

    async def create_deposit(self, wallet_id: str, amount_cents: Number) -> Any:
        return await self.execute(
            RequestDescriptor(
                f"/policy-wallets/{path_segment(wallet_id)}/deposit",
                method="POST",
                body={"amountCents": amount_cents},
            )
        )

    # === Discovery ===

    async def list_functions(self, search: FunctionSearch | None = None) -> Any:
        params = search.to_params() if search else None
        return await self.execute(RequestDescriptor("/functions", params=params))

    async def get_trending(self, query: TrendingQuery | None = None) -> Any:
        params = query.to_params() if query else None
        return await self.execute(RequestDescriptor("/functions/trending", params=params))

    async def get_reputation(self, agent_id: str, query: ReputationQuery | None = None) -> Any:
        params = query.to_params() if query else None
        return await self.execute(
            RequestDescriptor(f"/agents/{path_segment(agent_id)}/reputation", params=params)
        )

    # === Buying ===

    async def create_escrow(self, escrow: EscrowCreate) -> Any:
        """Create an escrow.

        When ``wait_for_execution`` is set the API may hold the request for up
        to its execution budget, so the timeout is widened to cover it.
        """
        timeout = None
        if escrow.wait_for_execution:
            timeout = EXECUTION_WAIT_SECONDS + EXECUTION_WAIT_GRACE_SECONDS
        return await self.execute(
            RequestDescriptor("/escrows", method="POST", body=escrow.to_body(), timeout=timeout)
        )

    async def get_escrow(self, escrow_id: str) -> Any:
        return await self.execute(RequestDescriptor(f"/escrows/{path_segment(escrow_id)}"))

    async def get_escrow_output(self, escrow_id: str) -> Any:
        return await self.execute(RequestDescriptor(f"/escrows/{path_segment(escrow_id)}/output"))

    async def get_transactions(self) -> Any:
        return await self.execute(RequestDescriptor("/transactions"))

    # === Selling ===

    async def register_function(self, registration: FunctionRegistration) -> Any:
        return await self.execute(
            RequestDescriptor("/functions", method="POST", body=registration.to_body())
        )

    async def update_function(self, fid: str, update: FunctionUpdate) -> Any:
        return await self.execute(
            RequestDescriptor(f"/functions/{path_segment(fid)}", method="PATCH", body=update.to_body())
        )

    async def get_my_functions(self) -> Any:
        return await self.execute(RequestDescriptor("/functions/my"))

    async def poll_jobs(self) -> Any:
        return await self.execute(RequestDescriptor("/jobs"))

    async def submit_delivery(self, delivery: DeliverySubmission) -> Any:
        return await self.execute(
            RequestDescriptor("/deliveries", method="POST", body=delivery.to_body())
        )

    async def get_earned_today(self) -> Any:
        return await self.execute(RequestDescriptor("/transactions/earned-today"))

    # === Social (invites) ===

    async def create_invite(self, invite: InviteCreate) -> Any:
        return await self.execute(RequestDescriptor("/invites", method="POST", body=invite.to_body()))

    async def list_invites(self) -> Any:
        return await self.execute(RequestDescriptor("/invites"))

    async def accept_invite(self, token: str) -> Any:
        return await self.execute(
            RequestDescriptor(f"/invites/{path_segment(token)}/accept", method="POST")
        )

    # === Market data ===

    async def get_market_data_function(self, function_id: str, query: WindowQuery | None = None) -> Any:
        params = query.to_params() if query else None
        return await self.execute(
            RequestDescriptor(f"/market-data/functions/{path_segment(function_id)}", params=params)
        )

    async def get_market_data_summary(self, query: WindowQuery | None = None) -> Any:
        params = query.to_params() if query else None
        return await self.execute(RequestDescriptor("/market-data/summary", params=params))

    # === Exchange (orders) ===

    async def place_order(self, order: OrderCreate) -> Any:
        return await self.execute(RequestDescriptor("/orders", method="POST", body=order.to_body()))

    async def list_orders(self, query: OrderQuery | None = None) -> Any:
        params = query.to_params() if query else None
        return await self.execute(RequestDescriptor("/orders", params=params))

    async def cancel_order(self, order_id: str) -> Any:
        return await self.execute(RequestDescriptor(f"/orders/{path_segment(order_id)}", method="DELETE"))

    async def get_order_book(self, query: OrderBookQuery | None = None) -> Any:
        params = query.to_params() if query else None
        return await self.execute(RequestDescriptor("/orderbook", params=params))

    # === Trust (disputes) ===

    async def create_dispute(self, dispute: DisputeCreate) -> Any:
        return await self.execute(RequestDescriptor("/disputes", method="POST", body=dispute.to_body()))

    async def list_disputes(self) -> Any:
        return await self.execute(RequestDescriptor("/disputes"))

    # === Analytics ===

    async def get_provider_analytics(
        self,
        provider_id: str,
        query: ProviderAnalyticsQuery | None = None,
    ) -> Any:
        params = query.to_params() if query else None
        return await self.execute(
            RequestDescriptor(f"/analytics/providers/{path_segment(provider_id)}", params=params)
        )

    async def get_function_analytics(self, function_id: str, query: WindowQuery | None = None) -> Any:
        params = query.to_params() if query else None
        return await self.execute(
            RequestDescriptor(f"/analytics/functions/{path_segment(function_id)}", params=params)
        )
