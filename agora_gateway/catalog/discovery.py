"""Marketplace discovery tools: search, details, reputation and trending."""

from typing import Any

import structlog
from pydantic import Field

from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.gateway.exceptions import MarketplaceError
from agora_gateway.gateway.schemas import (
    FunctionSearch,
    FunctionSort,
    Number,
    ReputationQuery,
    TrendingQuery,
    Window,
)
from agora_gateway.registry.schemas import READ_ONLY, MCPToolCallResult, ToolInput, tool

logger = structlog.get_logger(__name__)


class BrowseMarketplaceInput(ToolInput):
    q: str | None = Field(default=None, description="Search keyword (matches name and description)")
    min_price: Number | None = Field(default=None, description="Minimum price in cents")
    max_price: Number | None = Field(default=None, description="Maximum price in cents")
    sort: FunctionSort | None = Field(default=None, description="Sort order")
    provider: str | None = Field(default=None, description="Filter by provider agent ID")


class FunctionDetailsInput(ToolInput):
    fid: str = Field(description="The function ID (fid) to look up")


class CheckReputationInput(ToolInput):
    agent_id: str = Field(description="The provider agent ID to check")
    function_id: str | None = Field(default=None, description="Optional: scope metrics to a specific function")
    date_from: str | None = Field(default=None, description="Optional: filter from date (ISO format)")
    date_to: str | None = Field(default=None, description="Optional: filter to date (ISO format)")


class FindTrendingInput(ToolInput):
    period: Window | None = Field(default=None, description="Time window (default: 7d)")
    limit: Number | None = Field(default=None, ge=1, le=50, description="Max results (default: 20)")


@tool(
    "browse_marketplace",
    "Search and filter available functions on the Theagora marketplace. Returns function "
    "listings with provider info, pricing, and QoS specs. Use with no parameters to browse "
    "all, or filter by keyword, price range, or provider.",
    READ_ONLY,
    BrowseMarketplaceInput,
)
async def browse_marketplace(client: MarketplaceClient, params: BrowseMarketplaceInput) -> Any:
    return await client.list_functions(
        FunctionSearch(
            q=params.q,
            min_price=params.min_price,
            max_price=params.max_price,
            sort=params.sort,
            provider=params.provider,
        )
    )


def find_function(listing: Any, fid: str) -> dict[str, Any] | None:
    """Linear search of a function listing for ``fid``; non-list listings match nothing."""
    if not isinstance(listing, list):
        return None
    return next(
        (item for item in listing if isinstance(item, dict) and item.get("fid") == fid),
        None,
    )


async def fetch_provider_reputation(
    client: MarketplaceClient,
    function: dict[str, Any],
) -> Any | None:
    """Best-effort reputation lookup for a function's provider.

    Returns:
        The reputation payload, or ``None`` when the provider is unknown or
        the lookup fails. Reputation may not exist yet for new providers.
    """
    provider = function.get("provider")
    agent_id = provider.get("agentId") if isinstance(provider, dict) else None
    if not agent_id:
        return None

    try:
        return await client.get_reputation(agent_id, ReputationQuery(function_id=function.get("fid")))
    except MarketplaceError as exc:
        logger.info("provider_reputation_unavailable", agent_id=agent_id, error=exc.code)
        return None


@tool(
    "get_function_details",
    "Get detailed information about a specific function including provider reputation "
    "metrics. Provide the function ID (fid) to look up.",
    READ_ONLY,
    FunctionDetailsInput,
)
async def get_function_details(client: MarketplaceClient, params: FunctionDetailsInput) -> Any:
    """Look up one function in the full listing and attach its provider reputation.

    Returns:
        ``{"function", "providerReputation"}``, or an error envelope when the
        fid is not listed. Reputation is ``None`` when the lookup fails.
    """
    listing = await client.list_functions()
    function = find_function(listing, params.fid)
    if function is None:
        return MCPToolCallResult.error(f'Function "{params.fid}" not found.')

    reputation = await fetch_provider_reputation(client, function)
    return {"function": function, "providerReputation": reputation}


@tool(
    "check_reputation",
    "Get raw reputation metrics for a provider agent: proofPassRate, autoSettledRate, "
    "settlementSuccessRate, transaction count, volume, dispute count. No composite score; "
    "evaluate risk yourself based on these metrics.",
    READ_ONLY,
    CheckReputationInput,
)
async def check_reputation(client: MarketplaceClient, params: CheckReputationInput) -> Any:
    return await client.get_reputation(
        params.agent_id,
        ReputationQuery(
            function_id=params.function_id,
            date_from=params.date_from,
            date_to=params.date_to,
        ),
    )


@tool(
    "find_trending",
    "Discover trending functions with the highest transaction volume over a time period. "
    "Useful for finding popular, active services on the marketplace.",
    READ_ONLY,
    FindTrendingInput,
)
async def find_trending(client: MarketplaceClient, params: FindTrendingInput) -> Any:
    return await client.get_trending(TrendingQuery(period=params.period, limit=params.limit))


TOOLS = [browse_marketplace, get_function_details, check_reputation, find_trending]
