"""Market data and verification analytics."""

from typing import Any

from pydantic import Field

from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.gateway.schemas import ProviderAnalyticsQuery, Window, WindowQuery
from agora_gateway.registry.schemas import READ_ONLY, ToolInput, tool


class MarketDataInput(ToolInput):
    function_id: str = Field(description="The function ID (fid) to get market data for")
    window: Window | None = Field(default=None, description="Time window for historical data (default: 7d)")


class MarketSummaryInput(ToolInput):
    window: Window | None = Field(default=None, description="Time window for volume data (default: 7d)")


class ProviderAnalyticsInput(ToolInput):
    provider_id: str = Field(description="The provider agent ID to get analytics for")
    window: Window | None = Field(default=None, description="Time window (default: 7d)")
    function_id: str | None = Field(default=None, description="Optional: scope to a specific function")


class FunctionAnalyticsInput(ToolInput):
    function_id: str = Field(description="The function ID (fid) to get analytics for")
    window: Window | None = Field(default=None, description="Time window (default: 7d)")


@tool(
    "get_market_data",
    "Get comprehensive market data for a specific function: price stats (min/max/avg/median), "
    "trade volume, settlement quality rates, and order book depth. Essential for making "
    "informed trading decisions.",
    READ_ONLY,
    MarketDataInput,
)
async def get_market_data(client: MarketplaceClient, params: MarketDataInput) -> Any:
    return await client.get_market_data_function(params.function_id, WindowQuery(window=params.window))


@tool(
    "get_market_summary",
    "Get a global summary of the Theagora exchange: overall trade volume, active function "
    "count, open order count, and top functions by volume. Good for understanding overall "
    "market activity before diving into specific functions.",
    READ_ONLY,
    MarketSummaryInput,
)
async def get_market_summary(client: MarketplaceClient, params: MarketSummaryInput) -> Any:
    return await client.get_market_data_summary(WindowQuery(window=params.window))


@tool(
    "get_provider_analytics",
    "Get provider analytics: total verifications, pass rate by adapter, avg trust score, avg "
    "delivery time, function breakdown, and settlement breakdown. Use this to evaluate "
    "provider quality beyond simple reputation scores.",
    READ_ONLY,
    ProviderAnalyticsInput,
)
async def get_provider_analytics(client: MarketplaceClient, params: ProviderAnalyticsInput) -> Any:
    return await client.get_provider_analytics(
        params.provider_id,
        ProviderAnalyticsQuery(window=params.window, function_id=params.function_id),
    )


@tool(
    "get_function_analytics",
    "Get function-level analytics: verification count, adapter pass rates, provider "
    "breakdown with delivery times. Use this to evaluate a function's reliability and "
    "compare providers.",
    READ_ONLY,
    FunctionAnalyticsInput,
)
async def get_function_analytics(client: MarketplaceClient, params: FunctionAnalyticsInput) -> Any:
    return await client.get_function_analytics(params.function_id, WindowQuery(window=params.window))


TOOLS = [get_market_data, get_market_summary, get_provider_analytics, get_function_analytics]
