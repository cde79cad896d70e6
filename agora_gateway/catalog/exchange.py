"""Exchange tools: place, list and cancel orders, view the order book."""

from typing import Any

from pydantic import Field

from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.gateway.schemas import (
    Number,
    OrderBookQuery,
    OrderCreate,
    OrderQuery,
    OrderSide,
    OrderStatus,
)
from agora_gateway.registry.schemas import (
    DESTRUCTIVE,
    DESTRUCTIVE_IDEMPOTENT,
    READ_ONLY,
    ToolInput,
    tool,
)


class PlaceOrderInput(ToolInput):
    side: OrderSide = Field(description="BID to buy, ASK to sell")
    function_id: str | None = Field(default=None, description="Specific function ID (required for ASK, optional for BID)")
    category: str | None = Field(
        default=None,
        description='Service category for loose matching (e.g., "code-generation", "data-analysis")',
    )
    description: str | None = Field(default=None, description="What you want (BID) or what you offer (ASK)")
    price_cents: Number = Field(description="Max price to pay (BID) or asking price (ASK) in cents")
    min_reputation: float | None = Field(default=None, description="BID only: minimum provider reputation (0-1)")
    max_latency_ms: Number | None = Field(default=None, description="BID only: maximum acceptable P95 latency in ms")
    expires_at: str | None = Field(default=None, description="ISO 8601 expiry time. Omit for good-til-cancelled")
    metadata: dict[str, Any] | None = Field(default=None, description="Optional metadata")
    input: dict[str, Any] | None = Field(
        default=None,
        description=(
            'Input data to pass to the function (e.g. {"text": "hello"}). For auto-executable '
            "functions, this is sent directly to the provider endpoint."
        ),
    )
    dry_run: bool | None = Field(
        default=None,
        description=(
            "Simulate order without creating records or locking funds. Returns what WOULD "
            "match, including input validation results."
        ),
    )


class MyOrdersInput(ToolInput):
    side: OrderSide | None = Field(default=None, description="Filter by side")
    status: OrderStatus | None = Field(default=None, description="Filter by status")
    limit: Number | None = Field(default=None, description="Max results (default 50)")


class CancelOrderInput(ToolInput):
    order_id: str = Field(description="The order ID to cancel")


class ViewOrderBookInput(ToolInput):
    function_id: str | None = Field(default=None, description="Filter by specific function ID")
    category: str | None = Field(default=None, description="Filter by service category")


@tool(
    "place_order",
    "Place a BID or ASK on the exchange. Immediate match if counter-order exists.",
    DESTRUCTIVE,
    PlaceOrderInput,
)
async def place_order(client: MarketplaceClient, params: PlaceOrderInput) -> Any:
    return await client.place_order(OrderCreate(**params.model_dump()))


@tool(
    "my_orders",
    "View your open and recent orders on the exchange.",
    READ_ONLY,
    MyOrdersInput,
)
async def my_orders(client: MarketplaceClient, params: MyOrdersInput) -> Any:
    return await client.list_orders(OrderQuery(side=params.side, status=params.status, limit=params.limit))


@tool(
    "cancel_order",
    "Cancel one of your open orders on the exchange.",
    DESTRUCTIVE_IDEMPOTENT,
    CancelOrderInput,
)
async def cancel_order(client: MarketplaceClient, params: CancelOrderInput) -> Any:
    return await client.cancel_order(params.order_id)


@tool(
    "view_orderbook",
    "See current bids and asks on the exchange, with spread information. Filter by function or category.",
    READ_ONLY,
    ViewOrderBookInput,
)
async def view_orderbook(client: MarketplaceClient, params: ViewOrderBookInput) -> Any:
    return await client.get_order_book(OrderBookQuery(function_id=params.function_id, category=params.category))


TOOLS = [place_order, my_orders, cancel_order, view_orderbook]
