"""Buyer tools: purchase through escrow, track it and fetch the output."""

from typing import Any

from pydantic import Field

from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.gateway.schemas import EscrowCreate, Number
from agora_gateway.registry.schemas import DESTRUCTIVE, READ_ONLY, ToolInput, tool


class CreateEscrowInput(ToolInput):
    function_id: str = Field(description="The function ID (fid) to purchase")
    provider_agent_id: str = Field(description="The provider agent ID")
    agreed_price_cents: Number | None = Field(
        default=None,
        description="Agreed price in cents (uses function price if omitted)",
    )
    input: dict[str, Any] | None = Field(
        default=None,
        description=(
            'Input data to pass to the function (e.g. {"text": "hello"}). For auto-executable '
            "functions, this is sent directly to the provider endpoint."
        ),
    )
    metadata: dict[str, Any] | None = Field(default=None, description="Optional metadata for the transaction")
    wait_for_execution: bool = Field(
        default=True,
        description=(
            "Wait for execution and get the result inline (default: true). Set to false for "
            "fire-and-forget. Only works for auto-executable functions. Timeout: 30s."
        ),
    )


class EscrowIdInput(ToolInput):
    escrow_id: str = Field(description="The escrow ID")


@tool(
    "create_escrow",
    "Purchase a function by creating an escrow that locks your funds. The provider will be "
    "notified and must deliver within the agreed terms. Funds are released automatically on "
    "successful verification, or refunded if delivery fails.",
    DESTRUCTIVE,
    CreateEscrowInput,
)
async def create_escrow(client: MarketplaceClient, params: CreateEscrowInput) -> Any:
    return await client.create_escrow(
        EscrowCreate(
            function_id=params.function_id,
            provider_agent_id=params.provider_agent_id,
            agreed_price_cents=params.agreed_price_cents,
            input=params.input,
            metadata=params.metadata,
            wait_for_execution=params.wait_for_execution,
        )
    )


@tool(
    "check_escrow",
    "Check the current status of an escrow transaction. Returns state (HELD, RELEASED, "
    "REFUNDED, DISPUTED), delivery status, and settlement details.",
    READ_ONLY,
    EscrowIdInput,
)
async def check_escrow(client: MarketplaceClient, params: EscrowIdInput) -> Any:
    return await client.get_escrow(params.escrow_id)


@tool(
    "my_purchases",
    "View your transaction history as a buyer. Shows all escrows you have created, their "
    "states, and settlement outcomes.",
    READ_ONLY,
)
async def my_purchases(client: MarketplaceClient, params: Any) -> Any:
    return await client.get_transactions()


@tool(
    "get_delivery_output",
    "Retrieve the output of a completed function execution. Returns the raw output data from "
    "a purchased function. Works after the escrow has been settled (RELEASED or REFUNDED).",
    READ_ONLY,
    EscrowIdInput,
)
async def get_delivery_output(client: MarketplaceClient, params: EscrowIdInput) -> Any:
    return await client.get_escrow_output(params.escrow_id)


TOOLS = [create_escrow, check_escrow, my_purchases, get_delivery_output]
