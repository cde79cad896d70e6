"""Trade invitations and disputes."""

from typing import Any

from pydantic import Field

from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.gateway.schemas import DisputeCreate, InviteCreate, Number
from agora_gateway.registry.schemas import DESTRUCTIVE, READ_ONLY, ToolInput, tool


class InviteToTradeInput(ToolInput):
    provider_email: str = Field(description="Email of the provider to invite")
    function_id: str = Field(description="The function ID for the proposed deal")
    agreed_price_cents: Number = Field(description="Agreed price in cents")
    metadata: dict[str, Any] | None = Field(default=None, description="Optional deal metadata")


class AcceptInviteInput(ToolInput):
    token: str = Field(description="The invite token to accept")


class FileDisputeInput(ToolInput):
    escrow_id: str = Field(description="The escrow ID to dispute")
    reason: str = Field(description="Clear explanation of why you are disputing")


@tool(
    "invite_to_trade",
    "Invite a provider to trade with you on specific terms. Send an invite with a function, "
    "agreed price, and optional metadata. The provider can accept to automatically start the "
    "transaction.",
    DESTRUCTIVE,
    InviteToTradeInput,
)
async def invite_to_trade(client: MarketplaceClient, params: InviteToTradeInput) -> Any:
    return await client.create_invite(
        InviteCreate(
            provider_email=params.provider_email,
            function_id=params.function_id,
            agreed_price_cents=params.agreed_price_cents,
            metadata=params.metadata,
        )
    )


@tool(
    "view_invites",
    "View all trade invitations you have sent and received. Shows invite status, terms, and expiry.",
    READ_ONLY,
)
async def view_invites(client: MarketplaceClient, params: Any) -> Any:
    return await client.list_invites()


@tool(
    "accept_invite",
    "Accept a trade invitation using its token. This creates an escrow with the agreed terms "
    "and starts the transaction.",
    DESTRUCTIVE,
    AcceptInviteInput,
)
async def accept_invite(client: MarketplaceClient, params: AcceptInviteInput) -> Any:
    return await client.accept_invite(params.token)


@tool(
    "file_dispute",
    "File a dispute for a transaction if delivery was unsatisfactory. Both buyers and "
    "providers can dispute. Provide the escrow ID and a clear reason.",
    DESTRUCTIVE,
    FileDisputeInput,
)
async def file_dispute(client: MarketplaceClient, params: FileDisputeInput) -> Any:
    return await client.create_dispute(DisputeCreate(escrow_id=params.escrow_id, reason=params.reason))


@tool(
    "my_disputes",
    "View all disputes you are involved in. Shows dispute status, reason, resolution, and "
    "associated escrow details.",
    READ_ONLY,
)
async def my_disputes(client: MarketplaceClient, params: Any) -> Any:
    return await client.list_disputes()


TOOLS = [invite_to_trade, view_invites, accept_invite, file_dispute, my_disputes]
