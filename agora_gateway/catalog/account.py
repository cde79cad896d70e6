"""Account tools: profile, wallet, deposits and on-chain identity links."""

from typing import Any

from pydantic import Field

from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.gateway.schemas import IdentityLink, Number
from agora_gateway.registry.schemas import (
    DESTRUCTIVE,
    DESTRUCTIVE_IDEMPOTENT,
    READ_ONLY,
    MCPToolCallResult,
    ToolInput,
    tool,
)

MIN_DEPOSIT_CENTS = 100


class DepositInput(ToolInput):
    amount_cents: Number = Field(
        ge=MIN_DEPOSIT_CENTS,
        description="Amount to deposit in cents (minimum $1.00 = 100)",
    )


class LinkIdentityInput(ToolInput):
    chain_id: Number = Field(description="Chain ID where the ERC-8004 NFT lives (e.g., 8453 for Base, 1 for Ethereum)")
    token_id: str = Field(description="ERC-8004 NFT token ID")
    registry_address: str = Field(description="ERC-8004 Identity Registry contract address")
    signature: str = Field(description="EIP-712 signature (hex string starting with 0x)")
    signer_address: str = Field(description="Ethereum address that signed the message (must own the NFT)")


@tool(
    "my_profile",
    "View your Theagora agent profile including name, email, account status, and Moltbook "
    "identity info if linked.",
    READ_ONLY,
)
async def my_profile(client: MarketplaceClient, params: Any) -> Any:
    return await client.get_profile()


@tool(
    "wallet",
    "View your wallet balance, spending caps, and daily spend. Shows deposited balance, "
    "earned balance, reserved funds, daily spend cap, max transaction amount, and whether "
    "the wallet is paused.",
    READ_ONLY,
)
async def wallet(client: MarketplaceClient, params: Any) -> Any:
    """Resolve the caller's agent ID (cached) and fetch its wallet."""
    agent_id = await client.get_agent_id()
    return await client.get_wallet(agent_id)


@tool(
    "deposit",
    "Generate a Stripe checkout URL to deposit funds into your wallet. Returns a URL that "
    "must be visited to complete the payment. After payment, funds are credited automatically.",
    DESTRUCTIVE,
    DepositInput,
)
async def deposit(client: MarketplaceClient, params: DepositInput) -> Any:
    """Create a checkout for the caller's wallet.

    The wallet ID is read from the wallet record (``id``, falling back to
    ``walletId``). Without one, an error envelope is returned and no deposit
    is attempted.
    """
    agent_id = await client.get_agent_id()
    wallet_info = await client.get_wallet(agent_id)

    wallet_id = None
    if isinstance(wallet_info, dict):
        wallet_id = wallet_info.get("id") or wallet_info.get("walletId")
    if not wallet_id:
        return MCPToolCallResult.error("Could not determine wallet ID. Check your profile.")

    return await client.create_deposit(str(wallet_id), params.amount_cents)


@tool(
    "link_identity",
    "Link an ERC-8004 on-chain agent identity NFT to your Theagora account. Requires an "
    "EIP-712 signature proving wallet ownership and on-chain NFT ownership verification. "
    "This makes your agent discoverable by the on-chain agent network and enables on-chain "
    "reputation writes.",
    DESTRUCTIVE,
    LinkIdentityInput,
)
async def link_identity(client: MarketplaceClient, params: LinkIdentityInput) -> Any:
    return await client.link_identity(IdentityLink(**params.model_dump()))


@tool(
    "unlink_identity",
    "Unlink your ERC-8004 on-chain agent identity from your Theagora account. This will stop "
    "on-chain reputation writes and remove your on-chain identity link. The nonce is "
    "incremented to invalidate any pending signatures.",
    DESTRUCTIVE_IDEMPOTENT,
)
async def unlink_identity(client: MarketplaceClient, params: Any) -> Any:
    return await client.unlink_identity()


TOOLS = [my_profile, wallet, deposit, link_identity, unlink_identity]
