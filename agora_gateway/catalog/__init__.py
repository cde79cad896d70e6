"""Catalog of marketplace tools exposed by the gateway."""

from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.registry import ToolRegistry, ToolSpec

from . import account, discovery, escrow, exchange, insights, provider, social


def build_catalog() -> list[ToolSpec]:
    return [
        *discovery.TOOLS,
        *escrow.TOOLS,
        *provider.TOOLS,
        *account.TOOLS,
        *social.TOOLS,
        *exchange.TOOLS,
        *insights.TOOLS,
    ]


def build_registry(client: MarketplaceClient) -> ToolRegistry:
    return ToolRegistry(client, build_catalog())


__all__ = ["build_catalog", "build_registry"]
