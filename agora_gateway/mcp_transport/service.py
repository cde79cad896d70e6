"""Business logic for MCP protocol handlers."""

from typing import Any

from agora_gateway import __version__
from agora_gateway.registry import MCPToolCallResult, MCPToolListResult, ToolNotFoundError, ToolRegistry

from .schemas import MCPInitializeParams

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "theagora"


async def handle_initialize(params: MCPInitializeParams) -> dict[str, Any]:
    """Handle initialize request.

    Args:
        params: Initialize parameters from client.

    Returns:
        Server initialization response.
    """
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {
            "tools": {
                "listChanged": False  # Fixed catalog
            }
        },
        "serverInfo": {
            "name": SERVER_NAME,
            "version": __version__,
        }
    }


async def handle_tools_list(registry: ToolRegistry) -> MCPToolListResult:
    """Handle tools/list request."""
    return MCPToolListResult(tools=registry.list_tools())


async def handle_tools_call(
    registry: ToolRegistry,
    name: str,
    arguments: dict[str, Any],
    request_id: str | None = None,
) -> MCPToolCallResult:
    """Handle tools/call request.

    Args:
        registry: Tool registry to dispatch into.
        name: Tool name to invoke.
        arguments: Tool arguments.
        request_id: Optional correlation ID.

    Returns:
        Tool execution result; unknown tools yield an error envelope.
    """
    try:
        return await registry.call_tool(name, arguments, request_id=request_id)
    except ToolNotFoundError:
        return MCPToolCallResult.error(f"Error: Tool '{name}' not found")
