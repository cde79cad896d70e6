"""Global dependencies for the application."""

from fastapi import Request

from agora_gateway.registry import ToolRegistry


async def get_tool_registry(request: Request) -> ToolRegistry:
    """Dependency to get the tool registry built at startup.

    The registry and its marketplace client are created in main.py lifespan
    and shared across requests, so the agent ID cache and the HTTP
    connection pool are shared too.

    Args:
        request: The FastAPI request object.

    Returns:
        The global ToolRegistry instance.
    """
    return request.app.state.tool_registry
