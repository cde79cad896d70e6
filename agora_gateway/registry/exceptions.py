"""Exceptions raised by the tool registry."""

from agora_gateway.gateway.exceptions import MarketplaceError


class ToolNotFoundError(MarketplaceError):
    """Raised when requested tool is not in the registry.

    Attributes:
        tool_name: Name of the tool that was not found.
    """

    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Tool '{tool_name}' not found in registry",
            code="TOOL_NOT_FOUND"
        )
        self.tool_name = tool_name
