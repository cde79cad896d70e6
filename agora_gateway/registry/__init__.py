"""Registry module - tool definitions, validation and dispatch."""

from .exceptions import ToolNotFoundError
from .schemas import (
    DESTRUCTIVE,
    DESTRUCTIVE_IDEMPOTENT,
    READ_ONLY,
    MCPContent,
    MCPTool,
    MCPToolCallResult,
    MCPToolListResult,
    NoInput,
    ToolAnnotations,
    ToolInput,
    ToolSpec,
    tool,
)
from .service import ToolRegistry


__all__ = [
    "ToolNotFoundError",
    "DESTRUCTIVE",
    "DESTRUCTIVE_IDEMPOTENT",
    "READ_ONLY",
    "MCPContent",
    "MCPTool",
    "MCPToolCallResult",
    "MCPToolListResult",
    "NoInput",
    "ToolAnnotations",
    "ToolInput",
    "ToolSpec",
    "tool",
    "ToolRegistry",
]
