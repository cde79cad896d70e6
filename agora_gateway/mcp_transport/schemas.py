"""Pydantic schemas for MCP protocol messages."""

from typing import Any, Literal
from pydantic import BaseModel, Field


class MCPInitializeParams(BaseModel):
    """Parameters for initialize request."""

    protocolVersion: str = Field(description="MCP protocol version")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    clientInfo: dict[str, str] = Field(default_factory=dict)


class MCPToolCallParams(BaseModel):
    """Parameters for tools/call."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class MCPJSONRPCRequest(BaseModel):
    """Generic JSON-RPC 2.0 request."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    method: str
    params: dict[str, Any] | None = None


class MCPJSONRPCResponse(BaseModel):
    """Generic JSON-RPC 2.0 response."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    result: Any | None = None
    error: dict[str, Any] | None = None


class InvokeToolRequest(BaseModel):
    """Simplified request schema for the invoke endpoint.

    Attributes:
        tool_name: Name of the tool to invoke.
        arguments: Arguments to pass to the tool.
        request_id: Optional request ID for tracing.
    """

    tool_name: str = Field(..., description="Tool to invoke")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")
    request_id: str | None = Field(default=None, description="Optional request ID")


class JSONRPCErrorCodes:
    """Standard JSON-RPC error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
