"""MCP transport module - HTTP and JSON-RPC access to the tool catalog."""

from .router import router

__all__ = ["router"]
