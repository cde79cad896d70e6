"""HTTP transport for the MCP tool catalog."""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from agora_gateway.dependencies import get_tool_registry
from agora_gateway.registry import MCPToolCallResult, MCPToolListResult, ToolRegistry

from .schemas import (
    InvokeToolRequest,
    JSONRPCErrorCodes,
    MCPInitializeParams,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
    MCPToolCallParams,
)
from .service import handle_initialize, handle_tools_call, handle_tools_list


router = APIRouter(prefix="/mcp", tags=["mcp"])
logger = structlog.get_logger(__name__)


def _jsonrpc_error(request_id: str | int | None, code: int, message: str) -> MCPJSONRPCResponse:
    return MCPJSONRPCResponse(id=request_id, error={"code": code, "message": message})


async def _dispatch(registry: ToolRegistry, body: Any) -> MCPJSONRPCResponse | None:
    request_id = body.get("id") if isinstance(body, dict) else None
    try:
        jsonrpc_request = MCPJSONRPCRequest.model_validate(body)
    except ValidationError:
        return _jsonrpc_error(request_id, JSONRPCErrorCodes.INVALID_REQUEST, "Invalid Request")

    method = jsonrpc_request.method
    params = jsonrpc_request.params or {}

    try:
        if method == "initialize":
            init_params = MCPInitializeParams(**params)
            result = await handle_initialize(init_params)
            return MCPJSONRPCResponse(id=jsonrpc_request.id, result=result)

        elif method == "notifications/initialized":
            # Client is confirming initialization, just acknowledge
            return None

        elif method == "ping":
            return MCPJSONRPCResponse(id=jsonrpc_request.id, result={})

        elif method == "tools/list":
            result = await handle_tools_list(registry)
            return MCPJSONRPCResponse(id=jsonrpc_request.id, result=result.model_dump(exclude_none=True))

        elif method == "tools/call":
            call_params = MCPToolCallParams(**params)
            result = await handle_tools_call(
                registry,
                name=call_params.name,
                arguments=call_params.arguments,
                request_id=str(jsonrpc_request.id) if jsonrpc_request.id is not None else None,
            )
            return MCPJSONRPCResponse(id=jsonrpc_request.id, result=result.model_dump())

        else:
            return _jsonrpc_error(
                jsonrpc_request.id,
                JSONRPCErrorCodes.METHOD_NOT_FOUND,
                f"Method not found: {method}",
            )

    except ValidationError as e:
        return _jsonrpc_error(
            jsonrpc_request.id,
            JSONRPCErrorCodes.INVALID_PARAMS,
            f"Invalid params for {method}: {e.error_count()} validation error(s)",
        )
    except Exception as e:
        logger.error("jsonrpc_internal_error", method=method, error=str(e), exc_info=True)
        return _jsonrpc_error(
            jsonrpc_request.id,
            JSONRPCErrorCodes.INTERNAL_ERROR,
            f"Internal error: {str(e)}",
        )


@router.post("", operation_id="mcp_jsonrpc")
async def jsonrpc_endpoint(
    request: Request,
    registry: Annotated[ToolRegistry, Depends(get_tool_registry)],
):
    """Handle JSON-RPC 2.0 messages."""
    try:
        body = await request.json()
    except ValueError:
        response = _jsonrpc_error(None, JSONRPCErrorCodes.PARSE_ERROR, "Parse error")
        return JSONResponse(content=response.model_dump())

    response = await _dispatch(registry, body)
    if response is None:
        return Response(status_code=202)
    return JSONResponse(content=response.model_dump())


@router.get("/tools", response_model=MCPToolListResult, response_model_exclude_none=True)
async def list_tools_endpoint(
    registry: Annotated[ToolRegistry, Depends(get_tool_registry)],
) -> MCPToolListResult:
    """List every tool in the catalog with its input schema and hints."""
    return await handle_tools_list(registry)


@router.post("/invoke", response_model=MCPToolCallResult)
async def invoke_tool_endpoint(
    request: InvokeToolRequest,
    registry: Annotated[ToolRegistry, Depends(get_tool_registry)],
    x_request_id: Annotated[str | None, Header()] = None,
) -> MCPToolCallResult:
    """Invoke a catalog tool by name.

    Unknown tools raise ToolNotFoundError, which the application maps to 404.
    """
    return await registry.call_tool(
        request.tool_name,
        request.arguments,
        request_id=x_request_id or request.request_id,
    )
