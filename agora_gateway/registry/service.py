"""Tool registry: parameter validation, dispatch and result envelopes."""

from typing import Any, Iterable

import structlog
from pydantic import ValidationError

from agora_gateway.audit import audit_tool_invocation
from agora_gateway.gateway.client import MarketplaceClient
from agora_gateway.gateway.exceptions import ApiTimeoutError, MarketplaceError

from .exceptions import ToolNotFoundError
from .schemas import MCPTool, MCPToolCallResult, ToolSpec

logger = structlog.get_logger(__name__)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "arguments"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


class ToolRegistry:
    """Fixed catalog of named tools bound to one marketplace client."""

    def __init__(self, client: MarketplaceClient, specs: Iterable[ToolSpec]) -> None:
        """Register the given tools.

        Args:
            client: Gateway every tool calls into.
            specs: Tool definitions.

        Raises:
            ValueError: If two tools share a name.
        """
        self.client = client
        self._tools: dict[str, ToolSpec] = {}
        for spec in specs:
            if spec.name in self._tools:
                raise ValueError(f"duplicate tool name in catalog: {spec.name}")
            self._tools[spec.name] = spec

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def get(self, name: str) -> ToolSpec:
        spec = self._tools.get(name)
        if spec is None:
            raise ToolNotFoundError(name)
        return spec

    def list_tools(self) -> list[MCPTool]:
        return [spec.to_mcp_tool() for spec in self._tools.values()]

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> MCPToolCallResult:
        """Validate arguments, run the tool and wrap its outcome.

        Every failure past the name lookup is reported as an error envelope
        rather than raised.

        Args:
            name: Tool name.
            arguments: Raw tool arguments.
            request_id: Optional correlation ID for the audit log.

        Returns:
            Success envelope with the JSON result, or an error envelope.

        Raises:
            ToolNotFoundError: If no tool has this name.
        """
        spec = self.get(name)

        async with audit_tool_invocation(tool_name=name, request_id=request_id) as audit_ctx:
            try:
                params = spec.input_model.model_validate(arguments or {})
            except ValidationError as exc:
                audit_ctx.mark_error("INVALID_ARGUMENTS")
                return MCPToolCallResult.error(
                    f"Invalid arguments for tool '{name}': {_format_validation_error(exc)}"
                )

            try:
                result = await spec.handler(self.client, params)
            except ApiTimeoutError as exc:
                audit_ctx.mark_timeout()
                return MCPToolCallResult.error(exc.message)
            except MarketplaceError as exc:
                audit_ctx.mark_error(exc.code)
                return MCPToolCallResult.error(exc.message)
            except Exception as exc:
                logger.exception("tool_call_failed", tool_name=name)
                audit_ctx.mark_error("INTERNAL_ERROR")
                return MCPToolCallResult.error(f"Exception: {exc}")

            if isinstance(result, MCPToolCallResult):
                if result.isError:
                    audit_ctx.mark_error("TOOL_ERROR")
                return result
            return MCPToolCallResult.success(result)
