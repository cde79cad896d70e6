"""Pydantic schemas for tool definitions and result envelopes."""

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ToolInput(BaseModel):
    """Base model for tool parameters: camelCase names, unknown fields dropped."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ToolAnnotations(BaseModel):
    """Capability hints advertised with a tool.

    Attributes:
        readOnlyHint: The tool does not modify remote state.
        destructiveHint: The tool may create, change or remove remote state.
        idempotentHint: Repeating the call has no additional effect.
        openWorldHint: The tool reaches a system outside this process.
    """

    readOnlyHint: bool | None = None
    destructiveHint: bool | None = None
    idempotentHint: bool | None = None
    openWorldHint: bool | None = None


READ_ONLY = ToolAnnotations(readOnlyHint=True, openWorldHint=True)
DESTRUCTIVE = ToolAnnotations(destructiveHint=True, idempotentHint=False, openWorldHint=True)
DESTRUCTIVE_IDEMPOTENT = ToolAnnotations(destructiveHint=True, idempotentHint=True, openWorldHint=True)


class MCPContent(BaseModel):
    """Content item in tool response."""

    type: Literal["text"] = "text"
    text: str


class MCPToolCallResult(BaseModel):
    """Uniform result envelope for a tool call."""

    content: list[MCPContent]
    isError: bool = False

    @classmethod
    def success(cls, payload: Any) -> "MCPToolCallResult":
        """Wrap a JSON payload as pretty-printed text content.

        Args:
            payload: Decoded JSON returned by the marketplace API.

        Returns:
            MCPToolCallResult with ``isError`` false.
        """
        return cls(content=[MCPContent(text=json.dumps(payload, indent=2))])

    @classmethod
    def error(cls, message: str) -> "MCPToolCallResult":
        """Create an error envelope carrying a textual description."""
        return cls(content=[MCPContent(text=message)], isError=True)


class MCPTool(BaseModel):
    """Tool definition as advertised to callers."""

    name: str
    description: str
    inputSchema: dict[str, Any]
    annotations: ToolAnnotations = Field(default_factory=ToolAnnotations)


class MCPToolListResult(BaseModel):
    """Result for tools/list."""

    tools: list[MCPTool]


ToolHandler = Callable[[Any, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolSpec:
    """A catalog tool bound to its parameter model and handler.

    Attributes:
        name: Unique tool name.
        description: One-paragraph description advertised to callers.
        input_model: Parameter model; its JSON schema is the tool's input schema.
        annotations: Capability hints.
        handler: Async ``(client, params)`` callable returning JSON or an envelope.
    """

    name: str
    description: str
    input_model: type[ToolInput]
    annotations: ToolAnnotations
    handler: ToolHandler

    def to_mcp_tool(self) -> MCPTool:
        return MCPTool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_model.model_json_schema(by_alias=True),
            annotations=self.annotations,
        )


class NoInput(ToolInput):
    """Parameters for tools that take none."""


def tool(
    name: str,
    description: str,
    annotations: ToolAnnotations,
    input_model: type[ToolInput] = NoInput,
) -> Callable[[ToolHandler], ToolSpec]:
    """Declare a catalog tool from an async ``(client, params)`` handler.

    Example:
        @tool("my_profile", "View your agent profile.", READ_ONLY)
        async def my_profile(client, params):
            return await client.get_profile()
    """

    def decorator(handler: ToolHandler) -> ToolSpec:
        return ToolSpec(
            name=name,
            description=description,
            input_model=input_model,
            annotations=annotations,
            handler=handler,
        )

    return decorator
