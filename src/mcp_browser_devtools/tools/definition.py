"""Declarative tool records."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, Type, TypeVar

from pydantic import BaseModel

from .categories import ToolCategory

if TYPE_CHECKING:
    from ..context import PageContext
    from ..response import McpResponse

P = TypeVar("P", bound=BaseModel)


@dataclass(frozen=True)
class ToolRequest(Generic[P]):
    """What a handler receives: parameters already validated against the tool's schema."""

    params: P


Handler = Callable[[ToolRequest, "McpResponse", "PageContext"], Awaitable[None]]


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    category: ToolCategory
    read_only_hint: bool
    schema: Type[BaseModel]
    handler: Handler

    def parse_params(self, arguments: Any) -> BaseModel:
        """Validate raw MCP arguments; raises pydantic.ValidationError."""
        return self.schema.model_validate(arguments or {})

    def input_schema(self) -> dict:
        return self.schema.model_json_schema()


def define_tool(
    *,
    name: str,
    description: str,
    category: ToolCategory,
    read_only_hint: bool,
    schema: Type[BaseModel],
    handler: Handler,
) -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description=description,
        category=category,
        read_only_hint=read_only_hint,
        schema=schema,
        handler=handler,
    )


__all__ = ["ToolRequest", "ToolDefinition", "define_tool", "Handler"]
