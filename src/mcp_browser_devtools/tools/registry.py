"""Name-keyed tool registry and the single dispatch entry point."""

import logging
from typing import Any, Dict, Optional, Tuple

from ..context import PageContext
from ..errors import UnknownToolError
from ..response import McpResponse
from .categories import CATEGORY_LABELS
from .definition import ToolDefinition, ToolRequest
from .pages import close_page, list_pages, navigate_page, new_page, select_page
from .script import evaluate_script
from .snapshot import take_snapshot

logger = logging.getLogger(__name__)


TOOLS: Tuple[ToolDefinition, ...] = (
    list_pages,
    new_page,
    select_page,
    close_page,
    navigate_page,
    evaluate_script,
    take_snapshot,
)

_TOOLS_BY_NAME: Dict[str, ToolDefinition] = {tool.name: tool for tool in TOOLS}
if len(_TOOLS_BY_NAME) != len(TOOLS):
    raise RuntimeError("Duplicate tool names in TOOLS")


def get_tool(name: str) -> ToolDefinition:
    try:
        return _TOOLS_BY_NAME[name]
    except KeyError:
        raise UnknownToolError(f"Unknown tool: {name}") from None


def tools_by_category() -> Dict[str, list]:
    """Tool names grouped under their category label, in registration order."""
    grouped: Dict[str, list] = {}
    for tool in TOOLS:
        grouped.setdefault(CATEGORY_LABELS[tool.category], []).append(tool.name)
    return grouped


async def call_tool(
    name: str,
    arguments: Optional[Dict[str, Any]] = None,
    context: Optional[PageContext] = None,
) -> str:
    """
    Validate `arguments`, run the named tool against the shared context and render its response.

    Calls are serialized on the context lock: a second call arriving while one
    is running waits for it instead of interleaving with it.

    Raises:
        UnknownToolError: If no tool has this name.
        pydantic.ValidationError: If the arguments do not match the tool's schema.
        ToolError: Whatever the handler raised, unchanged.
    """
    definition = get_tool(name)
    params = definition.parse_params(arguments)

    if context is None:
        # Import lazily: launching pulls in the Playwright driver.
        from ..browser.launcher import ensure_browser_context
        context = await ensure_browser_context()

    async with context.get_lock():
        logger.info("Calling tool %s", name)
        response = McpResponse()
        await definition.handler(ToolRequest(params=params), response, context)
        return await response.handle(definition.name, context)


__all__ = ["TOOLS", "get_tool", "tools_by_category", "call_tool"]
