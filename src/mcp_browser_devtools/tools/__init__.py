# mcp_browser_devtools/tools/__init__.py
"""
MCP tool definitions.

Each tool is a ToolDefinition: name, description, category, read-only hint,
a pydantic parameter schema and an async handler
`(request, response, context) -> None`. Handlers only talk to the
PageContext and the McpResponse; registry.call_tool does the validation,
locking and rendering around them.
"""

from .categories import CATEGORY_LABELS, ToolCategory
from .definition import ToolDefinition, ToolRequest, define_tool
from .pages import close_page, list_pages, navigate_page, new_page, select_page
from .registry import TOOLS, call_tool, get_tool, tools_by_category
from .script import evaluate_script
from .snapshot import take_snapshot

__all__ = [
    # Definitions
    'ToolCategory',
    'CATEGORY_LABELS',
    'ToolDefinition',
    'ToolRequest',
    'define_tool',
    # Pages
    'list_pages',
    'new_page',
    'select_page',
    'close_page',
    'navigate_page',
    # Debugging
    'evaluate_script',
    'take_snapshot',
    # Dispatch
    'TOOLS',
    'get_tool',
    'tools_by_category',
    'call_tool',
]
