"""
Browser DevTools-style tools for MCP clients.

The server owns one browser context. Agents drive it through tools that act
on a shared list of pages and a selected-page cursor (see context.py); every
tool call gets a fresh McpResponse that is rendered to text once the handler
is done (see response.py).

Each agent connects through its own MCP session; calls coming in over one
session are queued, never interleaved.
"""

from .context import PageContext, get_context, reset_context, set_context
from .response import McpResponse

__all__ = [
    "PageContext",
    "McpResponse",
    "get_context",
    "set_context",
    "reset_context",
]
