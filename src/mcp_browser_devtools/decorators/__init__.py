# mcp_browser_devtools/decorators/__init__.py
#
# Re-exports decorators from their respective modules.

from .envelope import tool_envelope

__all__ = [
    "tool_envelope",
]
