"""
Exception types raised by the context and the tool handlers.

Handlers raise, the dispatch layer does not catch, and the MCP layer
(decorators.envelope.tool_envelope) turns whatever escapes into the uniform
error payload. The subclasses also derive from the closest builtin so callers
can catch them without importing this module.
"""


class ToolError(RuntimeError):
    """Base class for failures reported back to the MCP client."""


class PageClosedError(ToolError):
    """The selected page was closed by something other than this server."""

    def __init__(self, message: str = "The selected page has been closed. Call list_pages to see open pages."):
        super().__init__(message)


class PageIndexError(ToolError, IndexError):
    """A page index does not point at a currently tracked page."""

    def __init__(self, message: str = "No page found"):
        super().__init__(message)


class ElementNotFoundError(ToolError, LookupError):
    """A snapshot uid could not be resolved to a live element."""


class CrossFrameEvaluationError(ToolError, ValueError):
    """Script arguments belong to more than one frame."""

    def __init__(self, message: str = "Elements from different frames can't be evaluated together."):
        super().__init__(message)


class ScriptTimeoutError(ToolError):
    """A bounded browser operation did not finish in time."""


class NavigationHistoryError(ToolError):
    """There is no history entry in the requested direction."""


class UnknownToolError(ToolError, KeyError):
    """No tool is registered under the requested name."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


__all__ = [
    "ToolError",
    "PageClosedError",
    "PageIndexError",
    "ElementNotFoundError",
    "CrossFrameEvaluationError",
    "ScriptTimeoutError",
    "NavigationHistoryError",
    "UnknownToolError",
]
