# mcp_browser_devtools/decorators/envelope.py

import os
import json
import asyncio
import logging
import datetime
import functools
import traceback
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from ..errors import ToolError


__all__ = [
    "tool_envelope",
]

logger = logging.getLogger(__name__)


def _error_kind(err: Exception) -> str:
    if isinstance(err, ValidationError):
        return "invalid_arguments"
    if isinstance(err, ToolError):
        return "tool_error"
    return "internal"


def _error_message(err: Exception) -> str:
    if isinstance(err, ValidationError):
        # pydantic prefixes messages raised in validators with "Value error, "
        return "; ".join(
            str(e.get("msg", "")).removeprefix("Value error, ") for e in err.errors()
        )
    return str(err)


def tool_envelope(func: Callable[..., Awaitable[Any]]):
    """
    Decorator for the async MCP tool functions in __main__.

    Success passes the rendered response text through; anything else is
    json.dumps'ed. Failure returns one JSON document per error:

        {"ok": false, "tool": ..., "kind": "tool_error" | "invalid_arguments" | "internal",
         "summary": ..., "error": {"type", "message", "traceback"?}, "timestamp": ...}

    `tool_error` covers the expected preconditions (closed page, unknown uid,
    cross-frame arguments, timeouts); `internal` is everything Playwright or
    the driver threw at us.

    Environment:
      - Set MBD_TOOL_ERRORS_TRACEBACK=0 to suppress traceback in error payloads.
    """
    include_tb = os.getenv("MBD_TOOL_ERRORS_TRACEBACK", "1") not in ("0", "false", "False")
    # __main__ names tool functions mcp_<tool name>
    tool_name = func.__name__.removeprefix("mcp_")

    def _normalize(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        try:
            return json.dumps(value, ensure_ascii=False, default=repr)
        except (TypeError, ValueError):
            return str(value)

    def _error_payload(err: Exception) -> str:
        message = _error_message(err)
        payload = {
            "ok": False,
            "tool": tool_name,
            "kind": _error_kind(err),
            "summary": f"{err.__class__.__name__}: {message}",
            "error": {
                "type": err.__class__.__name__,
                "message": message,
            },
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        }
        if include_tb:
            payload["error"]["traceback"] = traceback.format_exc()
        return json.dumps(payload, ensure_ascii=False)

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            result = await func(*args, **kwargs)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if isinstance(e, ToolError):
                logger.info("Tool %s refused: %s", tool_name, e)
            else:
                logger.warning("Tool %s failed: %s: %s", tool_name, e.__class__.__name__, e)
            return _error_payload(e)
        return _normalize(result)
    return wrapper
