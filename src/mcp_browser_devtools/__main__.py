#region Overview
"""
MCP server exposing browser pages to an agent as a small set of tools.

## Pages and the selected page

The server keeps a list of the pages open in its browser and a cursor on one
of them, the *selected page*. Tools that do not name a page act on the
selected page. `list_pages` shows the list with the cursor marked,
`select_page` moves it and `new_page` opens a page and moves the cursor onto it.

If the selected page gets closed behind the server's back (by the user or by
the site), the next tool that needs it fails with
"The selected page has been closed. Call list_pages to see open pages." The
cursor is never moved silently.

## Snapshots and uids

`browser_snapshot` returns a role/name outline of the selected page in which
every node carries a uid, e.g. `uid=3_12 button "Submit"`. Those uids are
what `evaluate_script` accepts as element arguments. Taking a new snapshot
invalidates the uids of the previous one.

## Script evaluation

`evaluate_script` compiles the given function in the page (or in the frame
its element arguments live in), calls it and returns its JSON-serialized
result. Compilation and execution are each bounded by 30 seconds. Elements
from different frames cannot be passed together.

## Concurrency

Tool calls against the shared browser are queued: a call that arrives while
another is running waits for it to finish.
"""
#endregion

#region Imports
import os
import sys
import logging
from contextlib import asynccontextmanager
from typing import Annotated, List, Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field
#endregion

#region Import from your package
from mcp_browser_devtools.browser.launcher import close_browser
from mcp_browser_devtools.decorators import tool_envelope
from mcp_browser_devtools.tools import (
    call_tool,
    close_page,
    evaluate_script,
    list_pages,
    navigate_page,
    new_page,
    select_page,
    take_snapshot,
)
from mcp_browser_devtools.tools.definition import ToolDefinition
from mcp_browser_devtools.tools.script import ElementArg
#endregion

#region Logger
logger = logging.getLogger(__name__)
#endregion

#region Helper Functions
def _annotations(definition: ToolDefinition) -> ToolAnnotations:
    return ToolAnnotations(title=definition.name, readOnlyHint=definition.read_only_hint)


def _register(definition: ToolDefinition):
    return mcp.tool(
        name=definition.name,
        description=definition.description,
        annotations=_annotations(definition),
    )
#endregion

#region FastMCP Initialization
@asynccontextmanager
async def _lifespan(server: FastMCP):
    try:
        yield
    finally:
        logger.info("Shutting down; closing browser")
        await close_browser()


mcp = FastMCP("mcp_browser_devtools", lifespan=_lifespan)
#endregion

#region Tools -- Navigation
@_register(list_pages)
@tool_envelope
async def mcp_list_pages() -> str:
    return await call_tool(list_pages.name, {})


@_register(new_page)
@tool_envelope
async def mcp_new_page(
    url: Annotated[str, Field(description="URL to load in a new page.")],
    timeout: Annotated[Optional[int], Field(description="Maximum wait time in milliseconds.")] = None,
) -> str:
    return await call_tool(new_page.name, {"url": url, "timeout": timeout})


@_register(select_page)
@tool_envelope
async def mcp_select_page(
    pageIdx: Annotated[int, Field(description="The index of the page to select, as shown by list_pages.")],
) -> str:
    return await call_tool(select_page.name, {"pageIdx": pageIdx})


@_register(close_page)
@tool_envelope
async def mcp_close_page(
    pageIdx: Annotated[int, Field(description="The index of the page to close, as shown by list_pages.")],
) -> str:
    return await call_tool(close_page.name, {"pageIdx": pageIdx})


@_register(navigate_page)
@tool_envelope
async def mcp_navigate_page(
    type: Annotated[
        Optional[Literal["url", "goto", "back", "forward", "reload"]],
        Field(description="Navigate by URL, back or forward in history, or reload. Defaults to 'url' when a URL is given."),
    ] = None,
    url: Annotated[Optional[str], Field(description="Target URL (only type=url).")] = None,
    timeout: Annotated[Optional[int], Field(description="Maximum wait time in milliseconds.")] = None,
) -> str:
    return await call_tool(navigate_page.name, {"type": type, "url": url, "timeout": timeout})
#endregion

#region Tools -- Debugging
@_register(evaluate_script)
@tool_envelope
async def mcp_evaluate_script(
    function: Annotated[str, Field(description="A JavaScript function declaration to run in the selected page, e.g. `() => document.title` or `(el) => el.innerText`.")],
    args: Annotated[Optional[List[ElementArg]], Field(description="An optional list of arguments to pass to the function.")] = None,
) -> str:
    arguments = {"function": function}
    if args is not None:
        arguments["args"] = [arg.model_dump() for arg in args]
    return await call_tool(evaluate_script.name, arguments)


@_register(take_snapshot)
@tool_envelope
async def mcp_browser_snapshot() -> str:
    return await call_tool(take_snapshot.name, {})
#endregion


def main() -> None:
    # stdout carries the MCP stdio transport; logs go to stderr.
    logging.basicConfig(
        level=os.getenv("MBD_LOG_LEVEL", "INFO").upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting mcp_browser_devtools")
    mcp.run()


if __name__ == "__main__":
    main()
