# tests/test_server.py
import json
import asyncio

import pytest

from mcp_browser_devtools import __main__ as server
from mcp_browser_devtools.tools import TOOLS

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


def test_every_tool_is_registered(event_loop):
    tools = event_loop.run_until_complete(server.mcp.list_tools())
    by_name = {tool.name: tool for tool in tools}
    assert set(by_name) == {definition.name for definition in TOOLS}
    for definition in TOOLS:
        assert by_name[definition.name].annotations.readOnlyHint is definition.read_only_hint


def test_page_index_parameter_keeps_wire_name(event_loop):
    tools = event_loop.run_until_complete(server.mcp.list_tools())
    select = next(tool for tool in tools if tool.name == "select_page")
    assert "pageIdx" in select.inputSchema["properties"]


def test_tool_errors_come_back_as_payload(event_loop, monkeypatch):
    async def failing_call_tool(name, arguments=None, context=None):
        raise RuntimeError(f"{name} exploded")

    monkeypatch.setattr(server, "call_tool", failing_call_tool)

    out = event_loop.run_until_complete(server.mcp_select_page(pageIdx=3))
    payload = json.loads(out)
    assert payload["ok"] is False
    assert payload["tool"] == "select_page"
    assert payload["error"]["message"] == "select_page exploded"


def test_evaluate_script_forwards_element_args(event_loop, monkeypatch):
    seen = {}

    async def recording_call_tool(name, arguments=None, context=None):
        seen[name] = arguments
        return "# evaluate_script response"

    monkeypatch.setattr(server, "call_tool", recording_call_tool)

    args = [server.ElementArg(uid="1_4")]
    out = event_loop.run_until_complete(server.mcp_evaluate_script(function="(el) => el.id", args=args))

    assert out == "# evaluate_script response"
    assert seen["evaluate_script"] == {"function": "(el) => el.id", "args": [{"uid": "1_4"}]}
