# tests/_fakes.py
"""
In-memory stand-ins for the Playwright objects the context and the tools touch.

They implement just enough of Page / Frame / BrowserContext / JSHandle to
drive the handlers without a browser, and record what was called so tests
can assert on it.
"""

import asyncio
import copy
import re

from mcp_browser_devtools.snapshot import COLLECT_SCRIPT
from mcp_browser_devtools.tools.script import CALL_FUNCTION_SCRIPT
from mcp_browser_devtools.utils.wait_for import STABLE_DOM_SCRIPT


class FakeHandle:
    def __init__(self, frame=None, name="handle", fail_dispose=False, is_function=False, source=None):
        self.frame = frame
        self.name = name
        self.dispose_count = 0
        self.fail_dispose = fail_dispose
        self.is_function = is_function
        self.source = source

    async def dispose(self):
        self.dispose_count += 1
        if self.fail_dispose:
            raise RuntimeError("dispose failed")

    async def owner_frame(self):
        return self.frame

    def as_element(self):
        return self

    def __repr__(self):
        return f"FakeHandle({self.name})"


class FakeRequest:
    def __init__(self, frame, navigation=True):
        self.frame = frame
        self._navigation = navigation

    def is_navigation_request(self):
        return self._navigation


class FakeResponse:
    def __init__(self, url):
        self.url = url
        self.status = 200


class FakeValueHandle:
    def __init__(self, value):
        self.value = value

    async def json_value(self):
        return self.value

    async def dispose(self):
        pass


class FakeElementList:
    """The JS array of DOM nodes a snapshot keeps alive in one frame."""

    def __init__(self, frame, size):
        self.frame = frame
        self.size = size
        self.detached = False
        self.dispose_count = 0
        self.handed_out = []

    async def evaluate_handle(self, expression, index):
        if self.detached:
            raise RuntimeError("Execution context was destroyed")
        if 0 <= index < self.size:
            handle = FakeHandle(frame=self.frame, name=f"el{index}@{self.frame.name}")
        else:
            handle = FakeNonElementHandle()
        self.handed_out.append(handle)
        return handle

    async def dispose(self):
        self.dispose_count += 1


class FakeNonElementHandle(FakeHandle):
    def as_element(self):
        return None


class FakeSnapshotHandle:
    def __init__(self, tree, elements):
        self._props = {"tree": FakeValueHandle(tree), "elements": elements}
        self.dispose_count = 0

    async def get_property(self, name):
        return self._props[name]

    async def dispose(self):
        self.dispose_count += 1


def _count_nodes(tree):
    return 1 + sum(_count_nodes(child) for child in tree.get("children", []))


# Playwright evaluates the expression and, when the result is a function,
# calls it. Only `() => (\n<source>\n)` therefore hands back <source> itself.
_THUNK = re.compile(r"^\(\) => \(\n(?P<source>.*)\n\)$", re.S)
_FUNCTION_LIKE = re.compile(r"^\s*(async\s+)?(function\b|\([^)]*\)\s*=>|[\w$]+\s*=>)", re.S)


class FakeJSError(RuntimeError):
    """What a page-side exception looks like from Python."""


class FakeFrame:
    """
    A frame that mimics how Playwright evaluates JavaScript.

    evaluate_handle() records the expression. A function-valued expression is
    invoked, as Playwright does, so the returned handle is a function only for
    a thunk wrapping one. The snapshot collector is answered from `dom`.

    evaluate() of the call script fails like the page would when handed
    something that is not a function; otherwise it answers from
    `on_evaluate(expression, arg)` or from `scripts`, a map of function
    source to the JSON text it returns.
    """

    def __init__(self, page=None, name="frame", url="about:blank"):
        self.page = page
        self.name = name
        self.url = url
        self.compiled = []
        self.evaluate_calls = []
        self.compiled_handles = []
        self.element_lists = []
        self.on_evaluate = None
        self.scripts = {}
        self.compile_delay = 0
        self.snapshot_error = None
        self.dom = {"index": 0, "role": "RootWebArea", "name": "", "children": []}

    async def evaluate_handle(self, expression, arg=None):
        if expression == COLLECT_SCRIPT:
            if self.snapshot_error is not None:
                raise self.snapshot_error
            elements = FakeElementList(self, _count_nodes(self.dom))
            self.element_lists.append(elements)
            return FakeSnapshotHandle(copy.deepcopy(self.dom), elements)
        if self.compile_delay:
            await asyncio.sleep(self.compile_delay)
        self.compiled.append(expression)
        thunk = _THUNK.match(expression)
        if thunk is not None:
            handle = FakeHandle(frame=self, name=f"fn@{self.name}", is_function=True,
                                source=thunk.group("source"))
        elif _FUNCTION_LIKE.match(expression):
            # the function was called; what comes back is its return value
            handle = FakeHandle(frame=self, name=f"result@{self.name}")
        else:
            handle = FakeHandle(frame=self, name=f"value@{self.name}")
        self.compiled_handles.append(handle)
        return handle

    async def evaluate(self, expression, arg=None):
        if expression == STABLE_DOM_SCRIPT:
            return True
        self.evaluate_calls.append((expression, arg))
        if expression == CALL_FUNCTION_SCRIPT:
            fn = arg[0]
            if not getattr(fn, "is_function", False):
                raise FakeJSError("TypeError: fn is not a function")
            if self.on_evaluate is None:
                return self.scripts.get(fn.source)
        if self.on_evaluate is None:
            return None
        return await self.on_evaluate(expression, arg)


class FakePage(FakeFrame):
    def __init__(self, browser_context=None, url="about:blank", emit_navigation_requests=True):
        super().__init__(page=None, name="page")
        self.page = self
        self.browser_context = browser_context
        self._closed = False
        self._history = [url]
        self._history_idx = 0
        self._listeners = {}
        self.emit_navigation_requests = emit_navigation_requests
        self.brought_to_front = 0
        self.load_state_waits = []
        self.goto_calls = []
        self.reload_calls = 0
        self.child_frames = []

    # -- identity / lifecycle ------------------------------------------------

    @property
    def url(self):
        return self._history[self._history_idx]

    @url.setter
    def url(self, value):
        # FakeFrame.__init__ assigns url; the page derives it from history.
        pass

    @property
    def main_frame(self):
        return self

    @property
    def frames(self):
        return [self] + list(self.child_frames)

    def add_frame(self, name, url="about:srcdoc"):
        frame = FakeFrame(page=self, name=name, url=url)
        self.child_frames.append(frame)
        return frame

    def is_closed(self):
        return self._closed

    async def close(self, **kwargs):
        self._closed = True
        if self.browser_context is not None and self in self.browser_context.pages:
            self.browser_context.pages.remove(self)

    async def bring_to_front(self):
        self.brought_to_front += 1

    # -- events --------------------------------------------------------------

    def on(self, event, fn):
        self._listeners.setdefault(event, []).append(fn)

    def remove_listener(self, event, fn):
        self._listeners.get(event, []).remove(fn)

    def listener_count(self, event):
        return len(self._listeners.get(event, []))

    def _emit(self, event, payload):
        for fn in list(self._listeners.get(event, [])):
            fn(payload)

    async def wait_for_load_state(self, state="load", timeout=None):
        self.load_state_waits.append(state)

    # -- navigation ----------------------------------------------------------

    def _navigated(self):
        if self.emit_navigation_requests:
            self._emit("request", FakeRequest(self.main_frame))

    async def goto(self, url, **kwargs):
        self.goto_calls.append((url, kwargs))
        self._history = self._history[: self._history_idx + 1] + [url]
        self._history_idx += 1
        self._navigated()
        return FakeResponse(url)

    async def go_back(self, **kwargs):
        if self._history_idx == 0:
            return None
        self._history_idx -= 1
        self._navigated()
        return FakeResponse(self.url)

    async def go_forward(self, **kwargs):
        if self._history_idx >= len(self._history) - 1:
            return None
        self._history_idx += 1
        self._navigated()
        return FakeResponse(self.url)

    async def reload(self, **kwargs):
        self.reload_calls += 1
        self._navigated()
        return FakeResponse(self.url)


class FakeBrowserContext:
    def __init__(self, pages=0):
        self.closed = False
        self.pages = []
        for _ in range(pages):
            self.pages.append(FakePage(self))

    async def new_page(self):
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def close(self):
        self.closed = True
        for page in list(self.pages):
            await page.close()


class FakeBrowser:
    def __init__(self, connected=True):
        self.connected = connected
        self.close_calls = 0

    def is_connected(self):
        return self.connected

    async def close(self):
        self.close_calls += 1
        self.connected = False


class FakePlaywright:
    def __init__(self):
        self.stopped = False

    async def stop(self):
        self.stopped = True


def run(loop, coro):
    return loop.run_until_complete(coro)


def drain(loop):
    """Let fire-and-forget tasks (handle disposal) run to completion."""
    loop.run_until_complete(asyncio.sleep(0.01))


def make_context(loop, pages=1):
    """A PageContext over a fake browser context holding `pages` blank pages."""
    from mcp_browser_devtools.context import PageContext

    browser_context = FakeBrowserContext(pages=pages)
    return run(loop, PageContext.from_browser_context(browser_context))
