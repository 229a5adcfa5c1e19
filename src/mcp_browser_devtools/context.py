"""
Centralized page state management.

The PageContext owns the bookkeeping every tool needs: which pages are open,
which one is selected, the last text snapshot (and therefore which uids are
valid), and the synchronisation point used after state-changing actions.

It does not own the pages themselves. Playwright does, and a page may be
closed by the user, by the site or by another client at any moment. Every
read of the selected page therefore re-checks liveness instead of trusting
what was stored.

Thread Safety:
    PageContext is NOT safe for interleaved tool calls. tools.registry.call_tool
    serializes invocations with get_lock().

Usage:
    from mcp_browser_devtools.context import get_context

    ctx = get_context()
    page = ctx.get_selected_page()
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

from .errors import ElementNotFoundError, PageClosedError, PageIndexError, ToolError
from .snapshot import SnapshotNode, TextSnapshot, take_text_snapshot
from .utils.wait_for import WaitForHelper

logger = logging.getLogger(__name__)


class PageContext:
    """
    Page registry, selected-page cursor and snapshot state for one browser context.

    Attributes:
        browser_context: Playwright BrowserContext new pages are created in
        browser: Playwright Browser (None for persistent contexts)
        playwright: Running Playwright driver, kept so it can be stopped
    """

    def __init__(self, browser_context: Any, *, browser: Any = None, playwright: Any = None):
        self.browser_context = browser_context
        self.browser = browser
        self.playwright = playwright

        self._pages: List[Any] = []
        self._selected_page: Optional[Any] = None
        self._text_snapshot: Optional[TextSnapshot] = None
        self._next_snapshot_id = 1
        self._lock: Optional[asyncio.Lock] = None

    @classmethod
    async def from_browser_context(cls, browser_context: Any, **kwargs) -> "PageContext":
        """Track the pages already open in `browser_context`, opening one if there are none."""
        ctx = cls(browser_context, **kwargs)
        ctx.refresh_pages()
        if not ctx._pages:
            await ctx.new_page()
        elif ctx._selected_page is None:
            ctx._selected_page = ctx._pages[0]
        return ctx

    # ------------------------------------------------------------------
    # Page registry
    # ------------------------------------------------------------------

    @property
    def pages(self) -> List[Any]:
        return list(self._pages)

    def refresh_pages(self) -> List[Any]:
        """
        Re-sync the registry with the browser: drop closed pages, append pages the
        browser opened on its own (popups, target=_blank), keep everyone else's slot.
        The selection is left alone, even if it now points at a closed page.
        """
        live = [p for p in self.browser_context.pages if not p.is_closed()]
        kept = [p for p in self._pages if p in live]
        added = [p for p in live if p not in kept]
        self._pages = kept + added
        return self.pages

    async def new_page(self, url: Optional[str] = None) -> Any:
        page = await self.browser_context.new_page()
        if page not in self._pages:
            self._pages.append(page)
        self._selected_page = page
        logger.info("Opened page #%d", len(self._pages) - 1)
        if url:
            await page.goto(url)
        return page

    def get_page_by_idx(self, idx: int) -> Any:
        if not isinstance(idx, int) or not 0 <= idx < len(self._pages):
            raise PageIndexError()
        return self._pages[idx]

    def get_page_idx(self, page: Any) -> int:
        for idx, tracked in enumerate(self._pages):
            if tracked is page:
                return idx
        raise PageIndexError("Page is not tracked")

    async def close_page(self, idx: int) -> None:
        if len(self._pages) == 1:
            raise ToolError("The last open page can not be closed.")
        page = self.get_page_by_idx(idx)
        was_selected = page is self._selected_page
        await page.close()
        self._pages = [p for p in self._pages if p is not page]
        if was_selected:
            self._selected_page = self._pages[0]
        logger.info("Closed page #%d", idx)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def get_selected_page(self) -> Any:
        page = self._selected_page
        if page is None or page.is_closed():
            raise PageClosedError()
        return page

    def is_page_selected(self, page: Any) -> bool:
        return page is self._selected_page

    def select_page(self, idx: int) -> Any:
        page = self.get_page_by_idx(idx)
        self._selected_page = page
        return page

    # ------------------------------------------------------------------
    # Snapshots and element handles
    # ------------------------------------------------------------------

    def get_text_snapshot(self) -> Optional[TextSnapshot]:
        return self._text_snapshot

    async def create_text_snapshot(self) -> TextSnapshot:
        page = self.get_selected_page()
        snapshot = await take_text_snapshot(page, snapshot_id=self._next_snapshot_id)
        self._next_snapshot_id += 1
        previous, self._text_snapshot = self._text_snapshot, snapshot
        if previous is not None:
            await previous.dispose()
        return snapshot

    def get_snapshot_node(self, uid: str) -> SnapshotNode:
        """Look a uid up in the current snapshot without touching the browser."""
        if self._text_snapshot is None:
            raise ElementNotFoundError("No snapshot found. Use browser_snapshot to capture one.")
        node = self._text_snapshot.id_to_node.get(uid)
        if node is None:
            raise ElementNotFoundError("No such element found in the snapshot")
        return node

    async def get_element_by_uid(self, uid: str) -> Any:
        node = self.get_snapshot_node(uid)
        try:
            handle = await node.element_handle()
        except Exception as e:
            # The frame or page the snapshot was taken in is gone.
            raise ElementNotFoundError("No such element found in the snapshot") from e
        if handle is None:
            raise ElementNotFoundError("No such element found in the snapshot")
        return handle

    # ------------------------------------------------------------------
    # Synchronisation
    # ------------------------------------------------------------------

    async def wait_for_events_after_action(self, action: Callable[[], Awaitable[Any]]) -> Any:
        """Run `action`, then wait for the navigation and DOM churn it caused to settle."""
        helper = WaitForHelper(self.get_selected_page())
        return await helper.wait_for_events_after_action(action)

    def get_lock(self) -> asyncio.Lock:
        """Get or create the lock that serializes tool calls against this context."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def is_browser_connected(self) -> bool:
        if self.browser is not None:
            return self.browser.is_connected()
        return True


# ============================================================================
# Global Context Management
# ============================================================================

_global_context: Optional[PageContext] = None


def get_context() -> PageContext:
    """
    Get the global page context.

    Raises:
        RuntimeError: If no browser has been started yet (see
            browser.launcher.ensure_browser_context).
    """
    if _global_context is None:
        raise RuntimeError("Browser not started. Call browser.launcher.ensure_browser_context() first.")
    return _global_context


def get_context_or_none() -> Optional[PageContext]:
    return _global_context


def set_context(ctx: Optional[PageContext]) -> None:
    global _global_context
    _global_context = ctx


def reset_context() -> None:
    """
    Forget the global context without closing anything.

    Mainly for tests; production code should use browser.launcher.close_browser().
    """
    set_context(None)


__all__ = [
    "PageContext",
    "get_context",
    "get_context_or_none",
    "set_context",
    "reset_context",
]
