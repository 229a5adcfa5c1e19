"""Browser process bootstrap (Playwright)."""

from .launcher import close_browser, ensure_browser_context, launch_browser_context

__all__ = ["close_browser", "ensure_browser_context", "launch_browser_context"]
