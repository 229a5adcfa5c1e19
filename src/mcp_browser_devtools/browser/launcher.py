"""Start (or attach to) the browser and publish the global PageContext."""

import asyncio
import logging
from typing import Optional

from playwright.async_api import async_playwright

from ..config import get_env_config
from ..context import PageContext, get_context_or_none, reset_context, set_context

logger = logging.getLogger(__name__)

_start_lock: Optional[asyncio.Lock] = None


def _get_start_lock() -> asyncio.Lock:
    global _start_lock
    if _start_lock is None:
        _start_lock = asyncio.Lock()
    return _start_lock


def _launch_options(config: dict) -> dict:
    options = {"headless": config.get("headless", True)}
    if config.get("executable_path"):
        options["executable_path"] = config["executable_path"]
    elif config.get("channel"):
        options["channel"] = config["channel"]
    return options


def _context_options(config: dict) -> dict:
    return {"viewport": config["viewport"]} if config.get("viewport") else {}


async def launch_browser_context(config: Optional[dict] = None) -> PageContext:
    """
    Start Playwright and open a browser context according to `config`.

    Three modes, picked from the configuration:
      - cdp_endpoint: attach to a running Chromium and reuse its first context,
      - user_data_dir: launch a persistent context on that profile,
      - otherwise: launch a fresh Chromium and create a new context.
    """
    if config is None:
        config = get_env_config()

    playwright = await async_playwright().start()
    try:
        if config.get("cdp_endpoint"):
            logger.info("Attaching to browser at %s", config["cdp_endpoint"])
            browser = await playwright.chromium.connect_over_cdp(config["cdp_endpoint"])
            if browser.contexts:
                browser_context = browser.contexts[0]
            else:
                browser_context = await browser.new_context(**_context_options(config))
        elif config.get("user_data_dir"):
            logger.info("Launching persistent context on %s", config["user_data_dir"])
            browser_context = await playwright.chromium.launch_persistent_context(
                config["user_data_dir"],
                **_launch_options(config),
                **_context_options(config),
            )
            browser = browser_context.browser
        else:
            logger.info("Launching Chromium (headless=%s)", config.get("headless", True))
            browser = await playwright.chromium.launch(**_launch_options(config))
            browser_context = await browser.new_context(**_context_options(config))
    except Exception:
        await playwright.stop()
        raise

    return await PageContext.from_browser_context(
        browser_context, browser=browser, playwright=playwright
    )


async def ensure_browser_context() -> PageContext:
    """Return the global PageContext, launching the browser on first use or after a disconnect."""
    ctx = get_context_or_none()
    if ctx is not None and ctx.is_browser_connected():
        return ctx

    async with _get_start_lock():
        ctx = get_context_or_none()
        if ctx is not None and ctx.is_browser_connected():
            return ctx
        if ctx is not None:
            logger.warning("Browser disconnected; starting a new one")
            await close_browser()
        ctx = await launch_browser_context()
        set_context(ctx)
        return ctx


async def close_browser() -> None:
    """Close whatever launch_browser_context opened and forget the global context."""
    ctx = get_context_or_none()
    reset_context()
    if ctx is None:
        return
    try:
        if ctx.browser is not None:
            await ctx.browser.close()
        else:
            await ctx.browser_context.close()
    except Exception as e:
        logger.debug("Ignoring error while closing the browser: %s", e)
    if ctx.playwright is not None:
        try:
            await ctx.playwright.stop()
        except Exception as e:
            logger.debug("Ignoring error while stopping Playwright: %s", e)


__all__ = ["launch_browser_context", "ensure_browser_context", "close_browser"]
