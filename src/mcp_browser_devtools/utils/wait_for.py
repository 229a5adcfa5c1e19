"""Wait for the page to settle after a state-changing action."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from ..constants import (
    EXPECT_NAVIGATION_IN_MS,
    NAVIGATION_TIMEOUT_MS,
    STABLE_DOM_FOR_MS,
    STABLE_DOM_TIMEOUT_MS,
)

logger = logging.getLogger(__name__)


# Resolves once no DOM mutation happened for `stableFor` ms, or after `timeout` ms.
STABLE_DOM_SCRIPT = """([timeout, stableFor]) => new Promise(resolve => {
  let quietTimer;
  const finish = () => {
    observer.disconnect();
    clearTimeout(quietTimer);
    clearTimeout(deadline);
    resolve(true);
  };
  const observer = new MutationObserver(() => {
    clearTimeout(quietTimer);
    quietTimer = setTimeout(finish, stableFor);
  });
  const deadline = setTimeout(finish, timeout);
  observer.observe(document.documentElement || document, {
    attributes: true,
    childList: true,
    characterData: true,
    subtree: true,
  });
  quietTimer = setTimeout(finish, stableFor);
})"""


class WaitForHelper:
    """
    Runs an action against one page, then waits for what the action set off.

    Order of events:
        1. start listening for a main-frame navigation request,
        2. run the action,
        3. if a navigation started within `expect_navigation_in_ms`, wait for
           it to reach the `load` state (bounded by `navigation_timeout_ms`),
        4. wait until the DOM stops mutating (bounded by `stable_dom_timeout_ms`).

    Steps 3 and 4 never fail the caller: a page that keeps mutating or a
    navigation that does not finish only costs the bounded wait. Errors from
    the action itself propagate unchanged.
    """

    def __init__(
        self,
        page: Any,
        *,
        stable_dom_timeout_ms: int = STABLE_DOM_TIMEOUT_MS,
        stable_dom_for_ms: int = STABLE_DOM_FOR_MS,
        expect_navigation_in_ms: int = EXPECT_NAVIGATION_IN_MS,
        navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS,
    ):
        self.page = page
        self.stable_dom_timeout_ms = stable_dom_timeout_ms
        self.stable_dom_for_ms = stable_dom_for_ms
        self.expect_navigation_in_ms = expect_navigation_in_ms
        self.navigation_timeout_ms = navigation_timeout_ms

    async def wait_for_stable_dom(self) -> None:
        try:
            await asyncio.wait_for(
                self.page.evaluate(
                    STABLE_DOM_SCRIPT,
                    [self.stable_dom_timeout_ms, self.stable_dom_for_ms],
                ),
                # leave the in-page deadline room to fire first
                timeout=(self.stable_dom_timeout_ms + 500) / 1000.0,
            )
        except asyncio.TimeoutError:
            logger.debug("DOM did not settle within %sms", self.stable_dom_timeout_ms)
        except Exception as e:
            # Typically "Execution context was destroyed" from a late navigation.
            logger.debug("Stable DOM wait aborted: %s", e)

    def _listen_for_navigation(self) -> "tuple[asyncio.Future, Callable[[Any], None]]":
        loop = asyncio.get_running_loop()
        started: asyncio.Future = loop.create_future()

        def on_request(request: Any) -> None:
            if started.done():
                return
            try:
                is_main_navigation = (
                    request.is_navigation_request() and request.frame == self.page.main_frame
                )
            except Exception:
                is_main_navigation = False
            if is_main_navigation:
                started.set_result(True)

        self.page.on("request", on_request)
        return started, on_request

    async def _wait_for_navigation(self, started: asyncio.Future) -> None:
        try:
            await asyncio.wait_for(
                asyncio.shield(started), timeout=self.expect_navigation_in_ms / 1000.0
            )
        except asyncio.TimeoutError:
            return
        try:
            await self.page.wait_for_load_state("load", timeout=self.navigation_timeout_ms)
        except Exception as e:
            logger.debug("Navigation after action did not finish loading: %s", e)

    async def wait_for_events_after_action(self, action: Callable[[], Awaitable[Any]]) -> Optional[Any]:
        started, listener = self._listen_for_navigation()
        try:
            result = await action()
            await self._wait_for_navigation(started)
        finally:
            try:
                self.page.remove_listener("request", listener)
            except Exception as e:
                logger.debug("Could not remove request listener: %s", e)
            if not started.done():
                started.cancel()
        await self.wait_for_stable_dom()
        return result


__all__ = ["WaitForHelper", "STABLE_DOM_SCRIPT"]
