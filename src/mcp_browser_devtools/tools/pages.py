"""Page lifecycle tools: list, open, select, close and navigate pages."""

import logging
from typing import Literal, Optional

from playwright.async_api import Error as PlaywrightError
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import NavigationHistoryError
from .categories import ToolCategory
from .definition import define_tool

logger = logging.getLogger(__name__)


TIMEOUT_DESCRIPTION = (
    "Maximum wait time in milliseconds. If set to 0 or omitted, the default timeout is used."
)


def _timeout_options(timeout: Optional[int]) -> dict:
    return {"timeout": timeout} if timeout else {}


#region Schemas
class ListPagesParams(BaseModel):
    pass


class NewPageParams(BaseModel):
    url: str = Field(..., description="URL to load in a new page.")
    timeout: Optional[int] = Field(None, ge=0, description=TIMEOUT_DESCRIPTION)


class PageIdxParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_idx: int = Field(..., alias="pageIdx", description="The index of the page, as shown by list_pages.")


class NavigatePageParams(BaseModel):
    type: Optional[Literal["url", "goto", "back", "forward", "reload"]] = Field(
        None,
        description=(
            "Navigate the page by URL, back or forward in history, or reload. "
            "Defaults to 'url' when a URL is given."
        ),
    )
    url: Optional[str] = Field(None, description="Target URL (only type=url).")
    timeout: Optional[int] = Field(None, ge=0, description=TIMEOUT_DESCRIPTION)

    @model_validator(mode="after")
    def _resolve_type(self) -> "NavigatePageParams":
        if self.type is None:
            if not self.url:
                raise ValueError("Either URL or a type is required.")
            self.type = "url"
        elif self.type == "goto":
            self.type = "url"
        if self.type == "url" and not self.url:
            raise ValueError("A URL is required for navigation of type=url.")
        return self
#endregion


#region Handlers
async def _list_pages(request, response, context) -> None:
    response.set_include_pages(True)


async def _new_page(request, response, context) -> None:
    params = request.params
    page = await context.new_page()
    await context.wait_for_events_after_action(
        lambda: page.goto(params.url, **_timeout_options(params.timeout))
    )
    response.set_include_pages(True)


async def _select_page(request, response, context) -> None:
    page = context.select_page(request.params.page_idx)
    await page.bring_to_front()
    response.set_include_pages(True)


async def _close_page(request, response, context) -> None:
    await context.close_page(request.params.page_idx)
    response.set_include_pages(True)


async def _traverse_history(page, direction: str, options: dict) -> None:
    before = page.url
    go = page.go_back if direction == "back" else page.go_forward
    # Playwright answers None when there is nothing to go to.
    result = await go(**options)
    if result is None and page.url == before:
        raise NavigationHistoryError(f"there is no {direction} history entry")


async def _navigate_page(request, response, context) -> None:
    params = request.params
    page = context.get_selected_page()
    options = _timeout_options(params.timeout)

    async def navigate() -> None:
        if params.type == "url":
            await page.goto(params.url, **options)
            response.append_response_line(f"Successfully navigated to {params.url}.")
        elif params.type == "reload":
            await page.reload(**options)
            response.append_response_line("Successfully reloaded the page.")
        else:
            direction = params.type
            try:
                await _traverse_history(page, direction, options)
            except (NavigationHistoryError, PlaywrightError) as e:
                logger.info("History navigation %s failed: %s", direction, e)
                response.append_response_line(
                    f"Unable to navigate {direction} in the selected page: {e}"
                )
            else:
                response.append_response_line(f"Successfully navigated {direction} to {page.url}.")

    await context.wait_for_events_after_action(navigate)
    response.set_include_pages(True)
#endregion


#region Definitions
list_pages = define_tool(
    name="list_pages",
    description="Get a list of pages open in the browser.",
    category=ToolCategory.NAVIGATION,
    read_only_hint=True,
    schema=ListPagesParams,
    handler=_list_pages,
)

new_page = define_tool(
    name="new_page",
    description="Creates a new page, loads the given URL in it and selects it.",
    category=ToolCategory.NAVIGATION,
    read_only_hint=False,
    schema=NewPageParams,
    handler=_new_page,
)

select_page = define_tool(
    name="select_page",
    description="Select a page as a context for future tool calls.",
    category=ToolCategory.NAVIGATION,
    read_only_hint=True,
    schema=PageIdxParams,
    handler=_select_page,
)

close_page = define_tool(
    name="close_page",
    description="Closes the page by its index. The last open page cannot be closed.",
    category=ToolCategory.NAVIGATION,
    read_only_hint=False,
    schema=PageIdxParams,
    handler=_close_page,
)

navigate_page = define_tool(
    name="navigate_page",
    description="Navigates the currently selected page to a URL, back or forward in history, or reloads it.",
    category=ToolCategory.NAVIGATION,
    read_only_hint=False,
    schema=NavigatePageParams,
    handler=_navigate_page,
)
#endregion


__all__ = [
    "list_pages",
    "new_page",
    "select_page",
    "close_page",
    "navigate_page",
    "ListPagesParams",
    "NewPageParams",
    "PageIdxParams",
    "NavigatePageParams",
]
