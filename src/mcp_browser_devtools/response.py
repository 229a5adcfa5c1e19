"""Per-invocation response builder."""

import logging
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .context import PageContext

logger = logging.getLogger(__name__)


class McpResponse:
    """
    Accumulates what one tool call wants to tell the client.

    Handlers append text lines and raise flags; nothing is rendered until
    handle() runs after the handler finished, so the page list and the snapshot
    always describe the state after the tool did its work.
    """

    def __init__(self):
        self._lines: List[str] = []
        self._include_pages = False
        self._include_snapshot = False

    def append_response_line(self, line: str) -> None:
        self._lines.append(line)

    def set_include_pages(self, value: bool) -> None:
        self._include_pages = value

    def set_include_snapshot(self, value: bool) -> None:
        self._include_snapshot = value

    @property
    def response_lines(self) -> List[str]:
        return list(self._lines)

    @property
    def include_pages(self) -> bool:
        return self._include_pages

    @property
    def include_snapshot(self) -> bool:
        return self._include_snapshot

    async def handle(self, tool_name: str, context: "PageContext") -> str:
        """Render the lines plus any requested page list / snapshot as markdown text."""
        parts = [f"# {tool_name} response"]
        parts.extend(self._lines)

        if self._include_pages:
            parts.append("## Pages")
            for idx, page in enumerate(context.refresh_pages()):
                selected = " [selected]" if context.is_page_selected(page) else ""
                parts.append(f"{idx}: {page.url}{selected}")

        if self._include_snapshot:
            snapshot = await context.create_text_snapshot()
            parts.append("## Page content")
            parts.append(snapshot.format())

        return "\n".join(parts)


__all__ = ["McpResponse"]
