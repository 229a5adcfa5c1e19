"""browser_snapshot: attach a uid-annotated text snapshot of the selected page."""

from pydantic import BaseModel

from .categories import ToolCategory
from .definition import define_tool


class TakeSnapshotParams(BaseModel):
    pass


async def _take_snapshot(request, response, context) -> None:
    # Captured when the response is rendered, after everything else settled.
    response.set_include_snapshot(True)


take_snapshot = define_tool(
    name="browser_snapshot",
    description=(
        "Take a text snapshot of the currently selected page. The snapshot lists page elements "
        "along with a unique identifier (uid). Always use the latest snapshot; uids from older "
        "snapshots are no longer valid."
    ),
    category=ToolCategory.DEBUGGING,
    read_only_hint=True,
    schema=TakeSnapshotParams,
    handler=_take_snapshot,
)


__all__ = ["take_snapshot", "TakeSnapshotParams"]
