"""evaluate_script: run a caller-supplied JavaScript function in the selected page."""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from ..constants import SCRIPT_TIMEOUT_MS
from ..errors import CrossFrameEvaluationError
from ..utils.handles import HandleScope
from ..utils.timeouts import with_timeout
from .categories import ToolCategory
from .definition import define_tool

logger = logging.getLogger(__name__)


# Runs in the page: calls the compiled function with the element arguments and
# serializes the (possibly awaited) result there, so only a string crosses over.
CALL_FUNCTION_SCRIPT = "async ([fn, ...args]) => JSON.stringify(await fn(...args))"


def compile_expression(function: str) -> str:
    """
    Wrap a function declaration so evaluate_handle yields the function itself.

    Newlines keep a trailing `// comment` in the source from swallowing the
    closing parenthesis.
    """
    return f"() => (\n{function}\n)"

FUNCTION_DESCRIPTION = """A JavaScript function declaration to be executed by the tool in the currently selected page.
Example without arguments: `() => {
  return document.title
}` or `async () => {
  return await fetch("example.com")
}`.
Example with arguments: `(el) => {
  return el.innerText;
}`
"""


class ElementArg(BaseModel):
    uid: str = Field(..., description="The uid of an element on the page from the page content snapshot")


class EvaluateScriptParams(BaseModel):
    function: str = Field(..., description=FUNCTION_DESCRIPTION)
    args: Optional[List[ElementArg]] = Field(
        None, description="An optional list of arguments to pass to the function."
    )


async def _evaluate_script(request, response, context) -> None:
    params = request.params
    # Resolved from the snapshot alone: no browser round trip before the frame check.
    nodes = [context.get_snapshot_node(arg.uid) for arg in params.args or []]
    frames = {node.frame for node in nodes}

    # One evaluation context cannot see elements of two documents.
    if len(frames) > 1:
        raise CrossFrameEvaluationError()
    target = next(iter(frames)) if frames else context.get_selected_page()

    async with HandleScope() as scope:
        elements = []
        for node in nodes:
            elements.append(scope.add(await context.get_element_by_uid(node.id)))
        logger.debug("Evaluating function with %d element argument(s)", len(elements))

        # Playwright calls an expression that evaluates to a function, so the
        # compiled expression is a thunk returning the caller's function.
        fn = scope.add(
            await with_timeout(
                target.evaluate_handle(compile_expression(params.function)),
                SCRIPT_TIMEOUT_MS,
                "Script evaluation timed out",
            )
        )

        async def call() -> None:
            result = await with_timeout(
                target.evaluate(CALL_FUNCTION_SCRIPT, [fn, *elements]),
                SCRIPT_TIMEOUT_MS,
                "Script execution timed out",
            )
            response.append_response_line("Script ran on page and returned:")
            response.append_response_line("```json")
            response.append_response_line(f"{result}")
            response.append_response_line("```")

        await context.wait_for_events_after_action(call)


evaluate_script = define_tool(
    name="evaluate_script",
    description=(
        "Evaluate a JavaScript function inside the currently selected page. Returns the response as JSON\n"
        "so returned values have to JSON-serializable."
    ),
    category=ToolCategory.DEBUGGING,
    read_only_hint=False,
    schema=EvaluateScriptParams,
    handler=_evaluate_script,
)


__all__ = ["evaluate_script", "EvaluateScriptParams", "ElementArg", "CALL_FUNCTION_SCRIPT", "compile_expression"]
