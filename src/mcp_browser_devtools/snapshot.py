"""
Text snapshots of a page: a role/name outline where every node carries a uid.

The uids are what evaluate_script (and any later element tool) accepts as
arguments. Each node keeps a reference into a per-frame JS array of the DOM
elements collected during the snapshot, so a uid can be turned back into a
live ElementHandle for as long as the snapshot (and its frame) lives.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import SNAPSHOT_MAX_NAME_CHARS

logger = logging.getLogger(__name__)


# Returns {tree, elements}: `tree` is JSON-able, `elements[i]` is the DOM node
# behind every tree node whose `index` is i.
COLLECT_SCRIPT = r"""(maxName) => {
  const NAME_FROM_CONTENT = new Set([
    'link', 'button', 'heading', 'cell', 'columnheader', 'option', 'tab',
    'menuitem', 'checkbox', 'radio', 'listitem',
  ]);
  const INPUT_ROLES = {
    checkbox: 'checkbox', radio: 'radio', button: 'button', submit: 'button',
    reset: 'button', image: 'button', range: 'slider', hidden: null,
  };
  const IMPLICIT = {
    A: el => (el.hasAttribute('href') ? 'link' : null),
    BUTTON: () => 'button',
    INPUT: el => {
      const type = (el.getAttribute('type') || 'text').toLowerCase();
      return type in INPUT_ROLES ? INPUT_ROLES[type] : 'textbox';
    },
    TEXTAREA: () => 'textbox',
    SELECT: el => (el.multiple ? 'listbox' : 'combobox'),
    OPTION: () => 'option',
    IMG: () => 'img',
    H1: () => 'heading', H2: () => 'heading', H3: () => 'heading',
    H4: () => 'heading', H5: () => 'heading', H6: () => 'heading',
    UL: () => 'list', OL: () => 'list', LI: () => 'listitem',
    NAV: () => 'navigation', MAIN: () => 'main', HEADER: () => 'banner',
    FOOTER: () => 'contentinfo', ASIDE: () => 'complementary',
    FORM: () => 'form', TABLE: () => 'table', TR: () => 'row',
    TD: () => 'cell', TH: () => 'columnheader', DIALOG: () => 'dialog',
    P: () => 'paragraph',
  };
  const SKIP = new Set(['SCRIPT', 'STYLE', 'NOSCRIPT', 'TEMPLATE', 'IFRAME', 'FRAME']);

  const elements = [];
  const clip = text => {
    const s = (text || '').replace(/\s+/g, ' ').trim();
    return s.length > maxName ? s.slice(0, maxName) + '…' : s;
  };
  const isVisible = el => {
    if (el.getAttribute('aria-hidden') === 'true' || el.hidden) return false;
    const style = window.getComputedStyle(el);
    return style.display !== 'none' && style.visibility !== 'hidden';
  };
  const roleOf = el => {
    const explicit = (el.getAttribute('role') || '').trim();
    if (explicit) return explicit.split(/\s+/)[0];
    const implicit = IMPLICIT[el.tagName];
    return implicit ? implicit(el) : null;
  };
  const nameOf = (el, role) => clip(
    el.getAttribute('aria-label') ||
    el.getAttribute('alt') ||
    el.getAttribute('title') ||
    el.getAttribute('placeholder') ||
    (NAME_FROM_CONTENT.has(role) ? (el.innerText || el.textContent) : '')
  );
  const ownText = el => clip(
    Array.from(el.childNodes)
      .filter(n => n.nodeType === Node.TEXT_NODE)
      .map(n => n.textContent)
      .join(' ')
  );
  const push = (el, into, role, name) => {
    const node = {index: elements.length, role, name, children: []};
    elements.push(el);
    into.push(node);
    return node;
  };
  const walk = (el, into) => {
    if (SKIP.has(el.tagName) || !isVisible(el)) return;
    let target = into;
    const role = roleOf(el);
    if (role) {
      const node = push(el, into, role, nameOf(el, role));
      if ((role === 'textbox' || role === 'combobox' || role === 'slider') && 'value' in el) {
        node.value = clip(String(el.value));
      }
      if (role === 'checkbox' || role === 'radio') node.checked = !!el.checked;
      target = node.children;
    }
    if (!role || !NAME_FROM_CONTENT.has(role)) {
      const text = ownText(el);
      if (text) push(el, target, 'StaticText', text);
    }
    for (const child of el.children) walk(child, target);
  };

  const root = {index: 0, role: 'RootWebArea', name: clip(document.title), children: []};
  elements.push(document.documentElement);
  if (document.body) {
    for (const child of document.body.children) walk(child, root.children);
  }
  return {tree: root, elements};
}"""


@dataclass
class SnapshotNode:
    id: str
    role: str
    name: str
    value: Optional[str] = None
    checked: Optional[bool] = None
    children: List["SnapshotNode"] = field(default_factory=list)
    frame: Any = field(default=None, repr=False, compare=False)
    elements: Any = field(default=None, repr=False, compare=False)
    index: Optional[int] = None

    async def element_handle(self) -> Optional[Any]:
        """Resolve this node to a live ElementHandle, or None if it has no element."""
        if self.elements is None or self.index is None:
            return None
        handle = await self.elements.evaluate_handle("(els, i) => els[i]", self.index)
        element = handle.as_element()
        if element is None:
            await handle.dispose()
        return element

    def format(self, depth: int = 0) -> List[str]:
        line = f'{"  " * depth}uid={self.id} {self.role} "{self.name}"'
        if self.value:
            line += f' value="{self.value}"'
        if self.checked is not None:
            line += " checked" if self.checked else " unchecked"
        lines = [line]
        for child in self.children:
            lines.extend(child.format(depth + 1))
        return lines


@dataclass
class TextSnapshot:
    snapshot_id: int
    root: SnapshotNode
    id_to_node: Dict[str, SnapshotNode]
    element_lists: List[Any] = field(default_factory=list, repr=False)

    def format(self) -> str:
        return "\n".join(self.root.format())

    async def dispose(self) -> None:
        """Release the per-frame element arrays; failures are ignored."""
        lists, self.element_lists = self.element_lists, []
        results = await asyncio.gather(*(h.dispose() for h in lists), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                logger.debug("Ignoring snapshot dispose failure: %s", result)


def _build_nodes(raw: dict, *, snapshot_id: int, counter, frame: Any, elements: Any,
                 id_to_node: Dict[str, SnapshotNode]) -> SnapshotNode:
    node = SnapshotNode(
        id=f"{snapshot_id}_{next(counter)}",
        role=raw.get("role") or "generic",
        name=raw.get("name") or "",
        value=raw.get("value"),
        checked=raw.get("checked"),
        frame=frame,
        elements=elements,
        index=raw.get("index"),
    )
    id_to_node[node.id] = node
    for child in raw.get("children") or []:
        node.children.append(
            _build_nodes(child, snapshot_id=snapshot_id, counter=counter, frame=frame,
                         elements=elements, id_to_node=id_to_node)
        )
    return node


async def _collect_frame(frame: Any, max_name_chars: int):
    handle = await frame.evaluate_handle(COLLECT_SCRIPT, max_name_chars)
    try:
        tree = await (await handle.get_property("tree")).json_value()
        elements = await handle.get_property("elements")
    finally:
        await handle.dispose()
    return tree, elements


async def take_text_snapshot(page: Any, snapshot_id: int,
                             max_name_chars: int = SNAPSHOT_MAX_NAME_CHARS) -> TextSnapshot:
    """
    Capture the selected page, including same-page child frames.

    Child frames appear as `Iframe` nodes (named after the frame URL) appended
    to the root; a frame that cannot be evaluated (detached, navigating) is
    skipped with a debug log rather than failing the snapshot.
    """
    counter = itertools.count()
    id_to_node: Dict[str, SnapshotNode] = {}
    element_lists: List[Any] = []

    main_frame = page.main_frame
    tree, elements = await _collect_frame(main_frame, max_name_chars)
    element_lists.append(elements)
    root = _build_nodes(tree, snapshot_id=snapshot_id, counter=counter, frame=main_frame,
                        elements=elements, id_to_node=id_to_node)

    for frame in page.frames:
        if frame is main_frame:
            continue
        try:
            frame_tree, frame_elements = await _collect_frame(frame, max_name_chars)
        except Exception as e:
            logger.debug("Skipping frame %s in snapshot: %s", getattr(frame, "url", "?"), e)
            continue
        element_lists.append(frame_elements)
        frame_tree = dict(frame_tree, role="Iframe", name=getattr(frame, "url", "") or "")
        root.children.append(
            _build_nodes(frame_tree, snapshot_id=snapshot_id, counter=counter, frame=frame,
                         elements=frame_elements, id_to_node=id_to_node)
        )

    return TextSnapshot(
        snapshot_id=snapshot_id,
        root=root,
        id_to_node=id_to_node,
        element_lists=element_lists,
    )


__all__ = ["SnapshotNode", "TextSnapshot", "take_text_snapshot", "COLLECT_SCRIPT"]
