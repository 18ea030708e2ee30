"""Stitch per-frame accessibility snapshots into one page-wide outline."""

import re
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from playwright.async_api import Frame

from ..types import CombinedA11yResult, FrameSnapshot
from .fetch import get_accessibility_tree
from .frame_chain import resolve_frame_chain
from .frame_id import get_cdp_frame_id
from .ordinals import decode_id

if TYPE_CHECKING:
    from ..core.page import A11yPage

LABEL_RE = re.compile(r"^\s*\[([^\]]+)]")
INDENT_RE = re.compile(r"^\s*")

FRAME_ROOT_XPATH_JS = """
(node) => {
  const pos = (el) => {
    let i = 1;
    for (let sib = el.previousElementSibling; sib; sib = sib.previousElementSibling) {
      if (sib.tagName === el.tagName) i += 1;
    }
    return i;
  };
  const segs = [];
  for (let el = node; el; el = el.parentElement) {
    segs.unshift(`${el.tagName.toLowerCase()}[${pos(el)}]`);
  }
  return `/${segs.join("/")}`;
}
"""


def join_xpath(prefix: str, local: str) -> str:
    if not prefix:
        return local
    if not local:
        return prefix
    return f"{prefix.rstrip('/')}/{local.lstrip('/')}"


def inject_subtrees(tree: str, id_to_tree: Dict[str, str]) -> str:
    """
    Splice child-frame outlines beneath the lines of their host iframes.

    A line whose bracketed label is a key of ``id_to_tree`` is followed by
    that outline, indented one level deeper than the host line. Spliced
    outlines are themselves scanned, so nesting is arbitrary; each key is
    spliced at most once.
    """
    stack = [[tree.split("\n"), 0, ""]]
    out: List[str] = []
    visited: Set[str] = set()

    while stack:
        top = stack[-1]
        lines, idx, indent = top
        if idx >= len(lines):
            stack.pop()
            continue
        top[1] += 1

        line = indent + lines[idx]
        out.append(line)

        match = LABEL_RE.match(line)
        if not match:
            continue
        label = match.group(1)
        child = id_to_tree.get(label)
        if child is None or label in visited:
            continue

        visited.add(label)
        stack.append([child.split("\n"), 0, INDENT_RE.match(line).group(0) + "  "])

    return "\n".join(out)


async def get_frame_root_xpath(frame: Optional[Frame]) -> str:
    """Absolute XPath of the iframe element hosting ``frame`` in its parent document."""
    if frame is None or frame.parent_frame is None:
        return "/"
    handle = await frame.frame_element()
    return await handle.evaluate(FRAME_ROOT_XPATH_JS)


async def get_frame_root_backend_node_id(page: "A11yPage", frame: Optional[Frame]) -> Optional[int]:
    """Backend node id of the iframe element owning ``frame``, None for the main frame."""
    if frame is None or frame == page.page.main_frame:
        return None

    frame_id = await get_cdp_frame_id(page, frame)
    session = await page.sessions.session_for(frame.parent_frame)
    owner = await session.send("DOM.getFrameOwner", {"frameId": frame_id})
    return owner.get("backendNodeId")


async def _frame_prefix(frame: Frame, main: Frame, root_xpaths: Dict[Frame, str]) -> str:
    hops = []
    current: Optional[Frame] = frame
    while current is not None and current != main:
        if current not in root_xpaths:
            root_xpaths[current] = await get_frame_root_xpath(current)
        hops.append(root_xpaths[current])
        current = current.parent_frame

    prefix = ""
    for hop in reversed(hops):
        prefix = join_xpath(prefix, hop)
    return prefix


async def get_accessibility_tree_with_frames(
    page: "A11yPage",
    root_xpath: Optional[str] = None,
) -> CombinedA11yResult:
    """
    Build one outline, XPath map and URL map covering the page and every
    reachable iframe.

    Each frame is extracted independently; a failing frame is logged and
    left out while the rest of the page is still returned.

    Args:
        page: Page context
        root_xpath: Optional absolute XPath focusing extraction on one subtree

    Returns:
        The combined outline and maps, keyed by encoded id
    """
    main = page.page.main_frame

    target_frames: Optional[List[Frame]] = None
    inner_xpath: Optional[str] = None
    if root_xpath and root_xpath.strip():
        frames, inner_xpath = await resolve_frame_chain(page, root_xpath.strip())
        target_frames = frames or None

    main_only = bool(inner_xpath and not target_frames)

    snapshots: List[FrameSnapshot] = []
    root_xpaths: Dict[Frame, str] = {}
    frame_stack: List[Frame] = [main]

    while frame_stack:
        frame = frame_stack.pop()
        frame_stack.extend(reversed(frame.child_frames))

        if target_frames and frame not in target_frames:
            continue
        if main_only and frame != main:
            continue

        selector = None
        if target_frames:
            if frame == target_frames[-1]:
                selector = inner_xpath
        elif frame == main:
            selector = inner_xpath

        try:
            result = await get_accessibility_tree(page, selector, frame)
            is_main = frame == main
            frame_id = await get_cdp_frame_id(page, frame)
            backend_node_id = None
            host_encoded_id = None
            if not is_main:
                backend_node_id = await get_frame_root_backend_node_id(page, frame)
                if backend_node_id is not None:
                    parent_id = await get_cdp_frame_id(page, frame.parent_frame)
                    host_encoded_id = page.encode_with_frame_id(parent_id, backend_node_id)
            snapshot = FrameSnapshot(
                tree=result.simplified.rstrip(),
                xpath_map=result.xpath_map,
                url_map=result.id_to_url,
                frame_xpath="/" if is_main else await _frame_prefix(frame, main, root_xpaths),
                backend_node_id=backend_node_id,
                host_encoded_id=host_encoded_id,
                frame_id=frame_id,
                frame_ordinal=await page.frame_ordinal(frame),
            )
            snapshots.append(snapshot)
        except Exception as e:
            page.logger.warn(
                "observation",
                "failed to get AX tree for " + ("main frame" if frame == main else f"iframe ({frame.url})"),
                error=str(e),
            )
            continue

        if main_only:
            break

    combined_xpath_map: Dict[str, str] = {}
    combined_url_map: Dict[str, str] = {}
    id_to_tree: Dict[str, str] = {}

    for snap in snapshots:
        prefix = "" if snap.frame_xpath == "/" else snap.frame_xpath

        for enc, local in snap.xpath_map.items():
            if decode_id(enc)[0] != snap.frame_ordinal:
                continue
            combined_xpath_map[enc] = join_xpath(prefix, local) or "/"

        combined_url_map.update(snap.url_map)

        if snap.host_encoded_id is not None:
            id_to_tree[snap.host_encoded_id] = snap.tree

    root = next((s for s in snapshots if s.frame_xpath == "/"), snapshots[0] if snapshots else None)
    combined_tree = inject_subtrees(root.tree, id_to_tree) if root else ""

    page.logger.debug(
        "observation",
        "stitched accessibility tree",
        frames=len(snapshots),
        xpaths=len(combined_xpath_map),
    )

    return CombinedA11yResult(
        combined_tree=combined_tree,
        combined_xpath_map=combined_xpath_map,
        combined_url_map=combined_url_map,
    )
