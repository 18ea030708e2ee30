"""Resolve the DevTools protocol frame id of a Playwright frame."""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from playwright.async_api import Frame

from ..core.errors import FrameResolutionError

if TYPE_CHECKING:
    from ..core.page import A11yPage


def frame_depth(frame: Frame) -> int:
    """Number of ancestors between ``frame`` and the main frame."""
    depth = 0
    parent = frame.parent_frame
    while parent is not None:
        depth += 1
        parent = parent.parent_frame
    return depth


def _frame_urls(cdp_frame: Dict[str, Any]) -> List[str]:
    # Playwright reports the url with its fragment, the protocol splits it off
    url = cdp_frame.get("url", "")
    return [url, url + cdp_frame.get("urlFragment", "")]


def find_frames_at_depth(frame_tree: Dict[str, Any], depth: int, url: str) -> List[Dict[str, Any]]:
    """
    Collect protocol frames sitting exactly ``depth`` levels below the root
    whose URL equals ``url``, in tree order.
    """
    matches = []
    stack = [(frame_tree, 0)]
    while stack:
        node, level = stack.pop()
        cdp_frame = node.get("frame", {})
        if level == depth:
            if url in _frame_urls(cdp_frame):
                matches.append(cdp_frame)
            continue
        for child in reversed(node.get("childFrames") or []):
            stack.append((child, level + 1))
    return matches


async def get_cdp_frame_id(page: "A11yPage", frame: Optional[Frame]) -> Optional[str]:
    """
    Resolve the protocol frame id of ``frame``.

    Same-process iframes are located in the page-wide frame tree by depth
    and URL; out-of-process iframes report their id from the root of their
    own session's frame tree.

    Args:
        page: Page context owning the sessions and caches
        frame: Frame to resolve; None or the main frame mean "main"

    Returns:
        The protocol frame id, or None for the main frame

    Raises:
        FrameResolutionError: If an out-of-process frame cannot be attached
    """
    if frame is None or frame == page.page.main_frame:
        return None

    cached = page.frame_ids.get(frame)
    if cached is not None:
        return cached

    root_session = await page.sessions.page_session()
    tree = await root_session.send("Page.getFrameTree")
    candidates = find_frames_at_depth(tree["frameTree"], frame_depth(frame), frame.url)

    if candidates:
        if frame.name:
            candidates = [c for c in candidates if c.get("name") == frame.name] or candidates
        claimed = {fid for other, fid in page.frame_ids.items() if other is not frame}
        chosen = next((c for c in candidates if c["id"] not in claimed), candidates[0])
        page.frame_ids[frame] = chosen["id"]
        return chosen["id"]

    session = await page.sessions.frame_session(frame)
    if session is None:
        raise FrameResolutionError(frame.url, "frame is neither in the page frame tree nor attachable")

    own_tree = await session.send("Page.getFrameTree")
    frame_id = own_tree["frameTree"]["frame"]["id"]
    page.frame_ids[frame] = frame_id
    return frame_id
