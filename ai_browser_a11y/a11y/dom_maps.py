"""Map DOM backend node ids to tag names and frame-relative XPaths."""

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Set, Tuple

from playwright.async_api import Frame

from ..core.errors import DomProcessError
from ..types import BackendIdMaps
from .frame_id import get_cdp_frame_id

if TYPE_CHECKING:
    from ..core.page import A11yPage

TEXT_NODE = 3
COMMENT_NODE = 8
ELEMENT_NODE = 1
DOCUMENT_NODE = 9


class TagNameCache:
    """Memoises lower-casing of DOM node names."""

    def __init__(self):
        self._cache: Dict[str, str] = {}

    def lower(self, raw: str) -> str:
        cached = self._cache.get(raw)
        if cached is None:
            cached = self._cache[raw] = raw.lower()
        return cached

    def __len__(self) -> int:
        return len(self._cache)


def child_segments(children: List[Dict[str, Any]], tags: TagNameCache) -> List[Optional[str]]:
    """
    Compute the XPath step of each child, numbering siblings of the same
    node type and name from 1 in document order.

    Children that cannot be addressed (doctype, processing instructions)
    get None.
    """
    counters: Dict[Tuple[int, str], int] = {}
    segments: List[Optional[str]] = []

    for child in children:
        node_type = child.get("nodeType", ELEMENT_NODE)
        tag = tags.lower(child.get("nodeName", ""))
        key = (node_type, tag)
        idx = counters[key] = counters.get(key, 0) + 1

        if node_type == TEXT_NODE:
            segments.append(f"text()[{idx}]")
        elif node_type == COMMENT_NODE:
            segments.append(f"comment()[{idx}]")
        elif node_type == ELEMENT_NODE:
            segments.append(f"{tag}[{idx}]")
        else:
            segments.append(None)

    return segments


def find_iframe_node(root: Dict[str, Any], backend_node_id: int) -> Optional[Dict[str, Any]]:
    """Locate a node by backend id, descending into embedded documents."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.get("backendNodeId") == backend_node_id:
            return node
        if "contentDocument" in node:
            stack.append(node["contentDocument"])
        stack.extend(reversed(node.get("children") or []))
    return None


async def build_backend_id_maps(page: "A11yPage", target_frame: Optional[Frame] = None) -> BackendIdMaps:
    """
    Walk the DOM of one frame and record, for every node, its lower-cased
    tag name and its XPath relative to the frame's own document.

    Same-process child documents encountered on the way are recorded too,
    keyed by their own frame's ordinal and with paths restarting at "".

    Args:
        page: Page context owning sessions, ordinals and caches
        target_frame: Frame to map; None for the main frame

    Returns:
        Tag-name and XPath maps keyed by encoded id

    Raises:
        DomProcessError: If a same-process iframe's document cannot be found
    """
    is_main = target_frame is None or target_frame == page.page.main_frame
    session = await page.sessions.session_for(target_frame)
    same_process = not is_main and not await page.sessions.is_oopif(target_frame)

    await session.send("DOM.enable")
    try:
        document = await session.send("DOM.getDocument", {"depth": -1, "pierce": True})
        start_node = document["root"]
        root_frame_id = await get_cdp_frame_id(page, target_frame)

        if same_process:
            owner = await session.send("DOM.getFrameOwner", {"frameId": root_frame_id})
            iframe_node = find_iframe_node(start_node, owner["backendNodeId"])
            if iframe_node is None or "contentDocument" not in iframe_node:
                raise DomProcessError("iframe element or its contentDocument not found")
            start_node = iframe_node["contentDocument"]

        tags = page.tag_names
        tag_name_map: Dict[str, str] = {}
        xpath_map: Dict[str, str] = {}
        seen: Set[str] = set()

        stack: List[Tuple[Dict[str, Any], str, Optional[str]]] = [(start_node, "", root_frame_id)]
        while stack:
            node, path, frame_id = stack.pop()

            backend_id = node.get("backendNodeId")
            if not backend_id:
                continue

            enc = page.encode_with_frame_id(frame_id, backend_id)
            if enc in seen:
                continue
            seen.add(enc)

            tag = tags.lower(node.get("nodeName", ""))
            tag_name_map[enc] = tag
            xpath_map[enc] = path

            if tag == "iframe" and "contentDocument" in node:
                content = node["contentDocument"]
                child_frame_id = node.get("frameId") or content.get("frameId") or frame_id
                stack.append((content, "", child_frame_id))

            children = node.get("children") or []
            segments = child_segments(children, tags)
            for child, seg in zip(reversed(children), reversed(segments)):
                if seg is not None:
                    stack.append((child, f"{path}/{seg}", frame_id))

        return BackendIdMaps(tag_name_map=tag_name_map, xpath_map=xpath_map)
    finally:
        await session.send("DOM.disable")
