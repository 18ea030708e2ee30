"""Fetch a single frame's accessibility tree over the DevTools protocol."""

import json
from collections import deque
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Set

from playwright.async_api import Error as PlaywrightError, Frame

from ..core.errors import DomProcessError, ElementNotFoundError
from ..types import AccessibilityNode, TreeResult
from .dom_maps import build_backend_id_maps
from .frame_id import get_cdp_frame_id
from .tree import build_hierarchical_tree

if TYPE_CHECKING:
    from ..core.page import A11yPage

# XPathResult.FIRST_ORDERED_NODE_TYPE
_FIRST_ORDERED_NODE = 9

_EVALUATE_IN_CONTENT_DOCUMENT = f"""function (xp) {{
  const doc = this.contentDocument;
  if (!doc) return null;
  return doc.evaluate(xp, doc, null, {_FIRST_ORDERED_NODE}, null).singleNodeValue;
}}"""


def _xpath_expression(xpath: str) -> str:
    return (
        f"document.evaluate({json.dumps(xpath)}, document, null, "
        f"{_FIRST_ORDERED_NODE}, null).singleNodeValue"
    )


async def resolve_object_id_for_xpath(page: "A11yPage", xpath: str, frame: Optional[Frame] = None) -> str:
    """
    Evaluate an XPath inside ``frame``'s document and return a remote
    object handle for the first matching node.

    Main-frame and out-of-process XPaths are evaluated on the frame's own
    session. Same-process iframes share the page session, so the XPath is
    evaluated against the owning ``<iframe>`` element's ``contentDocument``.

    Raises:
        ElementNotFoundError: If the XPath matches nothing
    """
    is_main = frame is None or frame == page.page.main_frame

    if is_main or await page.sessions.is_oopif(frame):
        session = await page.sessions.session_for(frame)
        response = await session.send("Runtime.evaluate", {
            "expression": _xpath_expression(xpath),
            "returnByValue": False,
        })
    else:
        session = await page.sessions.page_session()
        frame_id = await get_cdp_frame_id(page, frame)
        owner = await session.send("DOM.getFrameOwner", {"frameId": frame_id})
        resolved = await session.send("DOM.resolveNode", {"backendNodeId": owner["backendNodeId"]})
        response = await session.send("Runtime.callFunctionOn", {
            "objectId": resolved["object"]["objectId"],
            "functionDeclaration": _EVALUATE_IN_CONTENT_DOCUMENT,
            "arguments": [{"value": xpath}],
            "returnByValue": False,
        })

    object_id = (response.get("result") or {}).get("objectId")
    if response.get("exceptionDetails") or not object_id:
        raise ElementNotFoundError(xpath)
    return object_id


async def find_scrollable_element_ids(page: "A11yPage", frame: Optional[Frame] = None) -> Set[int]:
    """Backend node ids of the scrollable containers in ``frame``."""
    target = frame or page.page.main_frame
    await page.ensure_dom_scripts(target)
    xpaths: List[str] = await target.evaluate(
        "() => window.getScrollableElementXpaths ? window.getScrollableElementXpaths() : []"
    )

    session = await page.sessions.session_for(frame)
    scrollable: Set[int] = set()
    for xpath in xpaths:
        try:
            object_id = await resolve_object_id_for_xpath(page, xpath, frame)
            described = await session.send("DOM.describeNode", {"objectId": object_id})
        except (ElementNotFoundError, PlaywrightError) as e:
            page.logger.debug("a11y", "skipping unresolvable scrollable", xpath=xpath, reason=str(e))
            continue
        backend_id = (described.get("node") or {}).get("backendNodeId")
        if backend_id:
            scrollable.add(backend_id)
    return scrollable


async def filter_ax_tree_by_xpath(
    page: "A11yPage",
    full: List[Dict[str, Any]],
    xpath: str,
    frame: Optional[Frame] = None,
) -> List[Dict[str, Any]]:
    """
    Keep only the AX node backing ``xpath`` and its descendants.

    The kept root loses its parent id so it becomes a tree root.

    Raises:
        ElementNotFoundError: If the XPath matches nothing
        DomProcessError: If the node has no backend id or no AX node
    """
    object_id = await resolve_object_id_for_xpath(page, xpath, frame)
    session = await page.sessions.session_for(frame)
    described = await session.send("DOM.describeNode", {"objectId": object_id})
    backend_id = (described.get("node") or {}).get("backendNodeId")
    if not backend_id:
        raise DomProcessError(f'unable to resolve backendNodeId for "{xpath}"')

    target = next((n for n in full if n.get("backendDOMNodeId") == backend_id), None)
    if target is None:
        raise DomProcessError(f'no accessibility node backs "{xpath}"')

    by_id = {n["nodeId"]: n for n in full}
    keep = {target["nodeId"]}
    queue = deque([target])
    while queue:
        current = queue.popleft()
        for child_id in current.get("childIds") or []:
            if child_id in keep:
                continue
            keep.add(child_id)
            child = by_id.get(child_id)
            if child is not None:
                queue.append(child)

    filtered = []
    for node in full:
        if node["nodeId"] not in keep:
            continue
        if node is target:
            node = {k: v for k, v in node.items() if k != "parentId"}
        filtered.append(node)
    return filtered


def _ax_value(node: Dict[str, Any], key: str) -> Optional[str]:
    value = (node.get(key) or {}).get("value")
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def decorate_roles(nodes: List[Dict[str, Any]], scrollable_ids: Set[int]) -> List[AccessibilityNode]:
    """
    Convert raw protocol AX nodes into flat ``AccessibilityNode``s, marking
    scrollable containers in their role.
    """
    decorated = []
    for node in nodes:
        role = _ax_value(node, "role") or ""
        if node.get("backendDOMNodeId") in scrollable_ids:
            role = f"scrollable, {role}" if role and role not in ("generic", "none") else "scrollable"

        parent_id = node.get("parentId")
        decorated.append(AccessibilityNode(
            role=role,
            name=_ax_value(node, "name"),
            description=_ax_value(node, "description"),
            value=_ax_value(node, "value"),
            node_id=str(node.get("nodeId", "")),
            backend_dom_node_id=node.get("backendDOMNodeId"),
            parent_id=str(parent_id) if parent_id is not None else None,
            child_ids=[str(c) for c in node.get("childIds") or []],
            properties=node.get("properties") or [],
        ))
    return decorated


async def get_accessibility_tree(
    page: "A11yPage",
    selector: Optional[str] = None,
    target_frame: Optional[Frame] = None,
) -> TreeResult:
    """
    Build the accessibility snapshot of one frame.

    Args:
        page: Page context
        selector: Optional XPath (relative to the frame's document) scoping the tree
        target_frame: Frame to inspect; None for the main frame

    Returns:
        TreeResult for the frame
    """
    maps = await build_backend_id_maps(page, target_frame)

    is_main = target_frame is None or target_frame == page.page.main_frame
    session = await page.sessions.session_for(target_frame)
    params: Dict[str, Any] = {}
    if not is_main and not await page.sessions.is_oopif(target_frame):
        params = {"frameId": await get_cdp_frame_id(page, target_frame)}

    await session.send("Accessibility.enable")
    try:
        response = await session.send("Accessibility.getFullAXTree", params)
        nodes = response.get("nodes", [])

        scrollable_ids = await find_scrollable_element_ids(page, target_frame)

        if selector:
            nodes = await filter_ax_tree_by_xpath(page, nodes, selector, target_frame)

        ordinal = await page.frame_ordinal(target_frame)
        return build_hierarchical_tree(
            decorate_roles(nodes, scrollable_ids),
            maps.tag_name_map,
            frame_ordinal=ordinal,
            xpath_map=maps.xpath_map,
            logger=page.logger,
        )
    finally:
        await session.send("Accessibility.disable")
