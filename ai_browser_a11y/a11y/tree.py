"""Build, clean and serialise accessibility trees."""

from collections import Counter
from typing import Dict, List, Optional

from ..types import AccessibilityNode, TreeResult
from ..utils.logger import A11yLogger
from ..utils.text import clean_text, normalise_spaces
from .ordinals import encode_id

STRUCTURAL_ROLES = frozenset({"generic", "none"})
UNINTERESTING_ROLES = frozenset({"generic", "none", "InlineTextBox"})


def _is_negative_id(node_id: str) -> bool:
    try:
        return int(node_id) < 0
    except (TypeError, ValueError):
        return False


def extract_url_from_ax_node(node: AccessibilityNode) -> Optional[str]:
    """Return the trimmed ``url`` property of an AX node, if present."""
    for prop in node.properties:
        if prop.get("name") != "url":
            continue
        value = (prop.get("value") or {}).get("value")
        if isinstance(value, str):
            return value.strip()
    return None


def remove_redundant_static_text_children(
    parent: AccessibilityNode,
    children: List[AccessibilityNode],
) -> List[AccessibilityNode]:
    """
    Drop StaticText children whose concatenated text merely repeats the
    parent's accessible name.
    """
    if not parent.name:
        return children

    parent_name = normalise_spaces(parent.name).strip()
    combined = "".join(
        normalise_spaces(child.name).strip()
        for child in children
        if child.role == "StaticText" and child.name
    )

    if combined == parent_name:
        return [child for child in children if child.role != "StaticText"]
    return children


def _tag_for(node: AccessibilityNode, tag_name_map: Dict[str, str]) -> Optional[str]:
    if node.encoded_id is None:
        return None
    return tag_name_map.get(node.encoded_id)


def clean_structural_nodes(
    root: AccessibilityNode,
    tag_name_map: Dict[str, str],
) -> Optional[AccessibilityNode]:
    """
    Remove or collapse structural wrappers below ``root``.

    Rules, applied bottom-up:

    - nodes with a negative id disappear with their subtree
    - leaf generic/none nodes disappear, other leaves stay
    - a generic/none node left with one child is replaced by that child,
      with none it disappears
    - remaining generic/none nodes take their DOM tag name as role
    - StaticText children repeating the parent's name are dropped

    Returns:
        The cleaned node (possibly a descendant of ``root``), or None
    """
    results: Dict[int, Optional[AccessibilityNode]] = {}
    stack = [(root, False)]

    while stack:
        node, expanded = stack.pop()

        if not expanded:
            if _is_negative_id(node.node_id):
                results[id(node)] = None
            elif not node.children:
                results[id(node)] = None if node.role in STRUCTURAL_ROLES else node
            else:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(node.children))
            continue

        cleaned = [results[id(c)] for c in node.children if results[id(c)] is not None]

        if node.role in STRUCTURAL_ROLES:
            if len(cleaned) == 1:
                results[id(node)] = cleaned[0]
                continue
            if not cleaned:
                results[id(node)] = None
                continue
            tag = _tag_for(node, tag_name_map)
            if tag:
                node.role = tag

        cleaned = remove_redundant_static_text_children(node, cleaned)

        if not cleaned and node.role in STRUCTURAL_ROLES:
            results[id(node)] = None
        else:
            node.children = cleaned
            results[id(node)] = node

    return results[id(root)]


def format_simplified_tree(node: AccessibilityNode, level: int = 0) -> str:
    """
    Render a tree as an indented outline, one node per line::

        [0-12] button: Submit
          [0-13] StaticText: Submit
    """
    lines = []
    stack = [(node, level)]
    while stack:
        current, depth = stack.pop()
        name = clean_text(current.name) if current.name else ""
        label = current.encoded_id or current.node_id
        line = f"{'  ' * depth}[{label}] {current.role}"
        if name:
            line += f": {name}"
        lines.append(line)
        stack.extend((child, depth + 1) for child in reversed(current.children))
    return "\n".join(lines)


def _encoded_id_resolver(tag_name_map: Dict[str, str], frame_ordinal: int):
    def resolve(backend_id: int) -> Optional[str]:
        enc = encode_id(frame_ordinal, backend_id)
        return enc if enc in tag_name_map else None
    return resolve


def build_hierarchical_tree(
    nodes: List[AccessibilityNode],
    tag_name_map: Dict[str, str],
    frame_ordinal: int,
    xpath_map: Optional[Dict[str, str]] = None,
    logger: Optional[A11yLogger] = None,
) -> TreeResult:
    """
    Convert the flat protocol node list into a cleaned hierarchy.

    Args:
        nodes: Flat, decorated AX nodes of one frame
        tag_name_map: Encoded id to lower-case tag name for the same frame
        frame_ordinal: Ordinal of the frame the nodes belong to
        xpath_map: Encoded id to XPath, passed through to the result
        logger: Optional logger

    Returns:
        TreeResult with roots, outline, iframe nodes and URL map
    """
    resolve = _encoded_id_resolver(tag_name_map, frame_ordinal)
    backend_counts = Counter(n.backend_dom_node_id for n in nodes if n.backend_dom_node_id is not None)

    id_to_url: Dict[str, str] = {}
    node_map: Dict[str, AccessibilityNode] = {}
    iframes: List[AccessibilityNode] = []

    for node in nodes:
        if node.role == "Iframe":
            iframes.append(AccessibilityNode(role=node.role, node_id=node.node_id))

        if _is_negative_id(node.node_id):
            continue

        encoded_id = None
        if node.backend_dom_node_id is not None:
            encoded_id = resolve(node.backend_dom_node_id)

        url = extract_url_from_ax_node(node)
        if url and encoded_id and backend_counts[node.backend_dom_node_id] == 1:
            id_to_url[encoded_id] = url

        has_name = bool(node.name and node.name.strip())
        if not has_name and not node.child_ids and node.role in UNINTERESTING_ROLES:
            continue

        node_map[node.node_id] = AccessibilityNode(
            role=node.role,
            name=node.name if has_name else None,
            description=node.description or None,
            value=node.value or None,
            node_id=node.node_id,
            backend_dom_node_id=node.backend_dom_node_id,
            encoded_id=encoded_id,
        )

    roots: List[AccessibilityNode] = []
    for node in nodes:
        current = node_map.get(node.node_id)
        if current is None:
            continue
        parent = node_map.get(node.parent_id) if node.parent_id else None
        if parent is None:
            roots.append(current)
        else:
            parent.children.append(current)

    tree = []
    for root in roots:
        cleaned = clean_structural_nodes(root, tag_name_map)
        if cleaned is not None:
            tree.append(cleaned)

    if logger:
        logger.debug("a11y", "built hierarchical tree", flat_nodes=len(nodes), roots=len(tree))

    return TreeResult(
        tree=tree,
        simplified="\n".join(format_simplified_tree(root) for root in tree),
        iframes=iframes,
        id_to_url=id_to_url,
        xpath_map=xpath_map or {},
    )
