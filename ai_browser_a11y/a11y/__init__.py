"""Accessibility snapshot pipeline."""

from .dom_maps import TagNameCache, build_backend_id_maps
from .fetch import (
    decorate_roles,
    filter_ax_tree_by_xpath,
    find_scrollable_element_ids,
    get_accessibility_tree,
    resolve_object_id_for_xpath,
)
from .frame_chain import resolve_frame_chain
from .frame_id import get_cdp_frame_id
from .ordinals import FrameOrdinalRegistry, decode_id, encode_id
from .stitch import (
    get_accessibility_tree_with_frames,
    get_frame_root_backend_node_id,
    get_frame_root_xpath,
    inject_subtrees,
)
from .tree import (
    build_hierarchical_tree,
    clean_structural_nodes,
    extract_url_from_ax_node,
    format_simplified_tree,
    remove_redundant_static_text_children,
)

__all__ = [
    "FrameOrdinalRegistry",
    "TagNameCache",
    "build_backend_id_maps",
    "build_hierarchical_tree",
    "clean_structural_nodes",
    "decode_id",
    "decorate_roles",
    "encode_id",
    "extract_url_from_ax_node",
    "filter_ax_tree_by_xpath",
    "find_scrollable_element_ids",
    "format_simplified_tree",
    "get_accessibility_tree",
    "get_accessibility_tree_with_frames",
    "get_cdp_frame_id",
    "get_frame_root_backend_node_id",
    "get_frame_root_xpath",
    "inject_subtrees",
    "remove_redundant_static_text_children",
    "resolve_frame_chain",
    "resolve_object_id_for_xpath",
]
