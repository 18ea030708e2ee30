"""Tests for building, cleaning and rendering accessibility trees."""

from ai_browser_a11y.a11y.fetch import decorate_roles
from ai_browser_a11y.a11y.tree import (
    build_hierarchical_tree,
    clean_structural_nodes,
    extract_url_from_ax_node,
    format_simplified_tree,
    remove_redundant_static_text_children,
)
from ai_browser_a11y.types import AccessibilityNode

from conftest import ax_node


def node(node_id, role, name=None, children=None, encoded_id=None):
    return AccessibilityNode(
        node_id=node_id,
        role=role,
        name=name,
        children=children or [],
        encoded_id=encoded_id,
    )


def test_extract_url_reads_trimmed_url_property():
    n = AccessibilityNode(role="link", properties=[
        {"name": "focusable", "value": {"value": True}},
        {"name": "url", "value": {"type": "string", "value": "  https://example.com/a  "}},
    ])
    assert extract_url_from_ax_node(n) == "https://example.com/a"
    assert extract_url_from_ax_node(AccessibilityNode(role="link")) is None


def test_redundant_static_text_is_removed():
    parent = node("1", "button", "Sign  in")
    children = [node("2", "StaticText", "Sign"), node("3", "StaticText", " in")]
    # "Sign" + "in" after trimming each child does not match "Sign in"
    assert remove_redundant_static_text_children(parent, children) == children

    single = [node("2", "StaticText", "Sign\nin")]
    assert remove_redundant_static_text_children(parent, single) == []


def test_static_text_kept_when_parent_unnamed():
    parent = node("1", "button")
    children = [node("2", "StaticText", "Go")]
    assert remove_redundant_static_text_children(parent, children) == children


def test_generic_with_single_child_collapses_to_child():
    button = node("3", "button", "OK")
    root = node("1", "generic", children=[node("2", "generic", children=[button])])
    assert clean_structural_nodes(root, {}) is button


def test_generic_leaf_is_removed_and_other_leaves_stay():
    assert clean_structural_nodes(node("1", "none"), {}) is None
    img = node("2", "img", "Logo")
    assert clean_structural_nodes(img, {}) is img


def test_generic_with_many_children_takes_tag_name():
    root = node("1", "generic", encoded_id="0-7", children=[
        node("2", "link", "A"),
        node("3", "link", "B"),
    ])
    cleaned = clean_structural_nodes(root, {"0-7": "nav"})
    assert cleaned.role == "nav"
    assert [c.name for c in cleaned.children] == ["A", "B"]


def test_negative_ids_are_pruned():
    root = node("1", "list", "Items", children=[node("-5", "listitem", "ghost"), node("2", "listitem", "real")])
    cleaned = clean_structural_nodes(root, {})
    assert [c.name for c in cleaned.children] == ["real"]


def test_format_simplified_tree_indents_and_labels():
    tree = node("1", "main", encoded_id="0-1", children=[
        node("2", "button", "Go", encoded_id="0-2"),
        node("9", "paragraph"),
    ])
    assert format_simplified_tree(tree) == "[0-1] main\n  [0-2] button: Go\n  [9] paragraph"


def test_format_simplified_tree_cleans_names():
    tree = node("1", "button", "Save  ", encoded_id="0-1")
    assert format_simplified_tree(tree) == "[0-1] button: Save"


def test_build_hierarchical_tree_from_flat_nodes():
    raw = [
        ax_node("1", "RootWebArea", "Shop", backend=1, children=["2", "5"]),
        ax_node("2", "generic", "", backend=2, parent="1", children=["3", "4"]),
        ax_node("3", "link", "Home", backend=3, parent="2", properties=[
            {"name": "url", "value": {"value": "https://shop.test/"}},
        ]),
        ax_node("4", "StaticText", "Sale", backend=4, parent="2"),
        ax_node("5", "generic", "", backend=5, parent="1"),
    ]
    tag_names = {"0-1": "#document", "0-2": "div", "0-3": "a", "0-4": "#text", "0-5": "span"}

    result = build_hierarchical_tree(decorate_roles(raw, set()), tag_names, frame_ordinal=0,
                                     xpath_map={"0-3": "/html[1]/body[1]/div[1]/a[1]"})

    assert result.simplified == (
        "[0-1] RootWebArea: Shop\n"
        "  [0-2] div\n"
        "    [0-3] link: Home\n"
        "    [0-4] StaticText: Sale"
    )
    assert result.id_to_url == {"0-3": "https://shop.test/"}
    assert result.xpath_map == {"0-3": "/html[1]/body[1]/div[1]/a[1]"}
    assert len(result.tree) == 1


def test_build_hierarchical_tree_collects_iframes_and_skips_unknown_ids():
    raw = [
        ax_node("1", "RootWebArea", "Page", backend=1, children=["2"]),
        ax_node("2", "Iframe", "", backend=40, parent="1"),
    ]
    result = build_hierarchical_tree(decorate_roles(raw, set()), {"0-1": "#document"}, frame_ordinal=0)

    assert [n.node_id for n in result.iframes] == ["2"]
    # backend 40 is not in the tag map, so the raw node id labels the line
    assert result.simplified == "[0-1] RootWebArea: Page\n  [2] Iframe"


def test_url_dropped_when_backend_id_is_shared():
    url = [{"name": "url", "value": {"value": "https://dup.test/"}}]
    raw = [
        ax_node("1", "link", "One", backend=3, properties=url),
        ax_node("2", "link", "Two", backend=3, properties=url),
    ]
    result = build_hierarchical_tree(decorate_roles(raw, set()), {"0-3": "a"}, frame_ordinal=0)
    assert result.id_to_url == {}


def test_backend_ids_of_other_frames_are_never_borrowed():
    raw = [ax_node("1", "button", "Go", backend=8), ax_node("2", "button", "Stop", backend=9)]
    tag_names = {"0-8": "button", "2-9": "button"}
    result = build_hierarchical_tree(decorate_roles(raw, set()), tag_names, frame_ordinal=2)
    assert result.simplified == "[1] button: Go\n[2-9] button: Stop"


def test_decorate_roles_marks_scrollables():
    raw = [
        ax_node("1", "list", "Results", backend=10),
        ax_node("2", "generic", "", backend=11),
        ax_node("3", "button", "x", backend=12),
    ]
    decorated = decorate_roles(raw, {10, 11})
    assert [n.role for n in decorated] == ["scrollable, list", "scrollable", "button"]
