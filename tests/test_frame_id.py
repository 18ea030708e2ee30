"""Tests for mapping Playwright frames to protocol frame ids."""

import asyncio

import pytest

from ai_browser_a11y.a11y.frame_id import find_frames_at_depth, frame_depth, get_cdp_frame_id
from ai_browser_a11y.core.errors import FrameResolutionError

from conftest import FakeCDPSession, FakeFrame, FakePage, nested_frame_page


def sibling_page(names=("", "")):
    session = FakeCDPSession({"Page.getFrameTree": {"frameTree": {
        "frame": {"id": "MAIN", "url": "https://example.com/"},
        "childFrames": [
            {"frame": {"id": "X1", "url": "https://ads.example.com/slot", "name": names[0]}},
            {"frame": {"id": "X2", "url": "https://ads.example.com/slot", "name": names[1]}},
        ],
    }}})
    page = FakePage(session)
    first = FakeFrame("https://ads.example.com/slot", name=names[0], parent=page.main_frame)
    second = FakeFrame("https://ads.example.com/slot", name=names[1], parent=page.main_frame,
                       root_xpath="/html[1]/body[1]/iframe[2]")
    return page, first, second


def test_frame_depth():
    page, f1, f2, _, _ = nested_frame_page()
    assert frame_depth(page.main_frame) == 0
    assert frame_depth(f1) == 1
    assert frame_depth(f2) == 2


def test_find_frames_at_depth_matches_url_with_fragment():
    page, _, _, session, _ = nested_frame_page()
    tree = session.handlers["Page.getFrameTree"]["frameTree"]
    assert [f["id"] for f in find_frames_at_depth(tree, 2, "https://example.com/b#top")] == ["F2"]
    assert [f["id"] for f in find_frames_at_depth(tree, 2, "https://example.com/b")] == ["F2"]
    assert find_frames_at_depth(tree, 1, "https://example.com/b") == []


def test_main_frame_has_no_id(a11y_page_factory):
    page, _, _, session, _ = nested_frame_page()
    a11y_page = a11y_page_factory(page)
    assert asyncio.run(get_cdp_frame_id(a11y_page, None)) is None
    assert asyncio.run(get_cdp_frame_id(a11y_page, page.main_frame)) is None
    assert session.calls == []


def test_same_process_frames_resolve_and_are_cached(a11y_page_factory):
    page, f1, f2, session, _ = nested_frame_page()
    a11y_page = a11y_page_factory(page)

    async def _run():
        first = await get_cdp_frame_id(a11y_page, f2)
        again = await get_cdp_frame_id(a11y_page, f2)
        return first, again, await get_cdp_frame_id(a11y_page, f1)

    assert asyncio.run(_run()) == ("F2", "F2", "F1")
    assert session.methods().count("Page.getFrameTree") == 2


def test_same_url_siblings_get_distinct_ids(a11y_page_factory):
    page, first, second = sibling_page()
    a11y_page = a11y_page_factory(page)

    async def _run():
        return await get_cdp_frame_id(a11y_page, first), await get_cdp_frame_id(a11y_page, second)

    assert asyncio.run(_run()) == ("X1", "X2")


def test_frame_name_disambiguates_siblings(a11y_page_factory):
    page, first, second = sibling_page(names=("left", "right"))
    a11y_page = a11y_page_factory(page)
    assert asyncio.run(get_cdp_frame_id(a11y_page, second)) == "X2"


def test_oopif_reports_its_own_root_frame_id(a11y_page_factory):
    page = FakePage(FakeCDPSession({"Page.getFrameTree": {"frameTree": {
        "frame": {"id": "MAIN", "url": "https://example.com/"},
    }}}))
    frame = FakeFrame("https://widgets.example.org/", parent=page.main_frame)
    page.frame_sessions[frame] = FakeCDPSession({"Page.getFrameTree": {"frameTree": {
        "frame": {"id": "REMOTE", "url": "https://widgets.example.org/"},
    }}})

    assert asyncio.run(get_cdp_frame_id(a11y_page_factory(page), frame)) == "REMOTE"


def test_unresolvable_frame_raises(a11y_page_factory):
    page = FakePage(FakeCDPSession({"Page.getFrameTree": {"frameTree": {
        "frame": {"id": "MAIN", "url": "https://example.com/"},
    }}}))
    frame = FakeFrame("about:blank", parent=page.main_frame)

    with pytest.raises(FrameResolutionError):
        asyncio.run(get_cdp_frame_id(a11y_page_factory(page), frame))
