"""Shared fakes standing in for Playwright pages, frames and CDP sessions."""

from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from ai_browser_a11y import A11yConfig, A11yPage
from ai_browser_a11y.utils.logger import A11yLogger


class FakeCDPSession:
    """Answers protocol commands from a handler table and records every call."""

    def __init__(self, handlers: Optional[Dict[str, Any]] = None):
        self.handlers: Dict[str, Any] = dict(handlers or {})
        self.calls: List[tuple] = []
        self.detached = False

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        params = params or {}
        self.calls.append((method, params))
        handler = self.handlers.get(method)
        if handler is None:
            if method.endswith(".enable") or method.endswith(".disable"):
                return {}
            raise PlaywrightError(f"unhandled protocol method {method}")
        if isinstance(handler, Exception):
            raise handler
        return handler(params) if callable(handler) else handler

    async def detach(self) -> None:
        self.detached = True

    def methods(self) -> List[str]:
        return [method for method, _ in self.calls]


class FakeElementHandle:
    def __init__(self, xpath: str, content_frame: Any = None):
        self.xpath = xpath
        self._content_frame = content_frame

    async def evaluate(self, expression: str, *args: Any) -> str:
        return self.xpath

    async def content_frame(self) -> Any:
        return self._content_frame


class FakeFrame:
    """A frame whose hosting iframe element sits at ``root_xpath`` in its parent."""

    def __init__(self, url: str, name: str = "", parent: "FakeFrame" = None,
                 root_xpath: str = "/html[1]/body[1]/iframe[1]"):
        self.url = url
        self.name = name
        self.parent_frame = parent
        self.child_frames: List["FakeFrame"] = []
        self.evaluated: List[str] = []
        self.scrollable_xpaths: List[str] = []
        self.locators: Dict[str, Any] = {}
        self._root_xpath = root_xpath
        if parent is not None:
            parent.child_frames.append(self)

    async def evaluate(self, expression: str, *args: Any) -> Any:
        self.evaluated.append(expression)
        if "getScrollableElementXpaths" in expression and "if (!window" not in expression:
            return list(self.scrollable_xpaths)
        return None

    async def frame_element(self) -> FakeElementHandle:
        return FakeElementHandle(self._root_xpath)

    def locator(self, selector: str) -> Any:
        return self.locators[selector]

    def __repr__(self) -> str:
        return f"<FakeFrame {self.url}>"


class FakeContext:
    def __init__(self, page: "FakePage"):
        self._page = page
        self.attach_attempts: List[Any] = []

    async def new_cdp_session(self, target: Any) -> FakeCDPSession:
        self.attach_attempts.append(target)
        if target is self._page:
            return self._page.session
        session = self._page.frame_sessions.get(target)
        if session is None:
            raise PlaywrightError("This frame does not have a separate CDP session")
        return session


class FakePage:
    """Minimal Playwright page: a main frame, a page session and OOPIF sessions."""

    def __init__(self, session: Optional[FakeCDPSession] = None, url: str = "https://example.com/"):
        self.url = url
        self.main_frame = FakeFrame(url, root_xpath="/")
        self.session = session or FakeCDPSession()
        self.frame_sessions: Dict[Any, FakeCDPSession] = {}
        self.context = FakeContext(self)
        self.init_scripts: List[str] = []
        self.load_states: List[str] = []
        self.closed = False

    async def add_init_script(self, script: Optional[str] = None, path: Optional[str] = None) -> None:
        self.init_scripts.append(script)

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        self.load_states.append(state)

    async def close(self) -> None:
        self.closed = True


def ax_node(node_id: str, role: str, name: str = "", backend: Optional[int] = None,
            parent: Optional[str] = None, children: Optional[List[str]] = None,
            properties: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Build a raw protocol AX node."""
    node: Dict[str, Any] = {
        "nodeId": node_id,
        "role": {"type": "role", "value": role},
        "name": {"type": "computedString", "value": name},
        "childIds": children or [],
    }
    if backend is not None:
        node["backendDOMNodeId"] = backend
    if parent is not None:
        node["parentId"] = parent
    if properties:
        node["properties"] = properties
    return node


def dom_node(backend: int, name: str, children: Optional[List[Dict[str, Any]]] = None,
             node_type: int = 1, **extra: Any) -> Dict[str, Any]:
    """Build a protocol DOM node."""
    node: Dict[str, Any] = {
        "backendNodeId": backend,
        "nodeName": name,
        "nodeType": node_type,
        "children": children or [],
    }
    node.update(extra)
    return node


def document(backend: int, children: List[Dict[str, Any]], **extra: Any) -> Dict[str, Any]:
    return dom_node(backend, "#document", children, node_type=9, **extra)


def keyed_by_frame(responses: Dict[Optional[str], Any]) -> Callable[[Dict[str, Any]], Any]:
    """Handler answering with the response registered for ``params["frameId"]``."""
    def handler(params: Dict[str, Any]) -> Any:
        response = responses[params.get("frameId")]
        if isinstance(response, Exception):
            raise response
        return response
    return handler


@pytest.fixture
def mock_structlog():
    return MagicMock()


@pytest.fixture
def logger(mock_structlog):
    return A11yLogger(mock_structlog, verbose=3)


@pytest.fixture
def fake_page():
    return FakePage()


@pytest.fixture
def a11y_page(fake_page, logger):
    return A11yPage(fake_page, A11yConfig(verbose=3), logger)


def nested_frame_page():
    """
    A page with a same-process iframe that itself embeds another one::

        main  /html/body/{button "Go", iframe#outer}
        F1    /html/body/{a "Docs", iframe}
        F2    /html/body/span "Deep"

    Returns the fake page, both child frames, the page session and the
    raw AX trees keyed by frame id.
    """
    f2_doc = document(20, [
        dom_node(21, "HTML", [dom_node(22, "BODY", [dom_node(23, "SPAN")])]),
    ])
    f1_doc = document(10, [
        dom_node(11, "HTML", [dom_node(12, "BODY", [
            dom_node(13, "A"),
            dom_node(14, "IFRAME", frameId="F2", contentDocument=f2_doc),
        ])]),
    ])
    main_doc = document(1, [
        dom_node(90, "html", node_type=10),
        dom_node(2, "HTML", [
            dom_node(3, "HEAD"),
            dom_node(4, "BODY", [
                dom_node(5, "BUTTON"),
                dom_node(6, "IFRAME", frameId="F1", contentDocument=f1_doc),
            ]),
        ]),
    ])

    frame_tree = {"frameTree": {
        "frame": {"id": "MAIN", "url": "https://example.com/"},
        "childFrames": [{
            "frame": {"id": "F1", "url": "https://example.com/a", "name": "outer"},
            "childFrames": [{
                "frame": {"id": "F2", "url": "https://example.com/b", "urlFragment": "#top"},
            }],
        }],
    }}

    ax_trees = {
        None: {"nodes": [
            ax_node("1", "RootWebArea", "Main", backend=1, children=["2", "3"]),
            ax_node("2", "button", "Go", backend=5, parent="1"),
            ax_node("3", "Iframe", "", backend=6, parent="1"),
        ]},
        "F1": {"nodes": [
            ax_node("101", "RootWebArea", "Frame A", backend=10, children=["102", "103"]),
            ax_node("102", "link", "Docs", backend=13, parent="101", properties=[
                {"name": "url", "value": {"type": "string", "value": "https://example.com/docs"}},
            ]),
            ax_node("103", "Iframe", "", backend=14, parent="101"),
        ]},
        "F2": {"nodes": [
            ax_node("201", "RootWebArea", "Frame B", backend=20, children=["202"]),
            ax_node("202", "button", "Deep", backend=23, parent="201"),
        ]},
    }

    session = FakeCDPSession({
        "Page.getFrameTree": frame_tree,
        "DOM.getDocument": {"root": main_doc},
        "DOM.getFrameOwner": keyed_by_frame({
            "F1": {"backendNodeId": 6},
            "F2": {"backendNodeId": 14},
        }),
        "Accessibility.getFullAXTree": keyed_by_frame(ax_trees),
    })
    page = FakePage(session)
    f1 = FakeFrame("https://example.com/a", name="outer", parent=page.main_frame)
    f2 = FakeFrame("https://example.com/b#top", parent=f1)
    return page, f1, f2, session, ax_trees


@pytest.fixture
def a11y_page_factory(logger):
    def make(page):
        return A11yPage(page, A11yConfig(verbose=3), logger)
    return make
