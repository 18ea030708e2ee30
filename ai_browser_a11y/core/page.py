"""A11yPage: a Playwright page plus the per-page accessibility context."""

import weakref
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from playwright.async_api import (
    CDPSession,
    Error as PlaywrightError,
    Frame,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from ..a11y.dom_maps import TagNameCache
from ..a11y.fetch import get_accessibility_tree
from ..a11y.frame_id import get_cdp_frame_id
from ..a11y.ordinals import FrameOrdinalRegistry
from ..a11y.stitch import get_accessibility_tree_with_frames
from ..cdp.session_pool import CDPSessionPool
from ..config import A11yConfig
from ..dom.scripts import DOM_SCRIPTS
from ..types import (
    ActOptions,
    ActResult,
    CombinedA11yResult,
    ObserveOptions,
    ObserveResult,
    TreeResult,
)
from ..utils.logger import A11yLogger

if TYPE_CHECKING:
    from ..llm import LLMProvider


class A11yPage:
    """
    Wraps a Playwright ``Page`` with accessibility snapshots and
    model-driven ``observe``/``act``.

    Owns everything whose lifetime is the page: the CDP session pool, the
    frame ordinal registry, the frame-id cache and the tag-name cache.
    Unknown attributes are proxied to the Playwright page.
    """

    def __init__(
        self,
        page: Page,
        config: Optional[A11yConfig] = None,
        logger: Optional[A11yLogger] = None,
        llm_provider: Optional["LLMProvider"] = None,
    ):
        self._page = page
        self.config = config or A11yConfig()
        self.logger = (logger or A11yLogger(verbose=self.config.verbose)).child(component="page")
        self._llm_provider = llm_provider

        self.sessions = CDPSessionPool(page, self.logger)
        self.frame_ordinals = FrameOrdinalRegistry()
        self.tag_names = TagNameCache()
        self.frame_ids: "weakref.WeakKeyDictionary[Frame, str]" = weakref.WeakKeyDictionary()

        self._init_script_added = False

    @property
    def page(self) -> Page:
        return self._page

    @property
    def llm_provider(self) -> "LLMProvider":
        if self._llm_provider is None:
            from ..llm import LLMProvider
            self._llm_provider = LLMProvider(
                self.logger,
                default_model=self.config.model_name,
                default_options=self.config.model_client_options,
            )
        return self._llm_provider

    # CDP helpers

    async def get_cdp_client(self, frame: Optional[Frame] = None) -> CDPSession:
        """Session owning ``frame``: dedicated for OOPIFs, else the page session."""
        return await self.sessions.session_for(frame)

    async def send_cdp(self, method: str, params: Optional[Dict[str, Any]] = None, frame: Optional[Frame] = None) -> Any:
        return await self.sessions.send(method, params, frame)

    async def enable_cdp(self, domain: str, frame: Optional[Frame] = None) -> None:
        await self.sessions.send(f"{domain}.enable", {}, frame)

    async def disable_cdp(self, domain: str, frame: Optional[Frame] = None) -> None:
        await self.sessions.send(f"{domain}.disable", {}, frame)

    # Frame identity

    def ordinal_for_frame_id(self, frame_id: Optional[str]) -> int:
        return self.frame_ordinals.ordinal_for(frame_id)

    def encode_with_frame_id(self, frame_id: Optional[str], backend_id: int) -> str:
        """Encoded id of a backend node inside the frame with protocol id ``frame_id``."""
        return self.frame_ordinals.encode(frame_id, backend_id)

    async def frame_ordinal(self, frame: Optional[Frame] = None) -> int:
        """Ordinal of a Playwright frame; 0 for the main frame."""
        return self.ordinal_for_frame_id(await get_cdp_frame_id(self, frame))

    # Page-side helpers

    async def ensure_dom_scripts(self, frame: Optional[Frame] = None) -> None:
        """Inject the helper scripts into ``frame`` and into future documents."""
        if not self._init_script_added:
            await self._page.add_init_script(script=DOM_SCRIPTS)
            self._init_script_added = True

        target = frame or self._page.main_frame
        await target.evaluate(f"() => {{ {DOM_SCRIPTS} }}")

    async def wait_for_settled_dom(self, timeout_ms: Optional[int] = None) -> None:
        """
        Wait for the document to load and the network to go idle.

        Timeouts are logged and otherwise ignored.
        """
        timeout_ms = timeout_ms if timeout_ms is not None else self.config.dom_settle_timeout_ms
        self.logger.debug("page", "Waiting for DOM to settle", timeout_ms=timeout_ms)
        try:
            await self._page.wait_for_load_state("domcontentloaded", timeout=timeout_ms)
            await self._page.wait_for_load_state("networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            self.logger.debug("page", "DOM settle timeout hit, proceeding", error=str(e))

    # Accessibility snapshots

    async def get_accessibility_tree(self, selector: Optional[str] = None, frame: Optional[Frame] = None) -> TreeResult:
        return await get_accessibility_tree(self, selector, frame)

    async def get_accessibility_tree_with_frames(self, root_xpath: Optional[str] = None) -> CombinedA11yResult:
        return await get_accessibility_tree_with_frames(self, root_xpath)

    # Model-driven operations

    async def observe(self, options: Optional[Union[str, ObserveOptions]] = None) -> List[ObserveResult]:
        """
        Find elements matching an instruction across every frame of the page.

        Args:
            options: Instruction string or ObserveOptions

        Returns:
            Observed elements with page-absolute ``xpath=`` selectors
        """
        from ..handlers.observe import ObserveHandler

        if options is None or isinstance(options, str):
            options = ObserveOptions(instruction=options)
        return await ObserveHandler(self.logger, self.llm_provider).handle(self, options)

    async def act(self, action: Union[str, ActOptions, ObserveResult]) -> ActResult:
        """
        Perform an action, either a previously observed one or one described
        in natural language.
        """
        from ..handlers.act import ActHandler

        return await ActHandler(self.logger, self.llm_provider).handle(self, action)

    async def perform_action(self, method: str, args: List[str], xpath: str) -> None:
        """Dispatch ``method`` on the element behind an (iframe-crossing) XPath."""
        from ..handlers.utils.act_utils import perform_playwright_method

        await perform_playwright_method(self._page, method, args, xpath, self.logger, self.config)

    async def close(self) -> None:
        """Detach protocol sessions and forget per-page state."""
        await self.sessions.detach_all()
        self.frame_ordinals.reset()
        self.frame_ids = weakref.WeakKeyDictionary()
        try:
            await self._page.close()
        except PlaywrightError as e:
            self.logger.debug("page", "page already closed", error=str(e))

    def __getattr__(self, name: str) -> Any:
        if name == "_page":
            raise AttributeError(name)
        return getattr(self._page, name)

    def __repr__(self) -> str:
        return f"<A11yPage url='{self._page.url}'>"
