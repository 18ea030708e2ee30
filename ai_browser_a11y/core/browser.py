"""A11yBrowser: launch Chromium and hand out accessibility-aware pages."""

from typing import Any, Dict, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Playwright,
    async_playwright,
)

from ..config import A11yConfig
from ..dom.scripts import DOM_SCRIPTS
from ..utils.logger import A11yLogger, configure_logging
from .errors import BrowserNotAvailableError, NotInitializedError
from .page import A11yPage


class A11yBrowser:
    """
    Owns a Playwright Chromium instance and one browser context.

    Usage::

        async with A11yBrowser(A11yConfig.from_env()) as browser:
            page = await browser.page()
            await page.goto("https://example.com")
            results = await page.observe("find the sign-in link")
    """

    def __init__(self, config: Optional[A11yConfig] = None, context_options: Optional[Dict[str, Any]] = None):
        self.config = config or A11yConfig()
        self.context_options = context_options or {}
        self.logger = A11yLogger(configure_logging(self.config.verbose), self.config.verbose)

        from ..llm import LLMProvider
        self.llm_provider = LLMProvider(
            logger=self.logger,
            default_model=self.config.model_name,
            default_options=self.config.model_client_options,
        )

        self.initialized = False
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.pages: List[A11yPage] = []

    async def init(self) -> None:
        """
        Launch Chromium and create the browser context.

        Raises:
            BrowserNotAvailableError: If the browser cannot be launched
        """
        self.logger.info("browser", "Launching browser", headless=self.config.headless)
        try:
            self.playwright = await async_playwright().start()

            browser_args = list(self.config.browser_args)
            if not any(arg.startswith("--disable-blink-features") for arg in browser_args):
                browser_args.append("--disable-blink-features=AutomationControlled")

            self.browser = await self.playwright.chromium.launch(
                headless=self.config.headless,
                args=browser_args,
            )
            context_options: Dict[str, Any] = {"viewport": {"width": 1280, "height": 720}}
            context_options.update(self.context_options)
            self.context = await self.browser.new_context(**context_options)
            await self.context.add_init_script(script=DOM_SCRIPTS)
        except PlaywrightError as e:
            self.logger.error("browser", "Initialization failed", error=str(e))
            await self.close()
            raise BrowserNotAvailableError(str(e)) from e

        self.initialized = True

    async def page(self) -> A11yPage:
        """
        Open a new tab wrapped in an ``A11yPage``.

        Raises:
            NotInitializedError: If init() has not completed
        """
        if not self.initialized or self.context is None:
            raise NotInitializedError()

        page = A11yPage(await self.context.new_page(), self.config, self.logger, self.llm_provider)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        """Close pages, the context, the browser and Playwright."""
        for page in self.pages:
            await page.close()
        self.pages = []

        if self.context is not None:
            await self.context.close()
        if self.browser is not None:
            await self.browser.close()
        if self.playwright is not None:
            await self.playwright.stop()

        self.context = None
        self.browser = None
        self.playwright = None
        self.initialized = False
        self.logger.info("browser", "Browser closed")

    async def __aenter__(self) -> "A11yBrowser":
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
