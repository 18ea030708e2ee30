"""Execute observed actions against the element behind an XPath."""

import asyncio
import random
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from playwright.async_api import (
    Error as PlaywrightError,
    FrameLocator,
    Locator,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from ...a11y.frame_chain import IFRAME_STEP_RE
from ...config import A11yConfig
from ...core.errors import (
    ElementNotFoundError,
    PlaywrightCommandError,
    PlaywrightMethodNotSupportedError,
)
from ...utils.logger import A11yLogger

# Action names accepted from the model, mapped to Playwright locator methods
LOCATOR_METHODS: Dict[str, str] = {
    "click": "click",
    "dblclick": "dblclick",
    "hover": "hover",
    "tap": "tap",
    "check": "check",
    "uncheck": "uncheck",
    "setChecked": "set_checked",
    "focus": "focus",
    "blur": "blur",
    "clear": "clear",
    "highlight": "highlight",
    "selectOption": "select_option",
    "selectText": "select_text",
    "setInputFiles": "set_input_files",
    "dispatchEvent": "dispatch_event",
    "scrollIntoViewIfNeeded": "scroll_into_view_if_needed",
    "pressSequentially": "press_sequentially",
}
LOCATOR_METHODS.update({name: name for name in list(LOCATOR_METHODS.values())})

# Locator methods whose single argument must be a bool
_BOOL_ARGUMENT_METHODS = frozenset({"set_checked"})


def clean_selector(selector: str) -> str:
    """
    Strip an ``xpath=`` prefix and make the XPath absolute.

    Args:
        selector: Raw selector string

    Returns:
        Cleaned XPath, or "" for an empty selector
    """
    cleaned = selector.strip()
    if cleaned.startswith("xpath="):
        cleaned = cleaned[len("xpath="):].strip()
    if cleaned and not cleaned.startswith("/"):
        cleaned = "/" + cleaned
    return cleaned


def deep_locator(page: Page, xpath: str) -> Locator:
    """
    Build a locator for an absolute XPath that may cross iframes.

    Every ``iframe[k]`` step (except a final one) closes a hop into that
    frame's document, e.g. ``/html[1]/body[1]/iframe[1]/html[1]/body[1]/a[1]``
    becomes ``frame_locator("xpath=/html[1]/body[1]/iframe[1]")
    .locator("xpath=/html[1]/body[1]/a[1]")``.
    """
    steps = [s for s in xpath.split("/") if s]
    scope: Union[Page, FrameLocator] = page
    buf: List[str] = []

    for i, step in enumerate(steps):
        buf.append(step)
        if IFRAME_STEP_RE.match(step) and i < len(steps) - 1:
            scope = scope.frame_locator("xpath=/" + "/".join(buf))
            buf = []

    return scope.locator("xpath=/" + "/".join(buf)).first


def _keystroke_delay(config: A11yConfig) -> float:
    return config.keystroke_delay_min_ms + random.random() * config.keystroke_delay_jitter_ms


async def fill_or_type(page: Page, locator: Locator, xpath: str, args: List[str],
                       logger: A11yLogger, config: A11yConfig) -> None:
    """Clear the field, focus it and type the text one character at a time."""
    text = args[0] if args else ""
    await locator.fill("")
    await locator.click()
    for char in text:
        await page.keyboard.type(char, delay=_keystroke_delay(config))


async def press_key(page: Page, locator: Locator, xpath: str, args: List[str],
                    logger: A11yLogger, config: A11yConfig) -> None:
    """Press a key on the page keyboard; the element is not focused first."""
    key = args[0] if args else "Enter"
    await page.keyboard.press(key)


async def scroll_into_view(page: Page, locator: Locator, xpath: str, args: List[str],
                           logger: A11yLogger, config: A11yConfig) -> None:
    try:
        await locator.evaluate(
            "(el) => el.scrollIntoView({ behavior: 'smooth', block: 'center' })"
        )
    except PlaywrightError as e:
        logger.warn("action", "error scrolling element into view", xpath=xpath, error=str(e))


SPECIAL_METHODS: Dict[str, Callable[..., Awaitable[None]]] = {
    "fill": fill_or_type,
    "type": fill_or_type,
    "press": press_key,
    "scrollIntoView": scroll_into_view,
}


def _locator_arguments(method: str, args: List[str]) -> List[Any]:
    if method in _BOOL_ARGUMENT_METHODS and args:
        return [args[0].strip().lower() in ("true", "1", "yes", "on")]
    return list(args)


async def handle_possible_page_navigation(page: Page, xpath: str, initial_url: str,
                                          new_page_waiter: "asyncio.Future",
                                          logger: A11yLogger, config: A11yConfig) -> None:
    """
    After a click, follow a freshly opened tab in the current page and let
    the network settle.

    A tab opened within ``new_tab_timeout_ms`` is closed and its URL loaded
    in ``page`` instead. Network idle is awaited for at most
    ``network_idle_timeout_ms``.
    """
    done, _ = await asyncio.wait({new_page_waiter}, timeout=config.new_tab_timeout_ms / 1000)
    new_page: Optional[Page] = None
    if done and not new_page_waiter.cancelled() and new_page_waiter.exception() is None:
        new_page = new_page_waiter.result()
    else:
        new_page_waiter.cancel()

    logger.info(
        "action",
        "clicked element",
        xpath=xpath,
        new_opened_tab="opened a new tab" if new_page else "no new tabs opened",
    )

    if new_page is not None:
        try:
            await new_page.wait_for_load_state("domcontentloaded", timeout=config.new_tab_timeout_ms)
        except PlaywrightTimeoutError as e:
            logger.debug("action", "new tab did not finish loading", error=str(e))
        url = new_page.url
        logger.info("action", "new page detected (new tab) with URL", url=url)
        await new_page.close()
        await page.goto(url)
        await page.wait_for_load_state("domcontentloaded")

    try:
        await page.wait_for_load_state("networkidle", timeout=config.network_idle_timeout_ms)
    except PlaywrightTimeoutError as e:
        logger.debug("action", "network idle timeout hit", error=str(e))

    if page.url != initial_url:
        logger.info("action", "new page detected with URL", url=page.url)


async def perform_playwright_method(
    page: Page,
    method: str,
    args: List[str],
    xpath: str,
    logger: A11yLogger,
    config: Optional[A11yConfig] = None,
) -> None:
    """
    Perform ``method`` on the element addressed by ``xpath``.

    Args:
        page: Playwright page the XPath is rooted in
        method: Action name (``click``, ``fill``, ``selectOption``, ...)
        args: String arguments of the action
        xpath: Absolute XPath, possibly crossing iframes
        logger: Logger instance
        config: Timing configuration

    Raises:
        ElementNotFoundError: If the XPath is empty or matches nothing
        PlaywrightMethodNotSupportedError: If the method is unknown
        PlaywrightCommandError: If Playwright fails to perform the action
    """
    config = config or A11yConfig()
    xpath = clean_selector(xpath)
    if not xpath:
        raise ElementNotFoundError(xpath)

    special = SPECIAL_METHODS.get(method)
    locator_method = LOCATOR_METHODS.get(method)
    if special is None and locator_method is None:
        raise PlaywrightMethodNotSupportedError(method)

    locator = deep_locator(page, xpath)
    logger.debug("action", "performing playwright method", xpath=xpath, method=method, args=args)

    try:
        if await locator.count() == 0:
            raise ElementNotFoundError(xpath)

        if special is not None:
            await special(page, locator, xpath, args, logger, config)
            return

        initial_url = page.url
        logger.debug("action", "page URL before action", url=initial_url)

        new_page_waiter = None
        if locator_method == "click":
            new_page_waiter = asyncio.ensure_future(page.context.wait_for_event("page", timeout=0))

        try:
            await getattr(locator, locator_method)(*_locator_arguments(locator_method, args))
        except BaseException:
            if new_page_waiter is not None:
                new_page_waiter.cancel()
            raise

        if new_page_waiter is not None:
            await handle_possible_page_navigation(page, xpath, initial_url, new_page_waiter, logger, config)
    except PlaywrightError as e:
        logger.error("action", "error performing method", xpath=xpath, method=method, args=args, error=str(e))
        raise PlaywrightCommandError(method, xpath, str(e)) from e
