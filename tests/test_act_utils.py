"""Tests for dispatching actions onto the element behind an XPath."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, call

import pytest
from playwright.async_api import Error as PlaywrightError

from ai_browser_a11y.config import A11yConfig
from ai_browser_a11y.core.errors import (
    ElementNotFoundError,
    PlaywrightCommandError,
    PlaywrightMethodNotSupportedError,
)
from ai_browser_a11y.handlers.utils import act_utils
from ai_browser_a11y.handlers.utils.act_utils import (
    LOCATOR_METHODS,
    clean_selector,
    deep_locator,
    perform_playwright_method,
)


def mock_page(count=1):
    """A page mock whose every locator chain ends at the same element locator."""
    locator = MagicMock()
    locator.count = AsyncMock(return_value=count)
    for name in ("click", "fill", "hover", "select_option", "set_checked", "evaluate"):
        setattr(locator, name, AsyncMock())

    page = MagicMock()
    page.url = "https://example.com/"
    page.locator.return_value.first = locator
    page.keyboard.type = AsyncMock()
    page.keyboard.press = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.goto = AsyncMock()

    async def no_new_tab(*args, **kwargs):
        await asyncio.sleep(3600)

    page.context.wait_for_event = no_new_tab
    return page, locator


@pytest.fixture
def fast_config():
    return A11yConfig(new_tab_timeout_ms=10, network_idle_timeout_ms=10)


@pytest.mark.parametrize("raw, cleaned", [
    ("xpath=/html/body/a", "/html/body/a"),
    ("  xpath=html/body ", "/html/body"),
    ("//button", "//button"),
    ("", ""),
])
def test_clean_selector(raw, cleaned):
    assert clean_selector(raw) == cleaned


def test_locator_methods_accept_both_spellings():
    assert LOCATOR_METHODS["selectOption"] == "select_option"
    assert LOCATOR_METHODS["select_option"] == "select_option"
    assert LOCATOR_METHODS["click"] == "click"


def test_deep_locator_hops_through_iframes():
    page = MagicMock()
    result = deep_locator(page, "/html[1]/body[1]/iframe[1]/html[1]/body[1]/iframe[2]/html[1]/body[1]/a[1]")

    page.frame_locator.assert_called_once_with("xpath=/html[1]/body[1]/iframe[1]")
    outer = page.frame_locator.return_value
    outer.frame_locator.assert_called_once_with("xpath=/html[1]/body[1]/iframe[2]")
    outer.frame_locator.return_value.locator.assert_called_once_with("xpath=/html[1]/body[1]/a[1]")
    assert result is outer.frame_locator.return_value.locator.return_value.first


def test_deep_locator_final_iframe_step_targets_the_element():
    page = MagicMock()
    deep_locator(page, "/html[1]/body[1]/iframe[1]")
    page.frame_locator.assert_not_called()
    page.locator.assert_called_once_with("xpath=/html[1]/body[1]/iframe[1]")


def test_empty_xpath_is_rejected(logger):
    page, _ = mock_page()
    with pytest.raises(ElementNotFoundError):
        asyncio.run(perform_playwright_method(page, "click", [], "xpath=", logger))


def test_unknown_method_is_rejected(logger):
    page, _ = mock_page()
    with pytest.raises(PlaywrightMethodNotSupportedError):
        asyncio.run(perform_playwright_method(page, "teleport", [], "/html/body", logger))


def test_missing_element_is_reported(logger):
    page, _ = mock_page(count=0)
    with pytest.raises(ElementNotFoundError):
        asyncio.run(perform_playwright_method(page, "hover", [], "/html/body/a", logger))


def test_fill_clears_focuses_and_types_each_character(logger, monkeypatch):
    page, locator = mock_page()
    monkeypatch.setattr(act_utils.random, "random", lambda: 0.5)

    asyncio.run(perform_playwright_method(page, "fill", ["hi"], "xpath=/html/body/input", logger))

    locator.fill.assert_awaited_once_with("")
    locator.click.assert_awaited_once_with()
    assert page.keyboard.type.await_args_list == [call("h", delay=50.0), call("i", delay=50.0)]


def test_press_uses_page_keyboard(logger):
    page, locator = mock_page()
    asyncio.run(perform_playwright_method(page, "press", ["Enter"], "/html/body/input", logger))
    page.keyboard.press.assert_awaited_once_with("Enter")
    locator.click.assert_not_awaited()


def test_scroll_into_view_failure_is_not_fatal(logger, mock_structlog):
    page, locator = mock_page()
    locator.evaluate.side_effect = PlaywrightError("detached")

    asyncio.run(perform_playwright_method(page, "scrollIntoView", [], "/html/body/div", logger))

    assert mock_structlog.warning.called


def test_select_option_and_set_checked_arguments(logger, fast_config):
    page, locator = mock_page()

    async def _run():
        await perform_playwright_method(page, "selectOption", ["blue"], "/html/body/select", logger, fast_config)
        await perform_playwright_method(page, "setChecked", ["false"], "/html/body/input", logger, fast_config)

    asyncio.run(_run())
    locator.select_option.assert_awaited_once_with("blue")
    locator.set_checked.assert_awaited_once_with(False)


def test_click_without_new_tab_waits_for_network_idle(logger, fast_config):
    page, locator = mock_page()

    asyncio.run(perform_playwright_method(page, "click", [], "/html/body/a", logger, fast_config))

    locator.click.assert_awaited_once_with()
    page.goto.assert_not_awaited()
    page.wait_for_load_state.assert_awaited_with("networkidle", timeout=10)


def test_click_opening_a_tab_moves_navigation_into_the_page(logger):
    page, locator = mock_page()
    new_page = MagicMock()
    new_page.url = "https://example.com/popup"
    new_page.wait_for_load_state = AsyncMock()
    new_page.close = AsyncMock()

    async def opened(*args, **kwargs):
        return new_page

    page.context.wait_for_event = opened

    asyncio.run(perform_playwright_method(page, "click", [], "/html/body/a", logger))

    new_page.close.assert_awaited_once()
    page.goto.assert_awaited_once_with("https://example.com/popup")


def test_playwright_failures_are_wrapped(logger, fast_config):
    page, locator = mock_page()
    locator.click.side_effect = PlaywrightError("element is not visible")

    with pytest.raises(PlaywrightCommandError) as exc:
        asyncio.run(perform_playwright_method(page, "click", [], "/html/body/a", logger, fast_config))

    assert exc.value.details["method"] == "click"
    assert "not visible" in exc.value.details["reason"]
