"""Split an absolute XPath that crosses iframes into a frame chain."""

import re
from typing import TYPE_CHECKING, List, Optional, Tuple

from playwright.async_api import Frame

from ..core.errors import ElementNotFoundError, FrameResolutionError
from .fetch import resolve_object_id_for_xpath

if TYPE_CHECKING:
    from ..core.page import A11yPage

IFRAME_STEP_RE = re.compile(r"^iframe\[\d+]$", re.IGNORECASE)


async def resolve_frame_chain(page: "A11yPage", abs_path: str) -> Tuple[List[Frame], str]:
    """
    Resolve the frames an absolute XPath descends through.

    Starting in the main document, whenever the remaining path does not
    resolve in the current frame, the path up to and including its first
    ``iframe[k]`` step is entered and the rest is tried inside that frame.

    Args:
        page: Page context
        abs_path: XPath such as ``/html/body/div/iframe[2]/html/body/span``

    Returns:
        The frames entered, outermost first, and the XPath left to
        evaluate inside the innermost one

    Raises:
        ElementNotFoundError: If the path neither resolves nor crosses an iframe
        FrameResolutionError: If an iframe step has no content frame
    """
    path = abs_path if abs_path.startswith("/") else "/" + abs_path
    ctx_frame: Optional[Frame] = None
    chain: List[Frame] = []

    while True:
        try:
            await resolve_object_id_for_xpath(page, path, ctx_frame)
            return chain, path
        except ElementNotFoundError:
            pass

        steps = [s for s in path.split("/") if s]
        iframe_at = next((i for i, step in enumerate(steps) if IFRAME_STEP_RE.match(step)), None)
        if iframe_at is None:
            raise ElementNotFoundError(abs_path)

        selector = "xpath=/" + "/".join(steps[: iframe_at + 1])
        current = ctx_frame or page.page.main_frame
        locator = current.locator(selector)
        if await locator.count() == 0:
            raise ElementNotFoundError(selector)

        handle = await locator.first.element_handle()
        frame = await handle.content_frame() if handle else None
        if frame is None:
            raise FrameResolutionError(selector, "iframe has no content frame")

        chain.append(frame)
        ctx_frame = frame
        path = "/" + "/".join(steps[iframe_at + 1:])
