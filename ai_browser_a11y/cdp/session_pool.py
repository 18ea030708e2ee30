"""DevTools protocol session management for a single page."""

import weakref
from typing import Any, Dict, Optional

from playwright.async_api import CDPSession, Error as PlaywrightError, Frame, Page

from ..core.errors import CDPError
from ..utils.logger import A11yLogger


class CDPSessionPool:
    """
    Holds the page-wide CDP session plus dedicated sessions for
    out-of-process iframes.

    A frame is out-of-process exactly when Chromium lets us attach a
    dedicated session to it. Same-process iframes share the page session.
    """

    def __init__(self, page: Page, logger: Optional[A11yLogger] = None):
        self.page = page
        self.logger = logger or A11yLogger()
        self._page_session: Optional[CDPSession] = None
        self._frame_sessions: "weakref.WeakKeyDictionary[Frame, CDPSession]" = weakref.WeakKeyDictionary()
        # Frames that failed to attach and render in the page process
        self._shared_frames: "weakref.WeakSet[Frame]" = weakref.WeakSet()

    def _is_main(self, frame: Optional[Frame]) -> bool:
        return frame is None or frame == self.page.main_frame

    async def page_session(self) -> CDPSession:
        """Return the page-wide session, creating it on first use."""
        if self._page_session is None:
            try:
                self._page_session = await self.page.context.new_cdp_session(self.page)
            except PlaywrightError as e:
                raise CDPError("Target.attachToTarget", str(e)) from e
        return self._page_session

    async def frame_session(self, frame: Frame) -> Optional[CDPSession]:
        """
        Return the dedicated session of an out-of-process frame.

        Returns:
            The session, or None when the frame renders in its parent's process
        """
        if self._is_main(frame) or frame in self._shared_frames:
            return None

        session = self._frame_sessions.get(frame)
        if session is not None:
            return session

        try:
            session = await self.page.context.new_cdp_session(frame)
        except PlaywrightError as e:
            self.logger.debug("cdp", "frame shares the page session", url=frame.url, reason=str(e))
            self._shared_frames.add(frame)
            return None

        self._frame_sessions[frame] = session
        return session

    async def session_for(self, frame: Optional[Frame] = None) -> CDPSession:
        """Session that owns ``frame``: its dedicated one, else the page session."""
        if self._is_main(frame):
            return await self.page_session()
        return await self.frame_session(frame) or await self.page_session()

    async def is_oopif(self, frame: Optional[Frame]) -> bool:
        return await self.frame_session(frame) is not None

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None, frame: Optional[Frame] = None) -> Any:
        session = await self.session_for(frame)
        return await session.send(method, params or {})

    async def detach_all(self) -> None:
        """Detach every session held by the pool."""
        sessions = list(self._frame_sessions.values())
        if self._page_session is not None:
            sessions.append(self._page_session)

        for session in sessions:
            try:
                await session.detach()
            except PlaywrightError as e:
                self.logger.debug("cdp", "session already detached", reason=str(e))

        self._page_session = None
        self._frame_sessions = weakref.WeakKeyDictionary()
        self._shared_frames = weakref.WeakSet()
