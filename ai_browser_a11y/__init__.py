"""
AI Browser A11y: frame-aware accessibility snapshots and model-driven
observe/act for Playwright pages.
"""

from .config import A11yConfig
from .core.browser import A11yBrowser
from .core.errors import (
    A11yError,
    DomProcessError,
    ElementNotFoundError,
    FrameOrdinalLimitError,
    FrameResolutionError,
    PlaywrightCommandError,
    PlaywrightMethodNotSupportedError,
)
from .core.page import A11yPage
from .types import (
    ActOptions,
    ActResult,
    CombinedA11yResult,
    ObserveOptions,
    ObserveResult,
    TreeResult,
)
from .utils.logger import A11yLogger, configure_logging

__version__ = "0.1.0"

__all__ = [
    "A11yBrowser",
    "A11yConfig",
    "A11yError",
    "A11yLogger",
    "A11yPage",
    "ActOptions",
    "ActResult",
    "CombinedA11yResult",
    "DomProcessError",
    "ElementNotFoundError",
    "FrameOrdinalLimitError",
    "FrameResolutionError",
    "ObserveOptions",
    "ObserveResult",
    "PlaywrightCommandError",
    "PlaywrightMethodNotSupportedError",
    "TreeResult",
    "configure_logging",
]
