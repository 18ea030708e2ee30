"""Utility helpers for AI Browser A11y."""

from .logger import A11yLogger, LogLevel, LogLine, configure_logging
from .text import clean_text, normalise_spaces

__all__ = [
    "A11yLogger",
    "LogLevel",
    "LogLine",
    "configure_logging",
    "clean_text",
    "normalise_spaces",
]
