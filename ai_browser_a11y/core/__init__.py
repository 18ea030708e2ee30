"""Core page wrapper and errors."""

from .errors import (
    A11yError,
    BrowserNotAvailableError,
    CDPError,
    ConfigurationError,
    DomProcessError,
    ElementNotFoundError,
    FrameOrdinalLimitError,
    FrameResolutionError,
    LLMError,
    LLMProviderError,
    LLMResponseError,
    MissingEnvironmentVariableError,
    NotInitializedError,
    PlaywrightCommandError,
    PlaywrightMethodNotSupportedError,
)

__all__ = [
    "A11yError",
    "BrowserNotAvailableError",
    "CDPError",
    "ConfigurationError",
    "DomProcessError",
    "ElementNotFoundError",
    "FrameOrdinalLimitError",
    "FrameResolutionError",
    "LLMError",
    "LLMProviderError",
    "LLMResponseError",
    "MissingEnvironmentVariableError",
    "NotInitializedError",
    "PlaywrightCommandError",
    "PlaywrightMethodNotSupportedError",
]
