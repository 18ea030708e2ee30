"""Custom exception hierarchy for AI Browser A11y."""

from typing import Any, Dict, Optional


class A11yError(Exception):
    """Base exception for all AI Browser A11y errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotInitializedError(A11yError):
    """Raised when the browser launcher is used before init()."""

    def __init__(self):
        super().__init__(
            "A11yBrowser not initialized. Call init() before using other methods.",
            {"error_code": "NOT_INITIALIZED"}
        )


class MissingEnvironmentVariableError(A11yError):
    """Raised when a required environment variable is missing."""

    def __init__(self, variable_name: str):
        super().__init__(
            f"Missing required environment variable: {variable_name}",
            {"variable": variable_name, "error_code": "MISSING_ENV_VAR"}
        )


class ConfigurationError(A11yError):
    """Raised when configuration values are invalid."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid configuration: {reason}",
            {"reason": reason, "error_code": "CONFIGURATION_ERROR"}
        )


class BrowserNotAvailableError(A11yError):
    """Raised when the browser cannot be launched or reached."""

    def __init__(self, reason: str):
        super().__init__(
            f"Browser not available: {reason}",
            {"reason": reason, "error_code": "BROWSER_NOT_AVAILABLE"}
        )


class CDPError(A11yError):
    """Raised when a DevTools protocol session or command fails."""

    def __init__(self, command: str, reason: str):
        super().__init__(
            f"CDP command '{command}' failed: {reason}",
            {"command": command, "reason": reason, "error_code": "CDP_ERROR"}
        )


class FrameResolutionError(A11yError):
    """Raised when the protocol frame id of a frame cannot be determined."""

    def __init__(self, frame_url: str, reason: str):
        super().__init__(
            f"Could not resolve frame id for {frame_url}: {reason}",
            {"frame_url": frame_url, "reason": reason, "error_code": "FRAME_RESOLUTION_ERROR"}
        )


class FrameOrdinalLimitError(A11yError):
    """Raised when a page registers more frames than ordinals allow."""

    def __init__(self, limit: int):
        super().__init__(
            f"Frame ordinal limit exceeded: more than {limit} frames on one page",
            {"limit": limit, "error_code": "FRAME_ORDINAL_LIMIT"}
        )


class DomProcessError(A11yError):
    """Raised when the DOM cannot be walked or re-rooted as expected."""

    def __init__(self, reason: str):
        super().__init__(
            f"DOM processing failed: {reason}",
            {"reason": reason, "error_code": "DOM_PROCESS_ERROR"}
        )


class ElementNotFoundError(A11yError):
    """Raised when an XPath resolves to no node."""

    def __init__(self, xpath: str):
        super().__init__(
            f"Element not found for xpath: {xpath}",
            {"xpath": xpath, "error_code": "ELEMENT_NOT_FOUND"}
        )


class PlaywrightMethodNotSupportedError(A11yError):
    """Raised when an action names a method the dispatcher does not know."""

    def __init__(self, method: str):
        super().__init__(
            f"Method '{method}' is not supported",
            {"method": method, "error_code": "METHOD_NOT_SUPPORTED"}
        )


class PlaywrightCommandError(A11yError):
    """Raised when Playwright fails while executing a dispatched action."""

    def __init__(self, method: str, xpath: str, reason: str):
        super().__init__(
            f"Action '{method}' on {xpath} failed: {reason}",
            {"method": method, "xpath": xpath, "reason": reason, "error_code": "PLAYWRIGHT_COMMAND_ERROR"}
        )


class LLMError(A11yError):
    """Base class for LLM-related errors."""
    pass


class LLMProviderError(LLMError):
    """Raised when LLM provider operations fail."""

    def __init__(self, provider: str, reason: str):
        super().__init__(
            f"LLM provider '{provider}' error: {reason}",
            {"provider": provider, "reason": reason, "error_code": "LLM_PROVIDER_ERROR"}
        )


class LLMResponseError(LLMError):
    """Raised when an LLM response is invalid or cannot be parsed."""

    def __init__(self, reason: str, response: Optional[Any] = None):
        super().__init__(
            f"Invalid LLM response: {reason}",
            {"reason": reason, "response": str(response), "error_code": "LLM_RESPONSE_ERROR"}
        )
