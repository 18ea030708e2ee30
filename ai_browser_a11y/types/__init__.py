"""Type definitions for AI Browser A11y."""

from .context import (
    AccessibilityNode,
    BackendIdMaps,
    CombinedA11yResult,
    EncodedId,
    FrameSnapshot,
    TreeResult,
)
from .llm import LLMChoice, LLMMessage, LLMResponse, LLMUsageMetrics
from .models import ActOptions, ActResult, ObserveOptions, ObserveResult
from .observe import ObserveElementSchema

__all__ = [
    "AccessibilityNode",
    "ActOptions",
    "ActResult",
    "BackendIdMaps",
    "CombinedA11yResult",
    "EncodedId",
    "FrameSnapshot",
    "LLMChoice",
    "LLMMessage",
    "LLMResponse",
    "LLMUsageMetrics",
    "ObserveElementSchema",
    "ObserveOptions",
    "ObserveResult",
    "TreeResult",
]
