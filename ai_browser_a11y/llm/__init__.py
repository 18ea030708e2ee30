"""LLM clients and prompts."""

from .client import LLMClient
from .provider import LLMProvider

__all__ = ["LLMClient", "LLMProvider"]
