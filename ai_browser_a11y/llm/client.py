"""Base LLM client interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..types import LLMMessage, LLMResponse
from ..utils.logger import A11yLogger


class LLMClient(ABC):
    """
    Abstract base class for LLM clients.

    The accessibility pipeline treats the model as a black box that turns
    an instruction plus an outline into JSON text.
    """

    provider: str = "unknown"

    def __init__(
        self,
        model_name: str,
        api_key: Optional[str],
        logger: A11yLogger,
        **options: Any
    ):
        """
        Initialize LLM client.

        Args:
            model_name: Name of the model
            api_key: API key for the provider
            logger: Logger instance
            **options: Provider-specific options
        """
        self.model_name = model_name
        self.api_key = api_key
        self.logger = logger
        self.options = options

    @abstractmethod
    async def create_chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: float = 1.0,
        max_tokens: Optional[int] = None,
        response_format: Optional[Dict[str, Any]] = None,
        **kwargs: Any
    ) -> LLMResponse:
        """
        Create a chat completion.

        Args:
            messages: Conversation so far
            temperature: Temperature for sampling
            max_tokens: Maximum tokens to generate
            response_format: Optional provider hint such as ``{"type": "json_object"}``
            **kwargs: Provider-specific parameters

        Returns:
            Provider-neutral response
        """
        pass
