"""OpenAI LLM client implementation."""

from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from ..core.errors import LLMProviderError
from ..types import LLMChoice, LLMMessage, LLMResponse, LLMUsageMetrics
from ..utils.logger import A11yLogger
from .client import LLMClient


class OpenAIClient(LLMClient):
    """Chat completions through the OpenAI SDK."""

    provider = "openai"

    def __init__(
        self,
        model_name: str,
        api_key: Optional[str],
        logger: A11yLogger,
        **kwargs: Any
    ):
        super().__init__(model_name, api_key, logger, **kwargs)
        self.client = AsyncOpenAI(api_key=api_key, **kwargs)

    async def create_chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: float = 1.0,
        max_tokens: Optional[int] = None,
        response_format: Optional[Dict[str, Any]] = None,
        **kwargs: Any
    ) -> LLMResponse:
        request_params: Dict[str, Any] = {
            "model": self.model_name,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
        }
        if max_tokens:
            request_params["max_tokens"] = max_tokens
        if response_format:
            request_params["response_format"] = response_format
        request_params.update(kwargs)

        self.logger.debug("llm", "Making OpenAI API call", model=self.model_name, message_count=len(messages))

        try:
            response = await self.client.chat.completions.create(**request_params)
        except OpenAIError as e:
            self.logger.error("llm", "OpenAI API error", error=str(e))
            raise LLMProviderError(self.provider, str(e)) from e

        return LLMResponse(
            id=response.id,
            model=response.model,
            choices=[
                LLMChoice(
                    index=choice.index,
                    message=LLMMessage(role="assistant", content=choice.message.content or ""),
                    finish_reason=choice.finish_reason,
                )
                for choice in response.choices
            ],
            usage=LLMUsageMetrics(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            ) if response.usage else None,
        )
