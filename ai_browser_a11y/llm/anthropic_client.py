"""Anthropic LLM client implementation."""

from typing import Any, Dict, List, Optional

from anthropic import AnthropicError, AsyncAnthropic

from ..core.errors import LLMProviderError
from ..types import LLMChoice, LLMMessage, LLMResponse, LLMUsageMetrics
from ..utils.logger import A11yLogger
from .client import LLMClient


class AnthropicClient(LLMClient):
    """Messages API through the Anthropic SDK."""

    provider = "anthropic"

    MODEL_ALIASES = {
        "claude-3-5-sonnet": "claude-3-5-sonnet-latest",
        "claude-3.5-sonnet": "claude-3-5-sonnet-latest",
        "claude-3-7-sonnet": "claude-3-7-sonnet-latest",
    }

    def __init__(
        self,
        model_name: str,
        api_key: Optional[str],
        logger: A11yLogger,
        **kwargs: Any
    ):
        super().__init__(model_name, api_key, logger, **kwargs)
        self.client = AsyncAnthropic(api_key=api_key, **kwargs)
        self.anthropic_model = self.MODEL_ALIASES.get(model_name, model_name)

    async def create_chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: float = 1.0,
        max_tokens: Optional[int] = None,
        response_format: Optional[Dict[str, Any]] = None,
        **kwargs: Any
    ) -> LLMResponse:
        system_parts = [m.content for m in messages if m.role == "system" and isinstance(m.content, str)]
        if response_format and response_format.get("type") == "json_object":
            system_parts.append("Respond with a single JSON object and nothing else.")

        request_params: Dict[str, Any] = {
            "model": self.anthropic_model,
            "messages": [{"role": m.role, "content": m.content} for m in messages if m.role != "system"],
            "temperature": temperature,
            # Anthropic requires max_tokens
            "max_tokens": max_tokens or 4096,
        }
        if system_parts:
            request_params["system"] = "\n\n".join(system_parts)
        request_params.update(kwargs)

        self.logger.debug("llm", "Making Anthropic API call", model=self.anthropic_model, message_count=len(messages))

        try:
            response = await self.client.messages.create(**request_params)
        except AnthropicError as e:
            self.logger.error("llm", "Anthropic API error", error=str(e))
            raise LLMProviderError(self.provider, str(e)) from e

        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        return LLMResponse(
            id=response.id,
            model=response.model,
            choices=[
                LLMChoice(
                    index=0,
                    message=LLMMessage(role="assistant", content=text),
                    finish_reason=response.stop_reason or "stop",
                )
            ],
            usage=LLMUsageMetrics(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            ),
        )
