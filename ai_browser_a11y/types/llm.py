"""LLM-specific type definitions."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel


class LLMMessage(BaseModel):
    """A message in an LLM conversation."""
    role: Literal["system", "user", "assistant"]
    content: Union[str, List[Dict[str, Any]]]


class LLMUsageMetrics(BaseModel):
    """Token usage metrics from LLM."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class LLMChoice(BaseModel):
    """A single choice from LLM response."""
    index: int
    message: LLMMessage
    finish_reason: Optional[str] = None


class LLMResponse(BaseModel):
    """Provider-neutral completion response."""
    id: str
    model: str
    choices: List[LLMChoice]
    usage: Optional[LLMUsageMetrics] = None

    @property
    def text(self) -> str:
        """Text content of the first choice, or an empty string."""
        if not self.choices:
            return ""
        content = self.choices[0].message.content
        return content if isinstance(content, str) else ""
