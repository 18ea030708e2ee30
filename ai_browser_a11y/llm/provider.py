"""LLM provider factory and management."""

import os
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..core.errors import LLMProviderError, MissingEnvironmentVariableError
from ..utils.logger import A11yLogger

if TYPE_CHECKING:
    from .client import LLMClient


class LLMProvider:
    """Creates and caches one LLM client per model name."""

    MODEL_TO_PROVIDER = {
        "gpt-4o": "openai",
        "gpt-4o-mini": "openai",
        "gpt-4.1": "openai",
        "gpt-4.1-mini": "openai",
        "gpt-4-turbo": "openai",
        "o3-mini": "openai",
        "claude-3-5-sonnet": "anthropic",
        "claude-3.5-sonnet": "anthropic",
        "claude-3-7-sonnet": "anthropic",
        "claude-3-5-sonnet-latest": "anthropic",
        "claude-3-7-sonnet-latest": "anthropic",
    }

    API_KEY_ENV_VARS = {
        "openai": "OPENAI_API_KEY",
        "anthropic": "ANTHROPIC_API_KEY",
    }

    def __init__(
        self,
        logger: A11yLogger,
        default_model: Optional[str] = None,
        default_options: Optional[Dict[str, Any]] = None,
    ):
        self.logger = logger
        self.default_model = default_model or "gpt-4o"
        self.default_options = default_options or {}
        self._clients: Dict[str, "LLMClient"] = {}

    def register_client(self, client: "LLMClient", model_name: Optional[str] = None) -> None:
        """Use a pre-built client for ``model_name`` (defaults to the client's own model)."""
        self._clients[model_name or client.model_name] = client

    def get_client(self, model_name: Optional[str] = None, **options: Any) -> "LLMClient":
        """
        Get or create the client for a model.

        Raises:
            LLMProviderError: If the provider cannot be determined
            MissingEnvironmentVariableError: If the provider's API key is missing
        """
        model_name = model_name or self.default_model
        if model_name in self._clients:
            return self._clients[model_name]

        client_options = {**self.default_options, **options}
        provider = self.provider_for_model(model_name)
        client = self._create_client(provider, model_name, client_options)
        self._clients[model_name] = client
        return client

    def provider_for_model(self, model_name: str) -> str:
        # Explicit "provider/model"
        if "/" in model_name:
            return model_name.split("/", 1)[0]

        provider = self.MODEL_TO_PROVIDER.get(model_name)
        if provider is None:
            if model_name.startswith(("gpt-", "o1", "o3", "o4")):
                provider = "openai"
            elif model_name.startswith("claude-"):
                provider = "anthropic"
            else:
                raise LLMProviderError("unknown", f"Cannot determine provider for model: {model_name}")
        return provider

    def _create_client(self, provider: str, model_name: str, options: Dict[str, Any]) -> "LLMClient":
        options = dict(options)
        api_key = options.pop("api_key", None)
        env_var = self.API_KEY_ENV_VARS.get(provider)
        if env_var is None:
            raise LLMProviderError(provider, "unsupported provider")

        api_key = api_key or os.getenv(env_var)
        if not api_key:
            raise MissingEnvironmentVariableError(env_var)

        if "/" in model_name:
            model_name = model_name.split("/", 1)[1]

        if provider == "openai":
            from .openai_client import OpenAIClient
            return OpenAIClient(model_name=model_name, api_key=api_key, logger=self.logger, **options)

        from .anthropic_client import AnthropicClient
        return AnthropicClient(model_name=model_name, api_key=api_key, logger=self.logger, **options)
