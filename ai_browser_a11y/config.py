"""Configuration for AI Browser A11y."""

import os
from typing import Any, Dict, List, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .core.errors import ConfigurationError

ENV_PREFIX = "AI_BROWSER_A11Y_"


class A11yConfig(BaseModel):
    """Runtime settings shared by the page, handlers and action dispatch."""
    verbose: int = 0
    headless: bool = True
    browser: Literal["chromium"] = "chromium"
    browser_args: List[str] = Field(default_factory=list)
    model_name: str = "gpt-4o"
    model_client_options: Dict[str, Any] = Field(default_factory=dict)
    user_provided_instructions: Optional[str] = None
    dom_settle_timeout_ms: int = 30000
    new_tab_timeout_ms: int = 1500
    network_idle_timeout_ms: int = 5000
    keystroke_delay_min_ms: float = 25
    keystroke_delay_jitter_ms: float = 50

    @field_validator("verbose")
    @classmethod
    def validate_verbose(cls, v: int) -> int:
        if not 0 <= v <= 3:
            raise ValueError("verbose must be between 0 and 3")
        return v

    @field_validator(
        "dom_settle_timeout_ms",
        "new_tab_timeout_ms",
        "network_idle_timeout_ms",
        "keystroke_delay_min_ms",
        "keystroke_delay_jitter_ms",
    )
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("timeouts and delays must be non-negative")
        return v

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides: Any) -> "A11yConfig":
        """
        Build a config from ``AI_BROWSER_A11Y_*`` environment variables.

        A ``.env`` file is loaded first; explicit keyword overrides win.

        Args:
            dotenv_path: Optional path to a .env file
            **overrides: Field values taking precedence over the environment

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If a value cannot be validated
        """
        load_dotenv(dotenv_path)

        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(ENV_PREFIX + name.upper())
            if raw is not None and name not in ("model_client_options", "browser_args"):
                values[name] = raw
        values.update(overrides)

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
