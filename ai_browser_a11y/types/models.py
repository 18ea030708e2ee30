"""Public request/result models for AI Browser A11y."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ObserveOptions(BaseModel):
    """Options for the observe method."""
    instruction: Optional[str] = None
    model_name: Optional[str] = None
    model_client_options: Optional[Dict[str, Any]] = None
    dom_settle_timeout_ms: Optional[int] = None
    return_action: bool = True
    # Absolute XPath scoping extraction to one subtree (and the frames under it)
    selector: Optional[str] = None


class ObserveResult(BaseModel):
    """An actionable element found by observe."""
    selector: str
    description: str
    encoded_id: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None
    method: Optional[str] = None
    arguments: List[str] = Field(default_factory=list)


class ActOptions(BaseModel):
    """Options for the act method."""
    action: str
    model_name: Optional[str] = None
    model_client_options: Optional[Dict[str, Any]] = None
    variables: Dict[str, str] = Field(default_factory=dict)
    dom_settle_timeout_ms: Optional[int] = None


class ActResult(BaseModel):
    """Result from an act operation."""
    success: bool
    message: str
    action: str
    selector: Optional[str] = None
    method: Optional[str] = None
