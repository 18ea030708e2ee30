"""Schemas for the model output consumed by observe."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class ObserveElementSchema(BaseModel):
    """One element proposed by the model."""

    elementId: str = Field(..., description="The encoded ID from the page (e.g., 0-15)")
    description: str = Field(..., description="Human-readable description of the element")
    method: Optional[str] = Field(None, description="Playwright method to use")
    arguments: List[Any] = Field(default_factory=list, description="Arguments for the method")

    @field_validator("elementId", mode="before")
    @classmethod
    def validate_element_id(cls, v: Any) -> str:
        """Strip the brackets the outline prints around ids."""
        v = str(v).strip().strip("[]").strip()
        if not v:
            raise ValueError("elementId must be a non-empty string")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return v.strip()

    @field_validator("arguments")
    @classmethod
    def stringify_arguments(cls, v: List[Any]) -> List[str]:
        return [str(arg) for arg in v]
