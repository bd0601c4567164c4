"""Pydantic models for tool schema export.

These models describe a tool's input contract as advertised to callers
before any call is made.
"""

import copy
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ToolInputSchema(BaseModel):
    """JSON-Schema-like description of a tool's input object.

    Every name in ``required`` must also be a key of ``properties``.
    Instances are frozen; use to_dict() for a mutable copy.
    """

    type: Literal["object"] = Field(default="object", description="Always 'object'")
    properties: dict[str, Any] = Field(
        default_factory=dict, description="Wire name to nested type schema"
    )
    required: list[str] = Field(
        default_factory=list, description="Wire names the caller should supply"
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "note": {"type": "string", "description": "Free-text note"},
                },
                "required": ["id"],
            }
        },
    )

    @model_validator(mode="after")
    def _required_are_properties(self) -> "ToolInputSchema":
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(f"required names missing from properties: {unknown}")
        return self

    @classmethod
    def empty(cls) -> "ToolInputSchema":
        """An object schema with no properties and nothing required."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Export as a plain dictionary, independent of this instance."""
        return copy.deepcopy(self.model_dump())


class ToolDefinition(BaseModel):
    """A tool as advertised to callers: identity plus input schema."""

    name: str = Field(description="Unique tool name")
    description: str = Field(default="", description="Free-text description")
    input_schema: ToolInputSchema = Field(
        default_factory=ToolInputSchema.empty,
        alias="inputSchema",
        description="Input schema; empty when suppressed",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Wire representation using camelCase keys."""
        return self.model_dump(by_alias=True)
