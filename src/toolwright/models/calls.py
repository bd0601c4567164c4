"""Pydantic models for the tool call envelopes.

An inbound call names a tool and carries an optional argument payload; an
outbound result carries either the JSON-encoded result text or an error
message.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CallToolRequest(BaseModel):
    """Inbound call envelope."""

    name: str = Field(description="Name of the tool to call")
    arguments: dict[str, Any] | str | None = Field(
        default=None,
        description="Argument object, or its JSON text. Null means no arguments.",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"name": "get_pet", "arguments": {"id": 42}},
                {"name": "list_pets", "arguments": None},
            ]
        }
    )


class CallToolResult(BaseModel):
    """Outbound result envelope.

    On success ``content`` holds the JSON-encoded result; on failure
    ``is_error`` is set and ``content`` holds the error message.
    """

    content: str = Field(description="Result JSON text or error message")
    is_error: bool = Field(
        default=False, alias="isError", description="Whether the call failed"
    )

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def text(cls, content: str) -> "CallToolResult":
        return cls(content=content)

    @classmethod
    def error(cls, message: str) -> "CallToolResult":
        return cls(content=message, is_error=True)

    def to_wire(self) -> dict[str, Any]:
        """Wire form: ``{content}`` on success, ``{content, isError: true}`` on failure."""
        return self.model_dump(by_alias=True, exclude_defaults=True)
