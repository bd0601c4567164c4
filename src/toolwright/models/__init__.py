"""Pydantic models for schema export and call envelopes.

This package contains the models exchanged with the hosting transport:
tool definitions with their input schemas, and call request/result
envelopes.
"""

from toolwright.models.calls import CallToolRequest, CallToolResult
from toolwright.models.schema import ToolDefinition, ToolInputSchema

__all__ = [
    "CallToolRequest",
    "CallToolResult",
    "ToolDefinition",
    "ToolInputSchema",
]
