"""toolwright: expose Python functions as schema-described, type-safe tools.

This package derives a JSON-Schema input description from a function's
signature, coerces loosely typed call arguments into the function's declared
types, and wraps results and errors in call envelopes.
"""

from toolwright.errors import (
    ConversionError,
    EncodingError,
    MissingRequiredError,
    ToolDefinitionError,
    ToolwrightError,
    UnknownToolError,
)
from toolwright.models import (
    CallToolRequest,
    CallToolResult,
    ToolDefinition,
    ToolInputSchema,
)
from toolwright.shapes import CallContext, tool_field
from toolwright.tools import Tool, ToolSet

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Tools
    "Tool",
    "ToolSet",
    "tool_field",
    "CallContext",
    # Models
    "CallToolRequest",
    "CallToolResult",
    "ToolDefinition",
    "ToolInputSchema",
    # Errors
    "ToolwrightError",
    "ToolDefinitionError",
    "ConversionError",
    "MissingRequiredError",
    "EncodingError",
    "UnknownToolError",
]
