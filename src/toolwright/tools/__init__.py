"""Tools and tool sets.

This package wraps functions as tools (schema + binder + invocation) and
serves call envelopes for them, individually or by name from a ToolSet.
"""

from toolwright.tools.codec import decode_arguments, encode_result
from toolwright.tools.tool import Tool
from toolwright.tools.toolset import ToolSet

__all__ = [
    "Tool",
    "ToolSet",
    "decode_arguments",
    "encode_result",
]
