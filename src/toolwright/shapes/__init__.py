"""Parameter shapes of tool functions.

This package describes what a function expects as input (an opaque mapping,
a record of named fields, or a single value) and computes that description
once per function at registration time.
"""

from toolwright.shapes.introspect import (
    inspect_function,
    is_record_type,
    record_fields,
    tool_field,
)
from toolwright.shapes.types import (
    NO_DEFAULT,
    VALUE_FIELD,
    CallArguments,
    CallContext,
    FieldSpec,
    FunctionShape,
    OpaqueShape,
    ParameterShape,
    RecordShape,
    ValueShape,
)

__all__ = [
    # Introspection
    "inspect_function",
    "is_record_type",
    "record_fields",
    "tool_field",
    # Shape types
    "ParameterShape",
    "OpaqueShape",
    "RecordShape",
    "ValueShape",
    "FunctionShape",
    "FieldSpec",
    # Call types
    "CallArguments",
    "CallContext",
    "NO_DEFAULT",
    "VALUE_FIELD",
]
