"""Schema synthesis and argument binding services.

This package contains the two algorithms behind every tool: deriving an
input schema from a parameter shape, and binding untyped input to typed
call arguments through the coercion engine.
"""

from toolwright.services.binder import ArgumentBinder
from toolwright.services.coercion import build_record, coerce, zero_value
from toolwright.services.schema import SchemaSynthesizer, type_schema

__all__ = [
    "ArgumentBinder",
    "SchemaSynthesizer",
    "build_record",
    "coerce",
    "type_schema",
    "zero_value",
]
