"""Schema synthesis from parameter shapes.

This module provides the SchemaSynthesizer which derives a tool's input
schema from its parameter shape by walking the declared types recursively.
Types it cannot describe fall back to ``string`` instead of failing.
"""

import collections.abc
import enum
import logging
from typing import Any, Literal, get_args, get_origin

from toolwright.models.schema import ToolInputSchema
from toolwright.shapes.introspect import (
    is_record_type,
    is_union,
    record_fields,
    strip_annotated,
    union_members,
)
from toolwright.shapes.types import (
    VALUE_FIELD,
    FieldSpec,
    OpaqueShape,
    ParameterShape,
    RecordShape,
    ValueShape,
)

logger = logging.getLogger(__name__)

SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)
MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def _enum_type(values: list[Any]) -> str | None:
    """JSON type shared by all enumeration values, if there is one."""
    if not values:
        return None
    if all(isinstance(v, bool) for v in values):
        return "boolean"
    if any(isinstance(v, bool) for v in values):
        return None
    if all(isinstance(v, int) for v in values):
        return "integer"
    if all(isinstance(v, (int, float)) for v in values):
        return "number"
    if all(isinstance(v, str) for v in values):
        return "string"
    return None


def _enum_schema(values: list[Any]) -> dict[str, Any]:
    schema: dict[str, Any] = {}
    json_type = _enum_type(values)
    if json_type:
        schema["type"] = json_type
    schema["enum"] = values
    return schema


def _sequence_schema(annotation: Any, seen: tuple[type, ...]) -> dict[str, Any]:
    container = get_origin(annotation) or annotation
    args = get_args(annotation)
    schema: dict[str, Any] = {"type": "array"}

    if container is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
        # Fixed-length tuple: one schema per position
        schema["prefixItems"] = [type_schema(arg, seen) for arg in args]
        schema["minItems"] = len(args)
        schema["maxItems"] = len(args)
        return schema

    schema["items"] = type_schema(args[0] if args else Any, seen)
    if container in (set, frozenset, collections.abc.Set, collections.abc.MutableSet):
        schema["uniqueItems"] = True
    return schema


def _mapping_schema(annotation: Any, seen: tuple[type, ...]) -> dict[str, Any]:
    key_type, value_type = get_args(annotation) or (str, Any)
    if strip_annotated(key_type) is str:
        return {"type": "object", "additionalProperties": type_schema(value_type, seen)}
    # Non-text keys cannot be described precisely
    return {"type": "object", "additionalProperties": True}


def _fields_schema(
    fields: tuple[FieldSpec, ...], seen: tuple[type, ...]
) -> tuple[dict[str, Any], list[str]]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    for spec in fields:
        field_schema = type_schema(spec.annotation, seen)
        if spec.description:
            field_schema["description"] = spec.description
        properties[spec.wire_name] = field_schema
        if not spec.optional:
            required.append(spec.wire_name)
    return properties, required


def type_schema(annotation: Any, seen: tuple[type, ...] = ()) -> dict[str, Any]:
    """Build the schema of one declared type.

    Args:
        annotation: The type to describe
        seen: Record types already on the current walk path

    Returns:
        A fresh schema dictionary.
    """
    annotation = strip_annotated(annotation)

    if is_union(annotation):
        members, nullable = union_members(annotation)
        if len(members) == 1:
            schema = type_schema(members[0], seen)
        else:
            schema = {"anyOf": [type_schema(m, seen) for m in members]}
        if nullable and "enum" in schema:
            schema["enum"] = [*schema["enum"], None]
        return schema

    if get_origin(annotation) is Literal:
        return _enum_schema(list(get_args(annotation)))
    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        return _enum_schema([member.value for member in annotation])

    if annotation is bool:
        return {"type": "boolean"}
    if annotation is int:
        return {"type": "integer"}
    if annotation is float:
        return {"type": "number"}
    if annotation is str:
        return {"type": "string"}

    container = get_origin(annotation) or annotation
    if container in SEQUENCE_ORIGINS:
        return _sequence_schema(annotation, seen)
    if container in MAPPING_ORIGINS:
        return _mapping_schema(annotation, seen)

    if is_record_type(annotation):
        if annotation in seen:
            return {"type": "object"}
        properties, required = _fields_schema(
            record_fields(annotation), (*seen, annotation)
        )
        return {"type": "object", "properties": properties, "required": required}

    return {"type": "string"}


class SchemaSynthesizer:
    """Derives input schemas from parameter shapes.

    Synthesis is a pure function of the shape, so the synthesizer holds no
    state and one instance can be shared freely.
    """

    def synthesize(self, shape: ParameterShape) -> ToolInputSchema:
        """Build the input schema for a parameter shape.

        - opaque mapping: empty object schema
        - record: one property per field, required unless optional
        - single value: one required property named ``value``

        Args:
            shape: The parameter shape to describe

        Returns:
            ToolInputSchema for the shape.
        """
        if isinstance(shape, OpaqueShape):
            return ToolInputSchema.empty()

        if isinstance(shape, ValueShape):
            return ToolInputSchema(
                properties={VALUE_FIELD: type_schema(shape.annotation)},
                required=[VALUE_FIELD],
            )

        if isinstance(shape, RecordShape):
            seen = (shape.record_type,) if shape.record_type is not None else ()
            properties, required = _fields_schema(shape.fields, seen)
            logger.debug(f"Synthesized schema with properties {list(properties)}")
            return ToolInputSchema(properties=properties, required=required)

        logger.debug(f"Unknown parameter shape {shape!r}, using empty schema")
        return ToolInputSchema.empty()
