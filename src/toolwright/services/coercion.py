"""Coercion of untyped values into declared Python types.

Values arrive as decoded JSON (bool, int, float, str, list, dict, None) and
are converted to the types a tool function declares. The conversion matrix:

- None becomes the zero value of the target
- bool accepts bools, numbers (nonzero is True) and strict literals
- int accepts ints, floats (truncated toward zero) and base-10 strings
- float accepts ints, floats and strict float strings
- str accepts anything via str()
- sequences accept lists/tuples and convert elementwise
- text-keyed mappings accept dicts and convert valuewise
- records accept dicts and bind them field by field

A ``bool`` is never accepted where a number is expected. Every failure is a
ConversionError qualified with the field, key or index path.
"""

import collections.abc
import dataclasses
import enum
import inspect
import math
import re
from collections.abc import Mapping
from typing import Any, Literal, get_args, get_origin

from pydantic import BaseModel

from toolwright.errors import ConversionError
from toolwright.services.schema import MAPPING_ORIGINS, SEQUENCE_ORIGINS
from toolwright.shapes.introspect import (
    is_record_type,
    is_union,
    record_fields,
    strip_annotated,
    union_members,
)
from toolwright.shapes.types import FieldSpec

_BOOL_LITERALS = {
    "1": True,
    "t": True,
    "T": True,
    "TRUE": True,
    "true": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "FALSE": False,
    "false": False,
    "False": False,
}

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# Concrete container built for each sequence/mapping annotation origin
_SEQUENCE_BUILDERS: dict[Any, type] = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _is_any(target: Any) -> bool:
    return target is Any or target is object or target is inspect.Parameter.empty


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def zero_value(target: Any, _seen: tuple[type, ...] = ()) -> Any:
    """The empty value of a declared type.

    Optional, Any and unknown types are None; records are built with every
    field zero-filled (or defaulted). A record already being built on the
    current path is None so self-referential types terminate.
    """
    target = strip_annotated(target)
    if is_union(target) or _is_any(target):
        return None
    if target is bool:
        return False
    if target is int:
        return 0
    if target is float:
        return 0.0
    if target is str:
        return ""

    container = get_origin(target) or target
    if container in SEQUENCE_ORIGINS:
        args = get_args(target)
        if container is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            return tuple(zero_value(arg, _seen) for arg in args)
        return _SEQUENCE_BUILDERS[container]()
    if container in MAPPING_ORIGINS:
        return {}

    if is_record_type(target):
        if target in _seen:
            return None
        return build_record(target, {}, _seen=(*_seen, target))

    return None


def _to_bool(value: Any, target: Any, path: str) -> bool:
    if isinstance(value, bool):
        return value
    if _is_number(value):
        return value != 0
    if isinstance(value, str):
        if value in _BOOL_LITERALS:
            return _BOOL_LITERALS[value]
        raise ConversionError(value, target, path, "invalid boolean literal")
    raise ConversionError(value, target, path)


def _to_int(value: Any, target: Any, path: str) -> int:
    if isinstance(value, bool):
        raise ConversionError(value, target, path)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ConversionError(value, target, path, "value is not finite")
        return math.trunc(value)
    if isinstance(value, str):
        if not _INT_PATTERN.fullmatch(value):
            raise ConversionError(value, target, path, "invalid base-10 integer")
        return int(value)
    raise ConversionError(value, target, path)


def _to_float(value: Any, target: Any, path: str) -> float:
    if isinstance(value, bool):
        raise ConversionError(value, target, path)
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError as e:
            raise ConversionError(value, target, path, str(e)) from e
    if isinstance(value, str):
        if value != value.strip() or "_" in value:
            raise ConversionError(value, target, path, "invalid float syntax")
        try:
            return float(value)
        except ValueError as e:
            raise ConversionError(value, target, path, "invalid float syntax") from e
    raise ConversionError(value, target, path)


def _to_sequence(value: Any, target: Any, path: str) -> Any:
    if not isinstance(value, (list, tuple)):
        raise ConversionError(value, target, path)

    container = get_origin(target) or target
    args = get_args(target)

    if container is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
        if len(value) != len(args):
            raise ConversionError(
                value, target, path, f"expected {len(args)} items, got {len(value)}"
            )
        return tuple(
            coerce(item, arg, f"{path}[{i}]")
            for i, (item, arg) in enumerate(zip(value, args))
        )

    element_type = args[0] if args else Any
    items = [coerce(item, element_type, f"{path}[{i}]") for i, item in enumerate(value)]
    builder = _SEQUENCE_BUILDERS[container]
    try:
        return builder(items)
    except TypeError as e:
        raise ConversionError(value, target, path, str(e)) from e


def _to_mapping(value: Any, target: Any, path: str) -> dict[str, Any]:
    key_type, value_type = get_args(target) or (str, Any)
    key_type = strip_annotated(key_type)
    if not isinstance(value, Mapping) or not (key_type is str or _is_any(key_type)):
        raise ConversionError(value, target, path)
    if not all(isinstance(key, str) for key in value):
        raise ConversionError(value, target, path, "mapping keys must be strings")
    return {key: coerce(item, value_type, _join(path, key)) for key, item in value.items()}


def _to_literal(value: Any, target: Any, path: str) -> Any:
    options = get_args(target)
    for option in options:
        if value == option and type(value) is type(option):
            return option
    for option in options:
        try:
            if coerce(value, type(option), path) == option:
                return option
        except ConversionError:
            continue
    raise ConversionError(value, target, path, f"expected one of {list(options)!r}")


def _to_enum(value: Any, target: type[enum.Enum], path: str) -> enum.Enum:
    if isinstance(value, target):
        return value
    for member in target:
        if member.value == value and type(member.value) is type(value):
            return member
    if isinstance(value, str) and value in target.__members__:
        return target[value]
    for member in target:
        try:
            if coerce(value, type(member.value), path) == member.value:
                return member
        except ConversionError:
            continue
    raise ConversionError(
        value, target, path, f"expected one of {[m.value for m in target]!r}"
    )


def _to_union(value: Any, target: Any, path: str) -> Any:
    members, _ = union_members(target)
    if len(members) == 1:
        return coerce(value, members[0], path)

    # An exact instance match wins over conversion
    for member in members:
        plain = strip_annotated(member)
        if (
            isinstance(plain, type)
            and get_origin(plain) is None
            and not issubclass(plain, enum.Enum)
            and isinstance(value, plain)
        ):
            if not (isinstance(value, bool) and plain is not bool):
                return value
    for member in members:
        try:
            return coerce(value, member, path)
        except ConversionError:
            continue
    raise ConversionError(value, target, path)


def coerce(value: Any, target: Any, path: str = "") -> Any:
    """Convert an untyped value to a declared type.

    Args:
        value: The untyped input value
        target: The declared type
        path: Field/key/index path of the value, used in error messages

    Returns:
        The converted value.

    Raises:
        ConversionError: If the value cannot be represented as ``target``.
    """
    target = strip_annotated(target)

    if value is None:
        return zero_value(target)
    if _is_any(target):
        return value
    if is_union(target):
        return _to_union(value, target, path)
    if get_origin(target) is Literal:
        return _to_literal(value, target, path)
    if isinstance(target, type) and issubclass(target, enum.Enum):
        return _to_enum(value, target, path)

    if target is bool:
        return _to_bool(value, target, path)
    if target is int:
        return _to_int(value, target, path)
    if target is float:
        return _to_float(value, target, path)
    if target is str:
        return value if isinstance(value, str) else str(value)

    container = get_origin(target) or target
    if container in SEQUENCE_ORIGINS:
        return _to_sequence(value, target, path)
    if container in MAPPING_ORIGINS:
        return _to_mapping(value, target, path)

    if is_record_type(target):
        if isinstance(value, target):
            return value
        if isinstance(value, Mapping):
            return build_record(target, value, path)
        raise ConversionError(value, target, path)

    if isinstance(target, type) and isinstance(value, target):
        return value
    raise ConversionError(value, target, path)


def bind_fields(
    fields: tuple[FieldSpec, ...],
    params: Mapping[str, Any],
    path: str = "",
    _seen: tuple[type, ...] = (),
) -> dict[str, Any]:
    """Convert a mapping into attribute values for a set of fields.

    Present wire names are coerced to the field type; absent ones get the
    field's declared default or the zero value of its type. Absence is never
    an error here.

    Args:
        fields: Field descriptors to fill
        params: Untyped input keyed by wire name
        path: Path prefix for error messages

    Returns:
        Mapping of attribute name to converted value.

    Raises:
        ConversionError: On the first field that cannot be converted.
    """
    values: dict[str, Any] = {}
    for spec in fields:
        if spec.wire_name in params:
            values[spec.attr] = coerce(
                params[spec.wire_name], spec.annotation, _join(path, spec.wire_name)
            )
        elif spec.has_default:
            values[spec.attr] = spec.make_default()
        else:
            values[spec.attr] = zero_value(spec.annotation, _seen)
    return values


def build_record(
    record_type: type,
    params: Mapping[str, Any],
    path: str = "",
    _seen: tuple[type, ...] = (),
) -> Any:
    """Build a dataclass or pydantic model instance from an untyped mapping.

    Pydantic models are built with ``model_construct`` so that required
    fields stay advisory, matching the dataclass behaviour.

    Raises:
        ConversionError: If a field cannot be converted or the record rejects its values.
    """
    seen = _seen if record_type in _seen else (*_seen, record_type)
    values = bind_fields(record_fields(record_type), params, path, seen)

    if issubclass(record_type, BaseModel):
        return record_type.model_construct(**values)

    # Hidden init fields without defaults still need a value
    for f in dataclasses.fields(record_type):
        if not f.init or f.name in values:
            continue
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            values[f.name] = zero_value(f.type, seen)

    try:
        return record_type(**values)
    except (TypeError, ValueError) as e:
        raise ConversionError(dict(params), record_type, path, str(e)) from e
