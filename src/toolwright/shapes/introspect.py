"""Introspection of functions and record types into parameter shapes.

Field descriptors come from declarative annotations instead of tag strings:

- dataclass fields use ``tool_field()`` (wire name, optionality, description,
  skip marker); plain fields are required under their declared name
- pydantic model fields use ``alias`` (or ``serialization_alias``), ``exclude``,
  ``description`` and their default (a field with a default is optional)
- function parameters use their name, their default, and ``Annotated``
  metadata for descriptions

Descriptors for a record type are computed once and cached. Annotations are
resolved one name at a time, so an undefined name only matters for the
fields and parameters that use it; those are rejected at registration.
"""

import collections.abc
import dataclasses
import inspect
import logging
import sys
import types
import typing
from functools import lru_cache
from typing import Annotated, Any, Callable, Literal, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic_core import PydanticUndefined

from toolwright.errors import ToolDefinitionError
from toolwright.shapes.types import (
    NO_DEFAULT,
    CallContext,
    FieldSpec,
    FunctionShape,
    OpaqueShape,
    ParameterShape,
    RecordShape,
    ValueShape,
)

logger = logging.getLogger(__name__)

# Metadata key under which tool_field() stores its descriptor
TOOL_FIELD_KEY = "toolwright"

# Wire name that removes a field entirely
SKIP_MARKER = "-"

NoneType = type(None)

_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def tool_field(
    name: str | None = None,
    *,
    optional: bool = False,
    description: str | None = None,
    skip: bool = False,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field with its wire descriptor.

    Args:
        name: Wire name; defaults to the attribute name. ``"-"`` skips the field.
        optional: Leave the field out of the schema's required list
        description: Description attached to the field schema
        skip: Never expose or bind this field
        **kwargs: Passed through to ``dataclasses.field`` (default, default_factory, ...)

    Returns:
        A dataclasses.Field carrying the descriptor in its metadata.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TOOL_FIELD_KEY] = {
        "name": name,
        "optional": optional,
        "description": description,
        "skip": skip,
    }
    return dataclasses.field(metadata=metadata, **kwargs)


def unwrap_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, ...]`` into ``T`` and its metadata."""
    if get_origin(annotation) is Annotated:
        inner, *extras = get_args(annotation)
        return inner, tuple(extras)
    return annotation, ()


def strip_annotated(annotation: Any) -> Any:
    return unwrap_annotated(annotation)[0]


def is_union(annotation: Any) -> bool:
    origin = get_origin(annotation)
    return origin is Union or origin is types.UnionType


def union_members(annotation: Any) -> tuple[list[Any], bool]:
    """Return the non-None members of a union and whether None was one of them."""
    args = get_args(annotation)
    members = [arg for arg in args if arg is not NoneType]
    return members, len(members) < len(args)


def is_record_type(annotation: Any) -> bool:
    """Whether the annotation is a dataclass or pydantic model class."""
    if not isinstance(annotation, type) or get_origin(annotation) is not None:
        return False
    return dataclasses.is_dataclass(annotation) or issubclass(annotation, BaseModel)


def is_opaque_mapping(annotation: Any) -> bool:
    """Whether the annotation is an untyped text-keyed mapping (``dict[str, Any]``)."""
    annotation = strip_annotated(annotation)
    if annotation in _MAPPING_ORIGINS:
        return True
    if get_origin(annotation) not in _MAPPING_ORIGINS:
        return False
    args = get_args(annotation)
    return len(args) == 2 and args[0] is str and args[1] in (Any, object)


def _description_from(extras: tuple[Any, ...]) -> str | None:
    """Pick a description out of Annotated metadata."""
    for extra in extras:
        if isinstance(extra, str):
            return extra
        description = getattr(extra, "description", None)
        if isinstance(description, str):
            return description
    return None


def _namespaces(obj: Any) -> tuple[dict[str, Any], dict[str, Any] | None]:
    """Global and local namespaces for evaluating the annotations of ``obj``."""
    if isinstance(obj, type):
        module = sys.modules.get(obj.__module__)
        return (dict(vars(module)) if module else {}), dict(vars(obj))
    return getattr(inspect.unwrap(obj), "__globals__", {}), None


def _raw_annotations(obj: Any) -> dict[str, Any]:
    sources = reversed(obj.__mro__) if isinstance(obj, type) else (obj,)
    annotations: dict[str, Any] = {}
    for source in sources:
        try:
            annotations.update(inspect.get_annotations(source))
        except (NameError, TypeError) as e:
            logger.debug(f"Could not read annotations of {source!r}: {e}")
    return annotations


def _evaluate(
    annotation: Any, globalns: dict[str, Any], localns: dict[str, Any] | None
) -> Any:
    """Evaluate a string annotation; unresolvable ones are returned as is."""
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, globalns, localns)
    except (NameError, AttributeError, SyntaxError, TypeError) as e:
        logger.debug(f"Could not evaluate annotation {annotation!r}: {e}")
        return annotation


def _resolve_hints(obj: Any) -> dict[str, Any]:
    """Type hints of ``obj``, resolved one name at a time if needed.

    ``typing.get_type_hints`` fails as a whole when any annotation names
    something undefined. In that case every annotation is evaluated on its
    own, and the ones that still fail stay strings for the caller to reject
    if they are actually used.
    """
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except (NameError, TypeError) as e:
        logger.debug(f"Resolving type hints of {obj!r} one by one: {e}")

    globalns, localns = _namespaces(obj)
    return {
        name: _evaluate(annotation, globalns, localns)
        for name, annotation in _raw_annotations(obj).items()
    }


def _is_unresolved(annotation: Any) -> bool:
    """Whether a forward reference is left anywhere inside the annotation."""
    if isinstance(annotation, (str, typing.ForwardRef)):
        return True
    origin = get_origin(annotation)
    if origin is Literal:
        return False
    if origin is Annotated:
        return _is_unresolved(get_args(annotation)[0])
    return any(_is_unresolved(arg) for arg in get_args(annotation))


def _require_resolved(annotation: Any, name: str, owner: Any) -> None:
    if _is_unresolved(annotation):
        raise ToolDefinitionError(
            f"cannot resolve type annotation {annotation!r} of {name!r} in {owner!r}"
        )


def _dataclass_fields(record_type: type) -> tuple[FieldSpec, ...]:
    hints = _resolve_hints(record_type)
    specs = []
    for f in dataclasses.fields(record_type):
        if f.name.startswith("_") or not f.init:
            continue

        meta = f.metadata.get(TOOL_FIELD_KEY, {})
        wire_name = meta.get("name") or f.name
        if meta.get("skip") or wire_name == SKIP_MARKER:
            continue

        annotation = hints.get(f.name, f.type)
        _require_resolved(annotation, f.name, record_type)
        annotation, extras = unwrap_annotated(annotation)
        specs.append(
            FieldSpec(
                attr=f.name,
                wire_name=wire_name,
                annotation=annotation,
                optional=bool(meta.get("optional", False)),
                description=meta.get("description") or _description_from(extras),
                default=NO_DEFAULT if f.default is dataclasses.MISSING else f.default,
                default_factory=(
                    None
                    if f.default_factory is dataclasses.MISSING
                    else f.default_factory
                ),
            )
        )
    return tuple(specs)


def _model_fields(record_type: type[BaseModel]) -> tuple[FieldSpec, ...]:
    specs = []
    for attr, info in record_type.model_fields.items():
        if info.exclude:
            continue

        wire_name = info.alias or info.serialization_alias or attr
        if wire_name == SKIP_MARKER:
            continue

        optional = not info.is_required()
        extra = info.json_schema_extra
        if isinstance(extra, dict) and "optional" in extra:
            optional = bool(extra["optional"])

        specs.append(
            FieldSpec(
                attr=attr,
                wire_name=wire_name,
                annotation=info.annotation,
                optional=optional,
                description=info.description,
                default=NO_DEFAULT if info.default is PydanticUndefined else info.default,
                default_factory=info.default_factory,
            )
        )
    return tuple(specs)


@lru_cache(maxsize=None)
def record_fields(record_type: type) -> tuple[FieldSpec, ...]:
    """Field descriptors of a dataclass or pydantic model, in declaration order.

    Args:
        record_type: The record class to describe

    Returns:
        Tuple of FieldSpec for every exposed field.
    """
    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        specs = _model_fields(record_type)
    else:
        specs = _dataclass_fields(record_type)
    logger.debug(
        f"Described record {record_type.__name__}: {[s.wire_name for s in specs]}"
    )
    return specs


def _signature_fields(
    params: list[inspect.Parameter], hints: dict[str, Any], owner: Any
) -> tuple[tuple[FieldSpec, ...], frozenset[str]]:
    specs = []
    positional = set()
    for param in params:
        annotation = hints.get(param.name, param.annotation)
        if annotation is inspect.Parameter.empty:
            annotation = Any
        _require_resolved(annotation, param.name, owner)
        annotation, extras = unwrap_annotated(annotation)
        has_default = param.default is not inspect.Parameter.empty
        specs.append(
            FieldSpec(
                attr=param.name,
                wire_name=param.name,
                annotation=annotation,
                optional=has_default,
                description=_description_from(extras),
                default=param.default if has_default else NO_DEFAULT,
            )
        )
        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            positional.add(param.name)
    return tuple(specs), frozenset(positional)


def _is_context(annotation: Any) -> bool:
    annotation = strip_annotated(annotation)
    return isinstance(annotation, type) and issubclass(annotation, CallContext)


def _returns_error_pair(annotation: Any) -> bool:
    """Whether a return annotation reads ``tuple[T, Exception | None]``."""
    annotation = strip_annotated(annotation)
    if get_origin(annotation) is not tuple:
        return False
    args = get_args(annotation)
    if len(args) != 2 or args[1] is Ellipsis:
        return False
    error_type = args[1]
    candidates = union_members(error_type)[0] if is_union(error_type) else [error_type]
    return bool(candidates) and all(
        isinstance(c, type) and issubclass(c, BaseException) for c in candidates
    )


def inspect_function(fn: Callable[..., Any]) -> FunctionShape:
    """Compute the call shape of a function.

    The first parameter receives the CallContext when annotated with it.
    A single remaining parameter is an opaque mapping, a record class or a
    single value; any other number of parameters forms a record of the
    function's own keyword parameters. ``*args`` is never bound.

    Args:
        fn: Any callable (function, coroutine function, bound method, callable object)

    Returns:
        FunctionShape describing how to bind and call ``fn``.

    Raises:
        ToolDefinitionError: If ``fn`` is not callable, has no inspectable signature,
            or annotates a used parameter with a name that cannot be resolved.
    """
    if not callable(fn):
        raise ToolDefinitionError(f"tool function must be callable, got {type(fn).__name__}")

    try:
        signature = inspect.signature(fn)
    except (NameError, TypeError, ValueError) as e:
        raise ToolDefinitionError(f"cannot inspect signature of {fn!r}: {e}") from e

    hint_source = fn if inspect.isroutine(fn) else getattr(fn, "__call__", fn)
    hints = _resolve_hints(hint_source)

    params = list(signature.parameters.values())
    accepts_context = bool(params) and _is_context(
        hints.get(params[0].name, params[0].annotation)
    )
    if accepts_context:
        params = params[1:]
    params = [p for p in params if p.kind is not inspect.Parameter.VAR_POSITIONAL]

    returns_error_pair = _returns_error_pair(
        hints.get("return", signature.return_annotation)
    )

    if len(params) == 1 and params[0].kind is inspect.Parameter.VAR_KEYWORD:
        shape: ParameterShape = OpaqueShape(splat=True)
        return FunctionShape(
            parameters=shape,
            accepts_context=accepts_context,
            returns_error_pair=returns_error_pair,
        )
    params = [p for p in params if p.kind is not inspect.Parameter.VAR_KEYWORD]

    if len(params) != 1:
        fields, positional = _signature_fields(params, hints, fn)
        return FunctionShape(
            parameters=RecordShape(fields=fields, positional=positional),
            accepts_context=accepts_context,
            returns_error_pair=returns_error_pair,
        )

    param = params[0]
    annotation = hints.get(param.name, param.annotation)
    if annotation is inspect.Parameter.empty:
        annotation = Any
    _require_resolved(annotation, param.name, fn)
    inner = strip_annotated(annotation)

    if is_opaque_mapping(inner):
        shape = OpaqueShape()
    elif is_record_type(inner):
        shape = RecordShape(fields=record_fields(inner), record_type=inner)
    else:
        default = param.default
        shape = ValueShape(
            annotation=annotation,
            default=NO_DEFAULT if default is inspect.Parameter.empty else default,
        )

    return FunctionShape(
        parameters=shape,
        accepts_context=accepts_context,
        param_name=param.name,
        keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
        returns_error_pair=returns_error_pair,
    )
