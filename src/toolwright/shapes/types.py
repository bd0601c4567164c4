"""Data types describing the callable shape of a tool function.

This module defines the parameter shape union (opaque mapping, record, or
single value), the per-field descriptor used by records, and the call
context handle that is threaded through to functions that accept it.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable

# Synthetic property name used for functions taking a single primitive argument
VALUE_FIELD = "value"


class _NoDefault:
    """Sentinel type for fields that declare no default."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()


@dataclass(frozen=True)
class CallContext:
    """Caller-supplied cancellation/deadline handle.

    The context is opaque to the binder and the tool: it is passed unchanged
    to functions whose first parameter is annotated with ``CallContext``.

    Attributes:
        request_id: Identifier of the inbound call (may be empty)
        deadline: Absolute deadline as a UNIX timestamp, or None
        metadata: Free-form values supplied by the hosting transport
    """

    request_id: str = ""
    deadline: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def time_remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.time())

    @property
    def expired(self) -> bool:
        remaining = self.time_remaining()
        return remaining is not None and remaining <= 0.0


@dataclass(frozen=True)
class FieldSpec:
    """Descriptor for one named input field.

    Attributes:
        attr: Declared attribute or parameter name
        wire_name: Key used in the untyped input mapping and in the schema
        annotation: Declared type of the field
        optional: Whether the field is left out of the schema's required list
        description: Human-readable description for the schema
        default: Declared default value, or NO_DEFAULT
        default_factory: Factory producing the default, if declared
    """

    attr: str
    wire_name: str
    annotation: Any
    optional: bool = False
    description: str | None = None
    default: Any = NO_DEFAULT
    default_factory: Callable[[], Any] | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT or self.default_factory is not None

    def make_default(self) -> Any:
        """Build the declared default value for this field."""
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


@dataclass(frozen=True)
class OpaqueShape:
    """A single untyped mapping parameter; no schema can be inferred.

    Attributes:
        splat: True when the mapping is received as ``**kwargs``
    """

    splat: bool = False


@dataclass(frozen=True)
class RecordShape:
    """Named, typed fields.

    Either the fields of a single record-typed parameter (``record_type`` set)
    or the function's own keyword parameters (``record_type`` is None).

    Attributes:
        fields: Field descriptors in declaration order
        record_type: Dataclass or pydantic model class, or None
        positional: Attribute names that must be passed positionally
    """

    fields: tuple[FieldSpec, ...] = ()
    record_type: type | None = None
    positional: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ValueShape:
    """A single unnamed primitive or collection parameter.

    Attributes:
        annotation: Declared type of the parameter
        default: Declared default value, or NO_DEFAULT
    """

    annotation: Any
    default: Any = NO_DEFAULT


# Tagged union of all parameter shapes
ParameterShape = OpaqueShape | RecordShape | ValueShape


@dataclass(frozen=True)
class FunctionShape:
    """Everything needed to call a function, computed once at registration.

    Attributes:
        parameters: Shape of the non-context parameters
        accepts_context: Whether the first parameter receives a CallContext
        param_name: Name of the single shaped parameter (opaque/value/record class)
        keyword_only: Whether that single parameter must be passed by keyword
        returns_error_pair: Whether the function returns ``(value, error)``
    """

    parameters: ParameterShape
    accepts_context: bool = False
    param_name: str | None = None
    keyword_only: bool = False
    returns_error_pair: bool = False


@dataclass
class CallArguments:
    """Arguments for exactly one invocation.

    Attributes:
        raw: The untyped input mapping as received
        args: Positional arguments, context first when accepted
        kwargs: Keyword arguments
    """

    raw: Any
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
