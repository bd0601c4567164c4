"""Argument binding for tool functions.

This module provides the ArgumentBinder which turns an untyped input mapping
into positional and keyword arguments for one call of a tool function,
according to the function's precomputed shape.
"""

import logging
from collections.abc import Mapping
from typing import Any

from toolwright.errors import MissingRequiredError
from toolwright.services.coercion import bind_fields, build_record, coerce, zero_value
from toolwright.shapes.types import (
    NO_DEFAULT,
    VALUE_FIELD,
    CallArguments,
    CallContext,
    FunctionShape,
    OpaqueShape,
    RecordShape,
    ValueShape,
)

logger = logging.getLogger(__name__)


class ArgumentBinder:
    """Binds untyped input mappings to typed call arguments.

    Required fields are advisory by default: absent values are filled with
    declared defaults or zero values and never rejected. Setting
    ``enforce_required`` rejects binds that lack required top-level names.

    Attributes:
        enforce_required: Whether to raise MissingRequiredError for absent required names
    """

    def __init__(self, enforce_required: bool = False) -> None:
        """Initialize the binder.

        Args:
            enforce_required: Reject binds missing required top-level names
        """
        self.enforce_required = enforce_required

    def bind(
        self,
        shape: FunctionShape,
        params: Mapping[str, Any],
        ctx: CallContext | None = None,
    ) -> CallArguments:
        """Produce call arguments for one invocation.

        The context is passed through untouched as the first positional
        argument when the function accepts one; it is never read from
        ``params``.

        Args:
            shape: The function's precomputed shape
            params: Untyped input mapping (decoded JSON object)
            ctx: Caller context; a blank one is supplied if the function needs it

        Returns:
            CallArguments ready to be applied to the function.

        Raises:
            ConversionError: If any value cannot be converted to its declared type.
            MissingRequiredError: If enforce_required is set and required names are absent.
        """
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        if shape.accepts_context:
            args.append(ctx if ctx is not None else CallContext())

        parameters = shape.parameters

        if isinstance(parameters, OpaqueShape):
            if parameters.splat:
                kwargs.update(params)
            else:
                self._place(shape, params, args, kwargs)

        elif isinstance(parameters, ValueShape):
            self._check_required([VALUE_FIELD], params)
            if VALUE_FIELD in params:
                value = coerce(params[VALUE_FIELD], parameters.annotation, VALUE_FIELD)
            elif parameters.default is not NO_DEFAULT:
                value = parameters.default
            else:
                value = zero_value(parameters.annotation)
            self._place(shape, value, args, kwargs)

        elif isinstance(parameters, RecordShape):
            self._check_required(
                [f.wire_name for f in parameters.fields if not f.optional], params
            )
            if parameters.record_type is not None:
                self._place(
                    shape, build_record(parameters.record_type, params), args, kwargs
                )
            else:
                values = bind_fields(parameters.fields, params)
                for spec in parameters.fields:
                    if spec.attr in parameters.positional:
                        args.append(values[spec.attr])
                    else:
                        kwargs[spec.attr] = values[spec.attr]

        logger.debug(
            f"Bound {len(args)} positional and {len(kwargs)} keyword arguments"
        )
        return CallArguments(raw=params, args=tuple(args), kwargs=kwargs)

    def _check_required(self, names: list[str], params: Mapping[str, Any]) -> None:
        if not self.enforce_required:
            return
        missing = [name for name in names if name not in params]
        if missing:
            raise MissingRequiredError(missing)

    @staticmethod
    def _place(
        shape: FunctionShape, value: Any, args: list[Any], kwargs: dict[str, Any]
    ) -> None:
        """Pass the single shaped argument positionally or by keyword."""
        if shape.keyword_only and shape.param_name:
            kwargs[shape.param_name] = value
        else:
            args.append(value)
