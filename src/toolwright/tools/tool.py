"""Tool: one function exposed as a schema-validated callable unit.

A Tool owns a name, a description, the wrapped function, the function's
shape and the synthesized input schema. All of it is computed once at
construction; a Tool is never mutated afterwards and can serve concurrent
calls.
"""

import copy
import inspect
import logging
from collections.abc import Mapping
from typing import Any, Callable

from pydantic import ValidationError

from toolwright.config import ToolwrightSettings, get_settings
from toolwright.errors import MissingRequiredError
from toolwright.models.calls import CallToolRequest, CallToolResult
from toolwright.models.schema import ToolDefinition, ToolInputSchema
from toolwright.services.binder import ArgumentBinder
from toolwright.services.schema import SchemaSynthesizer
from toolwright.shapes.introspect import inspect_function
from toolwright.shapes.types import CallContext, FunctionShape
from toolwright.tools.codec import decode_arguments, encode_result

logger = logging.getLogger(__name__)

_synthesizer = SchemaSynthesizer()


def _error_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class Tool:
    """A named function with its inferred input schema.

    Example:
        >>> def get_pet(req: GetPetRequest) -> Pet: ...
        >>> tool = Tool("get_pet", "Fetch a pet by id", get_pet)
        >>> await tool.execute({"id": "42"})

    Attributes:
        name: Unique tool name, supplied by the caller
        description: Free-text description
        function: The wrapped callable
        shape: Call shape computed from the function signature
        schema: Input schema, or None when suppressed
    """

    def __init__(
        self,
        name: str,
        description: str,
        function: Callable[..., Any],
        settings: ToolwrightSettings | None = None,
    ) -> None:
        """Create a tool, introspecting ``function`` and synthesizing its schema.

        Args:
            name: Unique tool name
            description: Free-text description
            function: Any callable; coroutine functions are awaited on call
            settings: Optional settings; loaded from the environment if omitted

        Raises:
            ToolDefinitionError: If ``function`` is not an inspectable callable.
        """
        self._settings = settings or get_settings()
        self._name = name
        self._description = description
        self._function = function
        self._shape = inspect_function(function)
        self._schema: ToolInputSchema | None = _synthesizer.synthesize(
            self._shape.parameters
        )
        self._binder = ArgumentBinder(enforce_required=self._settings.enforce_required)
        logger.debug(
            f"Created tool {name} with {type(self._shape.parameters).__name__}"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def function(self) -> Callable[..., Any]:
        return self._function

    @property
    def shape(self) -> FunctionShape:
        return self._shape

    @property
    def schema(self) -> ToolInputSchema | None:
        return self._schema

    def with_schema(self, schema: ToolInputSchema | Mapping[str, Any] | None) -> "Tool":
        """Return a copy of this tool with its schema replaced.

        Args:
            schema: Replacement schema (model or plain dict), or None to suppress it

        Returns:
            A new Tool; this one is left unchanged.
        """
        if schema is not None and not isinstance(schema, ToolInputSchema):
            schema = ToolInputSchema.model_validate(schema)
        tool = copy.copy(self)
        tool._schema = schema
        return tool

    def definition(self) -> ToolDefinition:
        """The tool as advertised to callers."""
        return ToolDefinition(
            name=self._name,
            description=self._description,
            input_schema=self._schema or ToolInputSchema.empty(),
        )

    async def execute(
        self,
        params: Mapping[str, Any] | None = None,
        ctx: CallContext | None = None,
    ) -> Any:
        """Bind ``params`` and invoke the function.

        Plain functions run inline; awaitable results are awaited. A function
        annotated to return ``tuple[T, Exception | None]`` is treated as
        returning a result pair: a non-None error is raised, otherwise the
        value is returned.

        Args:
            params: Untyped input mapping
            ctx: Caller context, passed through to functions that accept one

        Returns:
            The function's result (None when it returns nothing).

        Raises:
            ConversionError: If binding fails; the function is not called.
            MissingRequiredError: If required names are absent and enforcement is on.
            Exception: Whatever the function raises, unchanged.
        """
        params = {} if params is None else params
        if self._settings.log_arguments:
            logger.debug(f"Executing tool {self._name} with {dict(params)!r}")

        call = self._binder.bind(self._shape, params, ctx)
        result = self._function(*call.args, **call.kwargs)
        if inspect.isawaitable(result):
            result = await result

        if self._shape.returns_error_pair and isinstance(result, tuple) and len(result) == 2:
            value, error = result
            if error is not None:
                raise error
            return value
        return result

    async def handle(
        self,
        request: CallToolRequest | Mapping[str, Any],
        ctx: CallContext | None = None,
    ) -> CallToolResult:
        """Serve one inbound call envelope.

        Decodes the arguments, executes, and encodes the result as JSON text.
        Every failure (decode, bind, invoke, encode) becomes an error result;
        nothing is raised to the transport.

        Args:
            request: Inbound call envelope (model or plain mapping)
            ctx: Caller context

        Returns:
            CallToolResult with either the result JSON or the error message.
        """
        try:
            if not isinstance(request, CallToolRequest):
                request = CallToolRequest.model_validate(request)
            params = decode_arguments(request.arguments)
            result = await self.execute(params, ctx)
            content = encode_result(result)
        except MissingRequiredError as e:
            logger.warning(f"Tool {self._name} is missing required input: {e}")
            return CallToolResult.error(self._required_message(e))
        except ValidationError as e:
            logger.warning(f"Invalid call envelope for tool {self._name}: {e}")
            return CallToolResult.error(f"invalid call request: {e}")
        except Exception as e:
            logger.warning(f"Tool {self._name} failed: {_error_message(e)}")
            return CallToolResult.error(_error_message(e))

        logger.info(f"Tool {self._name} completed")
        return CallToolResult.text(content)

    def _required_message(self, error: MissingRequiredError) -> str:
        if self._schema is None:
            return _error_message(error)
        return (
            f"The {self._schema.model_dump_json()} schema is required "
            f"to execute {self._name}."
        )

    def __repr__(self) -> str:
        return f"Tool(name={self._name!r})"
