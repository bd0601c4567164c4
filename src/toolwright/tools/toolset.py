"""Explicit collections of tools addressed by name."""

import inspect
import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Callable

from pydantic import ValidationError

from toolwright.config import ToolwrightSettings
from toolwright.errors import ToolDefinitionError, UnknownToolError
from toolwright.models.calls import CallToolRequest, CallToolResult
from toolwright.models.schema import ToolDefinition
from toolwright.shapes.types import CallContext
from toolwright.tools.tool import Tool

logger = logging.getLogger(__name__)


class ToolSet:
    """A named set of tools, built explicitly at startup.

    There is no global registry: each ToolSet is an ordinary object that the
    hosting transport creates, fills, and dispatches calls to.
    """

    def __init__(
        self,
        tools: Iterable[Tool] = (),
        settings: ToolwrightSettings | None = None,
    ) -> None:
        self._tools: dict[str, Tool] = {}
        self._settings = settings
        for tool in tools:
            self.add(tool)

    def add(self, tool: Tool) -> Tool:
        """Add a tool.

        Raises:
            ToolDefinitionError: If a tool with the same name is already present.
        """
        if tool.name in self._tools:
            raise ToolDefinitionError(f"duplicate tool name: {tool.name}")
        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")
        return tool

    def add_function(
        self,
        function: Callable[..., Any],
        name: str | None = None,
        description: str | None = None,
    ) -> Tool:
        """Wrap a function in a Tool and add it.

        The name defaults to the function's ``__name__`` and the description
        to its docstring.
        """
        tool_name = name or getattr(function, "__name__", None)
        if not tool_name:
            raise ToolDefinitionError(f"cannot derive a tool name for {function!r}")
        tool_description = (
            description if description is not None else inspect.getdoc(function) or ""
        )
        return self.add(Tool(tool_name, tool_description, function, settings=self._settings))

    def tool(
        self, name: str | None = None, description: str | None = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of add_function; returns the function unchanged."""

        def decorator(function: Callable[..., Any]) -> Callable[..., Any]:
            self.add_function(function, name=name, description=description)
            return function

        return decorator

    def get(self, name: str) -> Tool:
        """Look up a tool by name.

        Raises:
            UnknownToolError: If no tool has this name.
        """
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def definitions(self) -> list[ToolDefinition]:
        """Definitions of all tools, in registration order."""
        return [tool.definition() for tool in self._tools.values()]

    async def dispatch(
        self,
        request: CallToolRequest | Mapping[str, Any] | str | bytes,
        ctx: CallContext | None = None,
    ) -> CallToolResult:
        """Route a call envelope to the tool it names.

        Args:
            request: Envelope as a model, a mapping, or its JSON text
            ctx: Caller context passed through to the tool

        Returns:
            The tool's result envelope; an error envelope for malformed
            requests or unknown tool names.
        """
        try:
            if isinstance(request, (str, bytes)):
                request = CallToolRequest.model_validate_json(request)
            elif not isinstance(request, CallToolRequest):
                request = CallToolRequest.model_validate(request)
            tool = self.get(request.name)
        except ValidationError as e:
            logger.warning(f"Invalid call request: {e}")
            return CallToolResult.error(f"invalid call request: {e}")
        except UnknownToolError as e:
            logger.warning(str(e))
            return CallToolResult.error(e.message)

        return await tool.handle(request, ctx)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
