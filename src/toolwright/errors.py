"""Exception types raised by toolwright.

All errors derive from ToolwrightError so that the protocol adapter can
convert any of them into an error envelope. Schema inference never raises:
unsupported types fall back to permissive schemas instead.
"""

from typing import Any


def _type_name(target: Any) -> str:
    """Readable name for a type or typing construct."""
    if isinstance(target, type):
        return target.__name__
    return repr(target).replace("typing.", "")


class ToolwrightError(Exception):
    """Base class for all toolwright errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Serializable representation of the error."""
        return {"error": self.message, "error_type": self.__class__.__name__}


class ToolDefinitionError(ToolwrightError):
    """A tool could not be constructed or registered."""


class ConversionError(ToolwrightError):
    """An input value could not be coerced to the expected type.

    Attributes:
        value: The offending input value
        target: The type the value was being converted to
        path: Field, key or index path of the value (empty at the top level)
        reason: Underlying parser message, if any
    """

    def __init__(
        self,
        value: Any,
        target: Any,
        path: str = "",
        reason: str | None = None,
    ) -> None:
        self.value = value
        self.target = target
        self.path = path
        self.reason = reason

        message = f"cannot convert {value!r} (type {type(value).__name__}) to {_type_name(target)}"
        if reason:
            message = f"{message}: {reason}"
        if path:
            message = f"failed to convert parameter {path}: {message}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["path"] = self.path
        return payload


class MissingRequiredError(ToolwrightError):
    """Required input values are absent.

    The binder only raises this when ``enforce_required`` is enabled; tool
    functions may raise it themselves to signal a required-but-absent value.
    """

    def __init__(self, names: list[str] | None = None) -> None:
        self.names = list(names or [])
        if self.names:
            message = f"missing required parameters: {', '.join(self.names)}"
        else:
            message = "Required."
        super().__init__(message)


class EncodingError(ToolwrightError):
    """Inbound arguments could not be decoded or a result could not be encoded."""


class UnknownToolError(ToolwrightError):
    """A call named a tool that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown tool: {name}")
