"""Wire encoding of call arguments and results."""

from collections.abc import Mapping
from typing import Any

import pydantic_core

from toolwright.errors import EncodingError


def decode_arguments(arguments: Mapping[str, Any] | str | bytes | None) -> dict[str, Any]:
    """Decode an inbound argument payload into a plain JSON mapping.

    Mappings are normalized through a JSON round trip so that the binder
    only ever sees JSON types.

    Args:
        arguments: Argument object, its JSON text, or None

    Returns:
        The decoded mapping (empty for None).

    Raises:
        EncodingError: If the payload is not valid JSON or not a JSON object.
    """
    if arguments is None:
        return {}
    try:
        if isinstance(arguments, (str, bytes)):
            decoded = pydantic_core.from_json(arguments) if arguments else {}
        else:
            decoded = pydantic_core.from_json(pydantic_core.to_json(arguments))
    except (ValueError, pydantic_core.PydanticSerializationError) as e:
        raise EncodingError(f"failed to decode arguments: {e}") from e

    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise EncodingError(
            f"arguments must be a JSON object, got {type(decoded).__name__}"
        )
    return decoded


def encode_result(result: Any) -> str:
    """Encode a tool result as JSON text, using serialization aliases of models.

    Raises:
        EncodingError: If the result is not JSON serializable.
    """
    try:
        return pydantic_core.to_json(result, by_alias=True).decode("utf-8")
    except pydantic_core.PydanticSerializationError as e:
        raise EncodingError(f"failed to encode result: {e}") from e
