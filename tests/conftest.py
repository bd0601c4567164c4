"""Pytest configuration and shared fixtures for toolwright tests.

This module provides common fixtures used across all test modules,
including isolated settings and a small set of sample tools.
"""

from dataclasses import dataclass

import pytest

from toolwright import CallContext, Tool, ToolSet, tool_field
from toolwright.config import ToolwrightSettings


@dataclass
class NoteRequest:
    """Sample record: one required and one optional field."""

    id: int
    note: str = tool_field(optional=True, description="Free-text note")


@pytest.fixture
def test_settings():
    """Create settings for testing with required-ness left advisory.

    Returns:
        ToolwrightSettings: Settings instance configured for testing.
    """
    return ToolwrightSettings(
        log_level="DEBUG",
        log_arguments=True,
        enforce_required=False,
    )


@pytest.fixture
def strict_settings():
    """Create settings that reject binds missing required names."""
    return ToolwrightSettings(log_level="DEBUG", enforce_required=True)


@pytest.fixture
def toolset(test_settings):
    """Create a ToolSet with a few representative tools.

    Args:
        test_settings: Test settings fixture.

    Returns:
        ToolSet: Tool set containing echo_note, add, passthrough and whoami.
    """
    tools = ToolSet(settings=test_settings)

    @tools.tool(description="Echo a note record")
    def echo_note(req: NoteRequest) -> NoteRequest:
        return req

    @tools.tool()
    def add(a: int, b: int = 0) -> int:
        """Add two integers."""
        return a + b

    @tools.tool(description="Return the raw arguments")
    def passthrough(params: dict) -> dict:
        return params

    async def whoami(ctx: CallContext) -> str:
        return ctx.request_id

    tools.add(Tool("whoami", "Return the request id", whoami, settings=test_settings))
    return tools
