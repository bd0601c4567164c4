"""Unit tests for ToolSet."""

import json

import pytest

from toolwright import Tool, ToolDefinitionError, ToolSet, UnknownToolError


def test_registration_order(toolset):
    """Test that definitions follow registration order."""
    names = [d.name for d in toolset.definitions()]
    assert names == ["echo_note", "add", "passthrough", "whoami"]
    assert len(toolset) == 4
    assert "add" in toolset
    assert "missing" not in toolset


def test_description_defaults_to_docstring(toolset):
    """Test that add_function uses the docstring as description."""
    assert toolset.get("add").description == "Add two integers."


def test_duplicate_name_rejected(toolset, test_settings):
    """Test that tool names are unique within a set."""
    with pytest.raises(ToolDefinitionError, match="duplicate tool name: add"):
        toolset.add(Tool("add", "", lambda: None, settings=test_settings))


def test_get_unknown(toolset):
    """Test that unknown lookups raise UnknownToolError."""
    with pytest.raises(UnknownToolError):
        toolset.get("missing")


def test_decorator_returns_function(test_settings):
    """Test that the decorator leaves the function callable."""
    tools = ToolSet(settings=test_settings)

    @tools.tool(name="shout")
    def upper(text: str) -> str:
        return text.upper()

    assert upper("hi") == "HI"
    assert tools.get("shout").function is upper


def test_iteration(toolset):
    """Test that iterating yields Tool objects."""
    assert all(isinstance(tool, Tool) for tool in toolset)


class TestDispatch:
    """Tests for ToolSet.dispatch."""

    @pytest.mark.asyncio
    async def test_routes_by_name(self, toolset):
        """Test that the named tool handles the call."""
        result = await toolset.dispatch({"name": "add", "arguments": {"a": "2", "b": 3}})
        assert result.is_error is False
        assert result.content == "5"

    @pytest.mark.asyncio
    async def test_json_envelope(self, toolset):
        """Test dispatching a raw JSON envelope."""
        raw = json.dumps({"name": "add", "arguments": {"a": 1}}).encode()
        result = await toolset.dispatch(raw)
        assert result.content == "1"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, toolset):
        """Test that unknown names produce an error envelope."""
        result = await toolset.dispatch({"name": "missing"})
        assert result.is_error is True
        assert result.content == "unknown tool: missing"

    @pytest.mark.asyncio
    async def test_malformed_envelope(self, toolset):
        """Test that envelopes without a name produce an error envelope."""
        result = await toolset.dispatch({"arguments": {}})
        assert result.is_error is True
        assert result.content.startswith("invalid call request")
