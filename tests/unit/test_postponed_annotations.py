"""Unit tests for introspection under postponed annotations.

Every annotation in this module is a string until it is resolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest

from toolwright import CallContext, Tool, ToolDefinitionError, tool_field
from toolwright.shapes import RecordShape, ValueShape, inspect_function, record_fields

if TYPE_CHECKING:
    from asyncio import AbstractEventLoop


@dataclass
class Job:
    id: int
    name: str
    loop: AbstractEventLoop | None = tool_field(skip=True, default=None)


def run(job: Job) -> int:
    return job.id


async def whoami(ctx: CallContext, pet_id: int) -> str:
    return f"{ctx.request_id}:{pet_id}"


class TestResolution:
    """Tests for annotations that resolve at registration."""

    def test_unused_undefined_name_is_ignored(self):
        """Test that an undefined name on a skipped field does not matter."""
        specs = record_fields(Job)
        assert [(s.wire_name, s.annotation) for s in specs] == [
            ("id", int),
            ("name", str),
        ]

    def test_record_parameter(self):
        """Test that a string annotation naming a record is resolved."""
        shape = inspect_function(run)
        assert isinstance(shape.parameters, RecordShape)
        assert shape.parameters.record_type is Job

    def test_context_parameter(self):
        """Test that a string CallContext annotation is still recognized."""
        shape = inspect_function(whoami)
        assert shape.accepts_context is True
        assert shape.parameters == ValueShape(annotation=int)

    @pytest.mark.asyncio
    async def test_execute(self, test_settings):
        """Test binding through resolved annotations."""
        tool = Tool("run", "", run, settings=test_settings)
        assert tool.schema.required == ["id", "name"]
        assert await tool.execute({"id": "3", "name": "nightly"}) == 3


class TestUnresolvable:
    """Tests for annotations naming something out of reach."""

    def test_local_record_is_rejected(self, test_settings):
        """Test that a record defined in a local scope fails registration."""

        @dataclass
        class Inner:
            x: int

        @dataclass
        class Outer:
            inner: Inner
            count: int

        def use(req: Outer) -> int:
            return req.count

        with pytest.raises(ToolDefinitionError, match="Outer"):
            Tool("use", "", use, settings=test_settings)

    def test_unresolvable_parameter_is_named(self):
        """Test that the failing parameter is reported among several."""

        @dataclass
        class Owner:
            name: str

        def lookup(pet_id: int, owner: Owner) -> None:
            pass

        with pytest.raises(ToolDefinitionError, match="'owner'"):
            inspect_function(lookup)
