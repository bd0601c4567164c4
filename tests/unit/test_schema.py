"""Unit tests for SchemaSynthesizer and type_schema."""

import enum
from dataclasses import dataclass, field
from typing import Any, Literal

import pytest
from pydantic import BaseModel, Field, ValidationError

from toolwright.models import ToolInputSchema
from toolwright.services import SchemaSynthesizer, type_schema
from toolwright.shapes import (
    OpaqueShape,
    RecordShape,
    ValueShape,
    inspect_function,
    record_fields,
    tool_field,
)


class Status(enum.Enum):
    AVAILABLE = "available"
    SOLD = "sold"


@dataclass
class Category:
    id: int
    name: str = tool_field(optional=True)


@dataclass
class CreatePetRequest:
    name: str = tool_field(description="Pet name")
    tags: list[str] = tool_field(optional=True, default_factory=list)
    category: Category | None = tool_field(optional=True, default=None)
    status: Status | None = tool_field(optional=True, default=None)
    PhotoUrls: list[str] = field(default_factory=list)


@dataclass
class TreeNode:
    label: str
    children: list["TreeNode"] = field(default_factory=list)
    parent: "TreeNode | None" = None


class PetModel(BaseModel):
    pet_id: int = Field(alias="petId", description="Pet identifier")
    name: str
    tag: str | None = None


class OrderModel(BaseModel):
    order_id: int = Field(serialization_alias="orderId", description="Order identifier")
    note: str = ""


@pytest.fixture
def synthesizer():
    """Create a SchemaSynthesizer."""
    return SchemaSynthesizer()


class TestSynthesize:
    """Tests for SchemaSynthesizer.synthesize."""

    def test_opaque_shape_is_empty(self, synthesizer):
        """Test that opaque mappings get an empty object schema."""
        schema = synthesizer.synthesize(OpaqueShape())
        assert schema.to_dict() == {"type": "object", "properties": {}, "required": []}

    def test_value_shape(self, synthesizer):
        """Test that a single value becomes a required 'value' property."""
        schema = synthesizer.synthesize(ValueShape(annotation=list[int]))
        assert schema.properties == {
            "value": {"type": "array", "items": {"type": "integer"}}
        }
        assert schema.required == ["value"]

    def test_record_shape(self, synthesizer):
        """Test properties, required names and descriptions of a record."""
        shape = RecordShape(
            fields=record_fields(CreatePetRequest), record_type=CreatePetRequest
        )
        schema = synthesizer.synthesize(shape)

        assert set(schema.properties) == {"name", "tags", "category", "status", "PhotoUrls"}
        assert sorted(schema.required) == ["PhotoUrls", "name"]
        assert schema.properties["name"] == {"type": "string", "description": "Pet name"}
        assert schema.properties["category"] == {
            "type": "object",
            "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
            "required": ["id"],
        }
        assert schema.properties["status"] == {
            "type": "string",
            "enum": ["available", "sold", None],
        }

    def test_pydantic_record(self, synthesizer):
        """Test schema synthesis for a pydantic model parameter."""

        def create(pet: PetModel) -> None:
            pass

        schema = synthesizer.synthesize(inspect_function(create).parameters)
        assert schema.properties["petId"] == {
            "type": "integer",
            "description": "Pet identifier",
        }
        assert schema.required == ["petId", "name"]

    def test_pydantic_serialization_alias(self, synthesizer):
        """Test that a serialization alias names the property."""

        def create(order: OrderModel) -> None:
            pass

        schema = synthesizer.synthesize(inspect_function(create).parameters)
        assert schema.properties == {
            "orderId": {"type": "integer", "description": "Order identifier"},
            "note": {"type": "string"},
        }
        assert schema.required == ["orderId"]

    def test_signature_record(self, synthesizer):
        """Test that parameters with defaults are optional."""

        def search(query: str, limit: int = 10, exact: bool = False) -> None:
            pass

        schema = synthesizer.synthesize(inspect_function(search).parameters)
        assert schema.properties == {
            "query": {"type": "string"},
            "limit": {"type": "integer"},
            "exact": {"type": "boolean"},
        }
        assert schema.required == ["query"]

    def test_no_parameters(self, synthesizer):
        """Test that a parameterless function gets an empty object schema."""

        def ping() -> str:
            return "pong"

        schema = synthesizer.synthesize(inspect_function(ping).parameters)
        assert schema == ToolInputSchema.empty()

    def test_deterministic(self, synthesizer):
        """Test that the same shape always yields the same schema."""
        shape = RecordShape(
            fields=record_fields(CreatePetRequest), record_type=CreatePetRequest
        )
        first = synthesizer.synthesize(shape)
        second = synthesizer.synthesize(shape)
        assert set(first.required) == set(second.required)
        assert first.properties == second.properties

    def test_required_names_are_properties(self, synthesizer):
        """Test the required-subset-of-properties invariant."""
        shape = RecordShape(fields=record_fields(TreeNode), record_type=TreeNode)
        schema = synthesizer.synthesize(shape)
        assert set(schema.required) <= set(schema.properties)

    def test_schema_rejects_unknown_required(self):
        """Test that a schema cannot require an undeclared property."""
        with pytest.raises(ValidationError):
            ToolInputSchema(properties={"a": {"type": "string"}}, required=["b"])

    def test_to_dict_is_a_copy(self, synthesizer):
        """Test that exported dictionaries do not alias the schema."""
        schema = synthesizer.synthesize(ValueShape(annotation=int))
        exported = schema.to_dict()
        exported["properties"]["value"]["type"] = "string"
        assert schema.properties["value"] == {"type": "integer"}


class TestTypeSchema:
    """Tests for the recursive type walk."""

    @pytest.mark.parametrize(
        "annotation,expected",
        [
            (bool, {"type": "boolean"}),
            (int, {"type": "integer"}),
            (float, {"type": "number"}),
            (str, {"type": "string"}),
            (int | None, {"type": "integer"}),
            (list[float], {"type": "array", "items": {"type": "number"}}),
            (tuple[int, ...], {"type": "array", "items": {"type": "integer"}}),
            (
                set[str],
                {"type": "array", "items": {"type": "string"}, "uniqueItems": True},
            ),
            (
                dict[str, bool],
                {"type": "object", "additionalProperties": {"type": "boolean"}},
            ),
            (dict[int, str], {"type": "object", "additionalProperties": True}),
            (Any, {"type": "string"}),
            (bytes, {"type": "string"}),
        ],
    )
    def test_type_matrix(self, annotation, expected):
        """Test the schema of each supported type."""
        assert type_schema(annotation) == expected

    def test_fixed_tuple(self):
        """Test that fixed-length tuples describe each position."""
        assert type_schema(tuple[int, str]) == {
            "type": "array",
            "prefixItems": [{"type": "integer"}, {"type": "string"}],
            "minItems": 2,
            "maxItems": 2,
        }

    def test_literal(self):
        """Test that literals become enumerations."""
        assert type_schema(Literal["asc", "desc"]) == {
            "type": "string",
            "enum": ["asc", "desc"],
        }

    def test_optional_literal_appends_null(self):
        """Test that optional enumerations include null."""
        assert type_schema(Literal[1, 2] | None) == {"type": "integer", "enum": [1, 2, None]}

    def test_union(self):
        """Test that unions of several types use anyOf."""
        assert type_schema(int | str) == {
            "anyOf": [{"type": "integer"}, {"type": "string"}]
        }

    def test_self_referential_record_terminates(self):
        """Test that recursive records stop at the first repetition."""
        schema = type_schema(TreeNode)
        assert schema["properties"]["children"] == {
            "type": "array",
            "items": {"type": "object"},
        }
        assert schema["properties"]["parent"] == {"type": "object"}
        assert schema["required"] == ["label", "children", "parent"]

    def test_returns_fresh_dicts(self):
        """Test that callers may mutate the returned schema."""
        first = type_schema(Category)
        first["properties"]["id"]["type"] = "string"
        assert type_schema(Category)["properties"]["id"] == {"type": "integer"}
