"""Pytest configuration for integration tests.

This module provides a pet-store style ToolSet whose functions take the
typed request structs a generated API client would supply, so that calls
can be exercised end to end through JSON envelopes.
"""

import enum
from dataclasses import dataclass, field

import pytest

from toolwright import CallContext, MissingRequiredError, ToolSet, tool_field


class PetStatus(enum.Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"


@dataclass
class Category:
    id: int
    name: str = tool_field(optional=True)


@dataclass
class Pet:
    id: int
    name: str = tool_field(description="Name of the pet")
    category: Category | None = tool_field(optional=True, default=None)
    tags: list[str] = tool_field(optional=True, default_factory=list)
    status: PetStatus | None = tool_field(optional=True, default=None)


@dataclass
class FindPetsRequest:
    status: list[PetStatus] = tool_field(description="Statuses to match")
    limit: int = tool_field(optional=True, default=20)


class PetStore:
    """In-memory pet store backing the tools."""

    def __init__(self) -> None:
        self.pets: dict[int, Pet] = {}
        self.raw_calls: list[dict] = []

    def add_pet(self, pet: Pet) -> Pet:
        self.pets[pet.id] = pet
        return pet

    async def get_pet(self, ctx: CallContext, pet_id: int) -> tuple[Pet | None, Exception | None]:
        pet = self.pets.get(pet_id)
        if pet is None:
            return None, LookupError(f"pet {pet_id} not found")
        return pet, None

    def find_pets(self, req: FindPetsRequest) -> list[Pet]:
        if not req.status:
            raise MissingRequiredError(["status"])
        matches = [p for p in self.pets.values() if p.status in req.status]
        return matches[: req.limit]

    def raw_webhook(self, payload: dict) -> int:
        self.raw_calls.append(payload)
        return len(self.raw_calls)


@pytest.fixture
def store():
    """Create an empty pet store."""
    return PetStore()


@pytest.fixture
def petstore_tools(store, test_settings):
    """Create a ToolSet exposing the pet store operations.

    Args:
        store: Pet store fixture.
        test_settings: Test settings fixture.

    Returns:
        ToolSet: Tools add_pet, get_pet, find_pets and raw_webhook.
    """
    tools = ToolSet(settings=test_settings)
    tools.add_function(store.add_pet, description="Add a new pet to the store")
    tools.add_function(store.get_pet, description="Find a pet by id")
    tools.add_function(store.find_pets, description="Find pets by status")
    tools.add_function(store.raw_webhook, description="Record a raw webhook payload")
    return tools
