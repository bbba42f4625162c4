"""Shared fixtures for family-plate tests."""

import itertools

import pytest
import respx

from family_plate.recipe import IngredientLine, IngredientSection, Recipe
from family_plate.store import MemoryStore, RecipeBook

API_URL = "http://proxy.test/api"


def make_section(title: str, *lines: str) -> IngredientSection:
    """Build a section from plain ingredient lines."""
    return IngredientSection(title=title, items=[IngredientLine(text=line) for line in lines])


@pytest.fixture
def id_factory():
    """Deterministic item ids: item-1, item-2, ..."""
    counter = itertools.count(1)
    return lambda: f"item-{next(counter)}"


@pytest.fixture
def recipe_a():
    """Recipe with one unnamed section."""
    return Recipe(
        id=1001,
        title="Pancakes",
        ingredient_sections=[make_section("", "2 cups flour", "1 tsp salt")],
        instructions=["Mix", "Fry"],
        servings="4",
    )


@pytest.fixture
def recipe_b():
    """Recipe with a named section."""
    return Recipe(
        id=1002,
        title="Salad",
        ingredient_sections=[make_section("Dressing", "1 cup flour, sifted")],
        instructions=["Whisk"],
    )


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def book(memory_store):
    return RecipeBook(memory_store)


@pytest.fixture
def mock_httpx():
    """Activate respx mock for HTTP requests."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def model_text_response():
    """Wrap model text in a messages-API style response body."""

    def _wrap(text: str) -> dict:
        return {"content": [{"type": "text", "text": text}]}

    return _wrap
