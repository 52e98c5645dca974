"""Shared fixtures for unit tests: recipe factories and an in-memory recipe source."""

from typing import Any, Optional

import pytest

from src.mcp_tools.base import RecipeSource
from src.models.models import FeaturedQuery, Recipe, RecipePage, RecipeQuery


class FakeRecipeSource(RecipeSource):
    """In-memory RecipeSource that records every call in order.

    list_pages are served one per list_recipes() call; once exhausted an empty
    page is returned. Errors, when set, are raised instead of returning data;
    list_errors maps a 1-based list_recipes() call number to the error that call raises.
    """

    def __init__(
        self,
        list_pages: Optional[list[RecipePage]] = None,
        featured_page: Optional[RecipePage] = None,
        details: Optional[dict[str, Recipe]] = None,
    ) -> None:
        self.list_pages = list(list_pages or [])
        self.featured_page = featured_page or RecipePage(data=[])
        self.details = details or {}
        self.list_error: Optional[Exception] = None
        self.list_errors: dict[int, Exception] = {}
        self.featured_error: Optional[Exception] = None
        self.interaction_error: Optional[Exception] = None
        self.calls: list[tuple[str, Any]] = []

    async def list_recipes(self, query: RecipeQuery) -> RecipePage:
        self.calls.append(("list", query))
        if self.list_error:
            raise self.list_error
        list_call = sum(1 for name, _ in self.calls if name == "list")
        if list_call in self.list_errors:
            raise self.list_errors[list_call]
        if self.list_pages:
            return self.list_pages.pop(0)
        return RecipePage(data=[])

    async def get_featured_recipes(self, query: FeaturedQuery) -> RecipePage:
        self.calls.append(("featured", query))
        if self.featured_error:
            raise self.featured_error
        return self.featured_page

    async def get_recipe_details(self, recipe_id: str, language: Optional[str] = None) -> Recipe:
        self.calls.append(("details", (recipe_id, language)))
        return self.details[recipe_id]

    async def set_interaction(self, recipe_id: str, kind: str, active: bool) -> None:
        self.calls.append(("interaction", (recipe_id, kind, active)))
        if self.interaction_error:
            raise self.interaction_error


@pytest.fixture
def make_recipe():
    """Factory for Recipe objects with sensible defaults."""

    def _make(recipe_id: str = "r1", **overrides: Any) -> Recipe:
        data: dict[str, Any] = {
            "id": recipe_id,
            "name": f"Recipe {recipe_id}",
            "age_group": "STAGE_2",
            "prep_time_minutes": 5,
            "cook_time_minutes": 10,
            "servings": 2,
            "difficulty_level": "easy",
            "allergens": None,
        }
        data.update(overrides)
        return Recipe.model_validate(data)

    return _make


@pytest.fixture
def make_page():
    """Factory for RecipePage objects wrapping a list of recipes."""

    def _make(recipes: list[Recipe], **overrides: Any) -> RecipePage:
        data: dict[str, Any] = {
            "data": recipes,
            "count": len(recipes),
            "page": 1,
            "per_page": 12,
            "total_pages": 1 if recipes else 0,
        }
        data.update(overrides)
        return RecipePage(**data)

    return _make


@pytest.fixture
def fake_source():
    """Factory for FakeRecipeSource instances."""

    def _make(**kwargs: Any) -> FakeRecipeSource:
        return FakeRecipeSource(**kwargs)

    return _make
