"""Abstract recipe source consumed by the search pipeline and tools.

Every implementation must raise CollaboratorError (or a subtype) on transport,
HTTP or payload failures, and return the canonical RecipePage/Recipe models.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.models.models import FeaturedQuery, InteractionKind, Recipe, RecipePage, RecipeQuery


class RecipeSource(ABC):
    """Paginated recipe listing, detail fetching and interaction toggles."""

    @abstractmethod
    async def list_recipes(self, query: RecipeQuery) -> RecipePage:
        """List recipes matching the given filters (one page)."""

    @abstractmethod
    async def get_featured_recipes(self, query: FeaturedQuery) -> RecipePage:
        """List editorially featured recipes (one page)."""

    @abstractmethod
    async def get_recipe_details(self, recipe_id: str, language: Optional[str] = None) -> Recipe:
        """Fetch a single recipe by id."""

    @abstractmethod
    async def set_interaction(self, recipe_id: str, kind: InteractionKind, active: bool) -> None:
        """Create (active=True) or delete (active=False) a like/bookmark."""
