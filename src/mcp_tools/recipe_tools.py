"""Caller-facing recipe tools.

RecipeTools wraps the search pipeline and the recipe source behind five
request/response operations shared by the MCP server and the Agno agent:

- search():          cascading fallback search with local post-filters
- featured():        curated featured recipes
- get_details():     full recipe with nutrition block
- toggle_bookmark(): create/remove a bookmark
- toggle_like():     create/remove a like

Inputs are validated with the Pydantic request models before any upstream call;
upstream failures surface as CollaboratorError.
"""

from typing import Any, Optional

from src.mcp_tools.base import RecipeSource
from src.models.models import (
    FeaturedQuery,
    FeaturedRequest,
    FeaturedToolOutput,
    InteractionAck,
    InteractionKind,
    InteractionRequest,
    RecipeDetail,
    RecipeDetailsRequest,
    RecipeDetailToolOutput,
    RecipeNutrition,
    RecipeSummary,
    SearchCriteria,
    SearchFilters,
    SearchPagination,
    SearchToolOutput,
)
from src.search.normalize import DEFAULT_SEARCH_LIMIT, derive_age_group, resolve_criteria
from src.search.pipeline import SearchPipeline
from src.utils.logger import logger

DEFAULT_FEATURED_LIMIT = 10

_ACK_MESSAGES: dict[tuple[str, bool], str] = {
    ("bookmark", True): "Recipe bookmarked successfully.",
    ("bookmark", False): "Bookmark removed successfully.",
    ("like", True): "Recipe liked successfully.",
    ("like", False): "Removed your like from the recipe.",
}


class RecipeTools:
    """Tool operations over a RecipeSource. Holds no per-call state."""

    def __init__(
        self,
        source: RecipeSource,
        default_search_limit: int = DEFAULT_SEARCH_LIMIT,
        default_featured_limit: int = DEFAULT_FEATURED_LIMIT,
    ) -> None:
        self.source = source
        self.default_search_limit = default_search_limit
        self.default_featured_limit = default_featured_limit
        self.pipeline = SearchPipeline(source, default_limit=default_search_limit)

    @classmethod
    def from_config(cls, source: RecipeSource, config) -> "RecipeTools":
        return cls(
            source,
            default_search_limit=config.DEFAULT_SEARCH_LIMIT,
            default_featured_limit=config.DEFAULT_FEATURED_LIMIT,
        )

    async def search(self, criteria: SearchCriteria | dict[str, Any]) -> SearchToolOutput:
        """Find age-appropriate recipes, relaxing filters until something matches.

        Args:
            criteria: SearchCriteria or a raw dict validated into one.

        Returns:
            SearchToolOutput with summary, filters, pagination and recipe cards.

        Raises:
            pydantic.ValidationError: Malformed or out-of-range input.
            CollaboratorError: Upstream failure in any attempted tier.
        """
        if not isinstance(criteria, SearchCriteria):
            criteria = SearchCriteria.model_validate(criteria)

        resolved = resolve_criteria(criteria, default_limit=self.default_search_limit)
        logger.debug(f"Search requested: {criteria.model_dump(exclude_none=True)}", extra={"tool": "search"})

        result = await self.pipeline.run_resolved(resolved)

        params = criteria.model_dump(mode="json", exclude_none=True)
        params["age_group"] = resolved.age_group.value if resolved.age_group else None
        params["limit"] = resolved.limit

        return SearchToolOutput(
            params=params,
            filters=SearchFilters(
                language=resolved.language,
                stage=resolved.requested_stage,
                age_group=resolved.age_group,
                difficulty=resolved.difficulty,
                max_total_time_minutes=resolved.max_total_time_minutes,
                max_cook_time_minutes=resolved.max_cook_time_minutes,
                max_prep_time_minutes=resolved.max_prep_time_minutes,
            ),
            summary=result.summary,
            pagination=SearchPagination(
                received=result.received,
                count=result.count,
                page=result.page,
                per_page=result.per_page,
                total_pages=result.total_pages,
            ),
            excluded_due_to_allergens=result.excluded_due_to_allergens,
            recipes=[RecipeSummary.from_recipe(recipe) for recipe in result.recipes],
            search_strategy=result.strategy,
        )

    async def featured(self, request: Optional[FeaturedRequest | dict[str, Any]] = None) -> FeaturedToolOutput:
        """Surface a curated list of featured recipes."""
        if request is None:
            request = FeaturedRequest()
        elif not isinstance(request, FeaturedRequest):
            request = FeaturedRequest.model_validate(request)

        age_group = request.age_group or derive_age_group(request.baby_age_months)
        query = FeaturedQuery(
            age_group=age_group,
            limit=request.limit or self.default_featured_limit,
            language=request.language,
        )
        logger.debug(f"Fetching featured recipes: {query.to_params()}", extra={"tool": "featured"})

        page = await self.source.get_featured_recipes(query)

        params = request.model_dump(mode="json", exclude_none=True)
        params["age_group"] = age_group.value if age_group else None
        params["limit"] = query.limit
        return FeaturedToolOutput(
            params=params,
            recipes=[RecipeSummary.from_recipe(recipe) for recipe in page.data],
        )

    async def get_details(self, request: RecipeDetailsRequest | dict[str, Any]) -> RecipeDetailToolOutput:
        """Retrieve full recipe details, including ingredients and instructions."""
        if not isinstance(request, RecipeDetailsRequest):
            request = RecipeDetailsRequest.model_validate(request)

        logger.debug("Fetching recipe details", extra={"tool": "getDetails", "recipe_id": request.recipe_id})
        recipe = await self.source.get_recipe_details(request.recipe_id, language=request.language)

        detail = RecipeDetail.from_recipe(recipe)
        return RecipeDetailToolOutput(
            recipe=detail,
            nutrition=RecipeNutrition(
                calories_per_serving=recipe.calories_per_serving,
                servings=recipe.servings,
                total_time_minutes=detail.total_time_minutes,
                cook_time_minutes=recipe.cook_time_minutes or None,
                prep_time_minutes=recipe.prep_time_minutes or None,
                difficulty=recipe.difficulty_level,
                allergens=recipe.allergens,
            ),
            language=request.language,
        )

    async def _set_interaction(self, recipe_id: str, kind: InteractionKind, active: bool) -> InteractionAck:
        request = InteractionRequest(recipe_id=recipe_id, kind=kind, active=active)
        logger.debug(
            f"Updating {request.kind} (active={request.active})",
            extra={"tool": f"toggle_{request.kind}", "recipe_id": request.recipe_id},
        )
        await self.source.set_interaction(request.recipe_id, request.kind, request.active)
        return InteractionAck(
            recipe_id=request.recipe_id,
            kind=request.kind,
            active=request.active,
            message=_ACK_MESSAGES[(request.kind, request.active)],
        )

    async def toggle_bookmark(self, recipe_id: str, bookmarked: bool = True) -> InteractionAck:
        """Bookmark (True) or remove the bookmark (False) for a recipe."""
        return await self._set_interaction(recipe_id, "bookmark", bookmarked)

    async def toggle_like(self, recipe_id: str, liked: bool = True) -> InteractionAck:
        """Like (True) or unlike (False) a recipe."""
        return await self._set_interaction(recipe_id, "like", liked)
