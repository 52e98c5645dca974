"""Cascading fallback recipe search.

The search runs an explicit, ordered list of tiers. Each tier is a pure planning
function from (criteria, previously attempted tier) to either an upstream request
or None (skip). Tiers run strictly one after another and the first tier that
returns at least one candidate wins:

1. exact            - every provided filter
2. relaxed          - drop query and meal type (only if either was given)
3. ageAgnostic      - drop age group too (only if an age group was given)
4. featuredFallback - featured list, always attempted last

Local post-filters then run once on the winning candidates. Collaborator errors
propagate immediately; a transport failure is never treated as "no results".
"""

from typing import Callable, NamedTuple, Optional, Union

from src.mcp_tools.base import RecipeSource
from src.models.models import (
    FeaturedQuery,
    RecipePage,
    RecipeQuery,
    SearchCriteria,
    SearchResult,
    SearchStrategy,
)
from src.search.filters import apply_filters
from src.search.normalize import DEFAULT_SEARCH_LIMIT, ResolvedCriteria, resolve_criteria
from src.search.summary import build_search_summary
from src.utils.logger import logger

TierRequest = Union[RecipeQuery, FeaturedQuery]
TierPlanner = Callable[[ResolvedCriteria, Optional[SearchStrategy]], Optional[TierRequest]]


class Tier(NamedTuple):
    name: SearchStrategy
    plan: TierPlanner


def plan_exact(criteria: ResolvedCriteria, previous: Optional[SearchStrategy]) -> Optional[TierRequest]:
    return RecipeQuery(
        age_group=criteria.age_group,
        meal_type=criteria.meal_type,
        query=criteria.query,
        limit=criteria.limit,
        offset=criteria.offset,
        language=criteria.language,
    )


def plan_relaxed(criteria: ResolvedCriteria, previous: Optional[SearchStrategy]) -> Optional[TierRequest]:
    if not (criteria.query or criteria.meal_type):
        return None
    return RecipeQuery(age_group=criteria.age_group, limit=criteria.limit, language=criteria.language)


def plan_age_agnostic(criteria: ResolvedCriteria, previous: Optional[SearchStrategy]) -> Optional[TierRequest]:
    if criteria.age_group is None:
        return None
    return RecipeQuery(limit=criteria.limit, language=criteria.language)


def plan_featured(criteria: ResolvedCriteria, previous: Optional[SearchStrategy]) -> Optional[TierRequest]:
    age_group = None if previous == "ageAgnostic" else criteria.age_group
    return FeaturedQuery(age_group=age_group, limit=criteria.limit, language=criteria.language)


DEFAULT_TIERS: tuple[Tier, ...] = (
    Tier("exact", plan_exact),
    Tier("relaxed", plan_relaxed),
    Tier("ageAgnostic", plan_age_agnostic),
    Tier("featuredFallback", plan_featured),
)


class SearchPipeline:
    """Runs the fallback tiers against a RecipeSource and explains the outcome.

    Stateless between runs; one instance can serve concurrent searches.
    """

    def __init__(
        self,
        source: RecipeSource,
        default_limit: int = DEFAULT_SEARCH_LIMIT,
        tiers: tuple[Tier, ...] = DEFAULT_TIERS,
    ) -> None:
        self.source = source
        self.default_limit = default_limit
        self.tiers = tiers

    async def _fetch(self, request: TierRequest) -> RecipePage:
        if isinstance(request, FeaturedQuery):
            return await self.source.get_featured_recipes(request)
        return await self.source.list_recipes(request)

    async def run(self, criteria: SearchCriteria) -> SearchResult:
        """Search with progressive relaxation, then filter and annotate.

        Args:
            criteria: Validated search criteria.

        Returns:
            SearchResult, possibly with zero recipes when even the featured list is empty.

        Raises:
            CollaboratorError: If any attempted tier's upstream call fails.
        """
        resolved = resolve_criteria(criteria, default_limit=self.default_limit)
        return await self.run_resolved(resolved)

    async def run_resolved(self, resolved: ResolvedCriteria) -> SearchResult:
        page: Optional[RecipePage] = None
        strategy: Optional[SearchStrategy] = None

        for tier in self.tiers:
            request = tier.plan(resolved, strategy)
            if request is None:
                logger.debug(f"Skipping tier {tier.name}", extra={"tool": "search", "strategy": tier.name})
                continue

            logger.debug(
                f"Running tier {tier.name} with {request.to_params()}",
                extra={"tool": "search", "strategy": tier.name},
            )
            page = await self._fetch(request)
            strategy = tier.name
            if page.data:
                break

        if page is None or strategy is None:
            raise RuntimeError("Search tier list produced no upstream request")

        outcome = apply_filters(page.data, resolved)
        summary = build_search_summary(
            total=len(outcome.recipes),
            strategy=strategy,
            age_group=resolved.age_group,
            meal_type=resolved.meal_type,
            query=resolved.query,
            excluded=outcome.excluded,
            difficulty=resolved.difficulty,
            max_total_time_minutes=resolved.max_total_time_minutes,
            max_cook_time_minutes=resolved.max_cook_time_minutes,
            max_prep_time_minutes=resolved.max_prep_time_minutes,
        )

        logger.info(
            f"Search finished: {len(outcome.recipes)}/{len(page.data)} recipes kept",
            extra={"tool": "search", "strategy": strategy},
        )

        return SearchResult(
            recipes=outcome.recipes,
            strategy=strategy,
            received=len(page.data),
            excluded_by_filters=outcome.excluded,
            excluded_due_to_allergens_only=outcome.excluded_by_allergens,
            count=page.count,
            page=page.page,
            per_page=page.per_page,
            total_pages=page.total_pages,
            age_group=resolved.age_group,
            language=resolved.language,
            summary=summary,
        )
