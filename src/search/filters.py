"""Local post-filters applied to the candidates of the winning search tier.

All filters compose with AND semantics and are side-effect free, so their
evaluation order never changes the result set.
"""

from typing import Iterable, NamedTuple, Optional

from src.models.models import AgeGroup, Recipe
from src.search.normalize import ResolvedCriteria


class FilterOutcome(NamedTuple):
    recipes: list[Recipe]
    excluded: int
    excluded_by_allergens: int


def passes_allergen_filter(recipe: Recipe, allergens_to_avoid: Iterable[str]) -> bool:
    """Keep recipes without allergen data; exclude any listing an avoided allergen.

    Missing allergen data is treated as allergen-free (permissive policy).
    `allergens_to_avoid` is expected lowercased.
    """
    avoid = set(allergens_to_avoid)
    if not avoid or not recipe.allergens:
        return True
    recipe_allergens = {item.strip().lower() for item in recipe.allergens}
    return recipe_allergens.isdisjoint(avoid)


def passes_stage_filter(recipe: Recipe, stage: Optional[AgeGroup]) -> bool:
    return stage is None or recipe.age_group == stage


def passes_difficulty_filter(recipe: Recipe, difficulty: Optional[str]) -> bool:
    if not difficulty:
        return True
    if not recipe.difficulty_level:
        return False
    return recipe.difficulty_level.strip().lower() == difficulty


def _exceeds(minutes: Optional[int], bound: Optional[int]) -> bool:
    # 0 or missing is an unknown time, never a reason to exclude
    return bound is not None and bool(minutes) and minutes > bound


def passes_time_filter(
    recipe: Recipe,
    max_total: Optional[int] = None,
    max_cook: Optional[int] = None,
    max_prep: Optional[int] = None,
) -> bool:
    """Exclude only when a bound is given, the time is known and exceeds it."""
    if _exceeds(recipe.effective_total_time(), max_total):
        return False
    if _exceeds(recipe.cook_time_minutes, max_cook):
        return False
    if _exceeds(recipe.prep_time_minutes, max_prep):
        return False
    return True


def apply_filters(candidates: list[Recipe], criteria: ResolvedCriteria) -> FilterOutcome:
    """Run every local filter and report the combined and allergen-only exclusions."""
    kept: list[Recipe] = []
    excluded_by_allergens = 0

    for recipe in candidates:
        allergen_ok = passes_allergen_filter(recipe, criteria.allergens_to_avoid)
        if not allergen_ok:
            excluded_by_allergens += 1
        if (
            allergen_ok
            and passes_stage_filter(recipe, criteria.requested_stage)
            and passes_difficulty_filter(recipe, criteria.difficulty)
            and passes_time_filter(
                recipe,
                max_total=criteria.max_total_time_minutes,
                max_cook=criteria.max_cook_time_minutes,
                max_prep=criteria.max_prep_time_minutes,
            )
        ):
            kept.append(recipe)

    return FilterOutcome(
        recipes=kept,
        excluded=len(candidates) - len(kept),
        excluded_by_allergens=excluded_by_allergens,
    )
