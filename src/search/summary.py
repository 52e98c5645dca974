"""Human-readable one-line explanation of a search outcome."""

from typing import Optional

from src.models.models import AGE_GROUP_METADATA, AgeGroup, SearchStrategy

STRATEGY_NOTES: dict[str, str] = {
    "relaxed": "(results from relaxed filters)",
    "ageAgnostic": "(results from all age groups)",
    "featuredFallback": "(showing featured recipes)",
}


def build_search_summary(
    total: int,
    strategy: SearchStrategy,
    age_group: Optional[AgeGroup] = None,
    meal_type: Optional[str] = None,
    query: Optional[str] = None,
    excluded: int = 0,
    difficulty: Optional[str] = None,
    max_total_time_minutes: Optional[int] = None,
    max_cook_time_minutes: Optional[int] = None,
    max_prep_time_minutes: Optional[int] = None,
) -> str:
    """Describe the result count, the filters in play and the fallback tier used.

    Deterministic for identical inputs; purely presentational.
    """
    parts = [f"Found {total} recipe{'' if total == 1 else 's'}"]

    if age_group is not None and age_group in AGE_GROUP_METADATA:
        parts.append(f"for {AGE_GROUP_METADATA[age_group]['label']}")
    if meal_type:
        parts.append(f"(meal type: {meal_type})")
    if query:
        parts.append(f'matching "{query}"')
    if excluded > 0:
        parts.append(f"({excluded} filtered out because of allergen or preference filters)")
    if difficulty:
        parts.append(f"(difficulty: {difficulty})")
    if max_total_time_minutes:
        parts.append(f"(max total time: {max_total_time_minutes} min)")
    if max_cook_time_minutes:
        parts.append(f"(max cook time: {max_cook_time_minutes} min)")
    if max_prep_time_minutes:
        parts.append(f"(max prep time: {max_prep_time_minutes} min)")

    note = STRATEGY_NOTES.get(strategy)
    if note:
        parts.append(note)

    return " ".join(parts).strip()
