"""Data models and schemas for the Dear Baby recipe tools.

Defines Pydantic models for the Solid Start API payloads, tool input validation,
search results and tool outputs. All models use Pydantic v2; upstream payloads that
do not match these shapes are rejected rather than probed for alternatives.
"""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class AgeGroup(str, Enum):
    """Coarse baby age bucket used both as search filter and recipe attribute."""

    STAGE_1 = "STAGE_1"
    STAGE_2 = "STAGE_2"
    STAGE_3 = "STAGE_3"
    STAGE_4 = "STAGE_4"


AGE_GROUP_METADATA: dict[AgeGroup, dict[str, Any]] = {
    AgeGroup.STAGE_1: {"label": "Stage 1 (around 4-6 months)", "months_range": (4, 6)},
    AgeGroup.STAGE_2: {"label": "Stage 2 (around 7-8 months)", "months_range": (7, 8)},
    AgeGroup.STAGE_3: {"label": "Stage 3 (around 9-10 months)", "months_range": (9, 10)},
    AgeGroup.STAGE_4: {"label": "Stage 4 (11+ months)", "months_range": (11, 24)},
}

SearchStrategy = Literal["exact", "relaxed", "ageAgnostic", "featuredFallback"]
InteractionKind = Literal["like", "bookmark"]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _uppercase_age_group(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


# ============================================================================
# Solid Start API payloads
# ============================================================================


class Recipe(BaseModel):
    """Recipe entity as returned by the Solid Start API.

    Unknown upstream fields are ignored. Missing or null time and counter fields
    are normalized to 0; a missing allergen list means "unknown".
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    age_group: AgeGroup
    food_type: Optional[str] = None
    prep_time_minutes: int = Field(0, ge=0)
    cook_time_minutes: int = Field(0, ge=0)
    total_time_minutes: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = None
    difficulty_level: Optional[str] = None
    ingredients: list[dict[str, Any]] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    calories_per_serving: Optional[float] = None
    allergens: Optional[list[str]] = None
    safety_notes: Optional[str] = None
    source: Optional[str] = None
    status: Optional[str] = None
    is_featured: bool = False
    likes_count: int = 0
    dislikes_count: Optional[int] = None
    bookmarks_count: int = 0
    made_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        """Accept numeric ids; the id is treated as an opaque string."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("prep_time_minutes", "cook_time_minutes", mode="before")
    @classmethod
    def normalize_minutes(cls, value: Any) -> Any:
        """Treat absent times as 0 and round fractional minutes."""
        if value is None:
            return 0
        if isinstance(value, float):
            return int(round(value))
        return value

    @field_validator("total_time_minutes", mode="before")
    @classmethod
    def normalize_total(cls, value: Any) -> Any:
        if isinstance(value, float):
            return int(round(value))
        return value

    @field_validator("likes_count", "bookmarks_count", "made_count", mode="before")
    @classmethod
    def normalize_counts(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("is_featured", mode="before")
    @classmethod
    def normalize_featured(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def normalize_lists(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("allergens", mode="before")
    @classmethod
    def drop_empty_allergens(cls, value: Any) -> Any:
        """Drop null and blank entries; a null list stays None (unknown)."""
        if not isinstance(value, list):
            return value
        return [item for item in value if item is not None and not (isinstance(item, str) and not item.strip())]

    def effective_total_time(self) -> Optional[int]:
        """Explicit total time, else prep + cook; a zero sum means unknown."""
        if self.total_time_minutes is not None:
            return self.total_time_minutes
        computed = self.prep_time_minutes + self.cook_time_minutes
        return computed or None


class RecipePage(BaseModel):
    """Paginated listing returned by /recipes and /recipes/featured."""

    model_config = ConfigDict(extra="ignore")

    data: list[Recipe]
    count: int = 0
    page: int = 1
    per_page: int = 0
    total_pages: int = 0

    @field_validator("count", "page", "per_page", "total_pages", mode="before")
    @classmethod
    def null_counters_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


# ============================================================================
# Upstream query shapes
# ============================================================================


class RecipeQuery(BaseModel):
    """Filter set for GET /recipes. None values are not sent."""

    model_config = ConfigDict(frozen=True)

    age_group: Optional[AgeGroup] = None
    meal_type: Optional[str] = None
    query: Optional[str] = None
    limit: int
    offset: Optional[int] = None
    language: Optional[str] = None

    def to_params(self) -> dict[str, str]:
        """Map to the Solid Start query-string names, dropping unset filters."""
        params = {
            "age_group": self.age_group.value if self.age_group else None,
            "food_type": self.meal_type,
            "search_query": self.query,
            "limit": self.limit,
            "offset": self.offset,
            "lang": self.language,
        }
        return {key: str(value) for key, value in params.items() if value is not None}


class FeaturedQuery(BaseModel):
    """Filter set for GET /recipes/featured."""

    model_config = ConfigDict(frozen=True)

    age_group: Optional[AgeGroup] = None
    limit: int
    language: Optional[str] = None

    def to_params(self) -> dict[str, str]:
        params = {
            "age_group": self.age_group.value if self.age_group else None,
            "limit": self.limit,
            "lang": self.language,
        }
        return {key: str(value) for key, value in params.items() if value is not None}


# ============================================================================
# Tool inputs
# ============================================================================


class SearchCriteria(BaseModel):
    """Input schema for the recipe search tool.

    Loosely-specified, natural-language-derived parameters. Age group is resolved
    with precedence explicit age_group > stage label > baby_age_months, and the
    language is inferred from the query text when not given (see src.search.normalize).
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", frozen=True)

    baby_age_months: Optional[int] = Field(
        None, ge=0, le=48, description="Baby age in months, used to pick an age stage."
    )
    age_group: Optional[AgeGroup] = Field(
        None, description="Override age group stage if you already know it."
    )
    stage: Optional[str] = Field(
        None, description="Free-text stage label such as 'stage 2', '3' or '11+'."
    )
    meal_type: Optional[str] = Field(
        None, min_length=1, description="Meal type label, forwarded to the food_type filter."
    )
    query: Optional[str] = Field(None, min_length=1, description="Free text search query.")
    allergens_to_avoid: list[str] = Field(
        default_factory=list, max_length=10, description="Allergens to filter out of the results."
    )
    difficulty: Optional[str] = Field(
        None, description="Required difficulty level (easy, medium, hard)."
    )
    max_total_time_minutes: Optional[int] = Field(None, gt=0)
    max_cook_time_minutes: Optional[int] = Field(None, gt=0)
    max_prep_time_minutes: Optional[int] = Field(None, gt=0)
    limit: Optional[int] = Field(
        None, ge=1, le=30, description="Maximum number of recipes to return (default 12)."
    )
    offset: Optional[int] = Field(None, ge=0, description="Offset for pagination.")
    language: Optional[str] = Field(
        None, min_length=2, max_length=5, description="ISO language code to localize content."
    )

    @field_validator("age_group", "stage", "meal_type", "query", "difficulty", "language", mode="before")
    @classmethod
    def blank_strings_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("age_group", mode="before")
    @classmethod
    def uppercase_age_group(cls, value: Any) -> Any:
        return _uppercase_age_group(value)

    @field_validator("difficulty", mode="after")
    @classmethod
    def lowercase_difficulty(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value

    @field_validator("allergens_to_avoid", mode="before")
    @classmethod
    def normalize_allergens(cls, value: Any) -> Any:
        """Lowercase, drop blanks and de-duplicate while keeping order."""
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple, set)):
            return value
        normalized: list[str] = []
        for item in value:
            if not isinstance(item, str):
                return value  # let type validation report it
            cleaned = item.strip().lower()
            if cleaned and cleaned not in normalized:
                normalized.append(cleaned)
        return normalized


class FeaturedRequest(BaseModel):
    """Input schema for the featured recipes tool."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", frozen=True)

    baby_age_months: Optional[int] = Field(None, ge=0, le=48)
    age_group: Optional[AgeGroup] = None
    limit: Optional[int] = Field(None, ge=1, le=20)
    language: Optional[str] = Field(None, min_length=2, max_length=5)

    @field_validator("age_group", "language", mode="before")
    @classmethod
    def blank_strings_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("age_group", mode="before")
    @classmethod
    def uppercase_age_group(cls, value: Any) -> Any:
        return _uppercase_age_group(value)


class RecipeDetailsRequest(BaseModel):
    """Input schema for the recipe details tool."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", frozen=True)

    recipe_id: str = Field(..., min_length=1)
    language: Optional[str] = Field(None, min_length=2, max_length=5)

    @field_validator("recipe_id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("language", mode="before")
    @classmethod
    def blank_language_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class InteractionRequest(BaseModel):
    """Input schema for like/bookmark toggles."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", frozen=True)

    recipe_id: str = Field(..., min_length=1)
    kind: InteractionKind
    active: bool = True

    @field_validator("recipe_id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


# ============================================================================
# Pipeline output
# ============================================================================


class SearchResult(BaseModel):
    """Filtered, explained outcome of one search pipeline run.

    `excluded_by_filters` is the combined delta of every local filter
    (allergen, stage, difficulty, time); `excluded_due_to_allergens_only`
    isolates the allergen contribution.
    """

    recipes: list[Recipe]
    strategy: SearchStrategy
    received: int
    excluded_by_filters: int
    excluded_due_to_allergens_only: int = 0
    count: int = 0
    page: int = 1
    per_page: int = 0
    total_pages: int = 0
    age_group: Optional[AgeGroup] = None
    language: Optional[str] = None
    summary: str = ""

    @property
    def excluded_due_to_allergens(self) -> int:
        """Legacy name for the combined exclusion count."""
        return self.excluded_by_filters


# ============================================================================
# Tool outputs
# ============================================================================


class RecipeSummary(BaseModel):
    """Recipe card shape returned by the search and featured tools."""

    id: str
    name: str
    display_name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    age_group: AgeGroup
    age_group_label: Optional[str] = None
    months_range: Optional[tuple[int, int]] = None
    food_type: Optional[str] = None
    prep_time_minutes: int = 0
    cook_time_minutes: int = 0
    total_time_minutes: Optional[int] = None
    servings: Optional[int] = None
    difficulty_level: Optional[str] = None
    likes_count: int = 0
    bookmarks_count: int = 0
    made_count: int = 0
    allergens: Optional[list[str]] = None
    safety_notes: Optional[str] = None
    is_featured: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def _summary_fields(cls, recipe: Recipe) -> dict[str, Any]:
        metadata = AGE_GROUP_METADATA.get(recipe.age_group, {})
        return {
            "id": recipe.id,
            "name": recipe.name,
            "display_name": recipe.display_name or recipe.name,
            "description": recipe.description,
            "image_url": recipe.image_url,
            "thumbnail_url": recipe.thumbnail_url,
            "age_group": recipe.age_group,
            "age_group_label": metadata.get("label"),
            "months_range": metadata.get("months_range"),
            "food_type": recipe.food_type,
            "prep_time_minutes": recipe.prep_time_minutes,
            "cook_time_minutes": recipe.cook_time_minutes,
            "total_time_minutes": recipe.effective_total_time(),
            "servings": recipe.servings,
            "difficulty_level": recipe.difficulty_level,
            "likes_count": recipe.likes_count,
            "bookmarks_count": recipe.bookmarks_count,
            "made_count": recipe.made_count,
            "allergens": recipe.allergens,
            "safety_notes": recipe.safety_notes,
            "is_featured": recipe.is_featured,
            "created_at": recipe.created_at,
            "updated_at": recipe.updated_at,
        }

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeSummary":
        return cls(**cls._summary_fields(recipe))


class RecipeDetail(RecipeSummary):
    """Full recipe shape returned by the details tool."""

    ingredients: list[dict[str, Any]] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    calories_per_serving: Optional[float] = None
    source: Optional[str] = None
    status: Optional[str] = None
    dislikes_count: Optional[int] = None

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeDetail":
        return cls(
            **cls._summary_fields(recipe),
            ingredients=recipe.ingredients,
            instructions=recipe.instructions,
            calories_per_serving=recipe.calories_per_serving,
            source=recipe.source,
            status=recipe.status,
            dislikes_count=recipe.dislikes_count,
        )


class SearchPagination(BaseModel):
    received: int
    count: int
    page: int
    per_page: int
    total_pages: int


class SearchFilters(BaseModel):
    """Filters that were actually applied to a search, echoed for the caller."""

    language: Optional[str] = None
    stage: Optional[AgeGroup] = None
    age_group: Optional[AgeGroup] = None
    difficulty: Optional[str] = None
    max_total_time_minutes: Optional[int] = None
    max_cook_time_minutes: Optional[int] = None
    max_prep_time_minutes: Optional[int] = None


class SearchToolOutput(BaseModel):
    """Structured output of the search tool."""

    params: dict[str, Any]
    filters: SearchFilters
    summary: str
    pagination: SearchPagination
    excluded_due_to_allergens: int
    recipes: list[RecipeSummary]
    search_strategy: SearchStrategy


class FeaturedToolOutput(BaseModel):
    """Structured output of the featured tool."""

    params: dict[str, Any]
    recipes: list[RecipeSummary]


class RecipeNutrition(BaseModel):
    calories_per_serving: Optional[float] = None
    servings: Optional[int] = None
    total_time_minutes: Optional[int] = None
    cook_time_minutes: Optional[int] = None
    prep_time_minutes: Optional[int] = None
    difficulty: Optional[str] = None
    allergens: Optional[list[str]] = None


class RecipeDetailToolOutput(BaseModel):
    """Structured output of the recipe details tool."""

    recipe: RecipeDetail
    nutrition: RecipeNutrition
    language: Optional[str] = None


class InteractionAck(BaseModel):
    """Acknowledgement returned by the like/bookmark tools."""

    recipe_id: str
    kind: InteractionKind
    active: bool
    message: str
