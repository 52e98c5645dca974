"""Unit tests for the local post-filters."""

from src.models.models import AgeGroup
from src.search.filters import (
    apply_filters,
    passes_allergen_filter,
    passes_difficulty_filter,
    passes_stage_filter,
    passes_time_filter,
)
from src.search.normalize import ResolvedCriteria


class TestAllergenFilter:
    """Test allergen exclusion and the permissive default for missing data."""

    def test_missing_allergen_data_is_kept(self, make_recipe):
        assert passes_allergen_filter(make_recipe(allergens=None), ["peanut"])
        assert passes_allergen_filter(make_recipe(allergens=[]), ["peanut"])

    def test_matching_allergen_is_excluded_case_insensitively(self, make_recipe):
        recipe = make_recipe(allergens=["Peanut", "egg"])
        assert not passes_allergen_filter(recipe, ["peanut"])

    def test_non_matching_allergens_are_kept(self, make_recipe):
        assert passes_allergen_filter(make_recipe(allergens=["dairy"]), ["peanut", "egg"])

    def test_empty_avoid_list_is_a_no_op(self, make_recipe):
        assert passes_allergen_filter(make_recipe(allergens=["Peanut"]), [])


class TestStageFilter:
    def test_no_requested_stage_keeps_everything(self, make_recipe):
        assert passes_stage_filter(make_recipe(age_group="STAGE_4"), None)

    def test_other_stage_is_excluded(self, make_recipe):
        assert passes_stage_filter(make_recipe(age_group="STAGE_2"), AgeGroup.STAGE_2)
        assert not passes_stage_filter(make_recipe(age_group="STAGE_3"), AgeGroup.STAGE_2)


class TestDifficultyFilter:
    def test_matches_case_insensitively(self, make_recipe):
        assert passes_difficulty_filter(make_recipe(difficulty_level="Easy"), "easy")

    def test_missing_difficulty_is_excluded_when_requested(self, make_recipe):
        assert not passes_difficulty_filter(make_recipe(difficulty_level=None), "easy")

    def test_different_difficulty_is_excluded(self, make_recipe):
        assert not passes_difficulty_filter(make_recipe(difficulty_level="hard"), "easy")

    def test_no_requested_difficulty_keeps_everything(self, make_recipe):
        assert passes_difficulty_filter(make_recipe(difficulty_level=None), None)


class TestTimeFilter:
    """Test time bounds and the zero-means-unknown rule."""

    def test_zero_prep_and_cook_is_unknown_not_instant(self, make_recipe):
        recipe = make_recipe(prep_time_minutes=0, cook_time_minutes=0)
        assert passes_time_filter(recipe, max_total=1)
        assert passes_time_filter(recipe, max_total=1000)

    def test_computed_total_over_bound_is_excluded(self, make_recipe):
        recipe = make_recipe(prep_time_minutes=10, cook_time_minutes=25)
        assert not passes_time_filter(recipe, max_total=30)
        assert passes_time_filter(recipe, max_total=35)

    def test_explicit_total_takes_precedence(self, make_recipe):
        recipe = make_recipe(prep_time_minutes=10, cook_time_minutes=25, total_time_minutes=20)
        assert passes_time_filter(recipe, max_total=30)

    def test_cook_and_prep_bounds(self, make_recipe):
        recipe = make_recipe(prep_time_minutes=15, cook_time_minutes=5)
        assert not passes_time_filter(recipe, max_prep=10)
        assert passes_time_filter(recipe, max_cook=5)
        assert not passes_time_filter(recipe, max_cook=4)

    def test_no_bounds_keeps_everything(self, make_recipe):
        assert passes_time_filter(make_recipe(prep_time_minutes=500, cook_time_minutes=500))


class TestApplyFilters:
    """Test composition and exclusion accounting."""

    def test_allergen_only_delta(self, make_recipe):
        candidates = [
            make_recipe("a", allergens=["egg"]),
            make_recipe("b", allergens=None),
            make_recipe("c", allergens=["Egg", "dairy"]),
        ]
        outcome = apply_filters(candidates, ResolvedCriteria(allergens_to_avoid=("egg",)))

        assert [r.id for r in outcome.recipes] == ["b"]
        assert outcome.excluded == len(candidates) - len(outcome.recipes) == 2
        assert outcome.excluded_by_allergens == 2

    def test_combined_filters_use_and_semantics_and_keep_order(self, make_recipe):
        candidates = [
            make_recipe("a", age_group="STAGE_2", difficulty_level="easy"),
            make_recipe("b", age_group="STAGE_3", difficulty_level="easy"),
            make_recipe("c", age_group="STAGE_2", difficulty_level="hard"),
            make_recipe("d", age_group="STAGE_2", difficulty_level="Easy", prep_time_minutes=40),
            make_recipe("e", age_group="STAGE_2", difficulty_level="easy", allergens=["egg"]),
            make_recipe("f", age_group="STAGE_2", difficulty_level="EASY"),
        ]
        criteria = ResolvedCriteria(
            requested_stage=AgeGroup.STAGE_2,
            difficulty="easy",
            max_total_time_minutes=30,
            allergens_to_avoid=("egg",),
        )

        outcome = apply_filters(candidates, criteria)

        assert [r.id for r in outcome.recipes] == ["a", "f"]
        assert outcome.excluded == 4
        assert outcome.excluded_by_allergens == 1

    def test_no_filters_keep_everything(self, make_recipe):
        candidates = [make_recipe("a"), make_recipe("b")]
        outcome = apply_filters(candidates, ResolvedCriteria())
        assert outcome.recipes == candidates
        assert outcome.excluded == 0
