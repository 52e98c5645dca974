"""Unit tests for the caller-facing recipe tools."""

import pytest
from pydantic import ValidationError

from src.mcp_tools.errors import AuthorizationError, CollaboratorError
from src.mcp_tools.recipe_tools import RecipeTools
from src.models.models import AgeGroup, FeaturedQuery, RecipeQuery


class TestSearchTool:
    """Tests for RecipeTools.search()."""

    @pytest.mark.asyncio
    async def test_output_shape(self, fake_source, make_recipe, make_page):
        source = fake_source(
            list_pages=[make_page([make_recipe("a", allergens=["egg"]), make_recipe("b")], count=2)]
        )
        tools = RecipeTools(source)

        output = await tools.search(
            {"baby_age_months": 7, "allergens_to_avoid": ["Egg"], "limit": 5, "query": "pear"}
        )

        assert output.search_strategy == "exact"
        assert output.excluded_due_to_allergens == 1
        assert [r.id for r in output.recipes] == ["b"]
        assert output.recipes[0].age_group_label == "Stage 2 (around 7-8 months)"
        assert output.recipes[0].months_range == (7, 8)
        assert output.recipes[0].total_time_minutes == 15
        assert output.params == {
            "baby_age_months": 7,
            "allergens_to_avoid": ["egg"],
            "limit": 5,
            "query": "pear",
            "age_group": "STAGE_2",
        }
        assert output.filters.age_group == AgeGroup.STAGE_2
        assert output.filters.stage is None
        assert output.filters.language == "en"
        assert output.pagination.received == 2
        assert output.pagination.count == 2
        assert output.summary.startswith("Found 1 recipe for Stage 2")

    @pytest.mark.asyncio
    async def test_default_limit_applied_to_params(self, fake_source):
        source = fake_source()
        tools = RecipeTools(source, default_search_limit=8)

        output = await tools.search({})

        assert output.params["limit"] == 8
        assert output.params["age_group"] is None
        assert source.calls[0] == ("list", RecipeQuery(limit=8))

    @pytest.mark.asyncio
    async def test_combined_exclusions_reported_under_legacy_name(self, fake_source, make_recipe, make_page):
        recipes = [
            make_recipe("a", difficulty_level="hard"),
            make_recipe("b", allergens=["peanut"]),
            make_recipe("c"),
        ]
        tools = RecipeTools(fake_source(list_pages=[make_page(recipes)]))

        output = await tools.search({"difficulty": "Easy", "allergens_to_avoid": "peanut"})

        assert output.excluded_due_to_allergens == 2
        assert output.filters.difficulty == "easy"

    @pytest.mark.parametrize(
        "criteria",
        [
            {"limit": 31},
            {"limit": 0},
            {"offset": -1},
            {"baby_age_months": 49},
            {"allergens_to_avoid": [f"a{i}" for i in range(11)]},
            {"language": "x"},
            {"unknown": "field"},
            {"age_group": "STAGE_9"},
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_input_rejected_before_any_call(self, fake_source, criteria):
        source = fake_source()

        with pytest.raises(ValidationError):
            await RecipeTools(source).search(criteria)

        assert source.calls == []

    @pytest.mark.asyncio
    async def test_collaborator_error_propagates(self, fake_source):
        source = fake_source()
        source.list_error = CollaboratorError(500, "boom")

        with pytest.raises(CollaboratorError):
            await RecipeTools(source).search({"query": "rice"})

        assert len(source.calls) == 1


class TestFeaturedTool:
    @pytest.mark.asyncio
    async def test_defaults(self, fake_source, make_recipe, make_page):
        source = fake_source(featured_page=make_page([make_recipe("f", is_featured=True)]))

        output = await RecipeTools(source).featured()

        assert source.calls == [("featured", FeaturedQuery(limit=10))]
        assert output.params == {"age_group": None, "limit": 10}
        assert output.recipes[0].is_featured is True

    @pytest.mark.asyncio
    async def test_age_group_derived_from_months(self, fake_source):
        source = fake_source()

        output = await RecipeTools(source, default_featured_limit=4).featured({"baby_age_months": 10, "language": "zh"})

        assert source.calls == [("featured", FeaturedQuery(age_group=AgeGroup.STAGE_3, limit=4, language="zh"))]
        assert output.params["age_group"] == "STAGE_3"

    @pytest.mark.asyncio
    async def test_limit_over_twenty_rejected(self, fake_source):
        source = fake_source()
        with pytest.raises(ValidationError):
            await RecipeTools(source).featured({"limit": 21})
        assert source.calls == []


class TestDetailsTool:
    @pytest.mark.asyncio
    async def test_details_and_nutrition(self, fake_source, make_recipe):
        recipe = make_recipe(
            "42",
            ingredients=[{"name": "carrot", "amount": "1"}],
            instructions=["Steam", "Blend"],
            calories_per_serving=45.5,
            cook_time_minutes=0,
            allergens=["dairy"],
        )
        source = fake_source(details={"42": recipe})

        output = await RecipeTools(source).get_details({"recipe_id": 42, "language": "en"})

        assert source.calls == [("details", ("42", "en"))]
        assert output.recipe.instructions == ["Steam", "Blend"]
        assert output.recipe.ingredients[0]["name"] == "carrot"
        assert output.nutrition.calories_per_serving == 45.5
        assert output.nutrition.cook_time_minutes is None
        assert output.nutrition.prep_time_minutes == 5
        assert output.nutrition.total_time_minutes == 5
        assert output.nutrition.allergens == ["dairy"]
        assert output.language == "en"

    @pytest.mark.asyncio
    async def test_empty_id_rejected(self, fake_source):
        with pytest.raises(ValidationError):
            await RecipeTools(fake_source()).get_details({"recipe_id": "  "})


class TestInteractionTools:
    """Tests for toggle_bookmark() and toggle_like()."""

    @pytest.mark.asyncio
    async def test_bookmark_twice_calls_upstream_twice(self, fake_source):
        source = fake_source()
        tools = RecipeTools(source)

        first = await tools.toggle_bookmark("r1", True)
        second = await tools.toggle_bookmark("r1", True)

        assert source.calls == [
            ("interaction", ("r1", "bookmark", True)),
            ("interaction", ("r1", "bookmark", True)),
        ]
        assert first == second
        assert first.message == "Recipe bookmarked successfully."

    @pytest.mark.asyncio
    async def test_remove_bookmark(self, fake_source):
        ack = await RecipeTools(fake_source()).toggle_bookmark("r1", bookmarked=False)
        assert ack.active is False
        assert ack.message == "Bookmark removed successfully."

    @pytest.mark.asyncio
    async def test_like_and_unlike(self, fake_source):
        source = fake_source()
        tools = RecipeTools(source)

        liked = await tools.toggle_like("r2")
        unliked = await tools.toggle_like("r2", liked=False)

        assert liked.kind == "like" and liked.active is True
        assert unliked.message == "Removed your like from the recipe."
        assert [call[1] for call in source.calls] == [("r2", "like", True), ("r2", "like", False)]

    @pytest.mark.asyncio
    async def test_authorization_error_surfaces(self, fake_source):
        source = fake_source()
        source.interaction_error = AuthorizationError(401, "Unauthorized")

        with pytest.raises(AuthorizationError):
            await RecipeTools(source).toggle_like("r1")

    @pytest.mark.asyncio
    async def test_blank_id_rejected_before_call(self, fake_source):
        source = fake_source()
        with pytest.raises(ValidationError):
            await RecipeTools(source).toggle_bookmark("")
        assert source.calls == []
