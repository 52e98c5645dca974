"""Agent initialization factory for the Dear Baby recipe agent.

Factory function that configures an Agno Agent (Gemini model) with the five
recipe tools, so a conversational agent can call the recipe API directly.
"""

from typing import Optional

from agno.agent import Agent
from agno.models.google import Gemini
from agno.tools import tool

from src.mcp_tools.recipe_tools import RecipeTools
from src.mcp_tools.solidstart import SolidStartClient
from src.prompts.prompts import get_system_instructions
from src.utils.config import config
from src.utils.logger import logger


def build_agent_tools(recipe_tools: RecipeTools) -> list:
    """Wrap RecipeTools operations as Agno tools.

    Tool docstrings are the descriptions the model sees.

    Args:
        recipe_tools: Tool operations bound to a recipe source.

    Returns:
        List of Agno tool functions.
    """

    @tool
    async def search_recipes(
        baby_age_months: Optional[int] = None,
        age_group: Optional[str] = None,
        stage: Optional[str] = None,
        meal_type: Optional[str] = None,
        allergens_to_avoid: Optional[list[str]] = None,
        query: Optional[str] = None,
        difficulty: Optional[str] = None,
        max_total_time_minutes: Optional[int] = None,
        max_cook_time_minutes: Optional[int] = None,
        max_prep_time_minutes: Optional[int] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        language: Optional[str] = None,
    ) -> dict:
        """Find age-appropriate baby recipes. Falls back to broader results when nothing matches.

        Args:
            baby_age_months: Baby age in months (0-48).
            age_group: STAGE_1..STAGE_4, when the stage is already known exactly.
            stage: Stage label such as "stage 2" or "11+", if the parent gave one.
            meal_type: Meal type (breakfast, lunch, dinner, snack).
            allergens_to_avoid: Allergens that must not appear in the recipes.
            query: Free text, e.g. an ingredient or dish name.
            difficulty: easy, medium or hard.
            max_total_time_minutes: Upper bound on total preparation time.
            max_cook_time_minutes: Upper bound on cook time.
            max_prep_time_minutes: Upper bound on prep time.
            limit: Maximum number of recipes (1-30).
            offset: Pagination offset, to show more results.
            language: ISO language code of the reply.

        Returns:
            Dict with 'summary', 'search_strategy', 'recipes' and pagination info.
        """
        criteria = {
            key: value
            for key, value in {
                "baby_age_months": baby_age_months,
                "age_group": age_group,
                "stage": stage,
                "meal_type": meal_type,
                "allergens_to_avoid": allergens_to_avoid,
                "query": query,
                "difficulty": difficulty,
                "max_total_time_minutes": max_total_time_minutes,
                "max_cook_time_minutes": max_cook_time_minutes,
                "max_prep_time_minutes": max_prep_time_minutes,
                "limit": limit,
                "offset": offset,
                "language": language,
            }.items()
            if value is not None
        }
        result = await recipe_tools.search(criteria)
        return result.model_dump(mode="json")

    @tool
    async def featured_recipes(baby_age_months: Optional[int] = None, limit: Optional[int] = None) -> dict:
        """List curated featured recipes, optionally for a baby's age.

        Args:
            baby_age_months: Baby age in months (0-48).
            limit: Maximum number of recipes (1-20).
        """
        request = {"baby_age_months": baby_age_months, "limit": limit}
        result = await recipe_tools.featured({k: v for k, v in request.items() if v is not None})
        return result.model_dump(mode="json")

    @tool
    async def get_recipe_details(recipe_id: str, language: Optional[str] = None) -> dict:
        """Get full details (ingredients, instructions, nutrition) for one recipe.

        Args:
            recipe_id: Recipe id from a search result.
            language: ISO language code of the reply.
        """
        request = {"recipe_id": recipe_id}
        if language:
            request["language"] = language
        result = await recipe_tools.get_details(request)
        return result.model_dump(mode="json")

    @tool
    async def toggle_bookmark(recipe_id: str, bookmarked: bool = True) -> dict:
        """Bookmark a recipe (bookmarked=True) or remove the bookmark (False). Only when asked."""
        result = await recipe_tools.toggle_bookmark(recipe_id, bookmarked)
        return result.model_dump(mode="json")

    @tool
    async def toggle_like(recipe_id: str, liked: bool = True) -> dict:
        """Like a recipe (liked=True) or remove the like (False). Only when asked."""
        result = await recipe_tools.toggle_like(recipe_id, liked)
        return result.model_dump(mode="json")

    return [search_recipes, featured_recipes, get_recipe_details, toggle_bookmark, toggle_like]


def create_agent(recipe_tools: RecipeTools) -> Agent:
    """Create and configure the Agno Agent instance.

    Args:
        recipe_tools: Tool operations bound to a recipe source.

    Returns:
        Configured Agent instance.
    """
    tools = build_agent_tools(recipe_tools)
    logger.info(f"✓ {len(tools)} tool(s) registered")

    agent = Agent(
        model=Gemini(
            id=config.GEMINI_MODEL,
            api_key=config.GEMINI_API_KEY,
            temperature=config.TEMPERATURE,
        ),
        tools=tools,
        instructions=get_system_instructions(
            max_recipes=config.DEFAULT_SEARCH_LIMIT,
            max_tool_calls=config.TOOL_CALL_LIMIT,
        ),
        tool_call_limit=config.TOOL_CALL_LIMIT,
        markdown=True,
        name="Dear Baby Recipe Agent",
        description="Finds age-appropriate baby recipes from Solid Start",
    )

    logger.info(f"✓ Agent configured with maximum {config.TOOL_CALL_LIMIT} tool calls per request")
    return agent


async def initialize_recipe_agent(client: Optional[SolidStartClient] = None) -> tuple[Agent, SolidStartClient]:
    """Factory function to initialize the recipe agent (async).

    1. Validate configuration (Solid Start + Gemini settings)
    2. Build the Solid Start client and optionally verify the connection (fail fast)
    3. Register tools and configure the agent

    Args:
        client: Optional pre-built client (tests inject fakes here).

    Returns:
        Tuple of (Agent, SolidStartClient). Caller closes the client.

    Raises:
        ValueError: If configuration is invalid.
        ConnectionError: If the Solid Start API is unreachable on startup.
    """
    logger.info("=== Initializing Dear Baby Recipe Agent ===")
    config.validate()
    config.validate_agent()

    if client is None:
        client = SolidStartClient.from_config(config)
        if config.VERIFY_CONNECTION:
            await client.verify_connection()

    agent = create_agent(RecipeTools.from_config(client, config))
    logger.info("=== Agent initialization complete ===")
    return agent, client
