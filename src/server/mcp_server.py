"""MCP server exposing the recipe tools.

Registers the five RecipeTools operations on a FastMCP server. Tool arguments
are validated by the Pydantic request models; validation and upstream errors are
logged here and re-raised so FastMCP reports them as tool errors.
"""

from typing import Awaitable, Optional, TypeVar

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from src.mcp_tools.errors import CollaboratorError
from src.mcp_tools.recipe_tools import RecipeTools
from src.models.models import (
    FeaturedToolOutput,
    InteractionAck,
    RecipeDetailToolOutput,
    SearchToolOutput,
)
from src.utils.logger import logger

T = TypeVar("T")

SERVER_NAME = "dearbaby-recipes"

SERVER_INSTRUCTIONS = (
    "Tools for finding age-appropriate baby recipes from Solid Start. "
    "Use solidstart.recipes.search with the baby's age or stage, meal type and allergens to avoid; "
    "then solidstart.recipes.getDetails for ingredients and instructions."
)

READ_ONLY = ToolAnnotations(readOnlyHint=True, openWorldHint=True)
WRITE = ToolAnnotations(readOnlyHint=False, idempotentHint=True, openWorldHint=True)


async def _run_tool(tool_name: str, call: Awaitable[T]) -> T:
    """Await a tool call, logging failures before they propagate to FastMCP."""
    try:
        return await call
    except CollaboratorError as e:
        logger.error(f"Tool {tool_name} failed upstream: {e}", extra={"tool": tool_name})
        raise
    except ValueError as e:
        # pydantic.ValidationError is a ValueError subclass
        logger.warning(f"Tool {tool_name} rejected input: {e}", extra={"tool": tool_name})
        raise


def _provided(**kwargs) -> dict:
    return {key: value for key, value in kwargs.items() if value is not None}


def create_mcp_server(recipe_tools: RecipeTools, host: str = "0.0.0.0", port: int = 8080) -> FastMCP:
    """Build a FastMCP server with the recipe tools registered.

    Args:
        recipe_tools: Tool operations bound to a recipe source.
        host: Bind address for HTTP transports.
        port: Port for HTTP transports.

    Returns:
        FastMCP server ready to run().
    """
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS, host=host, port=port)

    @mcp.tool(
        name="solidstart.recipes.search",
        title="Search Solid Start Recipes",
        description="Find age-appropriate baby recipes filtered by stage, meal type, allergens, difficulty and time.",
        annotations=READ_ONLY,
    )
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
    ) -> SearchToolOutput:
        """Search recipes; falls back to broader results when nothing matches exactly.

        Args:
            baby_age_months: Baby age in months (0-48), used to pick an age stage.
            age_group: STAGE_1..STAGE_4, overrides everything else.
            stage: Free-text stage label such as "stage 2" or "11+".
            meal_type: Meal type label (breakfast, lunch, snack...).
            allergens_to_avoid: Allergens to filter out (max 10).
            query: Free text search query.
            difficulty: easy, medium or hard.
            max_total_time_minutes: Upper bound on total time.
            max_cook_time_minutes: Upper bound on cook time.
            max_prep_time_minutes: Upper bound on prep time.
            limit: Maximum recipes to return (1-30, default 12).
            offset: Pagination offset.
            language: ISO language code; inferred from the query when omitted.
        """
        criteria = _provided(
            baby_age_months=baby_age_months,
            age_group=age_group,
            stage=stage,
            meal_type=meal_type,
            allergens_to_avoid=allergens_to_avoid,
            query=query,
            difficulty=difficulty,
            max_total_time_minutes=max_total_time_minutes,
            max_cook_time_minutes=max_cook_time_minutes,
            max_prep_time_minutes=max_prep_time_minutes,
            limit=limit,
            offset=offset,
            language=language,
        )
        return await _run_tool("search", recipe_tools.search(criteria))

    @mcp.tool(
        name="solidstart.recipes.featured",
        title="Featured Solid Start Recipes",
        description="Surface a curated list of featured baby recipes for quick discovery.",
        annotations=READ_ONLY,
    )
    async def featured_recipes(
        baby_age_months: Optional[int] = None,
        age_group: Optional[str] = None,
        limit: Optional[int] = None,
        language: Optional[str] = None,
    ) -> FeaturedToolOutput:
        request = _provided(baby_age_months=baby_age_months, age_group=age_group, limit=limit, language=language)
        return await _run_tool("featured", recipe_tools.featured(request))

    @mcp.tool(
        name="solidstart.recipes.getDetails",
        title="Get Recipe Details",
        description="Retrieve full Solid Start recipe details, including ingredients and instructions.",
        annotations=READ_ONLY,
    )
    async def get_recipe_details(recipe_id: str, language: Optional[str] = None) -> RecipeDetailToolOutput:
        request = _provided(recipe_id=recipe_id, language=language)
        return await _run_tool("getDetails", recipe_tools.get_details(request))

    @mcp.tool(
        name="solidstart.recipes.toggleBookmark",
        title="Bookmark Recipe",
        description="Bookmark or remove a bookmark for a Solid Start recipe in the user's account.",
        annotations=WRITE,
    )
    async def toggle_bookmark(recipe_id: str, bookmarked: bool = True) -> InteractionAck:
        return await _run_tool("toggleBookmark", recipe_tools.toggle_bookmark(recipe_id, bookmarked))

    @mcp.tool(
        name="solidstart.recipes.toggleLike",
        title="Like Recipe",
        description="Like or unlike a Solid Start recipe on behalf of the user.",
        annotations=WRITE,
    )
    async def toggle_like(recipe_id: str, liked: bool = True) -> InteractionAck:
        return await _run_tool("toggleLike", recipe_tools.toggle_like(recipe_id, liked))

    logger.info(f"✓ MCP server '{SERVER_NAME}' configured with 5 recipe tools")
    return mcp
