#!/usr/bin/env python3
"""Ad hoc query runner for the Dear Baby recipe agent.

Run queries directly without starting the MCP server.

Usage:
    python query.py "Lunch ideas for my 8 month old, no eggs please"
    python query.py --debug "Your query"  # Show full JSON response
"""

import asyncio
import sys

from rich.console import Console
from rich.markdown import Markdown

from src.agents.agent import initialize_recipe_agent
from src.utils.logger import logger

console = Console()


def extract_response_text(response) -> str:
    """Extract markdown text from an agent run output.

    Args:
        response: Agno RunOutput (or any object with a 'content' attribute).

    Returns:
        Response text or empty string if not found
    """
    content = getattr(response, "content", None)
    if isinstance(content, str):
        return content
    if content is not None:
        return str(content)
    return ""


async def _run(query: str):
    agent, client = await initialize_recipe_agent()
    try:
        logger.info(f"Running query: {query}")
        return await agent.arun(input=query)
    finally:
        await client.close()


def run_query(query: str, debug: bool = False) -> None:
    """Execute a single ad hoc query and print the response.

    Args:
        query: The parent's question.
        debug: If True, display the full JSON run output.
    """
    try:
        response = asyncio.run(_run(query))
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Query execution failed: {e}", exc_info=True)
        sys.exit(1)

    console.print()

    if debug:
        console.print("[bold cyan]Debug Mode: Full Response[/bold cyan]")
        console.print("[dim]" + "=" * 60 + "[/dim]")
        response_dict = response.to_dict() if hasattr(response, "to_dict") else vars(response)
        console.print_json(data=response_dict, default=str)
        console.print("[dim]" + "=" * 60 + "[/dim]")
        console.print()

    response_text = extract_response_text(response)
    if response_text:
        console.print(Markdown(response_text))
    else:
        console.print("[yellow]No response text found[/yellow]")


if __name__ == "__main__":
    args = sys.argv[1:]
    debug_mode = False
    if args and args[0] == "--debug":
        debug_mode = True
        args = args[1:]

    if not args:
        print('Usage: python query.py [--debug] "<your question>"')
        sys.exit(1)

    run_query(" ".join(args), debug=debug_mode)
