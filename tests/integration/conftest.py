"""Pytest configuration and fixtures for integration tests.

These tests call a live Solid Start API. They load .env from the project root
and skip when SOLIDSTART_BASE_URL is not configured.
"""

import os
from pathlib import Path

import pytest
import pytest_asyncio
from dotenv import load_dotenv

from src.mcp_tools.solidstart import SolidStartClient


def pytest_configure(config):
    """Load .env before test collection so module-level settings see it."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: These tests require a reachable SOLIDSTART_BASE_URL")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_settings():
    """Skip the whole session when the Solid Start API is not configured."""
    if not os.getenv("SOLIDSTART_BASE_URL"):
        pytest.skip(
            "Missing SOLIDSTART_BASE_URL in .env - integration tests skipped",
            allow_module_level=True,
        )


@pytest_asyncio.fixture
async def live_client():
    async with SolidStartClient(
        os.environ["SOLIDSTART_BASE_URL"],
        api_key=os.getenv("SOLIDSTART_API_KEY"),
    ) as client:
        yield client
