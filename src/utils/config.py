"""Configuration management for the Dear Baby recipe tools.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Solid Start recipe API: base URL is required, API key is only needed for like/bookmark
        self.SOLIDSTART_BASE_URL: str = os.getenv("SOLIDSTART_BASE_URL", "").rstrip("/")
        self.SOLIDSTART_API_KEY: Optional[str] = os.getenv("SOLIDSTART_API_KEY") or None
        # Per-request timeout for the Solid Start API (seconds). Default: 10
        self.REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
        # Startup connection check: attempts before giving up. Default: 3
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # VERIFY_CONNECTION: ping /health on startup and fail fast if unreachable
        self.VERIFY_CONNECTION: bool = _env_bool("VERIFY_CONNECTION", "true")
        # MCP server settings
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "8080"))
        # MCP_TRANSPORT: "streamable-http" (default), "sse" or "stdio"
        self.MCP_TRANSPORT: str = os.getenv("MCP_TRANSPORT", "streamable-http")
        # Search defaults. MAX_SEARCH_LIMIT is the hard upper bound accepted by the search tool
        self.DEFAULT_SEARCH_LIMIT: int = int(os.getenv("DEFAULT_SEARCH_LIMIT", "12"))
        self.MAX_SEARCH_LIMIT: int = 30
        self.DEFAULT_FEATURED_LIMIT: int = int(os.getenv("DEFAULT_FEATURED_LIMIT", "10"))
        # Conversational agent (query.py only)
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Temperature: 0.2 keeps recipe answers grounded in tool output
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.2"))
        # Tool Call Limit: maximum number of tool calls the agent can make per request
        self.TOOL_CALL_LIMIT: int = int(os.getenv("TOOL_CALL_LIMIT", "8"))

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If required settings are missing or invalid values provided.
        """
        if not self.SOLIDSTART_BASE_URL:
            raise ValueError("SOLIDSTART_BASE_URL environment variable is required")
        if not self.SOLIDSTART_BASE_URL.startswith(("http://", "https://")):
            raise ValueError(
                f"SOLIDSTART_BASE_URL must be a valid http(s) URL, got: {self.SOLIDSTART_BASE_URL}"
            )
        if self.MCP_TRANSPORT not in ("streamable-http", "sse", "stdio"):
            raise ValueError(
                f"MCP_TRANSPORT must be 'streamable-http', 'sse' or 'stdio', got: {self.MCP_TRANSPORT}"
            )
        if self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be positive, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )
        if self.MAX_RETRIES < 1:
            raise ValueError(f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}")
        if not (1 <= self.PORT <= 65535):
            raise ValueError(f"PORT must be between 1 and 65535, got: {self.PORT}")
        if not (1 <= self.DEFAULT_SEARCH_LIMIT <= self.MAX_SEARCH_LIMIT):
            raise ValueError(
                f"DEFAULT_SEARCH_LIMIT must be between 1 and {self.MAX_SEARCH_LIMIT}, "
                f"got: {self.DEFAULT_SEARCH_LIMIT}"
            )
        if not (1 <= self.DEFAULT_FEATURED_LIMIT <= 20):
            raise ValueError(
                f"DEFAULT_FEATURED_LIMIT must be between 1 and 20, got: {self.DEFAULT_FEATURED_LIMIT}"
            )

    def validate_agent(self) -> None:
        """Validate settings needed by the conversational agent.

        Raises:
            ValueError: If GEMINI_API_KEY is missing or TEMPERATURE is out of range.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}"
            )
        if self.TOOL_CALL_LIMIT < 1:
            raise ValueError(f"TOOL_CALL_LIMIT must be at least 1, got: {self.TOOL_CALL_LIMIT}")


# Module-level config instance; entry points call validate() before use
config = Config()
