"""Solid Start recipe API client.

This module provides the SolidStartClient class, the aiohttp-based RecipeSource
used by the search pipeline and the recipe tools. It also offers a startup
connection check with exponential backoff retries (fail fast on startup).
"""

import asyncio
import json
from typing import Any, Optional, Type, TypeVar
from urllib.parse import quote

import aiohttp
from pydantic import BaseModel, ValidationError

from src.mcp_tools.base import RecipeSource
from src.mcp_tools.errors import CollaboratorError, error_for_status
from src.models.models import FeaturedQuery, InteractionKind, Recipe, RecipePage, RecipeQuery
from src.utils.logger import logger

ModelT = TypeVar("ModelT", bound=BaseModel)


class SolidStartClient(RecipeSource):
    """Async client for the Solid Start recipe REST API.

    Configuration is passed in explicitly at construction; the client never reads
    global settings. A single aiohttp session is created lazily and reused until
    close() is called.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout_seconds: float = 10.0,
        max_retries: int = 3,
        retry_delays: Optional[list[int]] = None,
    ) -> None:
        """Initialize SolidStartClient with configuration.

        Args:
            base_url: Root URL of the Solid Start API (e.g. "https://api.example.com/v1").
            api_key: Optional bearer credential, sent on like/bookmark calls.
            timeout_seconds: Total timeout per request (default: 10).
            max_retries: Attempts for verify_connection() (default: 3).
            retry_delays: Delays in seconds between verify_connection() attempts. Defaults to [1, 2, 4].

        Raises:
            ValueError: If base_url is None or empty string.
        """
        if not base_url:
            raise ValueError("SOLIDSTART_BASE_URL is required")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key or None
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_delays = retry_delays or [1, 2, 4]
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls, config) -> "SolidStartClient":
        """Build a client from a validated Config instance."""
        return cls(
            base_url=config.SOLIDSTART_BASE_URL,
            api_key=config.SOLIDSTART_API_KEY,
            timeout_seconds=config.REQUEST_TIMEOUT_SECONDS,
            max_retries=config.MAX_RETRIES,
        )

    async def __aenter__(self) -> "SolidStartClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP session if one was opened."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={"Accept": "application/json"},
            )
        return self._session

    def _auth_headers(self) -> Optional[dict[str, str]]:
        if not self.api_key:
            return None
        return {"Authorization": f"Bearer {self.api_key}"}

    @staticmethod
    def _error_detail(body: str, reason: Optional[str]) -> str:
        """Compact JSON error bodies; fall back to raw text or the HTTP reason."""
        try:
            parsed = json.loads(body)
        except ValueError:
            return body.strip() or (reason or "request failed")
        if isinstance(parsed, (dict, list)):
            return json.dumps(parsed, separators=(",", ":"))
        return str(parsed)

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Issue one HTTP request and return the decoded JSON body (None when empty).

        Raises:
            CollaboratorError: On network failure, timeout, non-2xx status or invalid JSON.
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url} params={params or {}}")
        session = self._get_session()

        try:
            async with session.request(method, url, params=params, headers=headers) as response:
                body = await response.text()
                if response.status >= 400:
                    detail = self._error_detail(body, response.reason)
                    logger.warning(
                        f"{method} {path} failed: {detail}",
                        extra={"status_code": response.status},
                    )
                    raise error_for_status(response.status, detail)
                if not body.strip():
                    return None
                try:
                    return json.loads(body)
                except ValueError as e:
                    raise CollaboratorError(response.status, "response body is not valid JSON") from e
        except CollaboratorError:
            raise
        except asyncio.TimeoutError as e:
            logger.warning(f"{method} {path} timed out after {self.timeout_seconds}s")
            raise CollaboratorError(None, f"request timed out after {self.timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            logger.warning(f"{method} {path} transport failure: {e}")
            raise CollaboratorError(None, str(e) or e.__class__.__name__) from e

    @staticmethod
    def _parse(model: Type[ModelT], payload: Any) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise CollaboratorError(
                None, f"malformed {model.__name__} payload ({e.error_count()} validation errors)"
            ) from e

    async def health(self) -> bool:
        """Return True when GET /health answers with a 2xx status."""
        await self._request("GET", "/health")
        return True

    async def verify_connection(self) -> None:
        """Check the API is reachable, retrying with backoff (startup only).

        Raises:
            ConnectionError: If the health check fails after all retry attempts.
        """
        logger.info(f"Testing connection to Solid Start API at {self.base_url}...")

        last_exception: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                logger.debug(f"Connection attempt {attempt + 1}/{self.max_retries}...")
                await self.health()
                logger.info("Solid Start API reachable")
                return
            except CollaboratorError as e:
                last_exception = e
                logger.debug(f"Connection attempt {attempt + 1} failed: {e}")

                if attempt < self.max_retries - 1:
                    delay = self.retry_delays[attempt] if attempt < len(self.retry_delays) else self.retry_delays[-1]
                    logger.warning(
                        f"Connection failed, retrying in {delay}s... (attempt {attempt + 1}/{self.max_retries})"
                    )
                    await asyncio.sleep(delay)

        error_msg = f"Failed to reach Solid Start API after {self.max_retries} attempts"
        logger.error(f"{error_msg}: {last_exception}")
        raise ConnectionError(error_msg)

    async def list_recipes(self, query: RecipeQuery) -> RecipePage:
        payload = await self._request("GET", "/recipes", params=query.to_params())
        return self._parse(RecipePage, payload)

    async def get_featured_recipes(self, query: FeaturedQuery) -> RecipePage:
        payload = await self._request("GET", "/recipes/featured", params=query.to_params())
        return self._parse(RecipePage, payload)

    async def get_recipe_details(self, recipe_id: str, language: Optional[str] = None) -> Recipe:
        params = {"lang": language} if language else None
        payload = await self._request("GET", f"/recipes/{quote(recipe_id, safe='')}", params=params)
        return self._parse(Recipe, payload)

    async def set_interaction(self, recipe_id: str, kind: InteractionKind, active: bool) -> None:
        """POST to create, DELETE to remove a like or bookmark.

        No local state is kept: repeating a call repeats the upstream request.
        Missing credentials are not checked here; upstream answers 401/403,
        surfaced as AuthorizationError.
        """
        if kind not in ("like", "bookmark"):
            raise ValueError(f"Unsupported interaction kind: {kind}")
        method = "POST" if active else "DELETE"
        path = f"/recipes/{quote(recipe_id, safe='')}/{kind}"
        await self._request(method, path, headers=self._auth_headers())
