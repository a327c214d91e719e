"""Spoonacular API client for ingredient nutrition data.

Used by the enrichment stage: free-text ingredient lines are parsed into
Spoonacular ingredient ids, then each ``(id, amount, unit)`` is resolved to
its nutrient breakdown. Caching is left to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

import httpx
import orjson
from pydantic import ValidationError

from meal_generator.clients.exceptions import EnrichmentLookupError
from meal_generator.observability.logging import get_logger
from meal_generator.schemas.enrichment import IngredientInformation, ParsedIngredient


if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)


class SpoonacularClient:
    """Client for the Spoonacular food API.

    The API key travels as the ``apiKey`` query parameter on every call.
    """

    DEFAULT_BASE_URL: Final[str] = "https://api.spoonacular.com"
    PARSE_ENDPOINT: Final[str] = "/recipes/parseIngredients"
    INFORMATION_ENDPOINT: Final[str] = "/food/ingredients/{id}/information"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Spoonacular API key.
            base_url: API base URL.
            timeout: HTTP request timeout in seconds.
            http_client: HTTP client for API requests.
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http_client
        self._owns_http_client = http_client is None

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def initialize(self) -> None:
        """Initialize the HTTP client if not provided."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        logger.info("SpoonacularClient initialized", timeout=self.timeout)

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.info("SpoonacularClient shutdown")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body."""
        if self._http is None:
            await self.initialize()

        assert self._http is not None

        url = f"{self.base_url}{path}"
        query = {"apiKey": self.api_key, **(params or {})}

        try:
            response = await self._http.request(method, url, params=query, data=data)
            response.raise_for_status()
            return orjson.loads(response.content)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Spoonacular request failed",
                path=path,
                status_code=e.response.status_code,
                body=e.response.text[:200],
            )
            msg = f"Spoonacular returned {e.response.status_code}"
            raise EnrichmentLookupError(msg, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.warning("Spoonacular request error", path=path, error=str(e))
            msg = f"Cannot reach Spoonacular: {e}"
            raise EnrichmentLookupError(msg) from e
        except orjson.JSONDecodeError as e:
            msg = "Spoonacular returned a non-JSON body"
            raise EnrichmentLookupError(msg) from e

    async def parse_ingredients(
        self,
        lines: Sequence[str],
    ) -> list[ParsedIngredient | None]:
        """Parse free-text ingredient lines into lookup keys.

        Args:
            lines: Ingredient lines such as ``"1 cup brown rice"``.

        Returns:
            One entry per item the service returned; unusable items are None.

        Raises:
            EnrichmentLookupError: If the call fails or the body is not a list.
        """
        body = await self._request(
            "POST",
            self.PARSE_ENDPOINT,
            data={"ingredientList": "\n".join(lines)},
        )
        if not isinstance(body, list):
            msg = "Spoonacular parse response is not a list"
            raise EnrichmentLookupError(msg)

        parsed: list[ParsedIngredient | None] = []
        for item in body:
            if not isinstance(item, dict):
                parsed.append(None)
                continue
            try:
                parsed.append(ParsedIngredient.model_validate(item))
            except ValidationError:
                logger.debug("Skipping unparsable ingredient entry", item=str(item)[:200])
                parsed.append(None)
        return parsed

    async def resolve(
        self,
        ingredient_id: int | str,
        amount: float,
        unit: str,
    ) -> IngredientInformation:
        """Fetch nutrition facts for ``amount`` ``unit`` of one ingredient.

        Raises:
            EnrichmentLookupError: If the call fails or the body is malformed.
        """
        body = await self._request(
            "GET",
            self.INFORMATION_ENDPOINT.format(id=ingredient_id),
            params={"amount": f"{amount:g}", "unit": unit or "unit"},
        )
        if not isinstance(body, dict):
            msg = "Spoonacular information response is not an object"
            raise EnrichmentLookupError(msg)

        try:
            return IngredientInformation.model_validate(body)
        except ValidationError as e:
            msg = f"Malformed Spoonacular information response: {e}"
            raise EnrichmentLookupError(msg) from e
