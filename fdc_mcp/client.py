"""USDA FoodData Central API client."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .exceptions import UpstreamError
from .models import FoodDetailsRequest, FoodListRequest, FoodsRequest, SearchFoodsRequest

logger = logging.getLogger(__name__)


class FdcClient:
    """Client for the FoodData Central REST API.

    Every call opens its own short-lived HTTP session; nothing is pooled or
    cached between invocations. Response bodies are returned exactly as
    decoded from JSON.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make GET request to FoodData Central.

        Raises:
            UpstreamError: network failure, non-2xx status or a body that
                is not valid JSON.
        """
        query = {"api_key": self.api_key, **(params or {})}
        logger.debug("GET %s params=%s", path, sorted(params or {}))

        async with httpx.AsyncClient(
            base_url=self.base_url, transport=self._transport
        ) as client:
            try:
                response = await client.get(path, params=query)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                raise UpstreamError(
                    f"FoodData Central request to {path} failed with status {status}",
                    status_code=status,
                ) from exc
            except httpx.HTTPError as exc:
                raise UpstreamError(
                    f"FoodData Central request to {path} failed: {exc}"
                ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"FoodData Central returned an invalid JSON body for {path}",
                status_code=response.status_code,
            ) from exc

    # === Foods ===

    async def get_food(self, request: FoodDetailsRequest) -> dict:
        """Fetch details for one food by FDC ID."""
        path = f"/food/{quote(request.fdc_id, safe='')}"
        return await self.get(path, params=request.to_params())

    async def get_foods(self, request: FoodsRequest) -> list:
        """Fetch details for up to 20 foods by FDC ID."""
        return await self.get("/foods", params=request.to_params())

    async def list_foods(self, request: FoodListRequest) -> list:
        """Fetch a page of foods in abridged format."""
        return await self.get("/foods/list", params=request.to_params())

    # === Search ===

    async def search_foods(self, request: SearchFoodsRequest) -> dict:
        """Search foods by keyword."""
        return await self.get("/foods/search", params=request.to_params())
