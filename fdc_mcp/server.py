"""MCP Server for USDA FoodData Central.

Exposes FoodData Central lookups to MCP clients:

- ``food://details?fdcId=...``  one food by FDC ID
- ``food://foods?fdcIds=...``   up to 20 foods by FDC ID
- ``food://list?...``           paged food listing
- ``search-foods`` tool         keyword search
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Annotated, Any
from urllib.parse import urlsplit

from mcp.server.fastmcp import FastMCP
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import CallToolResult
from mcp.types import Resource as MCPResource
from pydantic import AnyUrl, Field

from .client import FdcClient
from .exceptions import DuplicateOperationError, FoodDataError, UpstreamError
from .models import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    DataTypes,
    FoodDetailsRequest,
    FoodListRequest,
    FoodsRequest,
    IsoDate,
    PageNumber,
    PageSize,
    SearchFoodsRequest,
    SearchQuery,
    SortBy,
    SortOrder,
    TradeChannels,
)
from .responses import JSON_MIME_TYPE, to_json_text, tool_error, tool_success

logger = logging.getLogger(__name__)

SERVER_NAME = "Food Data Central"

INSTRUCTIONS = """Access USDA's FoodData Central database.

Resources (parameters go in the query string):
- food://details?fdcId=<id>[&format=full|abridged][&nutrients=203,204]
- food://foods?fdcIds=<id>,<id>[&format=...][&nutrients=...]   (up to 20 ids)
- food://list[?dataType=Foundation,SR Legacy][&pageSize=50][&pageNumber=1][&sortBy=...][&sortOrder=asc|desc]

Tool:
- search-foods: keyword search with optional data type, brand owner,
  trade channel, publication date and paging filters.

Responses are the raw FoodData Central JSON."""

# Receives the query string of the requested address
ResourceHandler = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class FoodResource:
    """A query-string addressed resource."""

    name: str
    address: str
    description: str
    handler: ResourceHandler


class FoodDataCentralMCP(FastMCP):
    """FastMCP server that routes ``food://`` addresses by scheme and host.

    The SDK's resource templates match path segments only, so resources with
    query-string parameters are dispatched here instead.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._food_resources: dict[str, FoodResource] = {}
        self._operation_names: set[str] = set()

    def _claim_name(self, name: str) -> None:
        if name in self._operation_names:
            raise DuplicateOperationError(name)
        self._operation_names.add(name)

    def food_resource(
        self, name: str, address: str, description: str
    ) -> Callable[[ResourceHandler], ResourceHandler]:
        """Register a handler for a query-string addressed resource."""

        def decorator(handler: ResourceHandler) -> ResourceHandler:
            key = _base_address(address)
            if key in self._food_resources:
                raise DuplicateOperationError(address)
            self._claim_name(name)
            self._food_resources[key] = FoodResource(name, key, description, handler)
            return handler

        return decorator

    def operation_tool(self, name: str, description: str) -> Callable:
        """Register a tool, refusing duplicate operation names."""
        self._claim_name(name)
        return self.tool(name=name, description=description)

    async def list_resources(self) -> list[MCPResource]:
        resources = list(await super().list_resources())
        resources.extend(
            MCPResource(
                uri=AnyUrl(resource.address),
                name=resource.name,
                description=resource.description,
                mimeType=JSON_MIME_TYPE,
            )
            for resource in self._food_resources.values()
        )
        return resources

    async def read_resource(self, uri: AnyUrl | str) -> Iterable[ReadResourceContents]:
        parts = urlsplit(str(uri))
        resource = self._food_resources.get(_base_address(str(uri)))
        if resource is None:
            return await super().read_resource(uri)

        logger.info("Reading resource %s", resource.name)
        try:
            payload = await resource.handler(parts.query)
        except FoodDataError as exc:
            logger.error("Error reading %s: %s", resource.name, exc)
            raise

        return [ReadResourceContents(content=to_json_text(payload), mime_type=JSON_MIME_TYPE)]


def _base_address(uri: str) -> str:
    """``food://details/?fdcId=1`` -> ``food://details``."""
    parts = urlsplit(uri)
    return f"{parts.scheme}://{parts.netloc}{parts.path.rstrip('/')}"


# ============================================================================
# OPERATION HANDLERS
# ============================================================================


async def read_food_details(client: FdcClient, query: str) -> Any:
    """Fetch one food; raises on missing ``fdcId`` or upstream failure."""
    request = FoodDetailsRequest.from_query(query)
    return await client.get_food(request)


async def read_foods(client: FdcClient, query: str) -> Any:
    """Fetch several foods; raises on missing ``fdcIds`` or upstream failure."""
    request = FoodsRequest.from_query(query)
    return await client.get_foods(request)


async def read_food_list(client: FdcClient, query: str) -> Any:
    request = FoodListRequest.from_query(query)
    return await client.list_foods(request)


async def run_search(client: FdcClient, request: SearchFoodsRequest) -> CallToolResult:
    """Search FoodData Central, reporting upstream failures inline.

    Returns:
        The search body as pretty-printed JSON, or an error-flagged result
        when the upstream call fails.
    """
    logger.info("Searching foods for %r", request.query)
    try:
        payload = await client.search_foods(request)
    except UpstreamError as exc:
        logger.error("Error searching foods: %s", exc)
        return tool_error(f"Error searching foods: {exc}")
    return tool_success(payload)


# ============================================================================
# REGISTRATION
# ============================================================================


def create_server(client: FdcClient, log_level: str = "INFO") -> FoodDataCentralMCP:
    """Build the server and register all operations on it."""
    server = FoodDataCentralMCP(
        SERVER_NAME, instructions=INSTRUCTIONS, log_level=log_level.upper()
    )

    @server.food_resource(
        "food-details",
        "food://details",
        "Details for one food by FDC ID. Query: fdcId (required), format, nutrients.",
    )
    async def food_details(query: str) -> Any:
        return await read_food_details(client, query)

    @server.food_resource(
        "foods",
        "food://foods",
        "Details for up to 20 foods. Query: fdcIds (required), format, nutrients.",
    )
    async def foods(query: str) -> Any:
        return await read_foods(client, query)

    @server.food_resource(
        "food-list",
        "food://list",
        "Paged list of foods in abridged format. Query: dataType, pageSize, "
        "pageNumber, sortBy, sortOrder.",
    )
    async def food_list(query: str) -> Any:
        return await read_food_list(client, query)

    @server.operation_tool(
        "search-foods",
        "Search USDA FoodData Central for foods matching keywords.",
    )
    async def search_foods(
        query: Annotated[SearchQuery, Field(description="Search terms to find foods")],
        dataType: Annotated[
            DataTypes | None,
            Field(description="Filter on a specific data type; specify one or more values"),
        ] = None,
        pageSize: Annotated[
            PageSize,
            Field(description="Maximum number of results to return for the current page"),
        ] = DEFAULT_PAGE_SIZE,
        pageNumber: Annotated[
            PageNumber, Field(description="Page number to retrieve")
        ] = DEFAULT_PAGE_NUMBER,
        sortBy: Annotated[
            SortBy | None,
            Field(description="Specify one of the possible values to sort by that field"),
        ] = None,
        sortOrder: Annotated[
            SortOrder | None,
            Field(description="The sort direction for the results; only applies with sortBy"),
        ] = None,
        brandOwner: Annotated[
            str | None,
            Field(description="Filter results on the brand owner (Branded Foods only)"),
        ] = None,
        tradeChannel: Annotated[
            TradeChannels | None,
            Field(description="Filter foods containing any of the specified trade channels"),
        ] = None,
        startDate: Annotated[
            IsoDate | None,
            Field(description="Filter foods published on or after this date (YYYY-MM-DD)"),
        ] = None,
        endDate: Annotated[
            IsoDate | None,
            Field(description="Filter foods published on or before this date (YYYY-MM-DD)"),
        ] = None,
    ) -> CallToolResult:
        """Search USDA FoodData Central for foods matching keywords.

        Returns:
            The raw search response as JSON text
        """
        request = SearchFoodsRequest(
            query=query,
            data_type=dataType,
            page_size=pageSize,
            page_number=pageNumber,
            sort_by=sortBy,
            sort_order=sortOrder,
            brand_owner=brandOwner,
            trade_channel=tradeChannel,
            start_date=startDate,
            end_date=endDate,
        )
        return await run_search(client, request)

    return server
