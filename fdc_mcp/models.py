"""Request models for the FoodData Central operations.

Every operation's input is parsed into one of these models before anything
leaves the process. The models own two things:

- validation (required fields, enums, bounds, defaults), and
- rendering to the query parameters the FDC API expects.

Field names are snake_case in Python and camelCase on the wire, matching the
upstream API (``pageSize``, ``dataType`` ...).
"""

from typing import Annotated, Any, ClassVar, Literal
from urllib.parse import parse_qs

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .exceptions import InvalidRequestError

# =============================================================================
# Upstream enums and bounds
# =============================================================================

DataType = Literal["Branded", "Foundation", "Survey (FNDDS)", "SR Legacy"]
SortBy = Literal[
    "dataType.keyword",
    "lowercaseDescription.keyword",
    "fdcId",
    "publishedDate",
]
SortOrder = Literal["asc", "desc"]
FoodFormat = Literal["abridged", "full"]
TradeChannel = Literal[
    "CHILD_NUTRITION_FOOD_PROGRAMS",
    "DRUG",
    "FOOD_SERVICE",
    "GROCERY",
    "MASS_MERCHANDISING",
    "MILITARY",
    "ONLINE",
    "VENDING",
]

DEFAULT_PAGE_SIZE = 50
DEFAULT_PAGE_NUMBER = 1
MAX_PAGE_SIZE = 200
MAX_FDC_IDS = 20
MAX_NUTRIENTS = 25

PageSize = Annotated[int, Field(ge=1, le=MAX_PAGE_SIZE)]
PageNumber = Annotated[int, Field(ge=1)]
DataTypes = Annotated[list[DataType], Field(min_length=1, max_length=4)]
TradeChannels = Annotated[list[TradeChannel], Field(min_length=1, max_length=3)]
NutrientNumbers = Annotated[list[int], Field(min_length=1, max_length=MAX_NUTRIENTS)]
FdcId = Annotated[str, Field(min_length=1)]
FdcIds = Annotated[list[FdcId], Field(min_length=1, max_length=MAX_FDC_IDS)]
IsoDate = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$")]
SearchQuery = Annotated[str, Field(min_length=1)]


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten pydantic errors into ``field: message; ...``."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


class FdcRequest(BaseModel):
    """Base for all operation requests."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # Wire names sent as a single comma-delimited value (style=form, explode=false)
    delimited_params: ClassVar[frozenset[str]] = frozenset({"dataType"})
    # Field names that go into the URL path instead of the query string
    path_fields: ClassVar[frozenset[str]] = frozenset()
    # Wire names that accept several values in a query string
    list_params: ClassVar[frozenset[str]] = frozenset()

    def to_params(self) -> dict[str, Any]:
        """Render as upstream query parameters.

        Unset optional fields are left out entirely, never sent empty.
        """
        params: dict[str, Any] = {}
        dumped = self.model_dump(by_alias=True, exclude=set(self.path_fields))
        for key, value in dumped.items():
            if value is None or value == "" or value == []:
                continue
            if key in self.delimited_params and isinstance(value, list):
                value = ",".join(value)
            params[key] = value
        return params

    @classmethod
    def from_query(cls, query: str):
        """Parse a resource query string into a validated request.

        List parameters accept a comma-delimited value, repeated keys, or
        both. Blank values count as absent.

        Raises:
            InvalidRequestError: a required parameter is missing or a value
                is out of range.
        """
        raw = parse_qs(query or "")
        data: dict[str, Any] = {}
        for key, values in raw.items():
            if key in cls.list_params:
                items = [
                    item.strip()
                    for value in values
                    for item in value.split(",")
                    if item.strip()
                ]
                if items:
                    data[key] = items
            else:
                data[key] = values[0]

        for name, field in cls.model_fields.items():
            wire_name = field.alias or name
            if field.is_required() and wire_name not in data:
                raise InvalidRequestError(f"{wire_name} parameter is required")

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidRequestError(describe_validation_error(exc)) from exc


# =============================================================================
# Resource requests
# =============================================================================


class FoodDetailsRequest(FdcRequest):
    """One food by FDC ID (``GET /food/{fdcId}``)."""

    path_fields: ClassVar[frozenset[str]] = frozenset({"fdc_id"})
    list_params: ClassVar[frozenset[str]] = frozenset({"nutrients"})

    fdc_id: FdcId
    food_format: FoodFormat = Field(default="full", alias="format")
    nutrients: NutrientNumbers | None = None


class FoodsRequest(FdcRequest):
    """Several foods by FDC ID (``GET /foods``)."""

    list_params: ClassVar[frozenset[str]] = frozenset({"fdcIds", "nutrients"})

    fdc_ids: FdcIds
    food_format: FoodFormat = Field(default="full", alias="format")
    nutrients: NutrientNumbers | None = None


class FoodListRequest(FdcRequest):
    """A page of foods in abridged format (``GET /foods/list``)."""

    list_params: ClassVar[frozenset[str]] = frozenset({"dataType"})

    data_type: DataTypes | None = None
    page_size: PageSize = DEFAULT_PAGE_SIZE
    page_number: PageNumber = DEFAULT_PAGE_NUMBER
    sort_by: SortBy | None = None
    sort_order: SortOrder | None = None


# =============================================================================
# Tool request
# =============================================================================


class SearchFoodsRequest(FdcRequest):
    """Keyword search (``GET /foods/search``)."""

    query: SearchQuery
    data_type: DataTypes | None = None
    page_size: PageSize = DEFAULT_PAGE_SIZE
    page_number: PageNumber = DEFAULT_PAGE_NUMBER
    sort_by: SortBy | None = None
    sort_order: SortOrder | None = None
    brand_owner: str | None = None
    trade_channel: TradeChannels | None = None
    start_date: IsoDate | None = None
    end_date: IsoDate | None = None
