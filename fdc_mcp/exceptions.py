"""Error types raised by the FoodData Central MCP server."""


class FoodDataError(Exception):
    """Base class for all fdc_mcp errors."""


class ConfigurationError(FoodDataError):
    """Required configuration is missing or invalid at startup."""


class DuplicateOperationError(FoodDataError):
    """An operation name was registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Operation '{name}' is already registered")


class InvalidRequestError(FoodDataError, ValueError):
    """Caller-supplied parameters failed validation.

    Raised before any upstream call is attempted.
    """


class UpstreamError(FoodDataError):
    """The FoodData Central API call failed.

    Covers network errors, non-2xx responses and bodies that are not JSON.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
