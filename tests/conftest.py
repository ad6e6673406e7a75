"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all tests. Upstream FoodData Central
calls never leave the process: they are answered by ``FakeUpstream`` through
an ``httpx.MockTransport``.
"""

import os
import sys
from pathlib import Path

import httpx
import pytest

# Add repo root to path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

# Set test environment
os.environ.setdefault("USDA_API_KEY", "test-key")

from fdc_mcp.client import FdcClient  # noqa: E402
from fdc_mcp.server import create_server  # noqa: E402

TEST_API_KEY = "test-key"
TEST_BASE_URL = "https://fdc.test/fdc/v1"


# =============================================================================
# Fake upstream
# =============================================================================


class FakeUpstream:
    """Records outbound requests and answers with a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: object = {}
        self.content: bytes | None = None
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no upstream call was made"
        return self.requests[-1]

    @property
    def last_path(self) -> str:
        return self.last_request.url.path

    @property
    def last_params(self) -> dict[str, list[str]]:
        """Query parameters of the last call, every key mapped to its values."""
        params = self.last_request.url.params
        return {key: params.get_list(key) for key in params.keys()}


@pytest.fixture
def upstream():
    """Fake FoodData Central API."""
    return FakeUpstream()


@pytest.fixture
def fdc_client(upstream):
    """FDC client wired to the fake upstream."""
    return FdcClient(
        api_key=TEST_API_KEY,
        base_url=TEST_BASE_URL,
        transport=httpx.MockTransport(upstream.handler),
    )


@pytest.fixture
def server(fdc_client):
    """Fully registered MCP server backed by the fake upstream."""
    return create_server(fdc_client)


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_food():
    """Abridged FDC food record (includes non-ASCII text)."""
    return {
        "fdcId": 2346401,
        "description": "Crème fraîche",
        "dataType": "Foundation",
        "publicationDate": "2022-10-28",
        "foodNutrients": [
            {"number": "203", "name": "Protein", "amount": 2.4, "unitName": "G"},
            {"number": "204", "name": "Total lipid (fat)", "amount": 39.5, "unitName": "G"},
        ],
        "ndbNumber": None,
    }


@pytest.fixture
def sample_search_response(sample_food):
    """Search response as returned by /foods/search."""
    return {
        "totalHits": 1,
        "currentPage": 1,
        "totalPages": 1,
        "foodSearchCriteria": {"query": "creme fraiche", "pageSize": 50},
        "foods": [sample_food],
    }
