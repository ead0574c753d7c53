"""
MTG Price Finder — Shared pytest Fixtures & Configuration

Provides common fixtures for all test modules:
- Mock HTTP client (respx)
- Store descriptors and storefront response payloads
- Async test support via pytest-asyncio
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, AsyncGenerator

import httpx
import pytest
import respx

from src.models.store import StoreDescriptor
from src.stores import STORES


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for anyio tests."""
    return "asyncio"


# ---------------------------------------------------------------------------
# Mock Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def mock_async_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Async HTTP client with respx interceptor.

    All HTTP requests are intercepted and must be explicitly mocked.
    Prevents accidental calls to live APIs in tests.
    """
    with respx.mock:
        async with httpx.AsyncClient() as client:
            yield client


@pytest.fixture
def store() -> StoreDescriptor:
    """A standalone store that is not part of the production registry."""
    return StoreDescriptor(
        name="Test Games",
        key="testgames",
        url="https://testgames.example/",
        suggest_api_url="https://testgames.example/search/suggest.json?q={term}",
    )


@pytest.fixture
def stores() -> tuple[StoreDescriptor, ...]:
    """The production store registry."""
    return STORES


# ---------------------------------------------------------------------------
# Fixture Loaders
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def load_mock_storefront() -> dict[str, Any]:
    """Load mock predictive-search response from fixtures/mock_storefront_suggest.json."""
    fixture_path = Path(__file__).parent / "fixtures" / "mock_storefront_suggest.json"
    with open(fixture_path) as f:
        return json.load(f)
