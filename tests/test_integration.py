"""
MTG Price Finder — End-to-End Integration Tests

Runs the real orchestrator, Scryfall client, storefront adapter and
resilient fetcher against respx-mocked HTTP:

  card names → Scryfall /cards/named → CORS relay → store suggest.json →
  normalized, sorted CardSearchOutcome

Each store is recognized by the host of the URL carried in the relay's
`url` parameter.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable
from unittest.mock import AsyncMock, patch
from urllib.parse import urlsplit

import httpx
import pytest
import respx

from src.config import SearchStatus, settings
from src.models.card_result import CardSearchOutcome
from src.pipeline.search import CardSearchOrchestrator
from src.stores import get_store
from src.utils.formatting import render_batch
from tests.payloads import product, storefront_payload

KNOWN_CARDS = {"Lightning Bolt", "Counterspell"}


def scryfall_named(request: httpx.Request) -> httpx.Response:
    if request.url.params.get("exact") in KNOWN_CARDS:
        return httpx.Response(200, json={"object": "card", "name": request.url.params["exact"]})
    return httpx.Response(404, json={"object": "error", "code": "not_found"})


def relay_by_host(responses: dict[str, Any]) -> Callable[[httpx.Request], httpx.Response]:
    """Answer relay requests with responses[host of the relayed store URL]."""

    def handler(request: httpx.Request) -> httpx.Response:
        host = urlsplit(request.url.params["url"]).hostname
        response = responses.get(host, storefront_payload())
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    return handler


@pytest.fixture
def mock_http():
    with respx.mock(assert_all_called=False) as mock:
        mock.get(f"{settings.SCRYFALL_BASE_URL}/cards/named").mock(side_effect=scryfall_named)
        yield mock


# ---------------------------------------------------------------------------
# Single card
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_lightning_bolt_found_in_two_stores(mock_http) -> None:
    """Two stores stock it at $2.00 and $1.00, one has none → cheapest first."""
    mana_lounge = get_store("manalounge")
    lamood = get_store("lamoodcomics")

    relay = mock_http.get(url__startswith=settings.CORS_RELAY_URL).mock(
        side_effect=relay_by_host(
            {
                "www.manalounge.ca": storefront_payload(product("Lightning Bolt", "2.00")),
                "lamoodcomics.ca": storefront_payload(product("Lightning Bolt", "1.00")),
                "playerscandc.com": storefront_payload(),
            }
        )
    )

    async with CardSearchOrchestrator() as orchestrator:
        result = await orchestrator.search_card("Lightning Bolt")

    assert result.status == SearchStatus.FOUND
    assert [(r.store, r.price_min) for r in result.results] == [
        (lamood.name, Decimal("1.00")),
        (mana_lounge.name, Decimal("2.00")),
    ]
    assert result.results[0].url == "https://lamoodcomics.ca/products/lightning-bolt"
    assert relay.call_count == 3


@pytest.mark.asyncio
async def test_not_a_real_card(mock_http) -> None:
    """A validation miss returns not_found and never touches the relay."""
    relay = mock_http.get(url__startswith=settings.CORS_RELAY_URL).mock(
        return_value=httpx.Response(200, json=storefront_payload())
    )

    async with CardSearchOrchestrator() as orchestrator:
        result = await orchestrator.search_card("Not A Real Card")

    assert result == CardSearchOutcome(card_name="Not A Real Card", status=SearchStatus.NOT_FOUND)
    assert relay.call_count == 0


@pytest.mark.asyncio
async def test_valid_card_without_stock(mock_http) -> None:
    """Only unavailable or unrelated products → no_inventory."""
    mock_http.get(url__startswith=settings.CORS_RELAY_URL).mock(
        return_value=httpx.Response(
            200,
            json=storefront_payload(
                {"available": False, "title": "Counterspell", "price_min": "1.00"},
                product("Mana Leak", "0.50"),
            ),
        )
    )

    async with CardSearchOrchestrator() as orchestrator:
        result = await orchestrator.search_card("Counterspell")

    assert result.status == SearchStatus.NO_INVENTORY
    assert result.results == ()


@pytest.mark.asyncio
async def test_failing_store_does_not_abort_search(mock_http) -> None:
    """One store failing every retry is absorbed; the others still report."""
    relay = mock_http.get(url__startswith=settings.CORS_RELAY_URL).mock(
        side_effect=relay_by_host(
            {
                "playerscandc.com": httpx.Response(500),
                "www.manalounge.ca": storefront_payload(product("Lightning Bolt", "1.25")),
                "lamoodcomics.ca": httpx.Response(200, json={"unexpected": "shape"}),
            }
        )
    )

    with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        async with CardSearchOrchestrator() as orchestrator:
            result = await orchestrator.search_card("Lightning Bolt")

    assert result.status == SearchStatus.FOUND
    assert [r.store for r in result.results] == ["Mana Lounge"]
    # Players C&C: FETCH_MAX_ATTEMPTS calls; the other two: one each
    assert relay.call_count == settings.FETCH_MAX_ATTEMPTS + 2
    assert mock_sleep.await_count == settings.FETCH_MAX_ATTEMPTS - 1


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_batch_end_to_end(mock_http) -> None:
    mock_http.get(url__startswith=settings.CORS_RELAY_URL).mock(
        side_effect=relay_by_host(
            {"playerscandc.com": storefront_payload(product("Lightning Bolt", "0.99"))}
        )
    )
    progress: list[int] = []

    with patch("asyncio.sleep", new_callable=AsyncMock):
        async with CardSearchOrchestrator() as orchestrator:
            batch = await orchestrator.search_batch(
                ["Lightning Bolt", "Not A Real Card", "Counterspell"],
                on_progress=lambda outcomes: progress.append(len(outcomes)),
            )

    assert progress == [1, 2, 3]
    assert [o.status for o in batch.outcomes] == [
        SearchStatus.FOUND,
        SearchStatus.NOT_FOUND,
        SearchStatus.NO_INVENTORY,
    ]
    assert batch.error is None

    report = render_batch(batch)
    assert "Lightning Bolt: Found in stores (1 results)" in report
    assert "Not A Real Card: Card not recognized" in report
    assert "Counterspell: No inventory available" in report
    assert "$0.99" in report
