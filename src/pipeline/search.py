"""
MTG Price Finder — Card Search Orchestrator

Single card:
    validate name (Scryfall) → query every store concurrently → merge →
    stable sort by price_min → classify found / no_inventory.
    An invalid name short-circuits to not_found with zero store queries.

Batch:
    cards processed one at a time in input order with a short pause before
    every card after the first. The accumulated outcomes are published to
    the progress callback after each card, so callers see partial results
    while the batch is still running.

Failure isolation: a store failure is absorbed inside the storefront
adapter; an invalid or out-of-stock card is a normal outcome. Only an
unexpected exception in the batch loop itself stops the batch, and it is
reported as a single generic message.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, AsyncIterator, Callable, Iterable, Sequence

import httpx
import structlog

from src.config import SearchStatus, settings
from src.models.card_result import BatchResult, CardResult, CardSearchOutcome
from src.models.store import StoreDescriptor
from src.pipeline.fetcher import ResilientFetcher
from src.pipeline.scryfall import ScryfallClient
from src.pipeline.storefront import StorefrontAdapter
from src.stores import STORES
from src.utils.card_list import EMPTY_LIST_MESSAGE

logger = structlog.get_logger(__name__)

NO_CARDS_FOUND_MESSAGE = "No cards found. Please check your search terms."
SEARCH_FAILED_MESSAGE = "An error occurred while searching. Please try again."

ProgressCallback = Callable[[list[CardSearchOutcome]], Any]


class CardSearchOrchestrator:
    """
    Validates card names and searches every configured store for them.

    Opens one shared httpx.AsyncClient for Scryfall and the storefronts
    unless validator/adapter are injected.

    Usage:
        async with CardSearchOrchestrator() as orchestrator:
            outcome = await orchestrator.search_card("Lightning Bolt")
            batch = await orchestrator.search_batch(
                ["Lightning Bolt", "Counterspell"],
                on_progress=lambda outcomes: print(len(outcomes)),
            )
    """

    def __init__(
        self,
        stores: Sequence[StoreDescriptor] | None = None,
        validator: ScryfallClient | None = None,
        adapter: StorefrontAdapter | None = None,
        pacing_seconds: float | None = None,
    ):
        self._stores: tuple[StoreDescriptor, ...] = tuple(STORES if stores is None else stores)
        self._validator = validator
        self._adapter = adapter
        self._pacing_seconds = (
            settings.BATCH_PACING_SECONDS if pacing_seconds is None else pacing_seconds
        )
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> CardSearchOrchestrator:
        if self._validator is None or self._adapter is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": settings.USER_AGENT, "Accept": "application/json"},
                timeout=settings.HTTP_TIMEOUT_SECONDS,
            )
        if self._validator is None:
            self._validator = ScryfallClient(client=self._client)
        if self._adapter is None:
            self._adapter = StorefrontAdapter(ResilientFetcher(client=self._client))
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def stores(self) -> tuple[StoreDescriptor, ...]:
        return self._stores

    # -----------------------------------------------------------------------
    # Single card
    # -----------------------------------------------------------------------

    async def _fan_out(self, card_name: str) -> list[CardResult]:
        """Query all stores at once; per-store lists are joined in store order."""
        assert self._adapter is not None, "Orchestrator not initialized. Use 'async with'."

        per_store = await asyncio.gather(
            *(self._adapter.query_store(store, card_name) for store in self._stores),
            return_exceptions=True,
        )

        merged: list[CardResult] = []
        for store, results in zip(self._stores, per_store):
            if isinstance(results, BaseException):
                logger.error(
                    "search_store_task_failed",
                    store=store.key,
                    card_name=card_name,
                    error=str(results),
                    error_type=type(results).__name__,
                )
                continue
            merged.extend(results)
        return merged

    async def search_card(self, card_name: str) -> CardSearchOutcome:
        """
        Validate card_name and, if it is a real card, search every store.

        Returns:
            CardSearchOutcome with results sorted ascending by price_min.
        """
        assert self._validator is not None, "Orchestrator not initialized. Use 'async with'."

        name = card_name.strip()
        if not name or not await self._validator.validate_card_name(name):
            logger.info("search_card_not_found", card_name=name)
            return CardSearchOutcome(card_name=name, status=SearchStatus.NOT_FOUND)

        merged = await self._fan_out(name)
        # sorted() is stable, so equal prices keep store iteration order
        ordered = sorted(merged, key=lambda result: result.price_min)
        status = SearchStatus.FOUND if ordered else SearchStatus.NO_INVENTORY

        logger.info(
            "search_card_complete",
            card_name=name,
            status=status.value,
            results_count=len(ordered),
            stores_count=len(self._stores),
        )
        return CardSearchOutcome(card_name=name, status=status, results=tuple(ordered))

    # -----------------------------------------------------------------------
    # Batch
    # -----------------------------------------------------------------------

    async def iter_batch(self, card_names: Iterable[str]) -> AsyncIterator[list[CardSearchOutcome]]:
        """
        Search card_names sequentially, yielding the accumulated outcomes
        after each card.

        Blank names are skipped. Exceptions propagate to the caller.
        """
        outcomes: list[CardSearchOutcome] = []
        names = [name.strip() for name in card_names if name.strip()]

        for index, name in enumerate(names):
            if index > 0:
                await asyncio.sleep(self._pacing_seconds)

            outcomes.append(await self.search_card(name))
            yield list(outcomes)

    async def search_batch(
        self,
        card_names: Iterable[str],
        on_progress: ProgressCallback | None = None,
    ) -> BatchResult:
        """
        Search card_names one at a time, publishing progress after each card.

        Args:
            card_names: Names in the order they should be searched.
            on_progress: Called with a copy of the accumulated outcomes after
                every card. May be a plain function or a coroutine function.

        Returns:
            BatchResult with outcomes in input order. error is set when the
            input was empty, when nothing at all came back, or when the
            loop failed unexpectedly (processing stops at that point).
        """
        names = [name.strip() for name in card_names if name.strip()]
        if not names:
            return BatchResult(error=EMPTY_LIST_MESSAGE)

        logger.info("search_batch_start", cards_count=len(names))
        outcomes: list[CardSearchOutcome] = []

        try:
            async for snapshot in self.iter_batch(names):
                outcomes = snapshot
                if on_progress is not None:
                    published = on_progress(list(snapshot))
                    if inspect.isawaitable(published):
                        await published
        except Exception as e:
            logger.error(
                "search_batch_failed",
                completed=len(outcomes),
                cards_count=len(names),
                error=str(e),
                error_type=type(e).__name__,
            )
            return BatchResult(outcomes=outcomes, error=SEARCH_FAILED_MESSAGE)

        batch = BatchResult(outcomes=outcomes)
        if batch.found_count + batch.not_found_count + batch.no_inventory_count == 0:
            batch.error = NO_CARDS_FOUND_MESSAGE

        logger.info(
            "search_batch_complete",
            cards_count=len(names),
            found=batch.found_count,
            not_found=batch.not_found_count,
            no_inventory=batch.no_inventory_count,
        )
        return batch
