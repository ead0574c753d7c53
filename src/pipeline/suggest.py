"""
MTG Price Finder — Card Name Suggestions

Debounced autocomplete: each keystroke calls request(); only the last
request in a quiet period of AUTOCOMPLETE_DEBOUNCE_SECONDS reaches Scryfall,
and its suggestions are handed to the on_suggestions callback.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable

import structlog

from src.config import settings
from src.pipeline.scryfall import ScryfallClient
from src.utils.debounce import Debouncer

logger = structlog.get_logger(__name__)


class SuggestionService:
    """
    Usage:
        async with ScryfallClient() as scryfall:
            service = SuggestionService(scryfall, on_suggestions=show)
            service.request("Light")
            service.request("Lightn")
            await service.wait()   # show() called once with "Lightn" matches
    """

    def __init__(
        self,
        scryfall: ScryfallClient,
        on_suggestions: Callable[[list[str]], Any],
        delay: float | None = None,
    ):
        self._scryfall = scryfall
        self._on_suggestions = on_suggestions
        self._debouncer = Debouncer(
            self._fetch,
            settings.AUTOCOMPLETE_DEBOUNCE_SECONDS if delay is None else delay,
        )

    async def _fetch(self, prefix: str) -> list[str]:
        suggestions = await self._scryfall.autocomplete(prefix)
        published = self._on_suggestions(suggestions)
        if inspect.isawaitable(published):
            await published
        return suggestions

    def request(self, prefix: str) -> asyncio.Task[Any]:
        """Ask for suggestions for prefix, superseding any pending request."""
        return self._debouncer.call(prefix)

    def cancel(self) -> None:
        """Drop the pending request, e.g. once a suggestion was picked."""
        self._debouncer.cancel()

    async def wait(self) -> list[str] | None:
        """Wait for the pending request; returns its suggestions."""
        return await self._debouncer.wait()
