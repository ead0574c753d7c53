"""
MTG Price Finder — Scryfall Card Database Client

Canonical card lookups against the Scryfall API:
- Exact-name validation, run once per card before any store is queried
- Name autocomplete for the search input

Neither call retries or raises. A validation miss of any kind (unknown name,
HTTP error, timeout) is reported as "not a card"; autocomplete failures
yield no suggestions.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.config import settings

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Pydantic Response Models
# ---------------------------------------------------------------------------


class AutocompleteResponse(BaseModel):
    """Response from /cards/autocomplete — a catalog of card names."""

    data: list[str] = Field(default_factory=list)
    total_values: int = Field(default=0)

    @field_validator("data", mode="before")
    @classmethod
    def drop_non_strings(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, str)]


# ---------------------------------------------------------------------------
# API Client
# ---------------------------------------------------------------------------


class ScryfallClient:
    """
    Async client for the Scryfall card database.

    Usage:
        async with ScryfallClient() as scryfall:
            if await scryfall.validate_card_name("Lightning Bolt"):
                ...
            names = await scryfall.autocomplete("Lightn")
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
    ):
        self._client = client
        self._owns_client = client is None
        self._base_url = (base_url or settings.SCRYFALL_BASE_URL).rstrip("/")

    async def __aenter__(self) -> ScryfallClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "User-Agent": settings.USER_AGENT,
                    "Accept": "application/json",
                },
                timeout=settings.HTTP_TIMEOUT_SECONDS,
            )
            self._owns_client = True
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    async def validate_card_name(self, card_name: str) -> bool:
        """
        Check that card_name is an exact, real card name.

        Returns:
            True only on a success response from /cards/named?exact=.
        """
        assert self._client is not None, "Client not initialized. Use 'async with'."

        name = card_name.strip()
        if not name:
            return False

        try:
            response = await self._client.get(
                f"{self._base_url}/cards/named",
                params={"exact": name},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "scryfall_validate_request_error",
                card_name=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if not response.is_success:
            logger.info(
                "scryfall_card_not_found",
                card_name=name,
                status_code=response.status_code,
            )
            return False

        logger.debug("scryfall_card_validated", card_name=name)
        return True

    async def autocomplete(self, prefix: str) -> list[str]:
        """
        Suggest up to 20 card names starting with prefix.

        Prefixes shorter than AUTOCOMPLETE_MIN_CHARS return [] without
        contacting Scryfall.
        """
        assert self._client is not None, "Client not initialized. Use 'async with'."

        query = prefix.strip()
        if len(query) < settings.AUTOCOMPLETE_MIN_CHARS:
            return []

        try:
            response = await self._client.get(
                f"{self._base_url}/cards/autocomplete",
                params={"q": query},
            )
            if not response.is_success:
                logger.warning(
                    "scryfall_autocomplete_http_error",
                    prefix=query,
                    status_code=response.status_code,
                )
                return []
            parsed = AutocompleteResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning(
                "scryfall_autocomplete_failed",
                prefix=query,
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

        logger.debug("scryfall_autocomplete", prefix=query, count=len(parsed.data))
        return parsed.data
