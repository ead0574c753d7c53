"""
MTG Price Finder — Storefront Query Adapter

Queries one store's predictive-search endpoint for a card name and
normalizes the response into CardResult records.

The storefronts reject cross-origin calls, so every request goes through a
CORS relay that takes the real URL as its `url` query parameter.

Response shape (Shopify predictive search):
    {"resources": {"results": {"products": [
        {"available": true, "title": "...", "price_min": "1.00",
         "price_max": "1.50", "url": "/products/...",
         "image": "...", "featured_image": {"url": "..."}}
    ]}}}

A failing store never aborts a search: every exception inside query_store
is logged and converted to an empty result list.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import quote

import structlog
from pydantic import BaseModel, Field, field_validator

from src.config import settings
from src.models.card_result import CardResult
from src.models.store import TERM_PLACEHOLDER, StoreDescriptor
from src.pipeline.fetcher import ResilientFetcher

logger = structlog.get_logger(__name__)

_ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Pydantic Response Models
# ---------------------------------------------------------------------------


class FeaturedImage(BaseModel):
    url: str | None = None


class StorefrontProduct(BaseModel):
    """A single product entry from a predictive-search response."""

    available: bool = Field(default=False, description="True only for a literal JSON true")
    title: str = Field(default="")
    price_min: Decimal = Field(default=_ZERO)
    price_max: Decimal = Field(default=_ZERO)
    url: str | None = Field(default=None, description="Path relative to the store root")
    image: str | None = None
    featured_image: FeaturedImage | None = None

    @field_validator("available", mode="before")
    @classmethod
    def strict_true(cls, v: Any) -> bool:
        return v is True

    @field_validator("title", mode="before")
    @classmethod
    def coerce_title(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("price_min", "price_max", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> Decimal:
        """Missing, blank or unparseable prices count as 0."""
        if v is None or v == "" or isinstance(v, bool):
            return _ZERO
        try:
            price = Decimal(str(v).strip())
        except (InvalidOperation, ValueError):
            return _ZERO
        if not price.is_finite() or price < _ZERO:
            return _ZERO
        return price

    @field_validator("url", "image", mode="before")
    @classmethod
    def non_empty_string(cls, v: Any) -> str | None:
        return v if isinstance(v, str) and v else None

    @field_validator("featured_image", mode="before")
    @classmethod
    def featured_image_dict(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    @property
    def image_url(self) -> str | None:
        if self.image:
            return self.image
        if self.featured_image and self.featured_image.url:
            return self.featured_image.url
        return None


# ---------------------------------------------------------------------------
# URL building & response parsing
# ---------------------------------------------------------------------------


def build_search_url(store: StoreDescriptor, card_name: str) -> str:
    """Substitute the URL-encoded, trimmed card name into the store template."""
    return store.suggest_api_url.replace(TERM_PLACEHOLDER, quote(card_name.strip(), safe=""))


def build_relay_url(target_url: str, relay_url: str | None = None) -> str:
    """Wrap target_url in the CORS relay."""
    relay = relay_url or settings.CORS_RELAY_URL
    return f"{relay}?url={quote(target_url, safe='')}"


def extract_products(payload: Any) -> list[dict[str, Any]]:
    """
    Pull resources.results.products out of a response body.

    Any missing or wrongly-typed level yields [].
    """
    node = payload
    for key in ("resources", "results", "products"):
        if not isinstance(node, dict):
            return []
        node = node.get(key)
    if not isinstance(node, list):
        return []
    return [item for item in node if isinstance(item, dict)]


def resolve_product_url(store: StoreDescriptor, path: str | None) -> str:
    if not path:
        return store.url
    return f"{store.base_url}{path}"


def normalize_products(
    store: StoreDescriptor,
    card_name: str,
    raw_products: list[dict[str, Any]],
) -> list[CardResult]:
    """
    Filter to in-stock products whose title contains card_name
    (case-insensitive) and map them to CardResult.

    Stores return loosely related matches for a term, hence the title check.
    """
    needle = card_name.strip().lower()
    results: list[CardResult] = []

    for raw in raw_products:
        product = StorefrontProduct.model_validate(raw)
        if not product.available:
            continue
        if needle not in product.title.lower():
            continue

        results.append(
            CardResult(
                store=store.name,
                name=product.title or settings.UNKNOWN_TITLE_LABEL,
                price_min=product.price_min,
                # price_max may be absent while price_min is set
                price_max=max(product.price_min, product.price_max),
                availability=settings.DEFAULT_AVAILABILITY_LABEL,
                url=resolve_product_url(store, product.url),
                image=product.image_url,
                condition=settings.DEFAULT_CONDITION_LABEL,
            )
        )

    return results


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class StorefrontAdapter:
    """
    Runs one card search against one store through the resilient fetcher.

    Usage:
        async with ResilientFetcher() as fetcher:
            adapter = StorefrontAdapter(fetcher)
            results = await adapter.query_store(store, "Lightning Bolt")
    """

    def __init__(
        self,
        fetcher: ResilientFetcher,
        relay_url: str | None = None,
        max_attempts: int | None = None,
    ):
        self._fetcher = fetcher
        self._relay_url = relay_url or settings.CORS_RELAY_URL
        self._max_attempts = (
            settings.FETCH_MAX_ATTEMPTS if max_attempts is None else max_attempts
        )

    async def query_store(self, store: StoreDescriptor, card_name: str) -> list[CardResult]:
        """
        Search store for card_name.

        Returns:
            Normalized in-stock results in the order the store listed them,
            or [] if the store failed in any way.
        """
        try:
            search_url = build_search_url(store, card_name)
            result = await self._fetcher.fetch_json(
                build_relay_url(search_url, self._relay_url),
                max_attempts=self._max_attempts,
            )
            payload = result.unwrap()

            raw_products = extract_products(payload)
            results = normalize_products(store, card_name, raw_products)

        except Exception as e:
            logger.warning(
                "store_query_failed",
                store=store.key,
                card_name=card_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

        logger.info(
            "store_query_complete",
            store=store.key,
            card_name=card_name,
            products_count=len(raw_products),
            results_count=len(results),
        )
        return results
