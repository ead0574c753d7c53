"""
MTG Price Finder — Search Result Models

Normalized per-store results and per-card outcomes. Produced fresh for every
search and never persisted.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.config import SearchStatus


class CardResult(BaseModel):
    """One in-stock product from one store, in a store-independent shape."""

    model_config = ConfigDict(frozen=True)

    store: str = Field(..., description="Store display name")
    name: str = Field(..., description="Product title as listed by the store")
    price_min: Decimal = Field(default=Decimal("0"), ge=0)
    price_max: Decimal = Field(default=Decimal("0"), ge=0)
    availability: str = Field(..., description="Availability label")
    url: str = Field(..., description="Absolute product URL")
    image: str | None = None
    condition: str | None = None

    @model_validator(mode="after")
    def check_price_order(self) -> CardResult:
        if self.price_min > self.price_max:
            raise ValueError(
                f"price_min ({self.price_min}) exceeds price_max ({self.price_max})"
            )
        return self


class CardSearchOutcome(BaseModel):
    """
    Result of validating and searching one card name.

    results is ordered ascending by price_min; equal prices keep store order.
    """

    model_config = ConfigDict(frozen=True)

    card_name: str
    status: SearchStatus
    results: tuple[CardResult, ...] = ()

    @model_validator(mode="after")
    def check_status_matches_results(self) -> CardSearchOutcome:
        has_results = bool(self.results)
        if has_results != (self.status == SearchStatus.FOUND):
            raise ValueError(
                f"status {self.status.value} inconsistent with {len(self.results)} results"
            )
        return self


class BatchResult(BaseModel):
    """Outcomes of a batch search in input order, plus any user-facing error."""

    outcomes: list[CardSearchOutcome] = Field(default_factory=list)
    error: str | None = None

    def _count(self, status: SearchStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def found_count(self) -> int:
        return self._count(SearchStatus.FOUND)

    @property
    def not_found_count(self) -> int:
        return self._count(SearchStatus.NOT_FOUND)

    @property
    def no_inventory_count(self) -> int:
        return self._count(SearchStatus.NO_INVENTORY)
