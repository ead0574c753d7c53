"""
MTG Price Finder — Store Descriptor Model

Static configuration for one storefront. Loaded once at import from
src/stores.py and never mutated.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

TERM_PLACEHOLDER = "{term}"


class StoreDescriptor(BaseModel):
    """A storefront exposing a Shopify-style predictive search endpoint."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name (e.g., 'Mana Lounge')")
    key: str = Field(..., description="Unique store key")
    url: str = Field(..., description="Canonical storefront base URL")
    suggest_api_url: str = Field(
        ..., description="Search endpoint template containing a {term} placeholder"
    )

    @field_validator("suggest_api_url")
    @classmethod
    def require_term_placeholder(cls, v: str) -> str:
        if TERM_PLACEHOLDER not in v:
            raise ValueError(f"suggest_api_url must contain {TERM_PLACEHOLDER}")
        return v

    @property
    def base_url(self) -> str:
        """Storefront URL without its trailing slash, ready for path joins."""
        return self.url.rstrip("/")
