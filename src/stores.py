"""
MTG Price Finder — Store Registry

Fixed set of storefronts searched for every card. All three run Shopify and
share the predictive-search endpoint shape.
"""

from __future__ import annotations

from src.models.store import StoreDescriptor

_SUGGEST_QUERY = (
    "search/suggest.json?q={term}"
    "&resources[type]=product&resources[limit]=10&section_id=predictive-search"
)

STORES: tuple[StoreDescriptor, ...] = (
    StoreDescriptor(
        name="Players C&C",
        key="playerscandc",
        url="https://playerscandc.com/",
        suggest_api_url=f"https://playerscandc.com/{_SUGGEST_QUERY}",
    ),
    StoreDescriptor(
        name="Mana Lounge",
        key="manalounge",
        url="https://www.manalounge.ca/",
        suggest_api_url=f"https://www.manalounge.ca/{_SUGGEST_QUERY}",
    ),
    StoreDescriptor(
        name="Lamood Comics",
        key="lamoodcomics",
        url="https://lamoodcomics.ca/",
        suggest_api_url=f"https://lamoodcomics.ca/{_SUGGEST_QUERY}",
    ),
)


def get_store(key: str) -> StoreDescriptor:
    """
    Look up a store by its unique key.

    Raises:
        KeyError: If no store is registered under key.
    """
    for store in STORES:
        if store.key == key:
            return store
    raise KeyError(f"Unknown store key: {key}")
