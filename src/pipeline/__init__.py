from src.pipeline.fetcher import FetchError, FetchResult, ResilientFetcher
from src.pipeline.scryfall import ScryfallClient
from src.pipeline.search import CardSearchOrchestrator
from src.pipeline.storefront import StorefrontAdapter
from src.pipeline.suggest import SuggestionService

__all__ = [
    "CardSearchOrchestrator",
    "FetchError",
    "FetchResult",
    "ResilientFetcher",
    "ScryfallClient",
    "StorefrontAdapter",
    "SuggestionService",
]
