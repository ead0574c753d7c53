"""
MTG Price Finder — Configuration & Constants

Every endpoint, retry limit, pacing delay and display label lives here.
No hardcoded values in search logic.

Usage:
    from src.config import settings
"""

from __future__ import annotations

from enum import Enum

from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SearchStatus(str, Enum):
    """Outcome classification for a single card search."""
    FOUND = "found"                 # at least one store has stock
    NOT_FOUND = "not_found"         # name failed card-database validation
    NO_INVENTORY = "no_inventory"   # valid card, no store has stock


class SearchMode(str, Enum):
    """How the user supplied card names."""
    SINGLE = "single"
    LIST = "list"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Central configuration for MTG Price Finder.

    Loads from environment variables with fallback defaults.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # -----------------------------------------------------------------------
    # Upstream endpoints
    # -----------------------------------------------------------------------
    SCRYFALL_BASE_URL: str = "https://api.scryfall.com"
    CORS_RELAY_URL: str = "https://api.allorigins.win/raw"
    HTTP_TIMEOUT_SECONDS: float = 30.0
    USER_AGENT: str = "MTGPriceFinder/0.1"

    # -----------------------------------------------------------------------
    # Resilient fetcher: delay before retry N is BASE × 2^(N-1)
    # -----------------------------------------------------------------------
    FETCH_MAX_ATTEMPTS: int = 3
    FETCH_BASE_BACKOFF_SECONDS: float = 1.0

    # -----------------------------------------------------------------------
    # Batch search
    # -----------------------------------------------------------------------
    BATCH_PACING_SECONDS: float = 0.1       # Pause before every card after the first

    # -----------------------------------------------------------------------
    # Autocomplete
    # -----------------------------------------------------------------------
    AUTOCOMPLETE_MIN_CHARS: int = 2
    AUTOCOMPLETE_DEBOUNCE_SECONDS: float = 0.3

    # -----------------------------------------------------------------------
    # Normalized result labels
    # Storefront suggest endpoints expose no grading data
    # -----------------------------------------------------------------------
    DEFAULT_AVAILABILITY_LABEL: str = "In Stock"
    DEFAULT_CONDITION_LABEL: str = "NM"
    UNKNOWN_TITLE_LABEL: str = "Unknown Card"

    # -----------------------------------------------------------------------
    # Logging
    # -----------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"


# Singleton instance
settings = Settings()
