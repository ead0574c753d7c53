"""
Models package — export all pydantic models.
"""

from src.models.card_result import BatchResult, CardResult, CardSearchOutcome
from src.models.store import StoreDescriptor

__all__ = ["BatchResult", "CardResult", "CardSearchOutcome", "StoreDescriptor"]
