"""
MTG Price Finder — Plain-Text Result Formatting

Renders search outcomes for terminal output.
"""

from __future__ import annotations

from decimal import Decimal

from src.config import SearchStatus
from src.models.card_result import BatchResult, CardResult, CardSearchOutcome

_STATUS_TEXT: dict[SearchStatus, str] = {
    SearchStatus.FOUND: "Found in stores",
    SearchStatus.NOT_FOUND: "Card not recognized",
    SearchStatus.NO_INVENTORY: "No inventory available",
}


def format_price(amount: Decimal) -> str:
    return f"${amount:.2f}"


def format_price_range(price_min: Decimal, price_max: Decimal) -> str:
    """'$1.00' for a single price, '$1.00 - $2.50' for a range."""
    if price_min == price_max:
        return format_price(price_min)
    return f"{format_price(price_min)} - {format_price(price_max)}"


def status_text(status: SearchStatus) -> str:
    return _STATUS_TEXT[status]


def render_result(result: CardResult) -> str:
    price = format_price_range(result.price_min, result.price_max)
    condition = f" [{result.condition}]" if result.condition else ""
    return f"  {price:<18} {result.store} — {result.name}{condition}\n    {result.url}"


def render_outcome(outcome: CardSearchOutcome) -> str:
    """Header line with status, then one entry per store result."""
    header = f"{outcome.card_name}: {status_text(outcome.status)}"
    if outcome.status == SearchStatus.FOUND:
        header += f" ({len(outcome.results)} results)"
    lines = [header]
    lines.extend(render_result(result) for result in outcome.results)
    return "\n".join(lines)


def render_batch(batch: BatchResult) -> str:
    """Full report: every outcome, a summary line, and any error."""
    blocks = [render_outcome(outcome) for outcome in batch.outcomes]
    if batch.outcomes:
        blocks.append(
            f"Summary: {batch.found_count} found, "
            f"{batch.no_inventory_count} out of stock, "
            f"{batch.not_found_count} not recognized"
        )
    if batch.error:
        blocks.append(f"Error: {batch.error}")
    return "\n\n".join(blocks)
