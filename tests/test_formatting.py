"""
Tests for plain-text result formatting (src/utils/formatting.py).
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from src.config import SearchStatus
from src.models.card_result import BatchResult, CardResult, CardSearchOutcome
from src.utils.formatting import (
    format_price_range,
    render_batch,
    render_outcome,
    status_text,
)


def _result(price_min: str, price_max: str) -> CardResult:
    return CardResult(
        store="Mana Lounge",
        name="Lightning Bolt [M10]",
        price_min=Decimal(price_min),
        price_max=Decimal(price_max),
        availability="In Stock",
        url="https://www.manalounge.ca/products/lightning-bolt-m10",
        condition="NM",
    )


def test_format_price_range_single_price() -> None:
    assert format_price_range(Decimal("1"), Decimal("1.00")) == "$1.00"


def test_format_price_range_span() -> None:
    assert format_price_range(Decimal("1.5"), Decimal("12.345")) == "$1.50 - $12.35"


@pytest.mark.parametrize(
    "status,text",
    [
        (SearchStatus.FOUND, "Found in stores"),
        (SearchStatus.NOT_FOUND, "Card not recognized"),
        (SearchStatus.NO_INVENTORY, "No inventory available"),
    ],
)
def test_status_text(status: SearchStatus, text: str) -> None:
    assert status_text(status) == text


def test_render_outcome_found() -> None:
    outcome = CardSearchOutcome(
        card_name="Lightning Bolt",
        status=SearchStatus.FOUND,
        results=(_result("2.50", "3.75"),),
    )

    rendered = render_outcome(outcome)

    assert rendered.splitlines()[0] == "Lightning Bolt: Found in stores (1 results)"
    assert "$2.50 - $3.75" in rendered
    assert "Mana Lounge" in rendered
    assert "[NM]" in rendered
    assert "https://www.manalounge.ca/products/lightning-bolt-m10" in rendered


def test_render_outcome_not_found_has_no_entries() -> None:
    outcome = CardSearchOutcome(card_name="Not A Real Card", status=SearchStatus.NOT_FOUND)
    assert render_outcome(outcome) == "Not A Real Card: Card not recognized"


def test_render_batch_summary_and_error() -> None:
    batch = BatchResult(
        outcomes=[
            CardSearchOutcome(card_name="Opt", status=SearchStatus.NO_INVENTORY),
            CardSearchOutcome(card_name="Nope", status=SearchStatus.NOT_FOUND),
        ],
        error="An error occurred while searching. Please try again.",
    )

    rendered = render_batch(batch)

    assert "Summary: 0 found, 1 out of stock, 1 not recognized" in rendered
    assert rendered.endswith("Error: An error occurred while searching. Please try again.")


def test_render_batch_empty() -> None:
    assert render_batch(BatchResult(error="Please enter at least one card name")) == (
        "Error: Please enter at least one card name"
    )
