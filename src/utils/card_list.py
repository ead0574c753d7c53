"""
MTG Price Finder — Card List Editing

List-mode searches take one card name per line. These helpers keep that
text in a clean, de-duplicated form.
"""

from __future__ import annotations

from src.config import SearchMode

EMPTY_SINGLE_MESSAGE = "Please enter a card name to search"
EMPTY_LIST_MESSAGE = "Please enter at least one card name"


def parse_card_list(text: str) -> list[str]:
    """Split on newlines, trim each line and drop blanks."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def add_card(text: str, card_name: str) -> str:
    """
    Append card_name as a new line unless it is blank or already listed.

    Matching is exact (case-sensitive) on the trimmed name.
    """
    name = card_name.strip()
    cards = parse_card_list(text)
    if name and name not in cards:
        cards.append(name)
    return "\n".join(cards)


def remove_card(text: str, card_name: str) -> str:
    """Drop every line exactly matching card_name."""
    return "\n".join(card for card in parse_card_list(text) if card != card_name)


def cards_to_search(mode: SearchMode, search_term: str, card_list: str) -> list[str]:
    """Names a search should run for, given the current input mode."""
    if mode == SearchMode.SINGLE:
        term = search_term.strip()
        return [term] if term else []
    return parse_card_list(card_list)


def empty_input_message(mode: SearchMode) -> str:
    return EMPTY_SINGLE_MESSAGE if mode == SearchMode.SINGLE else EMPTY_LIST_MESSAGE
