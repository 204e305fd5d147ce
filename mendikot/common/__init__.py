"""
Shared building blocks: cards, the deck and console IO.
"""

from mendikot.common.card import Card as Card, Rank as Rank, Suit as Suit
from mendikot.common.deck import (
    Deck as Deck,
    DealError as DealError,
    build_deck as build_deck,
    shuffle as shuffle,
    deal as deal,
    sort_for_display as sort_for_display,
)

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "Deck",
    "DealError",
    "build_deck",
    "shuffle",
    "deal",
    "sort_for_display",
]
