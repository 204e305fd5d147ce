"""
This module contains the deck operations used to start a round of Mendikot:
building the 52-card deck, shuffling it and dealing it to four seats.

>>> deck = Deck()
>>> deck.size
52
>>> len(deal(["a", "b", "c", "d"], deck.shuffle().cards)[0])
13
"""

import random
from typing import List, Optional, Sequence, Tuple, TypeVar, Union

from mendikot.common.card import Card, Rank, Suit

T = TypeVar("T")

DECK_SIZE = 52
NUM_SEATS = 4
HAND_SIZE = DECK_SIZE // NUM_SEATS

SUIT_ORDER = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)
RANK_ORDER = (
    Rank.ACE,
    Rank.KING,
    Rank.QUEEN,
    Rank.JACK,
    Rank.TEN,
    Rank.NINE,
    Rank.EIGHT,
    Rank.SEVEN,
    Rank.SIX,
    Rank.FIVE,
    Rank.FOUR,
    Rank.THREE,
    Rank.TWO,
)

# Display grouping: spades, hearts, diamonds, clubs
DISPLAY_SUIT_ORDER = {Suit.SPADES: 0, Suit.HEARTS: 1, Suit.DIAMONDS: 2, Suit.CLUBS: 3}


class DealError(ValueError):
    """Raised when a deal is attempted with the wrong deck size or seat count."""


def build_deck() -> List[Card]:
    """
    Construct the 52-card deck, one card per (suit, rank) pair.

    The order is deterministic: suits in ``SUIT_ORDER``, ranks high to low.
    """
    return [Card(suit, rank) for suit in SUIT_ORDER for rank in RANK_ORDER]


def shuffle(deck: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Return a uniformly random permutation of ``deck``.

    The input is not modified. ``random.Random.shuffle`` is a Fisher-Yates
    shuffle, so every permutation is equally likely given a fair source.

    :param deck: Cards to shuffle
    :param rng: Optional random source, for reproducible deals
    """
    shuffled = list(deck)
    (rng or random).shuffle(shuffled)
    return shuffled


def deal(players: Sequence[T], deck: Sequence[Card]) -> List[Tuple[Card, ...]]:
    """
    Split a shuffled deck into four hands of 13 cards.

    Seat ``i`` receives the cards at indices ``[13 * i, 13 * i + 13)``.

    :param players: The four seated players (only the count matters here)
    :param deck: A full 52-card deck, already shuffled
    :return: One hand per seat, in seat order
    :raises DealError: If the deck does not hold 52 cards or there are not 4 players
    """
    if len(players) != NUM_SEATS:
        raise DealError(
            f"Mendikot needs exactly {NUM_SEATS} players, got {len(players)}"
        )
    if len(deck) != DECK_SIZE:
        raise DealError(f"Deck must hold {DECK_SIZE} cards, got {len(deck)}")
    if len(set(deck)) != DECK_SIZE:
        raise DealError("Deck contains duplicate cards")

    return [
        tuple(deck[seat * HAND_SIZE : (seat + 1) * HAND_SIZE])
        for seat in range(NUM_SEATS)
    ]


def sort_for_display(hand: Sequence[Card]) -> List[Card]:
    """Sort a hand by suit group, then by descending rank. Display only."""
    return sorted(
        hand, key=lambda card: (DISPLAY_SUIT_ORDER[card.suit], -card.rank.rank_value)
    )


class Deck:
    """
    A class representing a deck of cards.
    """

    def __init__(self, cards: Union[List[Card], None] = None):
        """
        Initialize a Deck instance.

        :param cards: A list of Card instances to populate the deck (optional).
                      If not provided, the full 52-card deck is built.
        """
        if cards is None:
            self.cards: List[Card] = build_deck()
        else:
            self.cards = list(cards)

    def shuffle(self, rng: Optional[random.Random] = None) -> "Deck":
        """
        Shuffle the cards in the deck.

        :param rng: Optional random source
        :return: The deck, for chaining
        """
        self.cards = shuffle(self.cards, rng)
        return self

    @property
    def size(self) -> int:
        """
        Return the number of cards in the deck.
        """
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Deck({[repr(card) for card in self.cards]})"

    def __str__(self) -> str:
        return f"Deck of {len(self.cards)} cards"
